"""Back-pressure and time-budget helpers used while iterating entities."""
from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, Iterator, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Pacer:
    """Pause for a fixed time after every batch of items.

    Keeps request rates to external services (URL probes, rate-limited
    APIs) below their quotas without putting sleeps in rule code.
    """

    def __init__(
        self,
        batch_size: int = 20,
        pause_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.batch_size = batch_size
        self.pause_seconds = max(0.0, pause_seconds)
        self._sleep = sleep

    def pace(self, items: Iterable[T]) -> Iterator[T]:
        """Yield items, pausing after each full batch except the last."""
        count = 0
        for item in items:
            if count and count % self.batch_size == 0 and self.pause_seconds:
                logger.debug("Pausing %.1fs after %d items", self.pause_seconds, count)
                self._sleep(self.pause_seconds)
            yield item
            count += 1


class Deadline:
    """Cooperative time budget checked between units of work."""

    def __init__(
        self,
        budget_seconds: Optional[float],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = clock
        self._budget = budget_seconds
        self._start = clock()

    @property
    def elapsed(self) -> float:
        return self._clock() - self._start

    @property
    def expired(self) -> bool:
        return self._budget is not None and self.elapsed >= self._budget

    @property
    def remaining(self) -> Optional[float]:
        if self._budget is None:
            return None
        return max(0.0, self._budget - self.elapsed)
