"""Append-only store for findings produced during one audit run."""
from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional, Tuple

from ..checks.types import Category, Finding, Section, Status, section_for

logger = logging.getLogger(__name__)


class ResultCollector:
    """Routes findings into per-section buckets and tracks critical issues.

    One collector is owned by each run; nothing is shared between runs.
    Recording is lock-protected so modules may run on worker threads while
    the order of one module's findings is preserved.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._buckets: Dict[Section, List[Finding]] = {}
        self._critical: List[Finding] = []
        self._all: List[Finding] = []

    def record(
        self,
        category: str,
        item: str,
        status: Status,
        details: str,
        recommendation: Optional[str] = None,
    ) -> Finding:
        """Store one finding and emit it to the progress log."""
        label = category.value if isinstance(category, Category) else str(category)
        try:
            status = Status(status)
        except ValueError:
            logger.warning("Unknown status %r for %s - %s, recording as Error", status, label, item)
            status = Status.ERROR
        finding = Finding(
            category=label,
            item=str(item),
            status=status,
            details=str(details),
            recommendation=recommendation or "N/A",
        )
        section = section_for(label)
        with self._lock:
            self._buckets.setdefault(section, []).append(finding)
            if finding.status is Status.FAIL:
                self._critical.append(finding)
            self._all.append(finding)
        self._log(finding)
        return finding

    @staticmethod
    def _log(finding: Finding) -> None:
        try:
            logger.info(
                "[%s] %s - %s: %s (%s)",
                finding.status.value,
                finding.category,
                finding.item,
                finding.details,
                finding.recommendation,
            )
        except Exception:  # noqa: BLE001 - progress logging is best effort
            pass

    def bucket(self, section: Section) -> Tuple[Finding, ...]:
        with self._lock:
            return tuple(self._buckets.get(section, ()))

    def buckets(self) -> Dict[Section, Tuple[Finding, ...]]:
        with self._lock:
            return {section: tuple(items) for section, items in self._buckets.items()}

    @property
    def critical_digest(self) -> Tuple[Finding, ...]:
        with self._lock:
            return tuple(self._critical)

    @property
    def findings(self) -> Tuple[Finding, ...]:
        """Every finding in emission order."""
        with self._lock:
            return tuple(self._all)

    def __len__(self) -> int:
        with self._lock:
            return len(self._all)
