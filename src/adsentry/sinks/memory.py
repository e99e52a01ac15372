"""In-memory sink, used for dry runs and tests."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..checks.types import DETAIL_HEADERS, OVERVIEW_HEADERS, Section
from ..core.aggregator import RunReport
from ..core.interfaces import SinkInitError, SinkWriteError
from .overview import overview_rows


class MemorySink:
    """Keeps sections as lists of rows, header first.

    ``fail_on_open`` and ``fail_on_section`` simulate destination failures.
    """

    def __init__(self, fail_on_open: bool = False, fail_on_section: Optional[str] = None) -> None:
        self.sections: Dict[str, List[Tuple[str, ...]]] = {}
        self.report: Optional[RunReport] = None
        self.opened = False
        self.closed = False
        self._fail_on_open = fail_on_open
        self._fail_on_section = fail_on_section

    def open(self) -> None:
        if self._fail_on_open:
            raise SinkInitError("memory sink configured to fail on open")
        self.opened = True
        self.closed = False

    def ensure_section(self, name: str) -> str:
        if name == self._fail_on_section:
            raise SinkWriteError(f"cannot prepare section '{name}'", section=name)
        headers = OVERVIEW_HEADERS if name == Section.OVERVIEW.value else DETAIL_HEADERS
        self.sections[name] = [tuple(headers)]
        return name

    def append_rows(self, handle: str, rows: Iterable[Sequence[str]]) -> None:
        self.sections[handle].extend(tuple(row) for row in rows)

    def write_summary(self, report: RunReport) -> None:
        handle = self.ensure_section(Section.OVERVIEW.value)
        self.append_rows(handle, overview_rows(report))
        self.report = report

    def close(self) -> None:
        self.closed = True

    def rows(self, name: str) -> List[Tuple[str, ...]]:
        """Rows of a section without its header."""
        return self.sections.get(name, [])[1:]
