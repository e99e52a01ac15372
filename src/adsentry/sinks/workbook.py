"""Excel workbook sink: one sheet per report section plus an overview."""
from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from ..checks.types import DETAIL_HEADERS, OVERVIEW_HEADERS, SUMMARY_ORDER, Section
from ..core.aggregator import RunReport
from ..core.interfaces import SinkInitError, SinkWriteError
from .overview import CRITICAL_BANNER, SUMMARY_BANNER, overview_rows

logger = logging.getLogger(__name__)

GREY = "D3D3D3"
LIGHT_RED = "FFCCCB"
LIGHT_GREEN = "90EE90"
LIGHT_YELLOW = "FFFFE0"

_DETAIL_WIDTHS = (26, 34, 10, 70, 70)
_OVERVIEW_WIDTH = 55


def _fill(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def workbook_path(directory: Path, prefix: str, date_format: str, today: Optional[date] = None) -> Path:
    """Daily report location, e.g. ``<dir>/Google_Ads_Audit_2024-05-01.xlsx``."""
    stamp = (today or date.today()).strftime(date_format)
    return Path(directory) / f"{prefix}{stamp}.xlsx"


class WorkbookSink:
    """Writes the report to an ``.xlsx`` file.

    An existing workbook of the same name is reopened and every section's
    rows below the header are replaced, so running the audit twice on the
    same day leaves exactly one copy of the results.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._workbook: Optional[Workbook] = None

    @property
    def workbook(self) -> Workbook:
        if self._workbook is None:
            raise SinkWriteError("workbook sink used before open()")
        return self._workbook

    def open(self) -> None:
        try:
            if self.path.exists():
                self._workbook = load_workbook(self.path)
                logger.info("Using existing workbook: %s", self.path)
            else:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                workbook = Workbook()
                workbook.active.title = Section.OVERVIEW.value
                self._workbook = workbook
                logger.info("Created new workbook: %s", self.path)
        except Exception as exc:  # noqa: BLE001 - any failure here leaves no destination
            raise SinkInitError(f"Cannot open workbook {self.path}: {exc}") from exc

        for section in (Section.OVERVIEW, *SUMMARY_ORDER):
            self.ensure_section(section.value)

    def ensure_section(self, name: str) -> Worksheet:
        workbook = self.workbook
        if name in workbook.sheetnames:
            sheet = workbook[name]
        else:
            sheet = workbook.create_sheet(name)
            logger.debug("Created sheet: %s", name)

        for merged in list(sheet.merged_cells.ranges):
            if merged.min_row > 1:
                sheet.unmerge_cells(str(merged))
        if sheet.max_row > 1:
            sheet.delete_rows(2, sheet.max_row - 1)

        headers = OVERVIEW_HEADERS if name == Section.OVERVIEW.value else DETAIL_HEADERS
        if sheet.cell(row=1, column=1).value in (None, ""):
            for col_idx, header in enumerate(headers, start=1):
                cell = sheet.cell(row=1, column=col_idx, value=header)
                cell.font = Font(bold=True)
            sheet.freeze_panes = "A2"

        if name == Section.OVERVIEW.value:
            for col_idx in range(1, len(headers) + 1):
                sheet.column_dimensions[get_column_letter(col_idx)].width = _OVERVIEW_WIDTH
        else:
            for col_idx, width in enumerate(_DETAIL_WIDTHS, start=1):
                sheet.column_dimensions[get_column_letter(col_idx)].width = width
        return sheet

    def append_rows(self, handle: Worksheet, rows: Iterable[Sequence[str]]) -> None:
        for row in rows:
            handle.append(list(row))
            for cell in handle[handle.max_row]:
                cell.alignment = Alignment(vertical="top", wrap_text=True)

    def write_summary(self, report: RunReport) -> None:
        sheet = self.ensure_section(Section.OVERVIEW.value)
        rows = overview_rows(report)
        self.append_rows(sheet, rows)

        # rows start below the header; totals follow the summary banner
        for offset, row in enumerate(rows, start=2):
            if row[0] in (SUMMARY_BANNER, CRITICAL_BANNER):
                sheet.merge_cells(start_row=offset, start_column=1, end_row=offset, end_column=3)
                banner = sheet.cell(row=offset, column=1)
                banner.font = Font(bold=True)
                banner.fill = _fill(GREY if row[0] == SUMMARY_BANNER else LIGHT_RED)
                banner.alignment = Alignment(horizontal="center")

        fails = sheet.cell(row=3, column=2)
        fails.font = Font(bold=True)
        fails.fill = _fill(LIGHT_RED if report.total_fails else LIGHT_GREEN)
        warns = sheet.cell(row=4, column=2)
        warns.font = Font(bold=True)
        warns.fill = _fill(LIGHT_YELLOW if report.total_warns else LIGHT_GREEN)

    def close(self) -> None:
        if self._workbook is None:
            return
        try:
            self._workbook.save(self.path)
        except OSError as exc:
            raise SinkWriteError(f"Cannot save workbook {self.path}: {exc}") from exc
        finally:
            self._workbook.close()
        logger.info("Report saved to %s", self.path)
