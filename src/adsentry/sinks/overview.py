"""Overview layout shared by every sink."""
from __future__ import annotations

from typing import List, Tuple

from ..core.aggregator import RunReport

OverviewRow = Tuple[str, str, str]

SUMMARY_BANNER = "--- AUDIT SUMMARY ---"
CRITICAL_BANNER = "--- CRITICAL ISSUES (FAIL) ---"
NO_CRITICAL = "No critical 'Fail' issues found."


def overview_rows(report: RunReport) -> List[OverviewRow]:
    """Rows of the overview section, in display order.

    Totals come first, then one line per section with issues (in summary
    priority order), a spacer, and the critical digest.
    """
    rows: List[OverviewRow] = [
        (SUMMARY_BANNER, "", ""),
        (
            "Total Critical Issues (Fail)",
            str(report.total_fails),
            "Review items marked 'Fail' below and in respective sheets.",
        ),
        (
            "Total Warnings (Warn)",
            str(report.total_warns),
            "Review items marked 'Warn' in respective sheets.",
        ),
        ("Issue Counts by Area:", "", ""),
    ]
    for section in report.sections_with_issues:
        counts = report.counts[section]
        rows.append(
            (
                section.value,
                f"Fails: {counts.fails}, Warns: {counts.warns}",
                f"See '{section.value}' sheet for details.",
            )
        )
    rows.append(("", "", ""))
    rows.append((CRITICAL_BANNER, "", ""))
    if report.critical_digest:
        for finding in report.critical_digest:
            rows.append((f"{finding.category} - {finding.item}", finding.details, finding.recommendation))
    else:
        rows.append((NO_CRITICAL, "", ""))
    return rows
