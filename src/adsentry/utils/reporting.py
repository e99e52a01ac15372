"""Console and JSON renderings of a run report."""
from __future__ import annotations

import datetime as _dt
import json
import sys
from pathlib import Path
from typing import Any, Dict, Mapping

from ..checks.types import SUMMARY_ORDER, Finding, Status
from ..core.aggregator import RunReport

_HEADER_LINE = "═" * 70

# ANSI color codes for terminal output
_COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "red": "\033[91m",
    "green": "\033[92m",
    "yellow": "\033[93m",
    "blue": "\033[94m",
    "cyan": "\033[96m",
    "gray": "\033[90m",
}

_STATUS_COLORS = {
    Status.PASS: _COLORS["green"],
    Status.FAIL: _COLORS["red"],
    Status.WARN: _COLORS["yellow"],
    Status.INFO: _COLORS["cyan"],
    Status.SKIPPED: _COLORS["gray"],
    Status.ERROR: _COLORS["bold"] + _COLORS["red"],
}


def _colorize(text: str, color: str) -> str:
    """Wrap text with ANSI color codes."""
    return f"{color}{text}{_COLORS['reset']}"


def _timestamp(dt: _dt.datetime | None = None) -> str:
    return (dt or _dt.datetime.now()).strftime("%Y-%m-%d %H:%M")


def _format_account_info(account_info: Mapping[str, str]) -> str:
    return "Account: " + ", ".join(f"{key}: {value}" for key, value in account_info.items())


def _visible(finding: Finding, verbose: bool) -> bool:
    if verbose:
        return True
    return finding.status not in (Status.PASS, Status.INFO)


def format_text_report(
    *,
    report: RunReport,
    account_info: Mapping[str, str],
    verbose: bool = False,
    color: bool | None = None,
) -> str:
    """Generate a human-readable text report.

    Without ``verbose`` only Fail, Warn, Error and Skipped findings are
    listed; totals always cover every finding.

    Args:
        color: Enable ANSI colors. None = auto-detect TTY.
    """
    use_color = color if color is not None else sys.stdout.isatty()

    lines = [
        f"╔{_HEADER_LINE}╗",
        f"║              adsentry Audit Report - {_timestamp()}              ║",
        f"╚{_HEADER_LINE}╝",
        "",
        _format_account_info(account_info),
        "",
    ]

    shown = 0
    for section in SUMMARY_ORDER:
        findings = [f for f in report.findings(section) if _visible(f, verbose)]
        if not findings:
            continue
        counts = report.counts[section]
        title = f"{section.value} (Fails: {counts.fails}, Warns: {counts.warns})"
        lines.append(_colorize(title, _COLORS["bold"]) if use_color else title)
        # most urgent first, emission order otherwise
        for finding in sorted(findings, key=lambda f: -f.urgency):
            status_text = finding.status.value.upper()
            if use_color:
                status_text = _colorize(status_text, _STATUS_COLORS.get(finding.status, ""))
            lines.append(f"[{status_text}] {finding.category} - {finding.item}")
            lines.append(f"  → {finding.details}")
            if finding.recommendation and finding.recommendation != "N/A":
                lines.append(f"  → Recommendation: {finding.recommendation}")
            shown += 1
        lines.append("")

    if not shown:
        lines.append("No findings for selected criteria.")
        lines.append("")

    totals = report.status_totals
    lines.extend(
        [
            "Summary:",
            f"  Total findings: {sum(totals.values())}",
            f"  Fails: {report.total_fails}  Warnings: {report.total_warns}  "
            f"Errors: {totals.get(Status.ERROR, 0)}  Skipped: {totals.get(Status.SKIPPED, 0)}  "
            f"Passed: {totals.get(Status.PASS, 0)}  Info: {totals.get(Status.INFO, 0)}",
        ]
    )
    if report.sections_with_issues:
        lines.append("  Areas with issues: " + ", ".join(s.value for s in report.sections_with_issues))

    return "\n".join(lines).strip() + "\n"


def format_json_report(
    *,
    report: RunReport,
    account_info: Mapping[str, str],
    scan_time: _dt.datetime | None = None,
    extra: Mapping[str, Any] | None = None,
) -> str:
    """Generate a JSON document with the summary, digest and every section."""

    scan_time = scan_time or _dt.datetime.now(_dt.timezone.utc)
    payload: Dict[str, Any] = {
        "scan_date": scan_time.replace(microsecond=0).isoformat(),
        "account": dict(account_info),
    }
    payload.update(report.to_dict())
    if extra:
        payload.update(extra)
    return json.dumps(payload, indent=2)


def write_report(output_path: Path, content: str) -> None:
    """Persist report content to the specified path."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
