"""adsentry - advertising account audit main entry point."""
from __future__ import annotations

import argparse
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Type

from . import __version__
from .checks import load_checks
from .checks.base import AuditContext, AuditModule, CheckRegistry
from .checks.types import Status
from .config import AuditConfig, ConfigError, load_config
from .core.aggregator import RunReport
from .core.interfaces import SinkInitError, UrlProbe
from .core.orchestrator import AuditRun, AuditRunner
from .core.pacing import Pacer
from .sinks.workbook import WorkbookSink, workbook_path
from .utils.http import HttpUrlProbe, OfflineUrlProbe
from .utils.reporting import format_json_report, format_text_report, write_report
from .utils.snapshot import SnapshotError, SnapshotSource

_LOG_DIR = Path.home() / ".adsentry" / "logs"

# Exit codes for CI/CD integration
EXIT_CLEAN = 0
EXIT_WARNINGS = 1
EXIT_FAILS = 2
EXIT_ERRORS = 3
EXIT_SETUP = 1


def configure_logging(level: int = logging.INFO, log_dir: Optional[Path] = None) -> None:
    """Configure logging for the application.

    Logs are written to ~/.adsentry/logs/audit.log with automatic rotation
    at 5MB and 3 backup files retained.
    """
    directory = log_dir or _LOG_DIR
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / "audit.log"

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Rotating file handler: 5MB max, keep 3 backups
    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=5 * 1024 * 1024,  # 5 MB
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.WARNING)

    logging.basicConfig(level=level, handlers=[file_handler, console_handler], force=True)


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="adsentry",
        description="adsentry - read-only advertising account audit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --snapshot account.json                  Audit a snapshot, write today's workbook
  %(prog)s --snapshot account.json --verbose        Also list passed and informational items
  %(prog)s --snapshot account.json --format json -o out.json
  %(prog)s --snapshot account.json --modules keywords,ad_groups
  %(prog)s --dry-run                                List modules without executing
""",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--snapshot",
        type=str,
        help="JSON account snapshot to audit",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="JSON file overriding audit thresholds and switches",
    )
    parser.add_argument(
        "--workbook",
        type=str,
        help="Workbook to write (default: <report prefix><date>.xlsx in the current directory)",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Console/report output format",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        help="Write the rendered report to file instead of stdout",
    )
    parser.add_argument(
        "--modules",
        type=str,
        help="Comma-separated list of modules to run (default: all)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List modules without executing",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Run modules on a thread pool",
    )
    parser.add_argument(
        "--time-budget",
        type=float,
        help="Seconds after which remaining modules are skipped",
    )
    parser.add_argument(
        "--no-landing-pages",
        action="store_true",
        help="Skip landing page HTTPS and broken link checks",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Never fetch landing pages over the network",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Include passed and informational findings in the text report",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only print the summary",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging and show module timings",
    )
    return parser.parse_args(argv)


def _parse_modules(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [part.strip().lower() for part in raw.split(",") if part.strip()]


def _select_modules(names: Sequence[str]) -> List[Type[AuditModule]]:
    if not names:
        return list(CheckRegistry.get_all())
    unknown = [name for name in names if CheckRegistry.get(name) is None]
    if unknown:
        raise ConfigError(f"Unknown modules: {', '.join(unknown)}")
    return list(CheckRegistry.by_name(names))


def _build_config(args: argparse.Namespace) -> AuditConfig:
    config = load_config(Path(args.config).expanduser() if args.config else None)
    changes = {}
    if args.no_landing_pages:
        changes["check_landing_pages"] = False
    if args.parallel:
        changes["parallel"] = True
    if args.time_budget is not None:
        changes["time_budget_seconds"] = args.time_budget
    return config.replace(**changes) if changes else config


def _print_dry_run(modules: Sequence[Type[AuditModule]], config: AuditConfig) -> None:
    """Display modules that would be executed in dry-run mode."""
    print("Modules that would be executed (dry-run):")
    for module_cls in modules:
        state = "" if module_cls.enabled_for(config) else " (disabled)"
        print(f"  - {module_cls.name} [{module_cls.category.value}]{state}")
        if module_cls.description:
            print(f"      {module_cls.description}")
    print(f"\nTotal: {len(modules)} modules")


def _print_timings(run: AuditRun) -> None:
    print("\nModule timings:")
    for timing in sorted(run.timings, key=lambda t: t.elapsed_ms, reverse=True):
        note = f" ({timing.outcome})" if timing.outcome != "completed" else ""
        print(f"  {timing.name:<24} {timing.elapsed_ms:8.1f}ms{note}")
    print(f"  {'total':<24} {run.elapsed * 1000:8.1f}ms")


def _determine_exit_code(report: RunReport, sink_failed: bool = False) -> int:
    """Determine appropriate exit code for CI/CD integration.

    Exit codes:
        0 = No fails or warnings
        1 = Warnings found
        2 = Fails found
        3 = Errors during execution (including report write failures)
    """
    if sink_failed or report.status_totals.get(Status.ERROR, 0) > 0:
        return EXIT_ERRORS
    if report.total_fails > 0:
        return EXIT_FAILS
    if report.total_warns > 0:
        return EXIT_WARNINGS
    return EXIT_CLEAN


def _make_probe(args: argparse.Namespace, config: AuditConfig) -> UrlProbe:
    if args.offline:
        return OfflineUrlProbe()
    return HttpUrlProbe(timeout=config.request_timeout_seconds)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(level=logging.DEBUG if args.debug else logging.INFO)
    logger = logging.getLogger(__name__)

    try:
        config = _build_config(args)
        load_checks()
        modules = _select_modules(_parse_modules(args.modules))
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_SETUP

    if args.dry_run:
        _print_dry_run(modules, config)
        return EXIT_CLEAN

    if not args.snapshot:
        print("No data source given: pass --snapshot <file>", file=sys.stderr)
        return EXIT_SETUP
    try:
        source = SnapshotSource.from_file(Path(args.snapshot).expanduser())
    except SnapshotError as exc:
        print(f"Snapshot error: {exc}", file=sys.stderr)
        return EXIT_SETUP

    if args.workbook:
        sink_path = Path(args.workbook).expanduser()
    else:
        sink_path = workbook_path(Path.cwd(), config.report_name_prefix, config.date_format)
    sink = WorkbookSink(sink_path)

    probe = _make_probe(args, config)
    context = AuditContext(
        source=source,
        config=config,
        url_probe=probe,
        pacer=Pacer(config.pacing_batch_size, config.pacing_pause_seconds),
    )

    try:
        run = AuditRunner(context, sink, modules).run()
    except SinkInitError as exc:
        print(f"Cannot prepare report workbook: {exc}", file=sys.stderr)
        return EXIT_SETUP
    finally:
        if isinstance(probe, HttpUrlProbe):
            probe.close()

    account_info = source.account_info()
    if args.format == "json":
        rendered = format_json_report(
            report=run.report,
            account_info=account_info,
            extra={"workbook": str(sink_path), "sink_error": run.sink_error},
        )
    else:
        rendered = format_text_report(report=run.report, account_info=account_info, verbose=args.verbose)

    if args.output:
        output_path = Path(args.output).expanduser()
        try:
            write_report(output_path, rendered)
        except OSError as exc:
            print(f"Failed to save report: {exc}", file=sys.stderr)
            return EXIT_SETUP
        if not args.quiet:
            print(f"Report saved to {output_path}")
    elif args.quiet and args.format == "text":
        print(f"Fails: {run.report.total_fails}  Warnings: {run.report.total_warns}")
    else:
        print(rendered, end="" if rendered.endswith("\n") else "\n")

    if args.debug and args.format == "text":
        _print_timings(run)

    if run.sink_error:
        print(f"Workbook could not be written: {run.sink_error}", file=sys.stderr)
    elif not args.quiet and args.format == "text":
        print(f"Workbook: {sink_path}")

    exit_code = _determine_exit_code(run.report, sink_failed=run.sink_error is not None)
    logger.info("Audit exit code %d", exit_code)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
