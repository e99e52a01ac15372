"""Run audit modules against one account and hand the report to a sink.

The runner guarantees that no single module can abort the audit:

1. The sink is opened before any module runs; failing to open it is the
   only fatal condition.
2. Any exception escaping a module becomes one Error finding for that
   module's category and the run continues.
3. A cooperative time budget is checked before each module starts.
4. Failing to write the report is logged with the rows it would have
   written and surfaced on the returned :class:`AuditRun`.
"""
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence, Type

from ..checks.base import AuditContext, AuditModule, CheckRegistry
from ..checks.types import DETAIL_HEADERS, SUMMARY_ORDER, Status
from .aggregator import RunReport, aggregate
from .collector import ResultCollector
from .interfaces import ReportSink, SinkInitError, SinkWriteError
from .pacing import Deadline

logger = logging.getLogger(__name__)


@dataclass
class ModuleTiming:
    """Wall-clock cost of one module."""

    name: str
    elapsed_ms: float
    outcome: str = "completed"  # completed, crashed, skipped
    error: Optional[str] = None


@dataclass
class AuditRun:
    """Everything a caller needs after a run finished."""

    report: RunReport
    timings: List[ModuleTiming] = field(default_factory=list)
    elapsed: float = 0.0
    sink_error: Optional[str] = None

    @property
    def crashed_modules(self) -> List[str]:
        return [t.name for t in self.timings if t.outcome == "crashed"]


class AuditRunner:
    """Executes registered audit modules in their declared order."""

    def __init__(
        self,
        context: AuditContext,
        sink: ReportSink,
        modules: Optional[Sequence[Type[AuditModule]]] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.context = context
        self.sink = sink
        self.modules: List[Type[AuditModule]] = list(
            modules if modules is not None else CheckRegistry.get_all()
        )
        self._clock = clock

    # -- module execution ----------------------------------------------------

    def _run_module(
        self,
        module_cls: Type[AuditModule],
        collector: ResultCollector,
        deadline: Deadline,
    ) -> ModuleTiming:
        start = self._clock()
        try:
            module = module_cls(self.context, collector)
            if deadline.expired:
                logger.warning("Time budget exhausted, skipping module %s", module.name)
                module.skip(
                    f"Time budget of {self.context.config.time_budget_seconds}s exhausted before this module started."
                )
                return ModuleTiming(module.name, 0.0, outcome="skipped")
            module.execute()
        except Exception as exc:  # noqa: BLE001 - one module must not end the run
            elapsed = (self._clock() - start) * 1000
            logger.exception("Module %s failed", module_cls.name)
            collector.record(
                module_cls.category,
                "General Check",
                Status.ERROR,
                f"An error occurred: {type(exc).__name__}: {exc}",
                "Investigate the error.",
            )
            return ModuleTiming(module_cls.name, elapsed, outcome="crashed", error=str(exc))

        elapsed = (self._clock() - start) * 1000
        logger.debug("Module %s finished in %.1fms", module.name, elapsed)
        return ModuleTiming(module.name, elapsed)

    def _run_modules(self, collector: ResultCollector, deadline: Deadline) -> List[ModuleTiming]:
        config = self.context.config
        if config.parallel and len(self.modules) > 1:
            with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
                futures = [
                    executor.submit(self._run_module, module_cls, collector, deadline)
                    for module_cls in self.modules
                ]
                return [future.result() for future in futures]
        return [self._run_module(module_cls, collector, deadline) for module_cls in self.modules]

    # -- sink ------------------------------------------------------------------

    def _write(self, report: RunReport) -> None:
        for section in SUMMARY_ORDER:
            try:
                handle = self.sink.ensure_section(section.value)
                self.sink.append_rows(handle, [f.as_row() for f in report.findings(section)])
            except SinkWriteError:
                raise
            except Exception as exc:  # noqa: BLE001 - sink adapters raise their own errors
                raise SinkWriteError(str(exc), section=section.value) from exc
        try:
            self.sink.write_summary(report)
        except SinkWriteError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise SinkWriteError(str(exc), section="Overview") from exc

    @staticmethod
    def _dump(report: RunReport) -> None:
        logger.error("Report rows that could not be written:")
        logger.error(" | ".join(DETAIL_HEADERS))
        for finding in report.all_findings:
            logger.error(" | ".join(finding.as_row()))

    def run(self) -> AuditRun:
        """Run every module once and deliver the report.

        Raises:
            SinkInitError: The sink could not be opened. No module has run.
        """
        start = self._clock()
        try:
            self.sink.open()
        except SinkInitError:
            logger.error("Report destination could not be prepared, aborting before any module runs")
            raise

        collector = ResultCollector()
        deadline = Deadline(self.context.config.time_budget_seconds, clock=self._clock)
        logger.info("Starting audit with %d modules", len(self.modules))
        timings = self._run_modules(collector, deadline)

        report = aggregate(collector.buckets(), collector.critical_digest)
        audit_run = AuditRun(report=report, timings=timings)

        try:
            self._write(report)
        except SinkWriteError as exc:
            where = f" (section '{exc.section}')" if exc.section else ""
            logger.error("Failed to write report%s: %s", where, exc)
            self._dump(report)
            audit_run.sink_error = str(exc)
        finally:
            try:
                self.sink.close()
            except Exception as exc:  # noqa: BLE001
                logger.error("Failed to close report destination: %s", exc)
                if audit_run.sink_error is None:
                    audit_run.sink_error = str(exc)

        audit_run.elapsed = self._clock() - start
        logger.info(
            "Audit finished in %.2fs: %d fails, %d warns",
            audit_run.elapsed,
            report.total_fails,
            report.total_warns,
        )
        return audit_run


def run_audit(
    context: AuditContext,
    sink: ReportSink,
    modules: Optional[Iterable[Type[AuditModule]]] = None,
) -> AuditRun:
    """Convenience wrapper around :class:`AuditRunner`."""
    return AuditRunner(context, sink, list(modules) if modules is not None else None).run()
