"""Turn collected findings into a run report."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Sequence, Tuple

from ..checks.types import SUMMARY_ORDER, Finding, Section, Status


@dataclass(frozen=True)
class SectionCounts:
    fails: int = 0
    warns: int = 0

    @property
    def has_issues(self) -> bool:
        return self.fails > 0 or self.warns > 0


@dataclass(frozen=True)
class RunReport:
    """Immutable result of aggregating one run's findings."""

    buckets: Mapping[Section, Tuple[Finding, ...]]
    counts: Mapping[Section, SectionCounts]
    critical_digest: Tuple[Finding, ...]
    total_fails: int
    total_warns: int
    status_totals: Mapping[Status, int] = field(default_factory=dict)

    @property
    def sections_with_issues(self) -> Tuple[Section, ...]:
        """Detail sections with fails or warns, in summary priority order."""
        return tuple(s for s in SUMMARY_ORDER if self.counts[s].has_issues)

    def findings(self, section: Section) -> Tuple[Finding, ...]:
        return self.buckets.get(section, ())

    @property
    def all_findings(self) -> Tuple[Finding, ...]:
        return tuple(f for section in SUMMARY_ORDER for f in self.buckets.get(section, ()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": {
                "total_fails": self.total_fails,
                "total_warns": self.total_warns,
                "statuses": {status.value: self.status_totals.get(status, 0) for status in Status},
                "sections": {
                    section.value: {
                        "fails": self.counts[section].fails,
                        "warns": self.counts[section].warns,
                    }
                    for section in SUMMARY_ORDER
                },
            },
            "critical_issues": [f.to_dict() for f in self.critical_digest],
            "sections": {
                section.value: [f.to_dict() for f in self.buckets.get(section, ())]
                for section in SUMMARY_ORDER
            },
        }


def aggregate(
    buckets: Mapping[Section, Sequence[Finding]],
    critical_digest: Sequence[Finding],
) -> RunReport:
    """Compute per-section counts and account-wide totals.

    Pure: the inputs are copied and never modified, so aggregating the same
    buckets twice yields equal reports.
    """
    frozen = {section: tuple(buckets.get(section, ())) for section in SUMMARY_ORDER}
    counts: Dict[Section, SectionCounts] = {}
    status_totals: Counter[Status] = Counter()
    for section, findings in frozen.items():
        tally = Counter(f.status for f in findings)
        status_totals.update(tally)
        counts[section] = SectionCounts(fails=tally[Status.FAIL], warns=tally[Status.WARN])

    return RunReport(
        buckets=frozen,
        counts=counts,
        critical_digest=tuple(critical_digest),
        total_fails=sum(c.fails for c in counts.values()),
        total_warns=sum(c.warns for c in counts.values()),
        status_totals=dict(status_totals),
    )
