"""Unit and property tests for report aggregation."""
from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from adsentry.checks.types import SUMMARY_ORDER, Category, Section, Status
from adsentry.core.aggregator import aggregate
from adsentry.core.collector import ResultCollector

_labels = st.sampled_from([c.value for c in Category] + ["Unmapped Area"])
_statuses = st.sampled_from(list(Status))
_records = st.lists(st.tuples(_labels, _statuses), max_size=60)


def _collect(records) -> ResultCollector:
    collector = ResultCollector()
    for i, (label, status) in enumerate(records):
        collector.record(label, f"item {i}", status, "details")
    return collector


class TestAggregate:
    def test_empty_run(self):
        report = aggregate({}, ())
        assert report.total_fails == 0
        assert report.total_warns == 0
        assert report.sections_with_issues == ()
        assert set(report.buckets) == set(SUMMARY_ORDER)

    def test_counts_per_section(self):
        collector = _collect(
            [
                ("Keywords", Status.FAIL),
                ("Ad Groups", Status.WARN),
                ("Quality Score", Status.WARN),
                ("Ad Copy", Status.PASS),
                ("Performance Metrics", Status.FAIL),
            ]
        )
        report = aggregate(collector.buckets(), collector.critical_digest)

        assert report.counts[Section.KEYWORDS_ADGROUPS].fails == 1
        assert report.counts[Section.KEYWORDS_ADGROUPS].warns == 2
        assert report.counts[Section.ADS_EXTENSIONS].has_issues is False
        assert report.total_fails == 2
        assert report.total_warns == 2

    def test_sections_with_issues_follow_priority_order(self):
        collector = _collect([("Keywords", Status.WARN), ("Bidding Strategies", Status.FAIL)])
        report = aggregate(collector.buckets(), collector.critical_digest)
        assert report.sections_with_issues == (Section.PERFORMANCE, Section.KEYWORDS_ADGROUPS)

    def test_does_not_modify_inputs(self):
        collector = _collect([("Keywords", Status.FAIL)])
        buckets = {section: list(items) for section, items in collector.buckets().items()}
        aggregate(buckets, collector.critical_digest)
        assert len(buckets[Section.KEYWORDS_ADGROUPS]) == 1

    def test_to_dict_lists_every_section(self):
        collector = _collect([("Keywords", Status.FAIL)])
        data = aggregate(collector.buckets(), collector.critical_digest).to_dict()
        assert list(data["sections"]) == [s.value for s in SUMMARY_ORDER]
        assert data["summary"]["total_fails"] == 1
        assert data["critical_issues"][0]["category"] == "Keywords"

    @given(_records)
    def test_fail_totals_match_digest(self, records):
        collector = _collect(records)
        report = aggregate(collector.buckets(), collector.critical_digest)
        fails = sum(1 for _, status in records if status is Status.FAIL)
        warns = sum(1 for _, status in records if status is Status.WARN)

        assert report.total_fails == fails == len(report.critical_digest)
        assert report.total_warns == warns
        assert sum(len(report.findings(s)) for s in SUMMARY_ORDER) == len(records)

    @given(_records)
    def test_aggregation_is_idempotent(self, records):
        collector = _collect(records)
        first = aggregate(collector.buckets(), collector.critical_digest)
        second = aggregate(collector.buckets(), collector.critical_digest)
        assert first == second
