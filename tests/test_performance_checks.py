"""Tests for performance metrics, bidding and campaign optimization modules."""
from __future__ import annotations

import pytest

from adsentry.checks.bidding import BiddingStrategiesCheck
from adsentry.checks.campaign_optimization import CampaignOptimizationCheck
from adsentry.checks.performance import PerformanceMetricsCheck
from adsentry.checks.types import Status
from adsentry.config import AuditConfig

from conftest import HEALTHY_METRICS, findings_for


def _metrics(**overrides):
    metrics = dict(HEALTHY_METRICS)
    metrics.update(overrides)
    return metrics


class TestPerformanceMetrics:
    def test_healthy_account(self, snapshot_factory, run_module):
        collector = run_module(PerformanceMetricsCheck, snapshot_factory.source())

        assert findings_for(collector, "Click-Through Rate (CTR)")[0].details == "Account CTR: 4.00% (>= 1%)"
        assert findings_for(collector, "Average Cost-Per-Click (CPC)")[0].details == "Account Avg. CPC: 1.50"
        assert findings_for(collector, "Cost Per Acquisition (CPA)")[0].details == "Account CPA: 30.00 (<= 50.00)"
        assert findings_for(collector, "Return On Ad Spend (ROAS)")[0].details.startswith("Account ROAS: 4.00")
        assert findings_for(collector, "Search Impression Share")[0].status is Status.PASS
        assert findings_for(collector, "Search IS Lost (Rank)")[0].details == "Account IS Lost (Rank): 10.0% (<= 20%)"
        assert findings_for(collector, "Metric Retrieval") == []
        assert collector.findings[-1].item == "Granular Performance"

    def test_threshold_failures(self, snapshot_factory, run_module):
        f = snapshot_factory
        doc = f.account(metrics=_metrics(ctr=0.005, conversion_rate=0.002, conversions=10,
                                         search_lost_is_budget=0.3))
        collector = run_module(PerformanceMetricsCheck, f.source(doc))

        ctr = findings_for(collector, "Click-Through Rate (CTR)")[0]
        assert ctr.status is Status.FAIL
        assert ctr.details == "Account CTR: 0.50% (< 1%)"
        assert findings_for(collector, "Conversion Rate")[0].status is Status.FAIL
        cpa = findings_for(collector, "Cost Per Acquisition (CPA)")[0]
        assert cpa.status is Status.FAIL
        assert cpa.details == "Account CPA: 180.00 (> 50.00)"
        budget = findings_for(collector, "Search IS Lost (Budget)")[0]
        assert budget.status is Status.FAIL
        assert "(> 10%)" in budget.details

    def test_cpa_threshold_is_configurable(self, snapshot_factory, run_module):
        collector = run_module(PerformanceMetricsCheck, snapshot_factory.source(), config=AuditConfig(max_cpa=20.0))
        assert findings_for(collector, "Cost Per Acquisition (CPA)")[0].status is Status.FAIL

    def test_zero_conversions(self, snapshot_factory, run_module):
        f = snapshot_factory
        collector = run_module(PerformanceMetricsCheck, f.source(f.account(metrics=_metrics(conversions=0))))
        cpa = findings_for(collector, "Cost Per Acquisition (CPA)")[0]
        assert cpa.status is Status.INFO
        assert "CPA cannot be calculated" in cpa.details

    def test_failed_metrics_are_errors_and_skip_dependent_checks(self, snapshot_factory, run_module):
        f = snapshot_factory
        doc = f.account(metrics=_metrics(ctr={"error": "timeout"}, cost={"error": "timeout"}))
        collector = run_module(PerformanceMetricsCheck, f.source(doc))

        retrieval = findings_for(collector, "Metric Retrieval")
        assert len(retrieval) == 1
        assert retrieval[0].status is Status.WARN
        assert "CTR, Cost" in retrieval[0].details
        errors = findings_for(collector, "Metric Retrieval Check")
        assert [e.status for e in errors] == [Status.ERROR, Status.ERROR]
        assert errors[0].details == "Error checking account metric CTR: timeout"
        assert errors[1].details == "Error checking account metric Cost: timeout"
        assert findings_for(collector, "Click-Through Rate (CTR)")[0].details == "CTR check skipped due to retrieval error."
        assert findings_for(collector, "Cost Per Acquisition (CPA)")[0].status is Status.INFO
        assert "ROAS check skipped" in findings_for(collector, "Return On Ad Spend (ROAS)")[0].details

    def test_display_only_account_has_no_impression_share(self, snapshot_factory, run_module):
        f = snapshot_factory
        metrics = _metrics()
        for key in ("search_impression_share", "search_lost_is_rank", "search_lost_is_budget"):
            del metrics[key]
        collector = run_module(PerformanceMetricsCheck, f.source(f.account(metrics=metrics)))

        share = findings_for(collector, "Search Impression Share")
        assert [s.status for s in share] == [Status.INFO]
        assert "not available" in share[0].details
        assert findings_for(collector, "Search IS Lost (Rank)") == []
        # unavailable metrics are not retrieval failures
        assert findings_for(collector, "Metric Retrieval") == []

    def test_low_impression_share_warns(self, snapshot_factory, run_module):
        f = snapshot_factory
        collector = run_module(PerformanceMetricsCheck,
                               f.source(f.account(metrics=_metrics(search_impression_share=0.42))))
        share = findings_for(collector, "Search Impression Share")[0]
        assert share.status is Status.WARN
        assert share.details == "Account Search IS: 42.0% (< 60%)"


class TestBiddingStrategies:
    def test_healthy_account(self, snapshot_factory, run_module):
        collector = run_module(BiddingStrategiesCheck, snapshot_factory.source())
        assert findings_for(collector, "Smart Bidding Usage")[0].status is Status.PASS
        assert findings_for(collector, "Bidding Strategy Mix")[0].details == "Manual/eCPC: 0, Smart Bidding: 1, Other: 0"
        assert findings_for(collector, "Bid Adjustments")[0].status is Status.INFO
        assert [s.status for s in findings_for(collector, "Impression Share Lost (Budget)")] == [Status.PASS]
        assert [s.status for s in findings_for(collector, "Impression Share Lost (Rank)")] == [Status.PASS]

    @pytest.mark.parametrize(
        "strategy, item, status",
        [
            ("MANUAL_CPC", "Manual/Enhanced Bidding Usage", Status.WARN),
            ("ENHANCED_CPC", "Manual/Enhanced Bidding Usage", Status.WARN),
            ("MAXIMIZE_CONVERSION_VALUE", "Smart Bidding Usage", Status.PASS),
            ("TARGET_IMPRESSION_SHARE", "Other Bidding Strategy", Status.INFO),
            (None, "Bidding Strategy Check", Status.WARN),
        ],
    )
    def test_strategy_classification(self, snapshot_factory, run_module, strategy, item, status):
        f = snapshot_factory
        doc = f.account([f.campaign("US-Brand-Search", bidding_strategy=strategy)])
        collector = run_module(BiddingStrategiesCheck, f.source(doc))
        assert [x.status for x in findings_for(collector, item)] == [status]

    def test_budget_and_rank_limited_campaigns(self, snapshot_factory, run_module):
        f = snapshot_factory
        campaigns = [
            f.campaign("US-Brand-Search"),
            f.campaign("US-Generic-Search", metrics=_metrics(search_lost_is_budget=0.35, search_lost_is_rank=0.4)),
        ]
        collector = run_module(BiddingStrategiesCheck, f.source(f.account(campaigns)))

        budget = findings_for(collector, "Impression Share Lost (Budget)")
        assert [b.status for b in budget] == [Status.FAIL]
        assert "lost 35.0% IS due to budget (>10%)" in budget[0].details
        assert findings_for(collector, "Budget Constraints")[0].details == "1 campaign(s) potentially limited by budget."
        assert findings_for(collector, "Rank Constraints")[0].status is Status.FAIL

    def test_missing_statistics(self, snapshot_factory, run_module):
        f = snapshot_factory
        pmax = f.campaign("US-All-PMax", [], channel_type="PERFORMANCE_MAX")
        del pmax["metrics"]
        collector = run_module(BiddingStrategiesCheck, f.source(f.account([pmax])))

        assert len(findings_for(collector, "Impression Share Check")) == 2
        assert findings_for(collector, "Impression Share Checks")[0].status is Status.WARN
        assert findings_for(collector, "Impression Share Lost (Budget)") == []

    def test_no_device_adjustments_warns(self, snapshot_factory, run_module):
        f = snapshot_factory
        doc = f.account([f.campaign("US-Brand-Search", device_bid_modifiers=[1.0, 1.0])])
        collector = run_module(BiddingStrategiesCheck, f.source(doc))
        assert findings_for(collector, "Bid Adjustments")[0].status is Status.WARN


class TestCampaignOptimization:
    def test_healthy_campaign(self, snapshot_factory, run_module):
        collector = run_module(CampaignOptimizationCheck, snapshot_factory.source())

        check = findings_for(collector, "Campaign Performance Check")[0]
        assert check.status is Status.PASS
        assert "CPA: 30.00" in check.details
        assert findings_for(collector, "Underperforming Campaigns")[0].status is Status.PASS
        assert findings_for(collector, "High Performing Campaign Budget")[0].status is Status.INFO
        for item in ("Ad Schedule Optimization", "Geo-targeting Optimization", "Device Optimization"):
            assert len(findings_for(collector, item)) == 1

    def test_underperforming_and_starved_campaigns(self, snapshot_factory, run_module):
        f = snapshot_factory
        campaigns = [
            f.campaign("US-Generic-Search", metrics=_metrics(conversions=10, conversion_rate=0.004)),
            f.campaign("US-Brand-Search", metrics=_metrics(search_lost_is_budget=0.25)),
        ]
        collector = run_module(CampaignOptimizationCheck, f.source(f.account(campaigns)))

        checks = findings_for(collector, "Campaign Performance Check")
        assert [c.status for c in checks] == [Status.FAIL, Status.PASS]
        assert "CPA 180.00 > 50.00" in checks[0].details
        assert "Conv. Rate 0.40% < 1%" in checks[0].details
        under = findings_for(collector, "Underperforming Campaigns")[0]
        assert under.status is Status.WARN
        assert under.details == "1 of 2 campaigns underperforming: US-Generic-Search"
        starved = findings_for(collector, "High Performing Campaign Budget")
        assert [s.status for s in starved] == [Status.WARN]
        assert "US-Brand-Search" in starved[0].details

    def test_statistics_unavailable(self, snapshot_factory, run_module):
        f = snapshot_factory
        pmax = f.campaign("US-All-PMax", [], channel_type="PERFORMANCE_MAX")
        del pmax["metrics"]
        collector = run_module(CampaignOptimizationCheck, f.source(f.account([pmax])))

        assert findings_for(collector, "Campaign Performance Check")[0].status is Status.INFO
        summaries = findings_for(collector, "Underperforming Campaigns") + findings_for(
            collector, "High Performing Campaign Budget"
        )
        assert [s.status for s in summaries] == [Status.INFO, Status.INFO]

    @pytest.mark.parametrize("failing", ["cost", "conversions", "conversion_rate"])
    def test_failed_statistics_are_errors(self, snapshot_factory, run_module, failing):
        f = snapshot_factory
        campaigns = [
            f.campaign("US-Generic-Search", metrics=_metrics(**{failing: {"error": "boom"}})),
            f.campaign("US-Brand-Search"),
        ]
        collector = run_module(CampaignOptimizationCheck, f.source(f.account(campaigns)))

        checks = findings_for(collector, "Campaign Performance Check")
        assert [c.status for c in checks] == [Status.ERROR, Status.PASS]
        assert checks[0].details == "Error checking performance statistics of campaign 'US-Generic-Search': boom"
        under = findings_for(collector, "Underperforming Campaigns")[0]
        assert under.status is Status.PASS
        assert "None of 1 campaigns" in under.details

    def test_no_campaigns(self, snapshot_factory, run_module):
        f = snapshot_factory
        collector = run_module(CampaignOptimizationCheck, f.source(f.account([])))
        assert [x.item for x in collector.findings] == ["General Check"]
