"""Account-level performance metrics against configured thresholds."""
from __future__ import annotations

from typing import Dict, List, Optional

from ..core.interfaces import Metric, Outcome
from .base import AuditModule, money, percent
from .types import Category, Status

_LABELS: Dict[Metric, str] = {
    Metric.CTR: "CTR",
    Metric.AVERAGE_CPC: "AvgCPC",
    Metric.CONVERSION_RATE: "ConvRate",
    Metric.CONVERSIONS: "Conversions",
    Metric.COST: "Cost",
    Metric.CONVERSION_VALUE: "ConvValue",
    Metric.SEARCH_IMPRESSION_SHARE: "ImprShare",
    Metric.SEARCH_LOST_IS_RANK: "ISLostRank",
    Metric.SEARCH_LOST_IS_BUDGET: "ISLostBudget",
}


class PerformanceMetricsCheck(AuditModule):
    name = "performance_metrics"
    description = "Account CTR, CPC, conversion rate, CPA, ROAS and impression share"
    category = Category.PERFORMANCE_METRICS

    def run(self) -> None:
        outcomes: Dict[Metric, Outcome[Optional[float]]] = {m: self.source.metric(m) for m in _LABELS}
        failed: List[str] = []
        for metric, outcome in outcomes.items():
            if outcome.is_ok or outcome.is_unavailable:
                continue
            failed.append(_LABELS[metric])
            self.settle(outcome, "Metric Retrieval Check", f"account metric {_LABELS[metric]}")
        if failed:
            self.record(
                "Metric Retrieval",
                Status.WARN,
                f"Could not retrieve some account metrics: {', '.join(failed)}",
                "Checks involving these metrics may be incomplete. Review manually or check API documentation.",
            )

        cfg = self.config
        self._ratio(
            outcomes[Metric.CTR], "Click-Through Rate (CTR)", "Account CTR", cfg.min_ctr, higher_is_better=True,
            pass_rec="CTR meets minimum threshold. Compare to industry benchmarks.",
            fail_rec="Investigate low CTR: improve ad copy, keyword relevance, targeting, or use negative keywords.",
            skipped="CTR check skipped due to retrieval error.",
        )

        cpc = outcomes[Metric.AVERAGE_CPC]
        if cpc.is_ok and cpc.value is not None:
            self.record(
                "Average Cost-Per-Click (CPC)",
                Status.INFO,
                f"Account Avg. CPC: {money(cpc.value)}",
                "Monitor CPC trends. Compare to keyword/industry benchmarks. High CPC may impact CPA.",
            )
        else:
            self.record("Average Cost-Per-Click (CPC)", Status.INFO,
                        "Avg. CPC check skipped due to retrieval error.", "Review manually.")

        self._ratio(
            outcomes[Metric.CONVERSION_RATE], "Conversion Rate", "Account Conv. Rate", cfg.min_conversion_rate,
            higher_is_better=True,
            pass_rec="Conversion rate meets minimum threshold. Focus on landing page optimization and offer relevance.",
            fail_rec="Investigate low conversion rate: check landing page experience, offer clarity, "
                     "audience targeting, and conversion tracking setup.",
            skipped="Conv. Rate check skipped due to retrieval error.",
        )

        cost = outcomes[Metric.COST]
        conversions = outcomes[Metric.CONVERSIONS]
        if cost.is_ok and conversions.is_ok and cost.value is not None and conversions.value is not None:
            if conversions.value > 0:
                cpa = cost.value / conversions.value
                if cpa <= cfg.max_cpa:
                    self.record(
                        "Cost Per Acquisition (CPA)",
                        Status.PASS,
                        f"Account CPA: {money(cpa)} (<= {money(cfg.max_cpa)})",
                        "CPA is within the acceptable threshold.",
                    )
                else:
                    self.record(
                        "Cost Per Acquisition (CPA)",
                        Status.FAIL,
                        f"Account CPA: {money(cpa)} (> {money(cfg.max_cpa)})",
                        "Investigate high CPA: optimize bids, improve Quality Score, refine targeting, "
                        "enhance conversion rates, or review CPA goal.",
                    )
            else:
                self.record(
                    "Cost Per Acquisition (CPA)",
                    Status.INFO,
                    "No conversions recorded in the last 30 days. CPA cannot be calculated.",
                    "Ensure conversion tracking is working correctly.",
                )
        else:
            self.record("Cost Per Acquisition (CPA)", Status.INFO,
                        "CPA check skipped due to retrieval error for Cost or Conversions.", "Review manually.")

        value = outcomes[Metric.CONVERSION_VALUE]
        if value.is_ok and value.value is not None and cost.is_ok and cost.value:
            self.record(
                "Return On Ad Spend (ROAS)",
                Status.INFO,
                f"Account ROAS: {value.value / cost.value:.2f} (conversion value {money(value.value)} "
                f"on cost {money(cost.value)})",
                "Compare ROAS against the target return for each campaign goal.",
            )
        else:
            self.record(
                "Return On Ad Spend (ROAS)",
                Status.INFO,
                "ROAS check skipped (conversion value unavailable).",
                "Implement conversion value tracking and review ROAS manually if applicable.",
            )

        self._impression_share(outcomes)
        self.record(
            "Granular Performance",
            Status.INFO,
            "Account-level metrics provide an overview.",
            "Analyze performance at the campaign, ad group, keyword, and audience levels for specific "
            "optimization opportunities.",
        )

    def _ratio(
        self,
        outcome: Outcome[Optional[float]],
        item: str,
        label: str,
        threshold: float,
        *,
        higher_is_better: bool,
        pass_rec: str,
        fail_rec: str,
        skipped: str,
        digits: int = 2,
    ) -> None:
        if not outcome.is_ok or outcome.value is None:
            self.record(item, Status.INFO, skipped, "Review manually.")
            return
        value = outcome.value
        passed = value >= threshold if higher_is_better else value <= threshold
        op = (">=" if passed else "<") if higher_is_better else ("<=" if passed else ">")
        self.record(
            item,
            Status.PASS if passed else Status.FAIL,
            f"{label}: {percent(value, digits)} ({op} {percent(threshold, 0)})",
            pass_rec if passed else fail_rec,
        )

    def _impression_share(self, outcomes: Dict[Metric, Outcome[Optional[float]]]) -> None:
        cfg = self.config
        share = outcomes[Metric.SEARCH_IMPRESSION_SHARE]
        if share.is_unavailable or (share.is_ok and share.value is None):
            self.record(
                "Search Impression Share",
                Status.INFO,
                "Search Impression Share data not available (e.g., Display/Video only account).",
                "N/A for this check.",
            )
            return

        if share.is_ok:
            if share.value >= cfg.min_impression_share:
                self.record(
                    "Search Impression Share",
                    Status.PASS,
                    f"Account Search IS: {percent(share.value, 1)} (>= {percent(cfg.min_impression_share, 0)})",
                    "Impression share meets minimum threshold.",
                )
            else:
                self.record(
                    "Search Impression Share",
                    Status.WARN,
                    f"Account Search IS: {percent(share.value, 1)} (< {percent(cfg.min_impression_share, 0)})",
                    "Investigate reasons for low impression share (budget or rank).",
                )
        else:
            self.record("Search Impression Share", Status.INFO,
                        "Search IS check skipped due to retrieval error.", "Review manually.")

        self._ratio(
            outcomes[Metric.SEARCH_LOST_IS_RANK], "Search IS Lost (Rank)", "Account IS Lost (Rank)",
            cfg.max_lost_is_rank, higher_is_better=False, digits=1,
            pass_rec="Impression share loss due to rank is within acceptable limits.",
            fail_rec="Improve Quality Score and/or increase bids to regain impression share lost to rank.",
            skipped="Search IS Lost (Rank) check skipped due to retrieval error.",
        )
        self._ratio(
            outcomes[Metric.SEARCH_LOST_IS_BUDGET], "Search IS Lost (Budget)", "Account IS Lost (Budget)",
            cfg.max_lost_is_budget, higher_is_better=False, digits=1,
            pass_rec="Impression share loss due to budget is within acceptable limits.",
            fail_rec="Increase budgets on performing campaigns or optimize efficiency to reduce impression "
                     "share lost to budget.",
            skipped="Search IS Lost (Budget) check skipped due to retrieval error.",
        )
