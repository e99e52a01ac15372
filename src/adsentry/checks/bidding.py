"""Bidding strategy, impression share and bid adjustment checks."""
from __future__ import annotations

from ..core.interfaces import Metric
from .base import AuditModule, percent
from .types import Category, Status

MANUAL_STRATEGIES = frozenset({"MANUAL_CPC", "MANUAL_CPM", "MANUAL_CPV", "ENHANCED_CPC"})
SMART_STRATEGIES = frozenset({"TARGET_CPA", "TARGET_ROAS", "MAXIMIZE_CONVERSIONS", "MAXIMIZE_CONVERSION_VALUE"})


class BiddingStrategiesCheck(AuditModule):
    name = "bidding_strategies"
    description = "Strategy mix, impression share lost to budget or rank, device bid adjustments"
    category = Category.BIDDING_STRATEGIES

    def run(self) -> None:
        cfg = self.config
        checked = 0
        manual = smart = other = 0
        stats_errors = 0
        lost_budget = 0
        lost_rank = 0

        for campaign in self.source.campaigns():
            checked += 1
            subject = f"Campaign '{campaign.name}'"

            strategy = campaign.bidding_strategy()
            kind = (strategy.value or "UNKNOWN").upper() if strategy.is_ok else None
            if kind is None:
                self.settle(strategy, "Bidding Strategy Check", f"campaign '{campaign.name}'")
            elif kind in MANUAL_STRATEGIES:
                manual += 1
                self.record(
                    "Manual/Enhanced Bidding Usage",
                    Status.WARN,
                    f"{subject} uses {kind}.",
                    "Ensure manual/eCPC bidding is intentional and actively managed. "
                    "Consider Smart Bidding if sufficient conversion data exists.",
                )
            elif kind in SMART_STRATEGIES:
                smart += 1
                self.record(
                    "Smart Bidding Usage",
                    Status.PASS,
                    f"{subject} uses {kind}.",
                    "Ensure sufficient conversion data (~15-30 conversions in last 30 days recommended) "
                    "for optimal performance. Monitor targets (tCPA/tROAS).",
                )
            elif kind != "UNKNOWN":
                other += 1
                self.record(
                    "Other Bidding Strategy",
                    Status.INFO,
                    f"{subject} uses {kind}.",
                    "Ensure strategy aligns with the primary goal of the campaign "
                    "(e.g., Max Clicks for traffic, Target IS for visibility).",
                )
            else:
                self.record(
                    "Bidding Strategy Check",
                    Status.WARN,
                    f"Could not determine bidding strategy for campaign '{campaign.name}'.",
                    "Review manually.",
                )

            budget_share = campaign.metric(Metric.SEARCH_LOST_IS_BUDGET)
            rank_share = campaign.metric(Metric.SEARCH_LOST_IS_RANK)
            budget_ok = self.settle(budget_share, "Impression Share Check",
                                    f"IS lost to budget of campaign '{campaign.name}'")
            rank_ok = self.settle(rank_share, "Impression Share Check",
                                  f"IS lost to rank of campaign '{campaign.name}'")
            if not (budget_ok and rank_ok):
                stats_errors += 1
            if budget_ok and budget_share.value is not None and budget_share.value > cfg.max_lost_is_budget:
                lost_budget += 1
                self.record(
                    "Impression Share Lost (Budget)",
                    Status.FAIL,
                    f"{subject} lost {percent(budget_share.value, 1)} IS due to budget "
                    f"(>{percent(cfg.max_lost_is_budget, 0)}).",
                    "Increase budget if performance is good, or optimize bids/targeting to reduce costs.",
                )
            if rank_ok and rank_share.value is not None and rank_share.value > cfg.max_lost_is_rank:
                lost_rank += 1
                self.record(
                    "Impression Share Lost (Rank)",
                    Status.FAIL,
                    f"{subject} lost {percent(rank_share.value, 1)} IS due to rank "
                    f"(>{percent(cfg.max_lost_is_rank, 0)}).",
                    "Improve Quality Score (ad relevance, CTR, landing page) and/or increase bids.",
                )

            modifiers = campaign.device_bid_modifiers()
            if self.settle(modifiers, "Bid Adjustments Check", f"campaign '{campaign.name}'",
                           recommendation="Check permissions/campaign type."):
                adjusted = sum(1 for m in (modifiers.value or []) if m != 1.0)
                self.record(
                    "Bid Adjustments",
                    Status.INFO if adjusted else Status.WARN,
                    f"{subject} has {adjusted} device bid adjustment(s) checked.",
                    "Review performance data to ensure adjustments are justified." if adjusted else
                    "Consider setting bid adjustments for devices, locations, times, or audiences "
                    "based on performance differences.",
                )

        self.record(
            "Bidding Strategy Mix",
            Status.INFO,
            f"Manual/eCPC: {manual}, Smart Bidding: {smart}, Other: {other}",
            "Ensure the mix of strategies aligns with overall account goals.",
        )
        if checked == 0:
            self.record("General Check", Status.INFO, "No enabled campaigns found to check bidding.", "N/A")
        else:
            if stats_errors:
                self.record(
                    "Impression Share Checks",
                    Status.WARN,
                    f"IS Lost (Budget/Rank) checks skipped for {stats_errors} campaigns due to stats errors/unavailability.",
                    "Review IS manually for these campaigns.",
                )
            if stats_errors < checked:
                if lost_budget == 0:
                    self.record(
                        "Impression Share Lost (Budget)",
                        Status.PASS,
                        f"No campaigns found losing significant IS (>{percent(cfg.max_lost_is_budget, 0)}) to budget.",
                        "Monitor budget utilization.",
                    )
                else:
                    self.record(
                        "Budget Constraints",
                        Status.FAIL,
                        f"{lost_budget} campaign(s) potentially limited by budget.",
                        "Review campaigns flagged for high IS Lost (Budget).",
                    )
                if lost_rank == 0:
                    self.record(
                        "Impression Share Lost (Rank)",
                        Status.PASS,
                        f"No campaigns found losing significant IS (>{percent(cfg.max_lost_is_rank, 0)}) to rank.",
                        "Maintain good Quality Scores and competitive bids.",
                    )
                else:
                    self.record(
                        "Rank Constraints",
                        Status.FAIL,
                        f"{lost_rank} campaign(s) potentially limited by rank.",
                        "Review campaigns flagged for high IS Lost (Rank).",
                    )
        self.manual(
            "Smart Bidding Optimization",
            "For Smart Bidding campaigns, ensure conversion tracking is accurate and review performance "
            "against tCPA/tROAS targets. Check Recommendations tab for optimization suggestions.",
        )
