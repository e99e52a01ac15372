"""Per-campaign performance review and optimization reminders."""
from __future__ import annotations

from typing import List, Optional

from ..core.interfaces import Metric
from .base import AuditModule, money, percent
from .types import Category, Status


class CampaignOptimizationCheck(AuditModule):
    name = "campaign_optimization"
    description = "Underperforming and budget-limited campaigns, schedule/geo/device reviews"
    category = Category.CAMPAIGN_OPTIMIZATION

    @staticmethod
    def _cpa(cost: Optional[float], conversions: Optional[float]) -> Optional[float]:
        if cost is None or not conversions:
            return None
        return cost / conversions

    def run(self) -> None:
        cfg = self.config
        checked = 0
        with_stats = 0
        underperforming: List[str] = []
        starved: List[str] = []

        for campaign in self.source.campaigns():
            checked += 1
            subject = f"Campaign '{campaign.name}'"
            conv_rate = campaign.metric(Metric.CONVERSION_RATE)
            cost = campaign.metric(Metric.COST)
            conversions = campaign.metric(Metric.CONVERSIONS)
            unusable = [o for o in (conv_rate, cost, conversions) if not o.is_ok]
            broken = [o for o in unusable if not o.is_unavailable]

            if broken:
                self.settle(
                    broken[0],
                    "Campaign Performance Check",
                    f"performance statistics of campaign '{campaign.name}'",
                    recommendation="Review campaign performance manually using Google Ads reports.",
                )
            elif unusable:
                self.record(
                    "Campaign Performance Check",
                    Status.INFO,
                    f"Detailed performance checks (CPA, Conv Rate, IS Lost) skipped for campaign "
                    f"'{campaign.name}': {unusable[0].reason or 'statistics unavailable'}.",
                    "Review campaign performance manually using Google Ads reports.",
                )
            else:
                with_stats += 1
                cpa = self._cpa(cost.value, conversions.value)
                problems: List[str] = []
                if cpa is not None and cpa > cfg.max_cpa:
                    problems.append(f"CPA {money(cpa)} > {money(cfg.max_cpa)}")
                if conv_rate.value is not None and conv_rate.value < cfg.min_conversion_rate:
                    problems.append(
                        f"Conv. Rate {percent(conv_rate.value)} < {percent(cfg.min_conversion_rate, 0)}"
                    )
                if problems:
                    underperforming.append(campaign.name)
                    self.record(
                        "Campaign Performance Check",
                        Status.FAIL,
                        f"{subject} is underperforming: {'; '.join(problems)}.",
                        "Review targeting, bids, ad copy and landing pages, or reallocate budget.",
                    )
                else:
                    self.record(
                        "Campaign Performance Check",
                        Status.PASS,
                        f"{subject} meets CPA and conversion rate thresholds "
                        f"(CPA: {money(cpa)}, Conv. Rate: {percent(conv_rate.value)}).",
                        "Keep monitoring performance trends.",
                    )
                    lost = campaign.metric(Metric.SEARCH_LOST_IS_BUDGET)
                    if lost.is_ok and lost.value is not None and lost.value > cfg.max_lost_is_budget:
                        starved.append(campaign.name)
                        self.record(
                            "High Performing Campaign Budget",
                            Status.WARN,
                            f"{subject} performs well but lost {percent(lost.value, 1)} IS due to budget.",
                            "Consider shifting budget toward this campaign.",
                        )

            self.record(
                "Ad Schedule Optimization",
                Status.INFO,
                f"Manual Review Required for Campaign '{campaign.name}'",
                "Analyze performance by day/hour in the UI (Reports > Predefined > Time). "
                "Apply bid adjustments or ad schedules based on data.",
            )
            self.record(
                "Geo-targeting Optimization",
                Status.INFO,
                f"Manual Review Required for Campaign '{campaign.name}'",
                "Analyze performance by location in the UI (Locations tab). "
                "Refine targeting or apply bid adjustments based on data.",
            )
            self.record(
                "Device Optimization",
                Status.INFO,
                f"Manual Review Required for Campaign '{campaign.name}'",
                "Analyze performance by device in the UI (Settings > Devices). Apply bid adjustments based on data.",
            )

        if not checked:
            self.record("General Check", Status.INFO, "No enabled campaigns found to check optimization status.", "N/A")
            return

        if not with_stats:
            self.record(
                "Underperforming Campaigns",
                Status.INFO,
                "Automated check skipped: campaign statistics unavailable.",
                "Review campaign performance manually to identify underperformers.",
            )
            self.record(
                "High Performing Campaign Budget",
                Status.INFO,
                "Automated check skipped: campaign statistics unavailable.",
                "Review performance and budget limitations manually for high-performing campaigns.",
            )
            return

        if underperforming:
            self.record(
                "Underperforming Campaigns",
                Status.WARN,
                f"{len(underperforming)} of {with_stats} campaigns underperforming: {', '.join(underperforming)}",
                "Prioritize optimization of the listed campaigns.",
            )
        else:
            self.record(
                "Underperforming Campaigns",
                Status.PASS,
                f"None of {with_stats} campaigns with statistics miss CPA or conversion rate thresholds.",
                "Continue regular performance reviews.",
            )
        if not starved:
            self.record(
                "High Performing Campaign Budget",
                Status.INFO,
                "No well-performing campaigns found losing significant impression share to budget.",
                "Monitor budget utilization.",
            )
