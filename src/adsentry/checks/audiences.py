"""Audience targeting checks."""
from __future__ import annotations

from .base import MANUAL_CHECK, AuditModule
from .types import Category, Status


class AudienceTargetingCheck(AuditModule):
    name = "audience_targeting"
    description = "Audience targets, exclusions and remarketing list usage"
    category = Category.AUDIENCE_TARGETING

    def run(self) -> None:
        targeted = 0
        excluded = 0
        remarketing = 0

        self.manual(
            "Remarketing/User Lists Available",
            "Check available User Lists (Audiences) in the UI (Tools & Settings > Shared Library > Audience manager).",
            details=MANUAL_CHECK,
        )

        for campaign in self.source.campaigns():
            has_target = False
            has_exclusion = False
            targets_readable = True
            exclusions_readable = True

            audiences = campaign.audiences()
            if self.settle(audiences, "Campaign Audience Check", f"campaign '{campaign.name}'",
                           recommendation="Check permissions/campaign type."):
                for audience in audiences.value or []:
                    targeted += 1
                    has_target = True
                    if audience.is_remarketing:
                        remarketing += 1
            else:
                targets_readable = False
            exclusions = campaign.excluded_audience_count()
            if self.settle(exclusions, "Campaign Audience Check", f"audience exclusions of campaign '{campaign.name}'",
                           recommendation="Check permissions/campaign type."):
                excluded += exclusions.value or 0
                has_exclusion = has_exclusion or bool(exclusions.value)
            else:
                exclusions_readable = False

            self.record(
                "Campaign Demographics Check",
                Status.INFO,
                f"Manual Check Required for Campaign '{campaign.name}'",
                "Review demographic targeting (Age, Gender) in the campaign's Audience settings in the UI.",
            )

            for ad_group in campaign.ad_groups():
                audiences = ad_group.audiences()
                if self.settle(audiences, "Ad Group Audience Check", f"ad group '{ad_group.name}'",
                               recommendation="Check permissions."):
                    for audience in audiences.value or []:
                        targeted += 1
                        has_target = True
                        if audience.is_remarketing:
                            remarketing += 1
                else:
                    targets_readable = False
                exclusions = ad_group.excluded_audience_count()
                if self.settle(exclusions, "Ad Group Audience Check",
                               f"audience exclusions of ad group '{ad_group.name}'",
                               recommendation="Check permissions."):
                    excluded += exclusions.value or 0
                    has_exclusion = has_exclusion or bool(exclusions.value)
                else:
                    exclusions_readable = False

            if not has_target and targets_readable:
                self.record(
                    "Audience Targeting Usage",
                    Status.WARN,
                    f"Campaign '{campaign.name}' does not appear to use audience or demographic targeting "
                    "at campaign or ad group level.",
                    "Consider adding relevant audiences or demographic refinements "
                    "(especially for Display/Video or Observation for Search).",
                )
            if not has_exclusion and exclusions_readable:
                self.record(
                    "Audience Exclusions",
                    Status.WARN,
                    f"Campaign '{campaign.name}' does not appear to use audience or demographic exclusions "
                    "at campaign or ad group level.",
                    "Consider excluding irrelevant audiences or demographics.",
                )

        self.record(
            "Audience Segments Targeted",
            Status.INFO,
            f"{targeted} audience criteria instances found at campaign/ad group level.",
            "Ensure targeted audiences align with campaign goals.",
        )
        self.manual("Demographic Targeting", "Review demographic targeting settings in the UI.",
                    details=MANUAL_CHECK)
        self.record(
            "Audience/Demographic Exclusions",
            Status.INFO,
            f"{excluded} audience exclusion criteria instances found.",
            "Verify audience exclusions are correctly removing irrelevant traffic/users. "
            "Review demographic exclusions manually.",
        )
        self.record(
            "Remarketing Lists Used",
            Status.PASS if remarketing else Status.WARN,
            f"{remarketing} instances of user lists (remarketing/custom) used in targeting.",
            "Ensure lists are sufficiently large and targeted appropriately." if remarketing else
            "Consider implementing or expanding remarketing efforts.",
        )
        self.manual(
            "Audience Performance Analysis",
            "Analyze performance reports segmented by audience (UI: Audiences section). Optimize bids or "
            "refine targeting based on performance (CTR, Conv. Rate, CPA).",
        )
