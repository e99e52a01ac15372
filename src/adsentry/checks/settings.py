"""Account settings and account structure checks."""
from __future__ import annotations

import logging

from ..core.interfaces import ENABLED_OR_PAUSED
from .base import MANUAL_CHECK, AuditModule, money, rollup
from .types import Category, Status

logger = logging.getLogger(__name__)


class AccountSettingsCheck(AuditModule):
    name = "account_settings"
    description = "Currency, time zone, auto-tagging and IP exclusions"
    category = Category.ACCOUNT_SETTINGS

    def run(self) -> None:
        currency = self.source.currency_code()
        time_zone = self.source.time_zone()
        if currency.is_ok and time_zone.is_ok:
            self.record(
                "Currency and Time Zone",
                Status.INFO,
                f"Currency: {currency.value}, Time Zone: {time_zone.value}",
                "Verify these are correct for the business.",
            )
        else:
            self.settle(currency, "Currency and Time Zone", "account currency")
            self.settle(time_zone, "Currency and Time Zone", "account time zone")

        self.manual(
            "Auto-tagging Enabled",
            "Verify auto-tagging status in Account Settings > Tracking. "
            "Enable it for proper GA tracking if disabled.",
            details=MANUAL_CHECK,
        )

        excluded_total = 0
        campaigns_with_exclusions = 0
        for campaign in self.source.campaigns():
            outcome = campaign.excluded_ips()
            if not self.settle(
                outcome,
                "IP Exclusions Check",
                f"campaign '{campaign.name}'",
                recommendation="Check data source permissions or API changes.",
                unavailable_recommendation="Method unavailable (likely incompatible campaign type like Performance Max).",
            ):
                continue
            ips = outcome.value or []
            if ips:
                campaigns_with_exclusions += 1
                excluded_total += len(ips)

        if excluded_total > 0:
            self.record(
                "IP Exclusions",
                Status.INFO,
                f"{excluded_total} IPs excluded across {campaigns_with_exclusions} campaigns.",
                "Review excluded IPs periodically for relevance.",
            )
        else:
            self.record(
                "IP Exclusions",
                Status.WARN,
                "0 IPs excluded across checked campaigns.",
                "Consider adding IP exclusions for irrelevant traffic (e.g., office IPs, known bots).",
            )

        self.record("Location Targeting", Status.INFO, "Checked per campaign.",
                    "Ensure targeting matches business goals in each campaign.")
        self.record("Language Settings", Status.INFO, "Checked per campaign.",
                    "Ensure language aligns with ad content and target audience in each campaign.")
        self.record("Device Targeting", Status.INFO, "Checked per campaign.",
                    "Review device performance and apply bid adjustments as needed per campaign.")
        self.record("Ad Scheduling", Status.INFO, "Checked per campaign.",
                    "Review performance by time/day and apply schedules or bid adjustments per campaign.")


class AccountStructureCheck(AuditModule):
    name = "account_structure"
    description = "Budgets, campaign naming and overall organization"
    category = Category.ACCOUNT_STRUCTURE

    def run(self) -> None:
        pattern = self.config.campaign_name_re
        currency = self.source.currency_code().value_or("")
        total_budget = 0.0
        checked = 0
        compliant = 0

        for campaign in self.source.campaigns(ENABLED_OR_PAUSED):
            checked += 1
            budget = campaign.budget()
            if budget.is_ok:
                amount = budget.value or 0.0
                total_budget += amount
                self.record(
                    "Budget Allocation",
                    Status.INFO,
                    f"Campaign '{campaign.name}' Budget: {money(amount)} {currency}".rstrip(),
                    "Ensure budget aligns with campaign priority and performance.",
                )
            elif budget.is_unavailable:
                self.settle(budget, "Budget Check", f"campaign '{campaign.name}'")
            else:
                self.record(
                    "Budget Check",
                    Status.WARN,
                    f"Could not retrieve budget for campaign '{campaign.name}': {budget.reason}",
                    "Review budget setting manually.",
                )

            if pattern.match(campaign.name):
                compliant += 1
            else:
                self.record(
                    "Campaign Naming Convention",
                    Status.WARN,
                    f"Campaign '{campaign.name}' doesn't match pattern: {pattern.pattern}",
                    "Standardize campaign naming for better organization.",
                )

        if checked == 0:
            self.record(
                "Campaign Naming Convention",
                Status.INFO,
                "No active/paused campaigns found to check.",
                "N/A",
            )
        elif compliant == checked:
            self.record(
                "Campaign Naming Convention",
                Status.PASS,
                f"All {checked} checked campaigns follow the naming convention.",
                "Maintain consistent naming.",
            )
        else:
            self.record(
                "Campaign Naming Convention",
                Status.INFO,
                rollup(compliant, checked, "campaigns", "follow the naming convention"),
                "Rename the campaigns flagged above.",
            )

        self.record(
            "Total Account Budget",
            Status.INFO,
            f"Sum of daily budgets for checked campaigns: {money(total_budget)} {currency}".rstrip(),
            "Verify total budget aligns with overall advertising goals.",
        )
        self.manual(
            "Campaign Organization",
            "Review campaign goals (e.g., Search, Display, Video) and structure "
            "(e.g., by product, service, location). Ensure logical grouping.",
        )
        self.record("Ad Group Theming", Status.INFO, "Checked in Ad Groups module.",
                    "Ensure ad groups contain tightly themed keywords.")
        self.record("Overlapping Keywords", Status.INFO, "Basic checks in Keywords module.",
                    "Perform deeper analysis using Search Terms Report or dedicated tools if needed.")
