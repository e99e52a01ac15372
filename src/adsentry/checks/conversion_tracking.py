"""Conversion tracking checks."""
from __future__ import annotations

from collections import Counter
from typing import List

from ..core.interfaces import ConversionAction
from .base import MANUAL_CHECK, AuditModule
from .types import Category, Status

# Conversion categories that usually represent the business goal itself
PRIMARY_CATEGORIES = frozenset({"PURCHASE", "LEAD", "SIGNUP", "SUBMIT_LEAD_FORM", "BOOK_APPOINTMENT", "PHONE_CALL_LEAD"})


class ConversionTrackingCheck(AuditModule):
    name = "conversion_tracking"
    description = "Conversion actions, values, duplicates and analytics imports"
    category = Category.CONVERSION_TRACKING

    def run(self) -> None:
        outcome = self.source.conversion_actions()
        if outcome.is_unavailable:
            self.record(
                "Conversion Action Check",
                Status.INFO,
                MANUAL_CHECK,
                "Conversion actions are not exposed by this data source. Review conversion actions, "
                "primary/secondary settings, values, and GA linking manually in the UI "
                "(Tools & Settings > Measurement > Conversions).",
            )
            self._analytics_link()
            return
        if not self.settle(outcome, "Conversion Action Check", "conversion actions"):
            self._analytics_link()
            return

        actions: List[ConversionAction] = list(outcome.value or [])
        if not actions:
            self.record(
                "Conversion Tracking Implemented",
                Status.FAIL,
                "No conversion actions found in the account.",
                "Implement conversion tracking immediately.",
            )
            self._analytics_link()
            return

        self.record(
            "Conversion Tracking Implemented",
            Status.PASS,
            f"{len(actions)} conversion action(s) found.",
            "Review specific actions below.",
        )

        enabled_names = Counter(a.name for a in actions if a.status.upper() == "ENABLED")
        primary = 0
        secondary = 0
        reported_duplicates = set()
        for action in actions:
            status = action.status.upper()
            if status != "ENABLED":
                self.record(
                    "Action Status",
                    Status.WARN,
                    f"Action '{action.name}' is {status}",
                    "Review if this action should be enabled or removed.",
                )
                continue

            if action.include_in_conversions and action.category.upper() in PRIMARY_CATEGORIES:
                primary += 1
                self.record(
                    "Primary Conversion Actions",
                    Status.INFO,
                    f"Action '{action.name}' (Category: {action.category}) likely primary.",
                    "Verify this action is correctly set as primary in the UI if applicable.",
                )
            else:
                secondary += 1
                self.record(
                    "Secondary Conversion Actions",
                    Status.INFO,
                    f"Action '{action.name}' (Category: {action.category}) likely secondary.",
                    "Verify this action is correctly set as secondary in the UI if applicable.",
                )

            has_value = bool(action.default_value) or not action.always_use_default_value
            if has_value:
                self.record(
                    "Conversion Values Assigned",
                    Status.PASS,
                    f"Action '{action.name}' has value settings.",
                    "Ensure values are accurate.",
                )
            else:
                self.record(
                    "Conversion Values Assigned",
                    Status.WARN,
                    f"Action '{action.name}' does not seem to have specific value settings.",
                    "Assign conversion values if applicable (e.g., for purchases, leads with estimated value).",
                )

            self.record(
                "Tag Firing Check",
                Status.INFO,
                f"Action '{action.name}' Origin: {action.origin}, Status: {status}",
                "Live tag firing cannot be confirmed from account data. Use Google Tag Assistant "
                "or check recent conversion data manually.",
            )

            if enabled_names[action.name] > 1 and action.name not in reported_duplicates:
                reported_duplicates.add(action.name)
                self.record(
                    "Potential Duplicate Tracking",
                    Status.WARN,
                    f"Multiple enabled conversion actions found with the name '{action.name}'.",
                    "Investigate if these are duplicates or intentionally named similarly. "
                    "Ensure correct counting settings.",
                )

        if primary == 0:
            self.record(
                "Primary Conversion Actions Defined",
                Status.FAIL,
                "No clear primary conversion actions identified among enabled actions.",
                "Define at least one primary conversion action representing key business goals.",
            )
        else:
            self.record(
                "Primary Conversion Actions Defined",
                Status.PASS,
                f"{primary} potential primary action(s) identified.",
                "Verify in UI.",
            )
        if secondary > 0:
            self.record(
                "Secondary Conversion Actions Tracked",
                Status.PASS,
                f"{secondary} potential secondary action(s) identified.",
                "Verify in UI.",
            )
        else:
            self.record(
                "Secondary Conversion Actions Tracked",
                Status.INFO,
                "No clear secondary actions identified.",
                "Consider tracking micro-conversions as secondary actions if valuable.",
            )

        self._analytics_link()
        analytics_goals = sum(1 for a in actions if a.is_google_analytics)
        if analytics_goals:
            self.record(
                "GA Goals Imported",
                Status.PASS,
                f"{analytics_goals} conversion action(s) sourced from Google Analytics found.",
                "Ensure imported goals are relevant and correctly configured in GA.",
            )
        else:
            self.record(
                "GA Goals Imported",
                Status.WARN,
                "No conversion actions sourced from Google Analytics found.",
                "If using GA goals, ensure they are imported into Google Ads.",
            )

    def _analytics_link(self) -> None:
        self.manual(
            "Google Analytics Linked",
            "Verify in Google Ads UI (Tools & Settings > Linked Accounts > Google Analytics) "
            "that the correct GA property is linked.",
            details=MANUAL_CHECK,
        )
