"""Checklist areas with no automatable signal; every item is a manual reminder."""
from __future__ import annotations

from typing import ClassVar, Tuple

from .base import MANUAL_CHECK, MANUAL_REVIEW, AuditModule
from .types import Category, Status

ChecklistItem = Tuple[str, str, str]


class ChecklistModule(AuditModule):
    """Records a fixed list of ``(item, details, recommendation)`` Info rows."""

    auto_register = False
    items: ClassVar[Tuple[ChecklistItem, ...]] = ()

    def run(self) -> None:
        for item, details, recommendation in self.items:
            self.record(item, Status.INFO, details, recommendation)


class AutomationToolsCheck(ChecklistModule):
    name = "automation_tools"
    description = "Automated rules, scripts, recommendations and third-party tools"
    category = Category.AUTOMATION_TOOLS
    items = (
        ("Automated Rules", MANUAL_CHECK,
         "Review existing automated rules in the UI (Tools & Settings > Bulk Actions > Rules). Ensure they are "
         "functioning correctly and align with current goals. Check rule history for errors."),
        ("Scripts", MANUAL_CHECK,
         "Review other active Google Ads Scripts in the UI (Tools & Settings > Bulk Actions > Scripts). Ensure "
         "they are necessary, functioning correctly (check logs), and not conflicting."),
        ("This Audit Script", "This audit (adsentry) is running.",
         "Schedule this audit to run regularly (e.g., weekly/monthly) and monitor its logs."),
        ("Google Ads Recommendations", MANUAL_CHECK,
         "Regularly review the 'Recommendations' tab in the Google Ads UI. Evaluate each suggestion carefully "
         "before applying; not all recommendations are suitable for every account."),
        ("Third-Party Tools", MANUAL_CHECK,
         "If using third-party management or reporting tools, ensure they are correctly integrated and "
         "providing value. Verify data consistency between tools and Google Ads."),
        ("Automation Alignment", MANUAL_REVIEW,
         "Ensure all automation (Rules, Scripts, Smart Bidding, Third-Party Tools) works together cohesively "
         "and supports overall campaign objectives. Avoid conflicting automations."),
    )


class CompetitiveAnalysisCheck(ChecklistModule):
    name = "competitive_analysis"
    description = "Auction insights and competitor positioning"
    category = Category.COMPETITIVE_ANALYSIS
    items = (
        ("Auction Insights Report", MANUAL_CHECK,
         "Regularly review the Auction Insights report in the UI (available at Campaign, Ad Group, and Keyword "
         "levels). Analyze impression share, overlap rate, position above rate, etc., for key competitors."),
        ("Competitor Ad Positioning", MANUAL_REVIEW,
         "Use Auction Insights and manual searches to understand how competitors position themselves in their "
         "ad copy and what offers they promote."),
        ("Identifying Gaps", MANUAL_REVIEW,
         "Analyze competitor strategies (keywords, ads, targeting - based on insights and observation) to "
         "identify potential gaps or opportunities they might be missing."),
        ("Differentiation Opportunities", MANUAL_REVIEW,
         "Based on competitor analysis, identify ways to differentiate your ads, offers, or targeting to "
         "stand out."),
    )


class ReportingInsightsCheck(ChecklistModule):
    name = "reporting_insights"
    description = "Dashboards, metric tracking, trend analysis and report sharing"
    category = Category.REPORTING_INSIGHTS
    items = (
        ("Custom Dashboards", "Manual Check Recommended",
         "Consider creating custom dashboards in Google Ads or Looker Studio to visualize key metrics and "
         "trends relevant to your goals."),
        ("Key Metric Tracking", "Script Provides Data",
         "This audit provides a snapshot of key metrics. Track these metrics over time using reports or "
         "dashboards to monitor progress."),
        ("Trend & Anomaly Identification", "Manual Analysis Required",
         "Regularly analyze performance data (using reports/dashboards) to identify positive/negative trends "
         "or unexpected anomalies that require investigation."),
        ("Report Sharing", "Manual Process",
         "Share audit summaries (like the generated workbook) and regular performance reports with relevant "
         "stakeholders."),
        ("Actionable Insights Documentation", "Manual Process",
         "Document insights gained from audits and performance analysis, along with the actions taken or "
         "planned, to track optimization efforts."),
    )
