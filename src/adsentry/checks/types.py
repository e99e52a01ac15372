"""Core audit types - no external dependencies."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

logger = logging.getLogger(__name__)


class Status(str, Enum):
    """Outcome of evaluating one rule against one entity."""

    PASS = "Pass"
    FAIL = "Fail"
    WARN = "Warn"
    INFO = "Info"
    ERROR = "Error"
    SKIPPED = "Skipped"


# Review urgency: Fail > Warn > Error > Info = Skipped = Pass
STATUS_URGENCY: Dict[Status, int] = {
    Status.FAIL: 4,
    Status.WARN: 3,
    Status.ERROR: 2,
    Status.INFO: 1,
    Status.SKIPPED: 1,
    Status.PASS: 1,
}


class Category(str, Enum):
    """Functional areas reported by the audit modules."""

    ACCOUNT_SETTINGS = "Account Settings"
    ACCOUNT_STRUCTURE = "Account Structure"
    CONVERSION_TRACKING = "Conversion Tracking"
    KEYWORDS = "Keywords"
    AD_GROUPS = "Ad Groups"
    AD_COPY = "Ad Copy"
    AD_EXTENSIONS = "Ad Extensions (Assets)"
    BIDDING_STRATEGIES = "Bidding Strategies"
    QUALITY_SCORE = "Quality Score"
    LANDING_PAGES = "Landing Pages"
    AUDIENCE_TARGETING = "Audience Targeting"
    PERFORMANCE_METRICS = "Performance Metrics"
    CAMPAIGN_OPTIMIZATION = "Campaign Optimization"
    AUTOMATION_TOOLS = "Automation & Tools"
    COMPETITIVE_ANALYSIS = "Competitive Analysis"
    REPORTING_INSIGHTS = "Reporting & Insights"


class Section(str, Enum):
    """Report sections, one sheet each in the workbook sink."""

    OVERVIEW = "Overview"
    PERFORMANCE = "Performance Summary"
    STRUCTURE_SETTINGS = "Structure & Settings"
    KEYWORDS_ADGROUPS = "Keywords & AdGroups"
    ADS_EXTENSIONS = "Ads & Extensions"
    MANUAL_CHECKS = "Opportunities & Manual Checks"


FALLBACK_SECTION = Section.MANUAL_CHECKS

# Order in which sections are summarized on the overview
SUMMARY_ORDER: Tuple[Section, ...] = (
    Section.PERFORMANCE,
    Section.STRUCTURE_SETTINGS,
    Section.KEYWORDS_ADGROUPS,
    Section.ADS_EXTENSIONS,
    Section.MANUAL_CHECKS,
)

CATEGORY_SECTIONS: Dict[str, Section] = {
    Category.ACCOUNT_SETTINGS.value: Section.STRUCTURE_SETTINGS,
    Category.ACCOUNT_STRUCTURE.value: Section.STRUCTURE_SETTINGS,
    Category.KEYWORDS.value: Section.KEYWORDS_ADGROUPS,
    Category.AD_GROUPS.value: Section.KEYWORDS_ADGROUPS,
    Category.QUALITY_SCORE.value: Section.KEYWORDS_ADGROUPS,
    Category.AD_COPY.value: Section.ADS_EXTENSIONS,
    Category.AD_EXTENSIONS.value: Section.ADS_EXTENSIONS,
    Category.PERFORMANCE_METRICS.value: Section.PERFORMANCE,
    Category.BIDDING_STRATEGIES.value: Section.PERFORMANCE,
    Category.CAMPAIGN_OPTIMIZATION.value: Section.PERFORMANCE,
    Category.CONVERSION_TRACKING.value: Section.MANUAL_CHECKS,
    Category.LANDING_PAGES.value: Section.MANUAL_CHECKS,
    Category.AUDIENCE_TARGETING.value: Section.MANUAL_CHECKS,
    Category.AUTOMATION_TOOLS.value: Section.MANUAL_CHECKS,
    Category.COMPETITIVE_ANALYSIS.value: Section.MANUAL_CHECKS,
    Category.REPORTING_INSIGHTS.value: Section.MANUAL_CHECKS,
}

DETAIL_HEADERS: Tuple[str, ...] = (
    "Category",
    "ChecklistItem",
    "Status",
    "Details/Metrics",
    "Recommendation",
)
OVERVIEW_HEADERS: Tuple[str, ...] = (
    "Category / Item",
    "Status / Details",
    "Recommendation",
)


def section_for(category: str) -> Section:
    """Route a category label to its report section.

    Total over all strings: labels missing from the routing table land in
    the fallback section instead of being dropped.
    """
    label = category.value if isinstance(category, Category) else str(category)
    section = CATEGORY_SECTIONS.get(label)
    if section is None:
        logger.warning(
            "Category '%s' not mapped to a report section, using '%s'",
            label,
            FALLBACK_SECTION.value,
        )
        return FALLBACK_SECTION
    return section


@dataclass(frozen=True, slots=True)
class Finding:
    """One evaluated rule against one entity (or a roll-up of many)."""

    category: str
    item: str
    status: Status
    details: str
    recommendation: str = "N/A"

    @property
    def section(self) -> Section:
        return section_for(self.category)

    @property
    def urgency(self) -> int:
        return STATUS_URGENCY[self.status]

    def as_row(self) -> Tuple[str, str, str, str, str]:
        """Row layout used by detail sections of the report."""
        return (self.category, self.item, self.status.value, self.details, self.recommendation)

    def to_dict(self) -> Dict[str, str]:
        return {
            "category": self.category,
            "item": self.item,
            "status": self.status.value,
            "details": self.details,
            "recommendation": self.recommendation,
        }
