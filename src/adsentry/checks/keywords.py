"""Keyword checks: negatives, match types, quality score, duplicates and bids."""
from __future__ import annotations

from collections import Counter
from typing import Dict

from .base import MANUAL_CHECK, AuditModule, money, rollup
from .types import Category, Status


def duplicate_key(campaign_name: str, text: str, match_type: str) -> str:
    """Identity used for the cross-ad-group duplicate check within a campaign."""
    return f"{campaign_name}:{text.strip().lower()}:{match_type.upper()}"


class KeywordsCheck(AuditModule):
    name = "keywords"
    description = "Negative keywords, match types, low quality scores and duplicates"
    category = Category.KEYWORDS

    def run(self) -> None:
        min_qs = self.config.min_quality_score

        account_negatives = 0
        negatives = self.source.negative_list_keyword_count()
        if self.settle(negatives, "Account Negative Keywords", "shared negative keyword lists"):
            account_negatives = negatives.value or 0
            if account_negatives > 0:
                self.record(
                    "Account Negative Keywords",
                    Status.PASS,
                    f"{account_negatives} negatives found in lists.",
                    "Review lists periodically.",
                )
            else:
                self.record(
                    "Account Negative Keywords",
                    Status.WARN,
                    "0 negatives found in lists.",
                    "Consider creating account-level negative lists for universally irrelevant terms.",
                )

        campaign_negatives = 0
        ad_group_negatives = 0
        match_types: Counter[str] = Counter()
        keywords_checked = 0
        keywords_with_qs = 0
        low_qs = 0
        qs_errors = 0

        for campaign in self.source.campaigns():
            outcome = campaign.negative_keyword_count()
            if self.settle(
                outcome,
                "Campaign Negative Keywords Check",
                f"campaign '{campaign.name}'",
                recommendation="Check campaign type/permissions.",
            ):
                count = outcome.value or 0
                campaign_negatives += count
                if count == 0:
                    self.record(
                        "Campaign Negative Keywords",
                        Status.WARN,
                        f"Campaign '{campaign.name}' has no direct negative keywords.",
                        "Add campaign-level negatives relevant to this campaign (or ensure coverage via lists).",
                    )

            # first ad group seen per campaign:text:match type
            seen: Dict[str, str] = {}
            for ad_group in campaign.ad_groups():
                outcome = ad_group.negative_keyword_count()
                if self.settle(
                    outcome,
                    "Ad Group Negative Keywords Check",
                    f"ad group '{ad_group.name}'",
                    recommendation="Check permissions.",
                ):
                    count = outcome.value or 0
                    ad_group_negatives += count
                    if count == 0:
                        self.record(
                            "Ad Group Negative Keywords",
                            Status.WARN,
                            f"Ad Group '{ad_group.name}' in Campaign '{campaign.name}' has no negative keywords.",
                            "Add ad group-level negatives for fine-tuning.",
                        )

                for keyword in ad_group.keywords():
                    keywords_checked += 1
                    match_type = keyword.match_type.upper()
                    match_types[match_type] += 1
                    label = f"Keyword '{keyword.text}' ({match_type})"

                    qs = keyword.quality_score()
                    if qs.is_ok:
                        if qs.value is not None:
                            keywords_with_qs += 1
                            if qs.value < min_qs:
                                low_qs += 1
                                self.record(
                                    "Low Quality Score",
                                    Status.FAIL,
                                    f"{label} in Ad Group '{ad_group.name}' has QS: {qs.value}",
                                    "Improve ad relevance, expected CTR, or landing page experience.",
                                )
                    else:
                        self.settle(qs, "Quality Score Check", f"{label} in Ad Group '{ad_group.name}'")
                        if not qs.is_unavailable:
                            qs_errors += 1

                    key = duplicate_key(campaign.name, keyword.text, match_type)
                    first_group = seen.setdefault(key, ad_group.name)
                    if first_group != ad_group.name:
                        self.record(
                            "Potential Duplicate Keyword (Cross-AdGroup)",
                            Status.WARN,
                            f"{label} found in Ad Group '{ad_group.name}' and also in Ad Group "
                            f"'{first_group}' within Campaign '{campaign.name}'.",
                            "Ensure keywords don't compete across ad groups within the same campaign "
                            "unless intended (e.g., different geo-targets or match types).",
                        )

                    bid = keyword.cpc_bid()
                    if self.settle(bid, "Keyword Bids", label):
                        self.record(
                            "Keyword Bids",
                            Status.INFO,
                            f"{label} Bid: {money(bid.value) if bid.value is not None else 'Automated'}",
                            "Ensure bids align with performance and bidding strategy.",
                        )

        self.record(
            "Keyword Match Types",
            Status.INFO,
            f"Broad: {match_types['BROAD']}, Phrase: {match_types['PHRASE']}, "
            f"Exact: {match_types['EXACT']} (Total Enabled Checked: {keywords_checked})",
            "Ensure match type usage aligns with campaign goals (e.g., control vs. reach). "
            "Review broad match performance carefully.",
        )
        self.record(
            "Total Negative Keywords",
            Status.INFO,
            f"Account Lists: {account_negatives}, Campaign Level: {campaign_negatives}, "
            f"Ad Group Level: {ad_group_negatives}",
            "Ensure comprehensive negative keyword coverage at appropriate levels.",
        )
        self.manual(
            "Search Terms Report Review",
            "Regularly review the Search Terms Report in the UI to find new positive and negative keyword opportunities.",
            details=MANUAL_CHECK,
        )
        self.manual(
            "Keyword Alignment with Goals",
            "Ensure keywords in each ad group are relevant to the ad copy, landing page, and overall campaign objective.",
        )

        if keywords_with_qs and low_qs == 0:
            self.record(
                "Low Quality Score",
                Status.PASS,
                f"No keywords found below QS {min_qs} (out of {keywords_with_qs} checked with QS data).",
                "Maintain good QS practices.",
            )
        elif keywords_with_qs:
            self.record(
                "Low Quality Score",
                Status.INFO,
                rollup(keywords_with_qs - low_qs, keywords_with_qs, "keywords with QS data", f"score {min_qs} or higher"),
                "Prioritize the low quality score keywords flagged above.",
            )
        if qs_errors:
            self.record(
                "Quality Score Errors",
                Status.WARN,
                f"Could not retrieve QS for {qs_errors} keywords.",
                "Check logs for details. May indicate permission issues or API changes.",
            )
