"""Ad group checks: keyword and ad counts, naming and bids."""
from __future__ import annotations

from .base import AuditModule, money, rollup
from .types import Category, Status


class AdGroupsCheck(AuditModule):
    name = "ad_groups"
    description = "Keyword counts, ad counts, naming convention and bids per ad group"
    category = Category.AD_GROUPS

    def run(self) -> None:
        cfg = self.config
        pattern = cfg.ad_group_name_re
        checked = 0
        kw_evaluated = kw_ok = 0
        ads_evaluated = ads_ok = 0
        named_ok = 0

        for campaign in self.source.campaigns():
            for ad_group in campaign.ad_groups():
                checked += 1
                where = f"Ad Group '{ad_group.name}' ({campaign.name})"

                keywords = ad_group.keyword_count()
                if self.settle(keywords, "Keyword Count Check", f"ad group '{ad_group.name}'",
                               recommendation="Check permissions."):
                    kw_evaluated += 1
                    count = keywords.value or 0
                    if count > cfg.max_keywords_per_ad_group:
                        self.record(
                            "Keyword Count",
                            Status.WARN,
                            f"{where} has {count} keywords (>{cfg.max_keywords_per_ad_group}).",
                            "Consider splitting into more tightly themed ad groups for better relevance.",
                        )
                    elif count == 0 and ad_group.is_dynamic:
                        kw_ok += 1
                        self.record(
                            "Keyword Count",
                            Status.INFO,
                            f"{where} is DSA and has 0 keywords.",
                            "Expected for DSA ad groups.",
                        )
                    elif count == 0:
                        self.record(
                            "Keyword Count",
                            Status.WARN,
                            f"{where} has 0 enabled keywords.",
                            "Add relevant keywords or pause the ad group if it's not needed (and not DSA).",
                        )
                    else:
                        kw_ok += 1

                ads = ad_group.ad_count()
                if self.settle(ads, "Ad Count Check", f"ad group '{ad_group.name}'",
                               recommendation="Check permissions."):
                    ads_evaluated += 1
                    count = ads.value or 0
                    if count < cfg.min_ads_per_ad_group:
                        self.record(
                            "Ad Count",
                            Status.FAIL,
                            f"{where} has {count} enabled ads (<{cfg.min_ads_per_ad_group}).",
                            f"Create at least {cfg.min_ads_per_ad_group} relevant ads per ad group "
                            "for testing and optimization.",
                        )
                    else:
                        ads_ok += 1

                if pattern.match(ad_group.name):
                    named_ok += 1
                else:
                    self.record(
                        "Ad Group Naming",
                        Status.WARN,
                        f"{where} doesn't match pattern: {pattern.pattern}",
                        "Standardize ad group naming.",
                    )

                bid = ad_group.cpc_bid()
                if self.settle(bid, "Ad Group Bids", f"ad group '{ad_group.name}'"):
                    self.record(
                        "Ad Group Bids",
                        Status.INFO,
                        f"{where} Bid: {money(bid.value) if bid.value is not None else 'Automated'}",
                        "Ensure bids align with performance goals and bidding strategy.",
                    )

        if checked == 0:
            self.record("General Check", Status.INFO, "No enabled ad groups found in enabled campaigns.", "N/A")
        else:
            self._summarize(
                "Ad Count", ads_ok, ads_evaluated,
                f"have at least {cfg.min_ads_per_ad_group} ads",
                "Continue A/B testing ads.",
            )
            self._summarize(
                "Keyword Count", kw_ok, kw_evaluated,
                f"have a reasonable number of keywords (<= {cfg.max_keywords_per_ad_group})",
                "Maintain tight keyword themes.",
            )
            self._summarize(
                "Ad Group Naming", named_ok, checked,
                "follow the naming convention",
                "Maintain consistent naming.",
            )

        self.record(
            "Competing Keywords within Ad Group",
            Status.INFO,
            "Basic duplicate checks in Keywords module.",
            "Manually review keyword themes within ad groups to ensure they aren't competing semantically.",
        )

    def _summarize(self, item: str, passed: int, total: int, rule: str, keep_doing: str) -> None:
        if total == 0:
            return
        if passed == total:
            self.record(item, Status.PASS, f"All {total} checked ad groups {rule}.", keep_doing)
        else:
            self.record(
                item,
                Status.INFO,
                rollup(passed, total, "checked ad groups", rule),
                "Address the ad groups flagged above.",
            )
