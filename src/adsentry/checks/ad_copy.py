"""Ad copy checks: ad formats, RSA coverage and policy approval."""
from __future__ import annotations

from .base import AuditModule
from .types import Category, Status

RSA = "RESPONSIVE_SEARCH_AD"
ETA = "EXPANDED_TEXT_AD"

_MANUAL_REVIEWS = (
    ("Headlines & Descriptions",
     "Review RSAs for compelling headlines/descriptions, asset variety, and strength indicators "
     "(Pinning usage, Asset performance)."),
    ("Call-to-Actions (CTAs)",
     "Ensure ads include clear and strong CTAs relevant to the offering."),
    ("Ad Tailoring to Theme",
     "Verify that ad copy (especially RSAs) is highly relevant to the keywords within the ad group."),
    ("Ad Variations (A/B Testing)",
     "Regularly test different ad copy elements (headlines, descriptions, CTAs) using experiments "
     "or by monitoring RSA asset performance."),
    ("Spelling & Grammar", "Proofread all ad copy for errors."),
)


class AdCopyCheck(AuditModule):
    name = "ad_copy"
    description = "Responsive search ad coverage, legacy formats and policy status"
    category = Category.AD_COPY

    def run(self) -> None:
        ads_checked = 0
        rsa_count = 0
        eta_count = 0
        disapproved = 0
        search_groups = 0
        missing_rsa = 0

        for campaign in self.source.campaigns():
            is_search = campaign.channel_type.upper() == "SEARCH"
            for ad_group in campaign.ad_groups():
                group_ads = 0
                group_has_rsa = False
                for ad in ad_group.ads():
                    ads_checked += 1
                    group_ads += 1
                    ad_type = ad.ad_type.upper()
                    if ad_type == RSA:
                        rsa_count += 1
                        group_has_rsa = True
                    elif ad_type == ETA:
                        eta_count += 1

                    where = f"Ad in Ad Group '{ad_group.name}' ({campaign.name})"
                    policy = ad.policy_status()
                    if not self.settle(policy, "Policy Compliance Check", f"ad {ad.id} in ad group '{ad_group.name}'"):
                        continue
                    status = (policy.value or "UNKNOWN").upper()
                    if status == "DISAPPROVED":
                        disapproved += 1
                        topics = ad.policy_topics()
                        topic_text = ", ".join(topics.value) if topics.is_ok and topics.value else "N/A"
                        self.record(
                            "Policy Compliance",
                            Status.FAIL,
                            f"{where} is DISAPPROVED. Topics: {topic_text}",
                            "Review policy violations and edit or remove the ad.",
                        )
                    elif status not in ("APPROVED", "UNKNOWN"):
                        self.record(
                            "Policy Compliance",
                            Status.WARN,
                            f"{where} status is {status}",
                            "Monitor status; may require action if it becomes disapproved.",
                        )

                if is_search and group_ads:
                    search_groups += 1
                    if not group_has_rsa:
                        missing_rsa += 1
                        self.record(
                            "RSA Usage per Ad Group",
                            Status.FAIL,
                            f"Search Ad Group '{ad_group.name}' ({campaign.name}) appears to be missing an enabled RSA.",
                            "Ensure each active Search ad group has at least one enabled RSA.",
                        )

        if ads_checked == 0:
            self.record("General Check", Status.INFO, "No enabled ads found in enabled ad groups/campaigns.", "N/A")
        else:
            if rsa_count:
                self.record(
                    "Responsive Search Ads (RSAs) Utilized",
                    Status.PASS,
                    f"{rsa_count} enabled RSAs found.",
                    "Ensure RSAs have sufficient high-quality assets.",
                )
            if eta_count:
                self.record(
                    "Legacy Ad Formats (ETAs)",
                    Status.WARN,
                    f"{eta_count} enabled Expanded Text Ads found.",
                    "Consider migrating ETAs to RSAs as ETAs can no longer be created or edited.",
                )
            if search_groups == 0:
                self.record(
                    "RSA Usage per Ad Group",
                    Status.INFO,
                    "No enabled Search ads found to assess RSA coverage.",
                    "N/A",
                )
            elif missing_rsa == 0:
                self.record(
                    "RSA Usage per Ad Group",
                    Status.PASS,
                    f"All {search_groups} checked Search ad groups with ads have at least one RSA.",
                    "Good.",
                )
            else:
                self.record(
                    "RSA Usage per Ad Group",
                    Status.INFO,
                    f"{search_groups - missing_rsa} of {search_groups} Search ad groups with ads have an enabled RSA.",
                    "Add RSAs to the ad groups flagged above.",
                )
            if disapproved == 0:
                self.record(
                    "Policy Compliance",
                    Status.PASS,
                    f"No disapproved ads found among {ads_checked} checked ads.",
                    "Maintain policy compliance.",
                )

        for item, recommendation in _MANUAL_REVIEWS:
            self.manual(item, recommendation)
