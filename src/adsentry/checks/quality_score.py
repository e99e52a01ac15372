"""Quality score analysis with component breakdown."""
from __future__ import annotations

from typing import Dict, List

from .base import AuditModule
from .types import Category, Status

COMPONENTS: Dict[str, str] = {
    "ad_relevance": "Ad Relevance",
    "expected_ctr": "Expected CTR",
    "landing_page_experience": "Landing Page Experience",
}
BELOW_AVERAGE = "BELOW_AVERAGE"


class QualityScoreCheck(AuditModule):
    name = "quality_score"
    description = "Average quality score and below-average components of low scoring keywords"
    category = Category.QUALITY_SCORE

    def run(self) -> None:
        min_qs = self.config.min_quality_score
        checked = 0
        scored = 0
        total = 0
        low = 0
        qs_errors = 0
        low_components: Dict[str, int] = {key: 0 for key in COMPONENTS}

        for campaign in self.source.campaigns():
            for ad_group in campaign.ad_groups():
                for keyword in ad_group.keywords():
                    checked += 1
                    label = f"Keyword '{keyword.text}' ({keyword.match_type.upper()})"
                    qs = keyword.quality_score()
                    if not qs.is_ok:
                        self.settle(qs, "Quality Score Check", f"{label} in Ad Group '{ad_group.name}'")
                        if not qs.is_unavailable:
                            qs_errors += 1
                        continue
                    if qs.value is None:
                        continue
                    scored += 1
                    total += qs.value
                    if qs.value >= min_qs:
                        continue

                    low += 1
                    flagged: List[str] = []
                    for key, title in COMPONENTS.items():
                        rating = keyword.quality_component(key)
                        if rating.is_ok and (rating.value or "").upper() == BELOW_AVERAGE:
                            low_components[key] += 1
                            flagged.append(title)
                    self.record(
                        f"Low Quality Score (<{min_qs})",
                        Status.FAIL,
                        f"{label} in Ad Group '{ad_group.name}' has QS: {qs.value}. "
                        f"Below Average Components: [{', '.join(flagged)}]",
                        "Improve the flagged components: tighten ad group themes, improve ad copy, "
                        "check landing page relevance/speed.",
                    )

        if scored:
            self.record(
                "Average Quality Score",
                Status.INFO,
                f"Avg. QS for keywords with score: {total / scored:.2f} (based on {scored} keywords).",
                "Aim to improve overall QS. Benchmark against industry standards if possible.",
            )
            if low == 0:
                self.record(
                    f"Low Quality Scores (<{min_qs})",
                    Status.PASS,
                    f"No keywords found with QS below {min_qs}.",
                    "Maintain high relevance across keywords, ads, and landing pages.",
                )
            else:
                self.record(
                    "Low Quality Score Summary",
                    Status.FAIL,
                    f"{low} keywords found with QS < {min_qs}. Low Components: "
                    f"Ad Relevance ({low_components['ad_relevance']}), "
                    f"Exp. CTR ({low_components['expected_ctr']}), "
                    f"Landing Page ({low_components['landing_page_experience']}).",
                    "Focus improvement efforts on the most common low components identified in "
                    "individual keyword results.",
                )
            self.record(
                "Ad Relevance Component",
                Status.INFO,
                f"{low_components['ad_relevance']} keywords flagged with Below Average Ad Relevance.",
                "Ensure keywords are tightly themed within ad groups and reflected in ad copy.",
            )
            self.record(
                "Expected CTR Component",
                Status.INFO,
                f"{low_components['expected_ctr']} keywords flagged with Below Average Expected CTR.",
                "Improve ad copy visibility, use compelling CTAs, leverage ad extensions, refine keyword targeting.",
            )
            self.record(
                "Landing Page Experience Component",
                Status.INFO,
                f"{low_components['landing_page_experience']} keywords flagged with Below Average "
                "Landing Page Experience.",
                "Ensure landing pages are relevant to keywords/ads, load quickly, are mobile-friendly, "
                "and provide a good user experience.",
            )
        elif checked:
            self.record(
                "General Check",
                Status.INFO,
                f"No keywords with Quality Score data found among {checked} checked.",
                "Ensure campaigns are running and keywords have enough impressions to generate QS data.",
            )
        else:
            self.record("General Check", Status.INFO, "No enabled keywords found to check Quality Score.", "N/A")

        if qs_errors:
            self.record(
                "Quality Score Errors",
                Status.WARN,
                f"Could not retrieve QS for {qs_errors} keywords.",
                "Check logs for details. May indicate permission issues or API changes.",
            )
