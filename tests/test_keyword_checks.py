"""Tests for keyword, ad group and quality score modules."""
from __future__ import annotations

from adsentry.checks.ad_groups import AdGroupsCheck
from adsentry.checks.keywords import KeywordsCheck, duplicate_key
from adsentry.checks.quality_score import QualityScoreCheck
from adsentry.checks.types import Status
from adsentry.config import AuditConfig

from conftest import findings_for


class TestAdGroups:
    def test_minimum_ads_scenario(self, snapshot_factory, run_module):
        f = snapshot_factory
        doc = f.account([f.campaign("US-Brand-Search", [f.ad_group("Brand_One", ads=1), f.ad_group("Brand_Three", ads=3)])])
        collector = run_module(AdGroupsCheck, f.source(doc), config=AuditConfig(min_ads_per_ad_group=2))

        ad_count = findings_for(collector, "Ad Count")
        fails = [a for a in ad_count if a.status is Status.FAIL]
        assert len(fails) == 1
        assert "Brand_One" in fails[0].details
        assert not any(a.status is Status.PASS for a in ad_count)
        assert ad_count[-1].status is Status.INFO
        assert ad_count[-1].details.startswith("1 of 2")

    def test_all_groups_pass(self, snapshot_factory, run_module):
        collector = run_module(AdGroupsCheck, snapshot_factory.source())
        assert [a.status for a in findings_for(collector, "Ad Count")] == [Status.PASS]
        assert [a.status for a in findings_for(collector, "Ad Group Naming")] == [Status.PASS]

    def test_keyword_count_bounds(self, snapshot_factory, run_module):
        f = snapshot_factory
        many = [f.keyword(f"kw {i}") for i in range(25)]
        groups = [
            f.ad_group("Big_Group", keywords=many),
            f.ad_group("Empty_Group", keywords=[]),
            f.ad_group("Dsa_Group", keywords=[], is_dynamic=True),
        ]
        collector = run_module(AdGroupsCheck, f.source(f.account([f.campaign("US-Brand-Search", groups)])))

        counts = findings_for(collector, "Keyword Count")
        assert [c.status for c in counts] == [Status.WARN, Status.WARN, Status.INFO, Status.INFO]
        assert "25 keywords" in counts[0].details
        assert "0 enabled keywords" in counts[1].details
        assert "DSA" in counts[2].details
        assert counts[3].details.startswith("1 of 3")

    def test_paused_keywords_are_not_counted(self, snapshot_factory, run_module):
        f = snapshot_factory
        group = f.ad_group("Brand_Exact", keywords=[f.keyword("acme", status="PAUSED")])
        collector = run_module(AdGroupsCheck, f.source(f.account([f.campaign("US-Brand-Search", [group])])))
        assert "0 enabled keywords" in findings_for(collector, "Keyword Count")[0].details

    def test_ad_group_naming_warns(self, snapshot_factory, run_module):
        f = snapshot_factory
        groups = [f.ad_group("Brand_Exact"), f.ad_group("generic")]
        collector = run_module(AdGroupsCheck, f.source(f.account([f.campaign("US-Brand-Search", groups)])))
        naming = findings_for(collector, "Ad Group Naming")
        assert [n.status for n in naming] == [Status.WARN, Status.INFO]
        assert "'generic'" in naming[0].details

    def test_no_ad_groups(self, snapshot_factory, run_module):
        f = snapshot_factory
        collector = run_module(AdGroupsCheck, f.source(f.account([f.campaign("US-Brand-Search", [])])))
        assert findings_for(collector, "General Check")[0].status is Status.INFO

    def test_ad_count_failure_is_contained(self, snapshot_factory, run_module):
        f = snapshot_factory
        groups = [f.ad_group("Brand_One", ad_count={"error": "rate limited"}), f.ad_group("Brand_Two")]
        collector = run_module(AdGroupsCheck, f.source(f.account([f.campaign("US-Brand-Search", groups)])))
        assert [e.status for e in findings_for(collector, "Ad Count Check")] == [Status.ERROR]
        # only the evaluable group feeds the roll-up
        assert [a.status for a in findings_for(collector, "Ad Count")] == [Status.PASS]
        assert "All 1 checked ad groups" in findings_for(collector, "Ad Count")[0].details


class TestKeywords:
    def test_duplicate_key_normalizes(self):
        assert duplicate_key("C", " Running Shoes ", "exact") == duplicate_key("C", "running shoes", "EXACT")

    def test_cross_ad_group_duplicates_warn(self, snapshot_factory, run_module):
        f = snapshot_factory
        groups = [
            f.ad_group("Shoes_A", keywords=[f.keyword("running shoes")]),
            f.ad_group("Shoes_B", keywords=[f.keyword("Running Shoes"), f.keyword("running shoes", "PHRASE")]),
        ]
        collector = run_module(KeywordsCheck, f.source(f.account([f.campaign("US-Shoes-Search", groups)])))
        dupes = findings_for(collector, "Potential Duplicate Keyword (Cross-AdGroup)")
        assert len(dupes) == 1
        assert "'Shoes_B'" in dupes[0].details and "'Shoes_A'" in dupes[0].details

    def test_same_text_in_other_campaign_is_not_a_duplicate(self, snapshot_factory, run_module):
        f = snapshot_factory
        campaigns = [
            f.campaign("US-Shoes-Search", [f.ad_group("Shoes_A", keywords=[f.keyword("running shoes")])]),
            f.campaign("UK-Shoes-Search", [f.ad_group("Shoes_A", keywords=[f.keyword("running shoes")])]),
        ]
        collector = run_module(KeywordsCheck, f.source(f.account(campaigns)))
        assert findings_for(collector, "Potential Duplicate Keyword (Cross-AdGroup)") == []

    def test_low_quality_score_fails(self, snapshot_factory, run_module):
        f = snapshot_factory
        group = f.ad_group("Shoes_A", keywords=[f.keyword("cheap shoes", quality_score=3), f.keyword("shoes")])
        collector = run_module(KeywordsCheck, f.source(f.account([f.campaign("US-Shoes-Search", [group])])))
        low = findings_for(collector, "Low Quality Score")
        assert [l.status for l in low] == [Status.FAIL, Status.INFO]
        assert "QS: 3" in low[0].details
        assert low[1].details.startswith("1 of 2")

    def test_match_type_distribution(self, snapshot_factory, run_module):
        f = snapshot_factory
        group = f.ad_group(
            "Shoes_A",
            keywords=[f.keyword("a", "BROAD"), f.keyword("b", "PHRASE"), f.keyword("c", "EXACT"), f.keyword("d", "EXACT")],
        )
        collector = run_module(KeywordsCheck, f.source(f.account([f.campaign("US-Shoes-Search", [group])])))
        match = findings_for(collector, "Keyword Match Types")[0]
        assert match.details == "Broad: 1, Phrase: 1, Exact: 2 (Total Enabled Checked: 4)"

    def test_negative_keyword_levels(self, snapshot_factory, run_module):
        f = snapshot_factory
        group = f.ad_group("Shoes_A", negative_keyword_count=0)
        doc = f.account([f.campaign("US-Shoes-Search", [group], negative_keyword_count=0)], negative_list_keyword_count=0)
        collector = run_module(KeywordsCheck, f.source(doc))
        assert findings_for(collector, "Account Negative Keywords")[0].status is Status.WARN
        assert findings_for(collector, "Campaign Negative Keywords")[0].status is Status.WARN
        assert findings_for(collector, "Ad Group Negative Keywords")[0].status is Status.WARN

    def test_quality_score_errors_are_counted(self, snapshot_factory, run_module):
        f = snapshot_factory
        group = f.ad_group("Shoes_A", keywords=[f.keyword("a", quality_score={"error": "denied"}), f.keyword("b")])
        collector = run_module(KeywordsCheck, f.source(f.account([f.campaign("US-Shoes-Search", [group])])))
        assert [e.status for e in findings_for(collector, "Quality Score Check")] == [Status.ERROR]
        assert "1 keywords" in findings_for(collector, "Quality Score Errors")[0].details


class TestQualityScore:
    def test_low_score_lists_below_average_components(self, snapshot_factory, run_module):
        f = snapshot_factory
        low = f.keyword(
            "cheap shoes",
            quality_score=3,
            quality_components={"ad_relevance": "BELOW_AVERAGE", "expected_ctr": "AVERAGE",
                                "landing_page_experience": "BELOW_AVERAGE"},
        )
        group = f.ad_group("Shoes_A", keywords=[low, f.keyword("shoes", quality_score=9)])
        collector = run_module(QualityScoreCheck, f.source(f.account([f.campaign("US-Shoes-Search", [group])])))

        flagged = findings_for(collector, "Low Quality Score (<5)")
        assert len(flagged) == 1
        assert "[Ad Relevance, Landing Page Experience]" in flagged[0].details
        assert findings_for(collector, "Average Quality Score")[0].details.startswith("Avg. QS for keywords with score: 6.00")
        summary = findings_for(collector, "Low Quality Score Summary")[0]
        assert summary.status is Status.FAIL
        assert "Ad Relevance (1)" in summary.details

    def test_all_scores_healthy(self, snapshot_factory, run_module):
        collector = run_module(QualityScoreCheck, snapshot_factory.source())
        assert findings_for(collector, "Low Quality Scores (<5)")[0].status is Status.PASS

    def test_no_score_data(self, snapshot_factory, run_module):
        f = snapshot_factory
        group = f.ad_group("Shoes_A", keywords=[f.keyword("new keyword", quality_score=None)])
        collector = run_module(QualityScoreCheck, f.source(f.account([f.campaign("US-Shoes-Search", [group])])))
        general = findings_for(collector, "General Check")[0]
        assert "No keywords with Quality Score data found among 1 checked" in general.details
