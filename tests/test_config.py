"""Tests for audit configuration loading and validation."""
from __future__ import annotations

import json

import pytest

from adsentry.config import AuditConfig, ConfigError, config_from_mapping, load_config


class TestDefaults:
    def test_default_thresholds(self):
        config = AuditConfig()
        assert config.min_quality_score == 5
        assert config.max_cpa == 50.0
        assert config.min_ads_per_ad_group == 2
        assert config.max_keywords_per_ad_group == 20
        assert config.landing_page_sample_size == 100
        assert config.report_name_prefix == "Google_Ads_Audit_"

    def test_naming_patterns(self):
        config = AuditConfig()
        assert config.campaign_name_re.match("US-Brand-Search")
        assert not config.campaign_name_re.match("summer_sale")
        assert config.ad_group_name_re.match("Brand_Exact")
        assert not config.ad_group_name_re.match("generic")

    @pytest.mark.parametrize("raw, expected", [("0", False), ("false", False), ("yes", True), ("1", True)])
    def test_landing_page_environment_flag(self, monkeypatch, raw, expected):
        monkeypatch.setenv("ADSENTRY_CHECK_LANDING_PAGES", raw)
        assert AuditConfig().check_landing_pages is expected


class TestValidation:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"min_ctr": 1.5},
            {"max_lost_is_budget": -0.1},
            {"min_quality_score": 0},
            {"min_ads_per_ad_group": 0},
            {"max_cpa": 0},
            {"pacing_pause_seconds": -1},
            {"time_budget_seconds": 0},
            {"campaign_name_pattern": "(["},
        ],
    )
    def test_rejects_invalid_values(self, overrides):
        with pytest.raises(ConfigError):
            AuditConfig(**overrides)

    def test_replace_revalidates(self):
        config = AuditConfig()
        assert config.replace(parallel=True).parallel is True
        with pytest.raises(ConfigError):
            config.replace(min_ctr=2)

    def test_disabled_modules_are_exact_names(self):
        config = AuditConfig(disabled_modules=[" keywords ", ""])
        assert config.disabled_modules == ["keywords"]
        assert config.is_disabled("keywords")
        assert not config.is_disabled("keyword")


class TestLoading:
    def test_no_path_gives_defaults(self):
        assert load_config(None) == AuditConfig()

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"max_cpa": 80, "disabled_modules": ["landing_pages"]}), encoding="utf-8")
        config = load_config(path)
        assert config.max_cpa == 80
        assert config.is_disabled("landing_pages")

    def test_unknown_keys(self):
        with pytest.raises(ConfigError, match="Unknown configuration keys: max_cpc"):
            config_from_mapping({"max_cpc": 3})

    def test_wrong_type(self):
        with pytest.raises(ConfigError):
            config_from_mapping({"max_cpa": "cheap"})

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
    def test_bad_files(self, tmp_path, content):
        path = tmp_path / "config.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config(tmp_path / "nope.json")

    def test_to_dict_round_trips(self):
        config = AuditConfig(max_cpa=75.0)
        assert config_from_mapping(config.to_dict()) == config
