"""Audit configuration: thresholds, naming conventions and run options."""
from __future__ import annotations

import dataclasses
import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Pattern


class ConfigError(ValueError):
    """Raised when a configuration file or value is invalid."""


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class AuditConfig:
    """Read-only settings shared by every check module."""

    # === Thresholds ===
    min_quality_score: int = 5
    max_cpa: float = 50.0
    min_ctr: float = 0.01
    min_conversion_rate: float = 0.01
    min_impression_share: float = 0.6
    max_lost_is_rank: float = 0.2
    max_lost_is_budget: float = 0.1
    min_ads_per_ad_group: int = 2
    max_keywords_per_ad_group: int = 20

    # === Naming conventions ===
    campaign_name_pattern: str = r"^[A-Z]{2,}-[A-Za-z0-9]+-.+$"
    ad_group_name_pattern: str = r"^[A-Za-z0-9]+_.+$"

    # === Landing pages ===
    check_landing_pages: bool = field(
        default_factory=lambda: _env_flag("ADSENTRY_CHECK_LANDING_PAGES", True)
    )
    landing_page_sample_size: int = 100
    request_timeout_seconds: float = 10.0

    # === Pacing ===
    pacing_batch_size: int = 20
    pacing_pause_seconds: float = 1.0

    # === Execution ===
    parallel: bool = False
    max_workers: int = 4
    time_budget_seconds: Optional[float] = None
    disabled_modules: List[str] = field(default_factory=list)

    # === Report ===
    report_name_prefix: str = "Google_Ads_Audit_"
    date_format: str = "%Y-%m-%d"

    def __post_init__(self) -> None:
        """Validate configuration."""
        for name in (
            "min_ctr",
            "min_conversion_rate",
            "min_impression_share",
            "max_lost_is_rank",
            "max_lost_is_budget",
        ):
            value = getattr(self, name)
            if not 0.0 <= float(value) <= 1.0:
                raise ConfigError(f"{name} must be a ratio between 0 and 1, got {value!r}")
        if not 1 <= self.min_quality_score <= 10:
            raise ConfigError(f"min_quality_score must be 1-10, got {self.min_quality_score!r}")
        for name in (
            "min_ads_per_ad_group",
            "max_keywords_per_ad_group",
            "landing_page_sample_size",
            "pacing_batch_size",
            "max_workers",
        ):
            if int(getattr(self, name)) < 1:
                raise ConfigError(f"{name} must be a positive integer")
        if self.max_cpa <= 0:
            raise ConfigError("max_cpa must be positive")
        if self.pacing_pause_seconds < 0:
            raise ConfigError("pacing_pause_seconds cannot be negative")
        if self.time_budget_seconds is not None and self.time_budget_seconds <= 0:
            raise ConfigError("time_budget_seconds must be positive when set")
        self.disabled_modules = [str(name).strip() for name in self.disabled_modules if str(name).strip()]
        self._campaign_re = self._compile("campaign_name_pattern")
        self._ad_group_re = self._compile("ad_group_name_pattern")

    def _compile(self, attr: str) -> Pattern[str]:
        try:
            return re.compile(getattr(self, attr))
        except re.error as exc:
            raise ConfigError(f"{attr} is not a valid regular expression: {exc}") from exc

    @property
    def campaign_name_re(self) -> Pattern[str]:
        return self._campaign_re

    @property
    def ad_group_name_re(self) -> Pattern[str]:
        return self._ad_group_re

    def is_disabled(self, module_name: str) -> bool:
        return module_name in self.disabled_modules

    def replace(self, **changes: Any) -> "AuditConfig":
        """Copy with overrides, validated like a fresh instance."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in dataclasses.fields(self)}


def config_from_mapping(data: Mapping[str, Any]) -> AuditConfig:
    known = {f.name for f in dataclasses.fields(AuditConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
    try:
        return AuditConfig(**dict(data))
    except (TypeError, ValueError) as exc:
        if isinstance(exc, ConfigError):
            raise
        raise ConfigError(f"Invalid configuration value: {exc}") from exc


def load_config(path: Optional[Path] = None) -> AuditConfig:
    """Load configuration from a JSON file, falling back to defaults."""
    if path is None:
        return AuditConfig()
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Configuration file {path} is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Configuration file {path} must contain a JSON object")
    return config_from_mapping(raw)
