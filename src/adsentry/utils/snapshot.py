"""Data source backed by a JSON account snapshot.

Layout (every key optional unless noted)::

    {
      "account": {
        "currency_code": "USD",
        "time_zone": "America/New_York",
        "metrics": {"ctr": 0.031, "cost": 1200.0, ...},
        "negative_list_keyword_count": 40,
        "extensions": {"callout": 4},
        "conversion_actions": [{"name": "Purchase", "category": "PURCHASE"}]
      },
      "campaigns": [
        {
          "id": "1", "name": "US-Brand-Search",        # name required
          "status": "ENABLED", "channel_type": "SEARCH",
          "budget": 50.0, "bidding_strategy": "TARGET_CPA",
          "metrics": {...}, "excluded_ips": [], "negative_keyword_count": 3,
          "device_bid_modifiers": [1.0, 1.2],
          "audiences": [{"name": "All visitors", "kind": "USER_LIST"}],
          "excluded_audience_count": 1, "extensions": {"sitelink": 4},
          "ad_groups": [
            {
              "id": "10", "name": "Brand_Exact", "is_dynamic": false,
              "keywords": [{"text": "acme", "match_type": "EXACT",
                            "quality_score": 7,
                            "quality_components": {"expected_ctr": "AVERAGE"},
                            "cpc_bid": 1.2, "final_url": "https://..."}],
              "ads": [{"id": "100", "ad_type": "RESPONSIVE_SEARCH_AD",
                       "policy_status": "APPROVED", "final_url": "https://..."}]
            }
          ]
        }
      ]
    }

An absent key means the capability is unavailable for that entity; a value
of the form ``{"error": "..."}`` means the accessor failed. ``null`` is a
present but empty value.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, TypeVar

from ..core.interfaces import (
    ENABLED,
    AudienceTarget,
    ConversionAction,
    ExtensionKind,
    Metric,
    Outcome,
    attempt,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SnapshotError(ValueError):
    """Raised when a snapshot document is structurally invalid."""


def _identity(value: Any) -> Any:
    return value


def _field(data: Mapping[str, Any], key: str, convert: Callable[[Any], T] = _identity) -> Outcome[T]:
    if key not in data:
        return Outcome.unavailable(f"'{key}' not present in snapshot")
    raw = data[key]
    if isinstance(raw, Mapping) and "error" in raw:
        return Outcome.failed(str(raw["error"]))
    if raw is None:
        return Outcome.ok(None)
    return attempt(convert, raw)


def _str_list(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        raise TypeError(f"expected a list, got {type(raw).__name__}")
    return [str(item) for item in raw]


def _float_list(raw: Any) -> List[float]:
    if not isinstance(raw, list):
        raise TypeError(f"expected a list, got {type(raw).__name__}")
    return [float(item) for item in raw]


def _audiences(raw: Any) -> List[AudienceTarget]:
    if not isinstance(raw, list):
        raise TypeError(f"expected a list, got {type(raw).__name__}")
    return [
        AudienceTarget(name=str(item.get("name", "")), kind=str(item.get("kind", "USER_INTEREST")))
        for item in raw
    ]


def _conversion_actions(raw: Any) -> List[ConversionAction]:
    if not isinstance(raw, list):
        raise TypeError(f"expected a list, got {type(raw).__name__}")
    actions = []
    for item in raw:
        default_value = item.get("default_value")
        actions.append(
            ConversionAction(
                name=str(item["name"]),
                status=str(item.get("status", "ENABLED")),
                category=str(item.get("category", "DEFAULT")),
                origin=str(item.get("origin", "WEBSITE")),
                include_in_conversions=bool(item.get("include_in_conversions", True)),
                default_value=float(default_value) if default_value is not None else None,
                always_use_default_value=bool(item.get("always_use_default_value", False)),
                tags=[str(tag) for tag in item.get("tags", [])],
            )
        )
    return actions


def _metric(data: Mapping[str, Any], metric: Metric) -> Outcome[Optional[float]]:
    metrics = data.get("metrics")
    if metrics is None:
        return Outcome.unavailable("statistics not present in snapshot")
    if isinstance(metrics, Mapping) and set(metrics) == {"error"}:
        return Outcome.failed(str(metrics["error"]))
    return _field(metrics, metric.value, float)


def _extension(data: Mapping[str, Any], kind: ExtensionKind) -> Outcome[int]:
    extensions = data.get("extensions")
    if extensions is None:
        return Outcome.unavailable("extensions not present in snapshot")
    if isinstance(extensions, Mapping) and set(extensions) == {"error"}:
        return Outcome.failed(str(extensions["error"]))
    return _field(extensions, kind.value, int)


def _matches(data: Mapping[str, Any], statuses: Sequence[str]) -> bool:
    wanted = {s.upper() for s in statuses}
    return str(data.get("status", "ENABLED")).upper() in wanted


def _entities(data: Mapping[str, Any], key: str, owner: str) -> List[Mapping[str, Any]]:
    items = data.get(key, [])
    if items is None:
        return []
    if not isinstance(items, list) or not all(isinstance(item, Mapping) for item in items):
        raise SnapshotError(f"'{key}' of {owner} must be a list of objects")
    return items


def _require_name(data: Mapping[str, Any], key: str, kind: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise SnapshotError(f"{kind} entry is missing '{key}': {dict(data)!r}")
    return value


class SnapshotKeyword:
    def __init__(self, data: Mapping[str, Any], index: int, ad_group_name: str, campaign_name: str) -> None:
        self._data = data
        self.id = str(data.get("id", f"{ad_group_name}:{index}"))
        self.text = _require_name(data, "text", "Keyword")
        self.match_type = str(data.get("match_type", "BROAD"))
        self.ad_group_name = ad_group_name
        self.campaign_name = campaign_name

    def quality_score(self) -> Outcome[Optional[int]]:
        return _field(self._data, "quality_score", int)

    def quality_component(self, component: str) -> Outcome[Optional[str]]:
        components = _field(self._data, "quality_components", dict)
        if not components.is_ok:
            return components
        return _field(components.value or {}, component, str)

    def cpc_bid(self) -> Outcome[Optional[float]]:
        return _field(self._data, "cpc_bid", float)

    def final_url(self) -> Outcome[Optional[str]]:
        return _field(self._data, "final_url", str)

    def __repr__(self) -> str:
        return f"SnapshotKeyword(text={self.text!r}, match_type={self.match_type!r})"


class SnapshotAd:
    def __init__(self, data: Mapping[str, Any], index: int, ad_group_name: str, campaign_name: str) -> None:
        self._data = data
        self.id = str(data.get("id", f"{ad_group_name}:{index}"))
        self.ad_type = str(data.get("ad_type", "UNKNOWN"))
        self.ad_group_name = ad_group_name
        self.campaign_name = campaign_name

    def policy_status(self) -> Outcome[str]:
        return _field(self._data, "policy_status", str)

    def policy_topics(self) -> Outcome[List[str]]:
        return _field(self._data, "policy_topics", _str_list)

    def final_url(self) -> Outcome[Optional[str]]:
        return _field(self._data, "final_url", str)

    def __repr__(self) -> str:
        return f"SnapshotAd(id={self.id!r}, ad_type={self.ad_type!r})"


class SnapshotAdGroup:
    def __init__(self, data: Mapping[str, Any], campaign_name: str) -> None:
        self._data = data
        self.name = _require_name(data, "name", "Ad group")
        self.id = str(data.get("id", self.name))
        self.campaign_name = campaign_name
        self.is_dynamic = bool(data.get("is_dynamic", False))
        self._keywords = [
            SnapshotKeyword(item, i, self.name, campaign_name)
            for i, item in enumerate(_entities(data, "keywords", f"ad group '{self.name}'"))
        ]
        self._ads = [
            SnapshotAd(item, i, self.name, campaign_name)
            for i, item in enumerate(_entities(data, "ads", f"ad group '{self.name}'"))
        ]

    def _count(self, key: str, children: str) -> Outcome[int]:
        if key in self._data:
            return _field(self._data, key, int)
        if children in self._data:
            items = _entities(self._data, children, f"ad group '{self.name}'")
            return Outcome.ok(sum(1 for item in items if _matches(item, ENABLED)))
        return Outcome.unavailable(f"'{children}' not present in snapshot")

    def keyword_count(self) -> Outcome[int]:
        return self._count("keyword_count", "keywords")

    def ad_count(self) -> Outcome[int]:
        return self._count("ad_count", "ads")

    def cpc_bid(self) -> Outcome[Optional[float]]:
        return _field(self._data, "cpc_bid", float)

    def negative_keyword_count(self) -> Outcome[int]:
        return _field(self._data, "negative_keyword_count", int)

    def audiences(self) -> Outcome[List[AudienceTarget]]:
        return _field(self._data, "audiences", _audiences)

    def excluded_audience_count(self) -> Outcome[int]:
        return _field(self._data, "excluded_audience_count", int)

    def extension_count(self, kind: ExtensionKind) -> Outcome[int]:
        return _extension(self._data, kind)

    def keywords(self, statuses: Sequence[str] = ENABLED) -> Iterator[SnapshotKeyword]:
        return (kw for kw in self._keywords if _matches(kw._data, statuses))

    def ads(self, statuses: Sequence[str] = ENABLED) -> Iterator[SnapshotAd]:
        return (ad for ad in self._ads if _matches(ad._data, statuses))

    def __repr__(self) -> str:
        return f"SnapshotAdGroup(name={self.name!r}, campaign={self.campaign_name!r})"


class SnapshotCampaign:
    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data = data
        self.name = _require_name(data, "name", "Campaign")
        self.id = str(data.get("id", self.name))
        self.status = str(data.get("status", "ENABLED")).upper()
        self.channel_type = str(data.get("channel_type", "SEARCH")).upper()
        self._ad_groups = [
            SnapshotAdGroup(item, self.name)
            for item in _entities(data, "ad_groups", f"campaign '{self.name}'")
        ]

    def budget(self) -> Outcome[Optional[float]]:
        return _field(self._data, "budget", float)

    def bidding_strategy(self) -> Outcome[str]:
        return _field(self._data, "bidding_strategy", str)

    def metric(self, metric: Metric) -> Outcome[Optional[float]]:
        return _metric(self._data, metric)

    def excluded_ips(self) -> Outcome[List[str]]:
        return _field(self._data, "excluded_ips", _str_list)

    def negative_keyword_count(self) -> Outcome[int]:
        return _field(self._data, "negative_keyword_count", int)

    def device_bid_modifiers(self) -> Outcome[List[float]]:
        return _field(self._data, "device_bid_modifiers", _float_list)

    def audiences(self) -> Outcome[List[AudienceTarget]]:
        return _field(self._data, "audiences", _audiences)

    def excluded_audience_count(self) -> Outcome[int]:
        return _field(self._data, "excluded_audience_count", int)

    def extension_count(self, kind: ExtensionKind) -> Outcome[int]:
        return _extension(self._data, kind)

    def ad_groups(self, statuses: Sequence[str] = ENABLED) -> Iterator[SnapshotAdGroup]:
        return (group for group in self._ad_groups if _matches(group._data, statuses))

    def __repr__(self) -> str:
        return f"SnapshotCampaign(name={self.name!r}, status={self.status!r})"


class SnapshotSource:
    """Read-only view of one account captured as JSON."""

    def __init__(self, data: Mapping[str, Any]) -> None:
        if not isinstance(data, Mapping):
            raise SnapshotError("Snapshot root must be a JSON object")
        account = data.get("account", {})
        if not isinstance(account, Mapping):
            raise SnapshotError("'account' must be a JSON object")
        self._account: Mapping[str, Any] = account
        self._campaigns = [SnapshotCampaign(item) for item in _entities(data, "campaigns", "snapshot")]
        logger.debug("Loaded snapshot with %d campaigns", len(self._campaigns))

    @classmethod
    def from_file(cls, path: Path) -> "SnapshotSource":
        try:
            with Path(path).open(encoding="utf-8") as handle:
                data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"Invalid JSON in snapshot {path}: {exc}") from exc
        except OSError as exc:
            raise SnapshotError(f"Cannot read snapshot {path}: {exc}") from exc
        return cls(data)

    def account_info(self) -> Dict[str, str]:
        """Descriptive fields shown in report headers."""
        info = {"campaigns": str(len(self._campaigns))}
        for key in ("name", "customer_id", "currency_code", "time_zone"):
            value = self._account.get(key)
            if isinstance(value, (str, int)):
                info[key] = str(value)
        return info

    def currency_code(self) -> Outcome[str]:
        return _field(self._account, "currency_code", str)

    def time_zone(self) -> Outcome[str]:
        return _field(self._account, "time_zone", str)

    def metric(self, metric: Metric) -> Outcome[Optional[float]]:
        return _metric(self._account, metric)

    def negative_list_keyword_count(self) -> Outcome[int]:
        return _field(self._account, "negative_list_keyword_count", int)

    def extension_count(self, kind: ExtensionKind) -> Outcome[int]:
        return _extension(self._account, kind)

    def conversion_actions(self) -> Outcome[List[ConversionAction]]:
        return _field(self._account, "conversion_actions", _conversion_actions)

    def campaigns(self, statuses: Sequence[str] = ENABLED) -> Iterator[SnapshotCampaign]:
        return (c for c in self._campaigns if _matches(c._data, statuses))
