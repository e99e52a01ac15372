"""Pytest configuration and shared fixtures for audit module tests."""
from __future__ import annotations

import copy
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from adsentry.checks import load_checks  # noqa: E402
from adsentry.checks.base import AuditContext, CheckRegistry  # noqa: E402
from adsentry.config import AuditConfig  # noqa: E402
from adsentry.core.collector import ResultCollector  # noqa: E402
from adsentry.core.interfaces import Outcome  # noqa: E402
from adsentry.core.pacing import Pacer  # noqa: E402
from adsentry.utils.snapshot import SnapshotSource  # noqa: E402

load_checks()


# ==============================================================================
# Account snapshots
# ==============================================================================

HEALTHY_METRICS: Dict[str, float] = {
    "clicks": 1200,
    "impressions": 30000,
    "ctr": 0.04,
    "average_cpc": 1.5,
    "cost": 1800.0,
    "conversions": 60,
    "conversion_rate": 0.05,
    "conversion_value": 7200.0,
    "search_impression_share": 0.75,
    "search_lost_is_rank": 0.1,
    "search_lost_is_budget": 0.05,
}


def keyword(text: str, match_type: str = "EXACT", quality_score: Optional[int] = 8, **extra: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "text": text,
        "match_type": match_type,
        "quality_score": quality_score,
        "quality_components": {
            "ad_relevance": "ABOVE_AVERAGE",
            "expected_ctr": "AVERAGE",
            "landing_page_experience": "ABOVE_AVERAGE",
        },
        "cpc_bid": 1.2,
        "final_url": "https://example.com/shoes",
    }
    data.update(extra)
    return data


def ad(ad_id: str, ad_type: str = "RESPONSIVE_SEARCH_AD", **extra: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": ad_id,
        "ad_type": ad_type,
        "policy_status": "APPROVED",
        "policy_topics": [],
        "final_url": "https://example.com/",
    }
    data.update(extra)
    return data


def ad_group(name: str, ads: int = 2, keywords: Optional[List[Dict[str, Any]]] = None, **extra: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": name,
        "name": name,
        "keywords": keywords if keywords is not None else [keyword(f"{name.lower()} shoes")],
        "ads": [ad(f"{name}-{i}") for i in range(ads)],
        "cpc_bid": 1.0,
        "negative_keyword_count": 2,
        "audiences": [],
        "excluded_audience_count": 0,
        "extensions": {"sitelink": 0, "callout": 0, "structured_snippet": 0, "call": 0, "price": 0},
    }
    data.update(extra)
    return data


def campaign(name: str, groups: Optional[List[Dict[str, Any]]] = None, **extra: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": name,
        "name": name,
        "status": "ENABLED",
        "channel_type": "SEARCH",
        "budget": 50.0,
        "bidding_strategy": "TARGET_CPA",
        "metrics": dict(HEALTHY_METRICS),
        "excluded_ips": ["203.0.113.7"],
        "negative_keyword_count": 5,
        "device_bid_modifiers": [1.0, 1.2],
        "audiences": [{"name": "All visitors", "kind": "USER_LIST"}],
        "excluded_audience_count": 1,
        "extensions": {"sitelink": 4, "callout": 4, "structured_snippet": 1, "call": 1, "price": 1},
        "ad_groups": groups if groups is not None else [ad_group("Brand_Exact")],
    }
    data.update(extra)
    return data


def account(campaigns: Optional[List[Dict[str, Any]]] = None, **extra: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "name": "Example Store",
        "currency_code": "USD",
        "time_zone": "America/New_York",
        "metrics": dict(HEALTHY_METRICS),
        "negative_list_keyword_count": 40,
        "extensions": {"callout": 3},
        "conversion_actions": [
            {"name": "Purchase", "category": "PURCHASE", "default_value": 120.0},
            {"name": "Newsletter", "category": "SIGNUP", "include_in_conversions": False},
            {"name": "GA4 purchase", "category": "PURCHASE", "origin": "GOOGLE_ANALYTICS_4",
             "include_in_conversions": False},
        ],
    }
    data.update(extra)
    return {
        "account": data,
        "campaigns": campaigns if campaigns is not None else [campaign("US-Brand-Search")],
    }


@pytest.fixture
def snapshot_factory():
    """Factory fixture building snapshot documents from the helpers above."""
    class _Factory:
        keyword = staticmethod(keyword)
        ad = staticmethod(ad)
        ad_group = staticmethod(ad_group)
        campaign = staticmethod(campaign)
        account = staticmethod(account)

        @staticmethod
        def source(document: Optional[Dict[str, Any]] = None) -> SnapshotSource:
            return SnapshotSource(copy.deepcopy(document if document is not None else account()))

    return _Factory


# ==============================================================================
# Collaborators
# ==============================================================================


class FakeProbe:
    """URL probe answering from a canned status map."""

    def __init__(self, statuses: Optional[Dict[str, Any]] = None, default: int = 200) -> None:
        self.statuses = statuses or {}
        self.default = default
        self.calls: List[str] = []

    def probe(self, url: str) -> Outcome[int]:
        self.calls.append(url)
        answer = self.statuses.get(url, self.default)
        if isinstance(answer, Outcome):
            return answer
        return Outcome.ok(answer)


@pytest.fixture
def fake_probe():
    """Factory fixture for FakeProbe instances."""
    def _create(statuses: Optional[Dict[str, Any]] = None, default: int = 200) -> FakeProbe:
        return FakeProbe(statuses, default)
    return _create


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def run_module(sleeps):
    """Run one module class against a source and return its collector."""
    def _run(module_cls, source, config: Optional[AuditConfig] = None, probe=None) -> ResultCollector:
        collector = ResultCollector()
        context = AuditContext(
            source=source,
            config=config or AuditConfig(),
            url_probe=probe,
            pacer=Pacer(batch_size=20, pause_seconds=1.0, sleep=sleeps.append),
        )
        module_cls(context, collector).execute()
        return collector
    return _run


@pytest.fixture
def isolated_registry():
    """Let a test register throwaway modules without leaking them."""
    saved = CheckRegistry.snapshot()
    CheckRegistry.clear()
    yield CheckRegistry
    CheckRegistry.restore(saved)


def findings_for(collector: ResultCollector, item: str):
    return [f for f in collector.findings if f.item == item]
