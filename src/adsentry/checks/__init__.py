"""Audit check implementations, one module per account area."""
from __future__ import annotations

from importlib import import_module
from typing import Iterable

from .base import AuditModule, CheckRegistry

# Import order is registration order, which is the order modules run in.
_CHECK_MODULES: tuple[str, ...] = (
    "settings",
    "conversion_tracking",
    "keywords",
    "ad_groups",
    "ad_copy",
    "extensions",
    "bidding",
    "quality_score",
    "landing_pages",
    "audiences",
    "performance",
    "campaign_optimization",
    "manual",
)


def load_checks() -> Iterable[type[AuditModule]]:
    """Import all check modules to populate the registry."""

    for module_name in _CHECK_MODULES:
        import_module(f"{__name__}.{module_name}")
    return CheckRegistry.get_all()
