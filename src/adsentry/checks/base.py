"""Base classes and helpers for audit check modules."""
from __future__ import annotations

import abc
import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterable, Optional, Tuple, Type, TypeVar

from ..config import AuditConfig
from ..core.collector import ResultCollector
from ..core.interfaces import Availability, DataSource, Outcome, UrlProbe
from ..core.pacing import Pacer
from .types import Category, Finding, Status

logger = logging.getLogger(__name__)

T = TypeVar("T")

MANUAL_REVIEW = "Manual Review Required"
MANUAL_CHECK = "Manual Check Required"


@dataclass
class AuditContext:
    """Collaborators handed to every module of a run."""

    source: DataSource
    config: AuditConfig = field(default_factory=AuditConfig)
    url_probe: Optional[UrlProbe] = None
    pacer: Pacer = field(default_factory=Pacer)


class CheckRegistry:
    """Registry for all audit modules, kept in definition order."""

    _registry: ClassVar[Dict[str, Type["AuditModule"]]] = {}

    @classmethod
    def register(cls, module_cls: Type["AuditModule"]) -> None:
        name = module_cls.name
        if not name:
            raise ValueError(f"Audit module {module_cls.__name__} must define a name")
        if name in cls._registry:
            raise ValueError(f"Duplicate audit module name registered: {name}")
        cls._registry[name] = module_cls
        logger.debug("Registered audit module: %s", name)

    @classmethod
    def get_all(cls) -> Iterable[Type["AuditModule"]]:
        return cls._registry.values()

    @classmethod
    def get(cls, name: str) -> Optional[Type["AuditModule"]]:
        return cls._registry.get(name)

    @classmethod
    def by_name(cls, names: Iterable[str]) -> Iterable[Type["AuditModule"]]:
        selected = {name.lower().strip() for name in names}
        for module_cls in cls._registry.values():
            if module_cls.name.lower() in selected:
                yield module_cls

    @classmethod
    def snapshot(cls) -> Dict[str, Type["AuditModule"]]:
        return dict(cls._registry)

    @classmethod
    def restore(cls, saved: Dict[str, Type["AuditModule"]]) -> None:
        cls._registry.clear()
        cls._registry.update(saved)

    @classmethod
    def clear(cls) -> None:
        cls._registry.clear()


class AuditModuleMeta(abc.ABCMeta):
    """Metaclass that auto-registers concrete audit modules."""

    def __new__(mcls, name: str, bases: Tuple[type, ...], namespace: Dict[str, Any]):
        cls = super().__new__(mcls, name, bases, namespace)
        auto_register = namespace.get("auto_register", True)
        if auto_register and not inspect_is_abstract(cls):
            CheckRegistry.register(cls)
        return cls


def inspect_is_abstract(cls: Type["AuditModule"]) -> bool:
    """Helper to determine whether a class is abstract."""

    abstract_methods = getattr(cls, "__abstractmethods__", set())
    return bool(abstract_methods)


class AuditModule(metaclass=AuditModuleMeta):
    """Evaluates one functional area of the account.

    Subclasses implement :meth:`run`, iterating the entities they care
    about and recording exactly one finding per entity-rule pair. Accessor
    problems are recorded through :meth:`settle` and never abort the
    module.
    """

    auto_register: ClassVar[bool] = True
    name: str = ""
    description: str = ""
    category: Category = Category.ACCOUNT_SETTINGS
    # AuditConfig attribute that switches the module off when False
    enabled_flag: ClassVar[Optional[str]] = None
    skipped_item: ClassVar[Optional[str]] = None

    def __init__(self, context: AuditContext, collector: ResultCollector) -> None:
        self.context = context
        self.collector = collector

    @property
    def source(self) -> DataSource:
        return self.context.source

    @property
    def config(self) -> AuditConfig:
        return self.context.config

    @classmethod
    def enabled_for(cls, config: AuditConfig) -> bool:
        if config.is_disabled(cls.name):
            return False
        if cls.enabled_flag is not None:
            return bool(getattr(config, cls.enabled_flag, True))
        return True

    def is_enabled(self) -> bool:
        return self.enabled_for(self.config)

    @abc.abstractmethod
    def run(self) -> None:
        """Evaluate the module's rules and record findings."""

    def execute(self) -> None:
        """Run the module, or record a single Skipped finding when disabled.

        Exceptions escaping :meth:`run` propagate to the caller, which turns
        them into an Error finding for this module.
        """
        if not self.is_enabled():
            logger.info("Module %s disabled by configuration", self.name)
            self.skip("Disabled in configuration.")
            return
        logger.debug("Executing module %s", self.name)
        self.run()

    def skip(self, reason: str) -> Finding:
        return self.record(
            self.skipped_item or f"{self.category.value} Checks",
            Status.SKIPPED,
            reason,
            "N/A",
        )

    # -- recording helpers -------------------------------------------------

    def record(
        self,
        item: str,
        status: Status,
        details: str,
        recommendation: Optional[str] = None,
        category: Optional[str] = None,
    ) -> Finding:
        return self.collector.record(
            category or self.category,
            item,
            status,
            details,
            recommendation,
        )

    def manual(self, item: str, recommendation: str, details: str = MANUAL_REVIEW) -> Finding:
        return self.record(item, Status.INFO, details, recommendation)

    def settle(
        self,
        outcome: Outcome[Any],
        item: str,
        subject: str,
        recommendation: str = "Investigate the data source error.",
        unavailable_recommendation: str = "Capability not available for this entity type. N/A.",
    ) -> bool:
        """Record a finding for an unusable outcome.

        Returns True when the outcome carries a value the caller may use;
        otherwise exactly one Info (capability absent) or Error (accessor
        failed) finding has been recorded for ``item`` on ``subject``.
        """
        if outcome.availability is Availability.OK:
            return True
        if outcome.availability is Availability.UNAVAILABLE:
            self.record(
                item,
                Status.INFO,
                f"Could not check for {subject}: {outcome.reason}",
                unavailable_recommendation,
            )
        else:
            logger.warning("%s: %s failed for %s: %s", self.name, item, subject, outcome.reason)
            self.record(
                item,
                Status.ERROR,
                f"Error checking {subject}: {outcome.reason}",
                recommendation,
            )
        return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, category={self.category.value!r})"


def rollup(passed: int, total: int, noun: str, rule: str) -> str:
    """Describe an N-of-M summary, e.g. '3 of 4 ad groups have 2+ ads.'"""
    return f"{passed} of {total} {noun} {rule}."


def percent(value: Optional[float], digits: int = 2) -> str:
    if value is None:
        return "N/A"
    return f"{value * 100:.{digits}f}%"


def money(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return f"{value:.2f}"
