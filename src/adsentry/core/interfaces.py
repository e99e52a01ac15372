"""Interfaces separating the audit engine from its collaborators.

Architecture:
┌─────────────────────────────────────────────────────────────────┐
│                       DATA SOURCE LAYER                          │
│  - Account -> campaign -> ad group -> keyword/ad hierarchy        │
│  - Every accessor answers with an Outcome (ok/unavailable/failed) │
│  - NO side effects (read-only)                                    │
└─────────────────────────────────────────────────────────────────┘
                              │
                              ▼
┌─────────────────────────────────────────────────────────────────┐
│                        AUDIT LAYER                               │
│  - Check modules evaluate rules, record findings                 │
│  - Collector routes findings, aggregator summarizes              │
└─────────────────────────────────────────────────────────────────┘
                              │
                              ▼
┌─────────────────────────────────────────────────────────────────┐
│                       REPORT SINK LAYER                          │
│  - One section per report area plus an overview                 │
│  - Re-running replaces earlier rows instead of appending         │
└─────────────────────────────────────────────────────────────────┘
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    TypeVar,
)

if TYPE_CHECKING:
    from .aggregator import RunReport

T = TypeVar("T")

ENABLED: Tuple[str, ...] = ("ENABLED",)
ENABLED_OR_PAUSED: Tuple[str, ...] = ("ENABLED", "PAUSED")


class SinkInitError(RuntimeError):
    """Raised when the report destination cannot be prepared."""


class SinkWriteError(RuntimeError):
    """Raised when rows or the summary cannot be written to the sink."""

    def __init__(self, message: str, section: Optional[str] = None) -> None:
        super().__init__(message)
        self.section = section


# =============================================================================
# OUTCOME - explicit result of a single data accessor
# =============================================================================


class Availability(str, Enum):
    OK = "ok"
    UNAVAILABLE = "unavailable"  # capability absent for this entity type
    FAILED = "failed"  # accessor raised or returned unusable data


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Value-or-reason returned by every data-source accessor."""

    availability: Availability
    value: Optional[T] = None
    reason: str = ""

    @classmethod
    def ok(cls, value: T) -> "Outcome[T]":
        return cls(Availability.OK, value)

    @classmethod
    def unavailable(cls, reason: str = "not supported for this entity") -> "Outcome[T]":
        return cls(Availability.UNAVAILABLE, None, reason)

    @classmethod
    def failed(cls, reason: str) -> "Outcome[T]":
        return cls(Availability.FAILED, None, reason)

    @property
    def is_ok(self) -> bool:
        return self.availability is Availability.OK

    @property
    def is_unavailable(self) -> bool:
        return self.availability is Availability.UNAVAILABLE

    def value_or(self, default: T) -> T:
        if self.is_ok and self.value is not None:
            return self.value
        return default


def attempt(func: Callable[..., T], *args: Any, **kwargs: Any) -> Outcome[T]:
    """Call a raising accessor and fold any exception into a failed Outcome.

    Intended for adapters that wrap client libraries signalling missing
    data by raising.
    """
    try:
        return Outcome.ok(func(*args, **kwargs))
    except NotImplementedError as exc:
        return Outcome.unavailable(str(exc) or "not supported for this entity")
    except Exception as exc:  # noqa: BLE001 - every accessor failure is data
        return Outcome.failed(f"{type(exc).__name__}: {exc}")


# =============================================================================
# VALUE TYPES
# =============================================================================


class Metric(str, Enum):
    """Statistics exposed by accounts and campaigns."""

    CLICKS = "clicks"
    IMPRESSIONS = "impressions"
    CTR = "ctr"
    AVERAGE_CPC = "average_cpc"
    COST = "cost"
    CONVERSIONS = "conversions"
    CONVERSION_RATE = "conversion_rate"
    CONVERSION_VALUE = "conversion_value"
    SEARCH_IMPRESSION_SHARE = "search_impression_share"
    SEARCH_LOST_IS_RANK = "search_lost_is_rank"
    SEARCH_LOST_IS_BUDGET = "search_lost_is_budget"


class ExtensionKind(str, Enum):
    SITELINK = "sitelink"
    CALLOUT = "callout"
    STRUCTURED_SNIPPET = "structured_snippet"
    CALL = "call"
    PRICE = "price"


@dataclass(frozen=True)
class AudienceTarget:
    name: str
    kind: str = "USER_INTEREST"

    @property
    def is_remarketing(self) -> bool:
        return self.kind.upper() == "USER_LIST"


@dataclass(frozen=True)
class ConversionAction:
    """Conversion action as reported by the account."""

    name: str
    status: str = "ENABLED"
    category: str = "DEFAULT"
    origin: str = "WEBSITE"
    include_in_conversions: bool = True
    default_value: Optional[float] = None
    always_use_default_value: bool = False
    tags: List[str] = field(default_factory=list)

    @property
    def is_google_analytics(self) -> bool:
        return self.origin.upper() in {"GOOGLE_ANALYTICS", "GOOGLE_ANALYTICS_4", "GA4"}


# =============================================================================
# DATA SOURCE - read-only view of the audited account
# =============================================================================


class Keyword(Protocol):
    id: str
    text: str
    match_type: str
    ad_group_name: str
    campaign_name: str

    def quality_score(self) -> Outcome[Optional[int]]:
        """Quality score 1-10, ok(None) when not yet computed."""
        ...

    def quality_component(self, component: str) -> Outcome[Optional[str]]:
        """Quality component rating (ABOVE_AVERAGE, AVERAGE, BELOW_AVERAGE).

        Args:
            component: One of ``ad_relevance``, ``expected_ctr`` or
                ``landing_page_experience``.
        """
        ...

    def cpc_bid(self) -> Outcome[Optional[float]]:
        ...

    def final_url(self) -> Outcome[Optional[str]]:
        ...


class Ad(Protocol):
    id: str
    ad_type: str
    ad_group_name: str
    campaign_name: str

    def policy_status(self) -> Outcome[str]:
        """Approval status such as APPROVED, APPROVED_LIMITED or DISAPPROVED."""
        ...

    def policy_topics(self) -> Outcome[List[str]]:
        ...

    def final_url(self) -> Outcome[Optional[str]]:
        ...


class AdGroup(Protocol):
    id: str
    name: str
    campaign_name: str
    is_dynamic: bool

    def keyword_count(self) -> Outcome[int]:
        """Number of enabled keywords."""
        ...

    def ad_count(self) -> Outcome[int]:
        """Number of enabled ads."""
        ...

    def cpc_bid(self) -> Outcome[Optional[float]]:
        ...

    def negative_keyword_count(self) -> Outcome[int]:
        ...

    def audiences(self) -> Outcome[List[AudienceTarget]]:
        ...

    def excluded_audience_count(self) -> Outcome[int]:
        ...

    def extension_count(self, kind: ExtensionKind) -> Outcome[int]:
        ...

    def keywords(self, statuses: Sequence[str] = ENABLED) -> Iterator[Keyword]:
        ...

    def ads(self, statuses: Sequence[str] = ENABLED) -> Iterator[Ad]:
        ...


class Campaign(Protocol):
    id: str
    name: str
    status: str
    channel_type: str

    def budget(self) -> Outcome[Optional[float]]:
        """Daily budget amount in account currency."""
        ...

    def bidding_strategy(self) -> Outcome[str]:
        ...

    def metric(self, metric: Metric) -> Outcome[Optional[float]]:
        ...

    def excluded_ips(self) -> Outcome[List[str]]:
        ...

    def negative_keyword_count(self) -> Outcome[int]:
        ...

    def device_bid_modifiers(self) -> Outcome[List[float]]:
        ...

    def audiences(self) -> Outcome[List[AudienceTarget]]:
        ...

    def excluded_audience_count(self) -> Outcome[int]:
        ...

    def extension_count(self, kind: ExtensionKind) -> Outcome[int]:
        ...

    def ad_groups(self, statuses: Sequence[str] = ENABLED) -> Iterator[AdGroup]:
        ...


class DataSource(Protocol):
    """Read-only access to one advertising account."""

    def currency_code(self) -> Outcome[str]:
        ...

    def time_zone(self) -> Outcome[str]:
        ...

    def metric(self, metric: Metric) -> Outcome[Optional[float]]:
        """Account-wide statistic over the audit date range."""
        ...

    def negative_list_keyword_count(self) -> Outcome[int]:
        """Keywords across shared negative keyword lists."""
        ...

    def extension_count(self, kind: ExtensionKind) -> Outcome[int]:
        """Account-level assets of the given kind."""
        ...

    def conversion_actions(self) -> Outcome[List[ConversionAction]]:
        ...

    def campaigns(self, statuses: Sequence[str] = ENABLED) -> Iterator[Campaign]:
        ...


class UrlProbe(Protocol):
    """Fetches a URL and reports its HTTP status code."""

    def probe(self, url: str) -> Outcome[int]:
        ...


# =============================================================================
# REPORT SINK - destination of the finished report
# =============================================================================


class ReportSink(Protocol):
    """Destination for detail rows and the overview summary."""

    def open(self) -> None:
        """Prepare the destination.

        Raises:
            SinkInitError: The destination cannot be created or opened.
        """
        ...

    def ensure_section(self, name: str) -> Any:
        """Create the named section if missing and clear rows from prior runs.

        Returns:
            Opaque handle passed back to :meth:`append_rows`.
        """
        ...

    def append_rows(self, handle: Any, rows: Iterable[Sequence[str]]) -> None:
        ...

    def write_summary(self, report: "RunReport") -> None:
        ...

    def close(self) -> None:
        ...
