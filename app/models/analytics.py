"""
Value types for the dashboard aggregation pipeline.

These are plain request-scoped values: the GA4 connector produces them, the
report shaper consumes them, nothing keeps them after a response is sent.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class DateWindow:
    """Inclusive date range in GA4's YYYY-MM-DD form."""
    start: str
    end: str

    def __str__(self) -> str:
        return f"{self.start} to {self.end}"


@dataclass(frozen=True)
class MetricSnapshot:
    """Core traffic metrics for one window."""
    active_users: int = 0
    page_views: int = 0
    sessions: int = 0
    avg_duration: float = 0.0  # seconds


@dataclass(frozen=True)
class AdditionalSnapshot:
    """Engagement metrics for one window."""
    bounce_rate: float = 0.0  # 0..1
    conversions: float = 0.0
    event_count: int = 0
    new_users: int = 0


@dataclass(frozen=True)
class RankedEntry:
    name: str
    views: int


class CategoryBucket(str, Enum):
    """Department-like page groupings, in report order."""
    DEV = "Dev"
    MKT = "Mkt"
    SALES = "Sales"
    HR = "HR"
    OTHER = "Other"


@dataclass(frozen=True)
class CategoryTotal:
    name: str
    val: int


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """
    Outcome of a single provider query.

    ``ok`` carries a value (possibly a zeroed snapshot or an empty list when
    the query legitimately matched nothing). ``failed`` carries the reason and
    no value; the report shaper decides what to render in its place.
    """
    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> "FetchResult[T]":
        return cls(value=value)

    @classmethod
    def failed(cls, reason: str) -> "FetchResult[T]":
        return cls(error=reason)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def value_or(self, default: Any) -> Any:
        return self.value if self.is_ok else default


@dataclass
class DashboardFetches:
    """Every fetch result one orchestration produced, keyed by purpose."""
    today: FetchResult[MetricSnapshot]
    mtd: FetchResult[MetricSnapshot]
    ytd: FetchResult[MetricSnapshot]
    today_additional: FetchResult[AdditionalSnapshot]
    mtd_additional: FetchResult[AdditionalSnapshot]
    ytd_additional: FetchResult[AdditionalSnapshot]
    traffic_sources: FetchResult[List[RankedEntry]]
    top_pages: FetchResult[List[RankedEntry]]
    top_job_pages: FetchResult[List[RankedEntry]]
    page_views_by_category: FetchResult[List[CategoryTotal]]

    def failures(self) -> List[str]:
        """Names of the fetches that failed."""
        names = [
            "today", "mtd", "ytd",
            "today_additional", "mtd_additional", "ytd_additional",
            "traffic_sources", "top_pages", "top_job_pages", "page_views_by_category",
        ]
        return [name for name in names if not getattr(self, name).is_ok]
