"""Value types for the dashboard aggregation pipeline"""
from app.models.analytics import (
    AdditionalSnapshot,
    CategoryBucket,
    CategoryTotal,
    DashboardFetches,
    DateWindow,
    FetchResult,
    MetricSnapshot,
    RankedEntry,
)

__all__ = [
    "AdditionalSnapshot",
    "CategoryBucket",
    "CategoryTotal",
    "DashboardFetches",
    "DateWindow",
    "FetchResult",
    "MetricSnapshot",
    "RankedEntry",
]
