"""
Page category classification

Deterministic keyword rules that map a page path to a department bucket,
plus the rollup used for the "page views by category" chart.

Rules are evaluated in order against the lower-cased path, first match wins.
"""
from typing import Dict, Iterable, List, Tuple

from app.models.analytics import CategoryBucket, CategoryTotal

CATEGORY_RULES: List[Tuple[CategoryBucket, Tuple[str, ...]]] = [
    (CategoryBucket.DEV, ("dev", "developer", "tech", "engineering")),
    (CategoryBucket.MKT, ("marketing", "mkt")),
    (CategoryBucket.SALES, ("sales", "business")),
    (CategoryBucket.HR, ("hr", "human", "recruit")),
]


def classify(page_path: str) -> CategoryBucket:
    """Return the bucket for a page path. Never fails; unmatched paths are Other."""
    path = (page_path or "").lower()
    for bucket, keywords in CATEGORY_RULES:
        if any(keyword in path for keyword in keywords):
            return bucket
    return CategoryBucket.OTHER


def rollup(rows: Iterable[Tuple[str, int]]) -> List[CategoryTotal]:
    """
    Sum views per bucket.

    Args:
        rows: (page_path, views) pairs

    Returns:
        Non-zero buckets in Dev, Mkt, Sales, HR, Other order.
    """
    totals: Dict[CategoryBucket, int] = {bucket: 0 for bucket in CategoryBucket}
    for page_path, views in rows:
        totals[classify(page_path)] += views

    return [
        CategoryTotal(name=bucket.value, val=total)
        for bucket, total in totals.items()
        if total > 0
    ]
