"""
Response models for the dashboard data endpoint.

Field names are the wire names the dashboard UI reads, hence camelCase.
"""
from typing import List, Literal, Optional, Union

from pydantic import BaseModel

KPIValue = Union[int, float, str]

LIVE = "live"
PLACEHOLDER = "placeholder"


class KPIRow(BaseModel):
    label: str
    today: KPIValue
    mtd: KPIValue
    ytd: KPIValue
    isCurrency: Optional[bool] = None
    notes: Optional[str] = None
    source: Literal["live", "placeholder"]


class TrafficSourceOut(BaseModel):
    name: str
    value: int


class PageViewsOut(BaseModel):
    pageName: str
    views: int


class CategoryViewsOut(BaseModel):
    name: str
    val: int


class DashboardReport(BaseModel):
    growthFunnel: List[KPIRow]
    businessMetrics: List[KPIRow]
    jobPortalMetrics: List[KPIRow]
    candidateMetrics: List[KPIRow]
    employerMetrics: List[KPIRow]
    websitePerformance: List[KPIRow]
    trafficSources: List[TrafficSourceOut]
    topPages: List[PageViewsOut]
    topJobPages: List[PageViewsOut]
    pageViewsByCategory: List[CategoryViewsOut]
