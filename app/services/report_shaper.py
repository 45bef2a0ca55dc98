"""
Dashboard report shaping

Turns the fetch results of one orchestration into the fixed report the UI
renders. Every section and row label is always present: a failed snapshot
renders as zeros, a failed list renders as [].

Rows that GA4 cannot supply (CRM leads and revenue, job portal activity,
Search Console) come from PLACEHOLDER_SECTIONS and are tagged
source="placeholder".
"""
import math
from typing import Callable, Dict, List, Tuple, Union

from app.models.analytics import (
    AdditionalSnapshot,
    CategoryTotal,
    DashboardFetches,
    FetchResult,
    MetricSnapshot,
    RankedEntry,
)
from app.schemas.dashboard import (
    LIVE,
    PLACEHOLDER,
    CategoryViewsOut,
    DashboardReport,
    KPIRow,
    PageViewsOut,
    TrafficSourceOut,
)

NOT_AVAILABLE = "---"
GSC_NOTE = "Requires GSC API"

# (label, today, mtd, ytd, extra)
PLACEHOLDER_SECTIONS: Dict[str, List[Tuple]] = {
    "growthFunnel": [
        ("Applications", 0, 12, 150, {}),
        ("Shortlisted", 0, 4, 45, {}),
        ("Interviews", 0, 2, 30, {}),
        ("Offers", 0, 1, 12, {}),
        ("Hires / Joins", 0, 1, 10, {}),
    ],
    "businessMetrics": [
        ("Total Leads", 2, 45, 320, {}),
        ("Employer Leads", 0, 5, 40, {}),
        ("Training Leads", 2, 40, 280, {}),
        ("Monthly Revenue", NOT_AVAILABLE, 5000, 45000, {"isCurrency": True}),
        ("CPA", NOT_AVAILABLE, 25, 28, {"isCurrency": True}),
        ("Avg Revenue per Employer", NOT_AVAILABLE, 1200, 1500, {"isCurrency": True}),
        ("Marketing ROI", NOT_AVAILABLE, "3.2x", "4.0x", {}),
    ],
    "jobPortalMetrics": [
        ("Total Live Jobs", 50, 50, 50, {}),
        ("Jobs Added", 1, 10, 85, {}),
        ("Applications Received", 5, 120, 1500, {}),
        ("Applications per Job", 0.1, 2.4, 30, {}),
        ("Conversion Rate", "1%", "2.5%", "3.1%", {}),
    ],
    "candidateMetrics": [
        ("Total Candidates", NOT_AVAILABLE, NOT_AVAILABLE, 5400, {}),
        ("New Registrations", 8, 240, 2100, {}),
    ],
    "employerMetrics": [
        ("Licensed Employers", 0, 2, 15, {}),
        ("Jobs per Employer", NOT_AVAILABLE, 3, 4.5, {}),
    ],
    "websitePerformance": [
        ("Total Clicks (GSC)", NOT_AVAILABLE, NOT_AVAILABLE, NOT_AVAILABLE, {"notes": GSC_NOTE}),
        ("Impressions (GSC)", NOT_AVAILABLE, NOT_AVAILABLE, NOT_AVAILABLE, {"notes": GSC_NOTE}),
        ("CTR %", NOT_AVAILABLE, NOT_AVAILABLE, NOT_AVAILABLE, {"notes": GSC_NOTE}),
    ],
}


def format_bounce_rate(rate: float) -> str:
    """0.4567 -> '45.7%'; zero renders as '0%'."""
    if not rate:
        return "0%"
    return f"{rate * 100:.1f}%"


def format_duration(seconds: float) -> str:
    """Whole seconds, rounded half up: 83.5 -> '84s'."""
    if not seconds:
        return "0s"
    return f"{math.floor(seconds + 0.5)}s"


def _number(value: float) -> Union[int, float]:
    return int(value) if float(value).is_integer() else value


def placeholder_rows(section: str) -> List[KPIRow]:
    return [
        KPIRow(label=label, today=today, mtd=mtd, ytd=ytd, source=PLACEHOLDER, **extra)
        for label, today, mtd, ytd, extra in PLACEHOLDER_SECTIONS[section]
    ]


def _live_row(
    label: str,
    results: Tuple[FetchResult, FetchResult, FetchResult],
    default,
    value: Callable,
) -> KPIRow:
    today, mtd, ytd = (value(result.value_or(default)) for result in results)
    return KPIRow(label=label, today=today, mtd=mtd, ytd=ytd, source=LIVE)


def _ranked(result: FetchResult[List[RankedEntry]]) -> List[RankedEntry]:
    return result.value_or([])


def shape_report(fetches: DashboardFetches) -> DashboardReport:
    """Assemble the dashboard report from one orchestration's fetch results."""
    core = (fetches.today, fetches.mtd, fetches.ytd)
    extra = (fetches.today_additional, fetches.mtd_additional, fetches.ytd_additional)
    zero_core = MetricSnapshot()
    zero_extra = AdditionalSnapshot()

    growth_funnel = [
        _live_row("Website Visits", core, zero_core, lambda s: s.active_users),
        _live_row("Job Views", core, zero_core, lambda s: s.page_views),
    ] + placeholder_rows("growthFunnel")

    website_performance = placeholder_rows("websitePerformance") + [
        _live_row("Total Users", core, zero_core, lambda s: s.active_users),
        _live_row("Sessions", core, zero_core, lambda s: s.sessions),
        _live_row("New Users", extra, zero_extra, lambda s: s.new_users),
        _live_row("Bounce Rate", extra, zero_extra, lambda s: format_bounce_rate(s.bounce_rate)),
        _live_row("Avg Session Duration", core, zero_core, lambda s: format_duration(s.avg_duration)),
        _live_row("Total Events", extra, zero_extra, lambda s: s.event_count),
        _live_row("Conversions", extra, zero_extra, lambda s: _number(s.conversions)),
    ]

    categories: List[CategoryTotal] = fetches.page_views_by_category.value_or([])

    return DashboardReport(
        growthFunnel=growth_funnel,
        businessMetrics=placeholder_rows("businessMetrics"),
        jobPortalMetrics=placeholder_rows("jobPortalMetrics"),
        candidateMetrics=placeholder_rows("candidateMetrics"),
        employerMetrics=placeholder_rows("employerMetrics"),
        websitePerformance=website_performance,
        trafficSources=[
            TrafficSourceOut(name=entry.name, value=entry.views)
            for entry in _ranked(fetches.traffic_sources)
        ],
        topPages=[
            PageViewsOut(pageName=entry.name, views=entry.views)
            for entry in _ranked(fetches.top_pages)
        ],
        topJobPages=[
            PageViewsOut(pageName=entry.name, views=entry.views)
            for entry in _ranked(fetches.top_job_pages)
        ],
        pageViewsByCategory=[
            CategoryViewsOut(name=total.name, val=total.val) for total in categories
        ],
    )
