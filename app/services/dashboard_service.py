"""
Dashboard data aggregation

Resolves the report windows, runs every GA4 query for one request
concurrently and hands the settled results to the report shaper.
"""
import asyncio
from typing import Any, Optional

from app.connectors.ga4_connector import GA4Connector
from app.models.analytics import DashboardFetches, FetchResult
from app.schemas.dashboard import DashboardReport
from app.services.date_ranges import resolve_date_ranges
from app.services.report_shaper import shape_report
from app.utils.logger import log


def _settled(outcome: Any) -> FetchResult:
    """Turn an exception that escaped a fetcher into a failed result."""
    if isinstance(outcome, BaseException):
        log.error(f"Unhandled error in GA4 fetch: {type(outcome).__name__}: {outcome}")
        return FetchResult.failed(f"{type(outcome).__name__}: {outcome}")
    return outcome


class DashboardService:
    """Builds the dashboard report for one request"""

    def __init__(self, connector: GA4Connector):
        self.connector = connector

    async def fetch_all(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> DashboardFetches:
        """
        Run all ten GA4 queries concurrently and wait for every one to settle.

        Core and additional metrics run for the selected, month-to-date and
        year-to-date windows. Traffic sources, top pages, job pages and the
        category rollup run for the breakdown window.
        """
        ranges = resolve_date_ranges(end_date=end_date, start_date=start_date)
        selected, mtd, ytd, breakdown = ranges.selected, ranges.mtd, ranges.ytd, ranges.breakdown

        log.info(
            f"Fetching GA4 data - Selected: {selected}, MTD: {mtd}, YTD: {ytd}, "
            f"Breakdowns: {breakdown}"
        )

        ga4 = self.connector
        outcomes = await asyncio.gather(
            ga4.fetch_core_metrics(selected),
            ga4.fetch_core_metrics(mtd),
            ga4.fetch_core_metrics(ytd),
            ga4.fetch_additional_metrics(selected),
            ga4.fetch_additional_metrics(mtd),
            ga4.fetch_additional_metrics(ytd),
            ga4.fetch_traffic_sources(breakdown),
            ga4.fetch_top_pages(breakdown),
            ga4.fetch_top_job_pages(breakdown),
            ga4.fetch_category_rollup(breakdown),
            return_exceptions=True,
        )
        results = [_settled(outcome) for outcome in outcomes]

        fetches = DashboardFetches(*results)
        failed = fetches.failures()
        if failed:
            log.warning(f"Dashboard built with {len(failed)} failed GA4 fetches: {', '.join(failed)}")
        return fetches

    async def build_report(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> DashboardReport:
        fetches = await self.fetch_all(start_date=start_date, end_date=end_date)
        return shape_report(fetches)
