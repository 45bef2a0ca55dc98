"""
Google Analytics 4 data connector
Runs the dashboard's report queries against the GA4 Data API.

Every fetch method returns a FetchResult and never raises: a provider error
becomes FetchResult.failed, an empty result set becomes a zeroed snapshot or
an empty list.
"""
import asyncio
from typing import Any, List, Optional

from google.analytics.data_v1beta import BetaAnalyticsDataClient
from google.analytics.data_v1beta.types import (
    DateRange,
    Dimension,
    Filter,
    FilterExpression,
    Metric,
    OrderBy,
    RunReportRequest,
)
from google.oauth2 import service_account

from app.connectors.base_connector import BaseConnector
from app.config import get_settings
from app.models.analytics import (
    AdditionalSnapshot,
    CategoryTotal,
    DateWindow,
    FetchResult,
    MetricSnapshot,
    RankedEntry,
)
from app.services.category_classifier import rollup
from app.utils.logger import log

settings = get_settings()

GA4_READONLY_SCOPE = "https://www.googleapis.com/auth/analytics.readonly"


def _to_int(value: str) -> int:
    return int(float(value)) if value else 0


def _to_float(value: str) -> float:
    return float(value) if value else 0.0


class GA4Connector(BaseConnector):
    """Connector for Google Analytics 4"""

    def __init__(
        self,
        client: Optional[BetaAnalyticsDataClient] = None,
        property_id: Optional[str] = None,
        job_page_keyword: Optional[str] = None,
        top_limit: Optional[int] = None,
        category_limit: Optional[int] = None,
    ):
        super().__init__("Google Analytics 4")
        self.client = client
        self.property_id = property_id or settings.ga4_property_id
        self.job_page_keyword = job_page_keyword or settings.job_page_keyword
        self.top_limit = top_limit or settings.top_entries_limit
        self.category_limit = category_limit or settings.category_sample_limit

    async def connect(self) -> bool:
        """Build the GA4 client from the service account file"""
        try:
            credentials = service_account.Credentials.from_service_account_file(
                settings.ga4_credentials_path,
                scopes=[GA4_READONLY_SCOPE]
            )
            self.client = BetaAnalyticsDataClient(credentials=credentials)
            log.info(f"Connected to Google Analytics 4 (property {self.property_id})")
            return True
        except Exception as e:
            log.error(f"Failed to connect to GA4: {str(e)}")
            return False

    async def validate_connection(self) -> bool:
        """Validate GA4 connection with a one-row probe query"""
        try:
            request = RunReportRequest(
                property=self._property,
                date_ranges=[DateRange(start_date="7daysAgo", end_date="yesterday")],
                metrics=[Metric(name="activeUsers")],
                limit=1,
            )
            await self._run_report(request)
            return True
        except Exception as e:
            log.error(f"GA4 connection validation failed: {str(e)}")
            return False

    @property
    def _property(self) -> str:
        return f"properties/{self.property_id}"

    async def _run_report(self, request: RunReportRequest) -> Any:
        """Run one report on a worker thread so concurrent fetches overlap."""
        if not self.client and not await self.connect():
            raise ConnectionError("GA4 client is not configured")
        try:
            response = await asyncio.to_thread(self.client.run_report, request)
        except Exception:
            self.record_query(failed=True)
            raise
        self.record_query()
        return response

    def _failed(self, what: str, window: DateWindow, error: Exception) -> FetchResult:
        log.error(f"Error fetching GA4 {what} ({window}): {str(error)}")
        details = getattr(error, "details", None)
        if details:
            log.error(f"GA4 error details: {details}")
        return FetchResult.failed(f"{type(error).__name__}: {str(error)}")

    def _ranked_request(
        self,
        window: DateWindow,
        dimension: str,
        metric: str,
        limit: int,
        dimension_filter: Optional[FilterExpression] = None,
    ) -> RunReportRequest:
        """Single dimension/metric report ordered by the metric, descending"""
        extra = {}
        if dimension_filter is not None:
            extra["dimension_filter"] = dimension_filter
        return RunReportRequest(
            property=self._property,
            date_ranges=[DateRange(start_date=window.start, end_date=window.end)],
            dimensions=[Dimension(name=dimension)],
            metrics=[Metric(name=metric)],
            order_bys=[OrderBy(metric=OrderBy.MetricOrderBy(metric_name=metric), desc=True)],
            limit=limit,
            **extra,
        )

    def _ranked_entries(self, response: Any) -> List[RankedEntry]:
        entries = [
            RankedEntry(
                name=row.dimension_values[0].value,
                views=_to_int(row.metric_values[0].value),
            )
            for row in response.rows
        ]
        entries.sort(key=lambda entry: entry.views, reverse=True)
        return entries[:self.top_limit]

    async def fetch_core_metrics(self, window: DateWindow) -> FetchResult[MetricSnapshot]:
        """Active users, page views, sessions and average session duration"""
        try:
            request = RunReportRequest(
                property=self._property,
                date_ranges=[DateRange(start_date=window.start, end_date=window.end)],
                metrics=[
                    Metric(name="activeUsers"),
                    Metric(name="screenPageViews"),
                    Metric(name="sessions"),
                    Metric(name="averageSessionDuration"),
                ],
            )
            response = await self._run_report(request)

            if not response.rows:
                log.warning(f"No data returned for GA4 metrics ({window})")
                return FetchResult.ok(MetricSnapshot())

            row = response.rows[0]
            return FetchResult.ok(MetricSnapshot(
                active_users=_to_int(row.metric_values[0].value),
                page_views=_to_int(row.metric_values[1].value),
                sessions=_to_int(row.metric_values[2].value),
                avg_duration=_to_float(row.metric_values[3].value),
            ))

        except Exception as e:
            return self._failed("metrics", window, e)

    async def fetch_additional_metrics(self, window: DateWindow) -> FetchResult[AdditionalSnapshot]:
        """Bounce rate, conversions, event count and new users"""
        try:
            request = RunReportRequest(
                property=self._property,
                date_ranges=[DateRange(start_date=window.start, end_date=window.end)],
                metrics=[
                    Metric(name="bounceRate"),
                    Metric(name="conversions"),
                    Metric(name="eventCount"),
                    Metric(name="newUsers"),
                ],
            )
            response = await self._run_report(request)

            if not response.rows:
                log.warning(f"No data returned for GA4 additional metrics ({window})")
                return FetchResult.ok(AdditionalSnapshot())

            row = response.rows[0]
            return FetchResult.ok(AdditionalSnapshot(
                bounce_rate=_to_float(row.metric_values[0].value),
                conversions=_to_float(row.metric_values[1].value),
                event_count=_to_int(row.metric_values[2].value),
                new_users=_to_int(row.metric_values[3].value),
            ))

        except Exception as e:
            return self._failed("additional metrics", window, e)

    async def fetch_traffic_sources(self, window: DateWindow) -> FetchResult[List[RankedEntry]]:
        """Top channel groups by session count"""
        try:
            request = self._ranked_request(
                window, "sessionDefaultChannelGroup", "sessions", self.top_limit
            )
            response = await self._run_report(request)
            return FetchResult.ok(self._ranked_entries(response))

        except Exception as e:
            return self._failed("traffic sources", window, e)

    async def fetch_top_pages(self, window: DateWindow) -> FetchResult[List[RankedEntry]]:
        """Most viewed page paths"""
        try:
            request = self._ranked_request(
                window, "pagePath", "screenPageViews", self.top_limit
            )
            response = await self._run_report(request)
            return FetchResult.ok(self._ranked_entries(response))

        except Exception as e:
            return self._failed("top pages", window, e)

    async def fetch_top_job_pages(self, window: DateWindow) -> FetchResult[List[RankedEntry]]:
        """
        Most viewed page paths containing the job keyword.

        Filtered by GA4 itself (case-insensitive CONTAINS on pagePath).
        No matching pages is an ok empty list, not a failure.
        """
        try:
            job_filter = FilterExpression(
                filter=Filter(
                    field_name="pagePath",
                    string_filter=Filter.StringFilter(
                        match_type=Filter.StringFilter.MatchType.CONTAINS,
                        value=self.job_page_keyword,
                        case_sensitive=False,
                    ),
                )
            )
            request = self._ranked_request(
                window, "pagePath", "screenPageViews", self.top_limit,
                dimension_filter=job_filter,
            )
            response = await self._run_report(request)

            if not response.rows:
                log.info(f"No pages matching '{self.job_page_keyword}' ({window})")
                return FetchResult.ok([])

            return FetchResult.ok(self._ranked_entries(response))

        except Exception as e:
            return self._failed("job pages", window, e)

    async def fetch_category_rollup(self, window: DateWindow) -> FetchResult[List[CategoryTotal]]:
        """Page views grouped into department buckets from a page path sample"""
        try:
            request = self._ranked_request(
                window, "pagePath", "screenPageViews", self.category_limit
            )
            response = await self._run_report(request)

            rows = [
                (row.dimension_values[0].value, _to_int(row.metric_values[0].value))
                for row in response.rows
            ]
            log.debug(f"Categorising {len(rows)} GA4 page paths ({window})")
            return FetchResult.ok(rollup(rows))

        except Exception as e:
            return self._failed("page views by category", window, e)
