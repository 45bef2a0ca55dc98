"""Tests for the GA4 connector fetch methods."""

import pytest
from unittest.mock import AsyncMock

from app.connectors.ga4_connector import GA4Connector
from app.models.analytics import (
    AdditionalSnapshot,
    CategoryTotal,
    DateWindow,
    MetricSnapshot,
    RankedEntry,
)
from tests.ga4_fakes import FakeGA4Client, make_response, make_row

WINDOW = DateWindow("2024-03-01", "2024-03-15")


# ---------------------------------------------------------------------------
# Core and additional metrics
# ---------------------------------------------------------------------------

class TestMetricSnapshots:

    @pytest.mark.asyncio
    async def test_core_metrics_parsed(self):
        client = FakeGA4Client(responses={
            "core": make_response(make_row(metrics=("120", "480", "150", "83.25"))),
        })
        result = await GA4Connector(client=client, property_id="1").fetch_core_metrics(WINDOW)

        assert result.is_ok
        assert result.value == MetricSnapshot(
            active_users=120, page_views=480, sessions=150, avg_duration=83.25
        )

    @pytest.mark.asyncio
    async def test_core_metrics_request_shape(self, connector, fake_client):
        await connector.fetch_core_metrics(WINDOW)

        _, request = fake_client.requests[0]
        assert request.property == "properties/123456"
        assert request.date_ranges[0].start_date == "2024-03-01"
        assert request.date_ranges[0].end_date == "2024-03-15"
        assert [m.name for m in request.metrics] == [
            "activeUsers", "screenPageViews", "sessions", "averageSessionDuration",
        ]

    @pytest.mark.asyncio
    async def test_empty_result_is_zeroed_not_failed(self, connector):
        result = await connector.fetch_core_metrics(WINDOW)

        assert result.is_ok
        assert result.value == MetricSnapshot()

    @pytest.mark.asyncio
    async def test_provider_error_is_failed_result(self):
        client = FakeGA4Client(errors={"core": PermissionError("quota exceeded")})
        result = await GA4Connector(client=client, property_id="1").fetch_core_metrics(WINDOW)

        assert not result.is_ok
        assert result.value is None
        assert "quota exceeded" in result.error

    @pytest.mark.asyncio
    async def test_additional_metrics_parsed(self):
        client = FakeGA4Client(responses={
            "additional": make_response(make_row(metrics=("0.4567", "3.5", "900", "40"))),
        })
        result = await GA4Connector(client=client, property_id="1").fetch_additional_metrics(WINDOW)

        assert result.value == AdditionalSnapshot(
            bounce_rate=0.4567, conversions=3.5, event_count=900, new_users=40
        )

    @pytest.mark.asyncio
    async def test_additional_metrics_empty_and_error(self):
        empty = await GA4Connector(client=FakeGA4Client(), property_id="1").fetch_additional_metrics(WINDOW)
        broken = await GA4Connector(
            client=FakeGA4Client(errors={"additional": ConnectionError("reset")}),
            property_id="1",
        ).fetch_additional_metrics(WINDOW)

        assert empty.value == AdditionalSnapshot()
        assert not broken.is_ok


# ---------------------------------------------------------------------------
# Ranked lists
# ---------------------------------------------------------------------------

class TestRankedLists:

    @pytest.mark.asyncio
    async def test_top_pages_sorted_and_bounded(self):
        rows = [make_row((f"/page-{i}",), (i * 10,)) for i in range(1, 8)]
        client = FakeGA4Client(responses={"top_pages": make_response(*rows)})

        result = await GA4Connector(client=client, property_id="1").fetch_top_pages(WINDOW)

        assert [entry.views for entry in result.value] == [70, 60, 50, 40, 30]

    @pytest.mark.asyncio
    async def test_top_pages_request_orders_by_views(self, connector, fake_client):
        await connector.fetch_top_pages(WINDOW)

        _, request = fake_client.requests[0]
        assert request.dimensions[0].name == "pagePath"
        assert request.limit == 5
        assert request.order_bys[0].metric.metric_name == "screenPageViews"
        assert request.order_bys[0].desc is True

    @pytest.mark.asyncio
    async def test_traffic_sources_by_channel_group(self):
        client = FakeGA4Client(responses={"traffic_sources": make_response(
            make_row(("Direct",), (50,)),
            make_row(("Organic Search",), (70,)),
        )})
        connector = GA4Connector(client=client, property_id="1")

        result = await connector.fetch_traffic_sources(WINDOW)

        assert result.value == [RankedEntry("Organic Search", 70), RankedEntry("Direct", 50)]
        _, request = client.requests[0]
        assert request.dimensions[0].name == "sessionDefaultChannelGroup"
        assert request.metrics[0].name == "sessions"

    @pytest.mark.asyncio
    async def test_list_fetch_error_is_failed_result(self):
        client = FakeGA4Client(errors={"top_pages": ConnectionError("network down")})

        result = await GA4Connector(client=client, property_id="1").fetch_top_pages(WINDOW)

        assert not result.is_ok
        assert result.value_or([]) == []

    @pytest.mark.asyncio
    async def test_job_pages_use_case_insensitive_contains_filter(self):
        client = FakeGA4Client()
        connector = GA4Connector(client=client, property_id="1", job_page_keyword="career")

        await connector.fetch_top_job_pages(WINDOW)

        _, request = client.requests[0]
        string_filter = request.dimension_filter.filter.string_filter
        assert request.dimension_filter.filter.field_name == "pagePath"
        assert string_filter.value == "career"
        assert string_filter.case_sensitive is False
        assert string_filter.match_type.name == "CONTAINS"

    @pytest.mark.asyncio
    async def test_job_pages_no_match_is_ok_empty(self, connector):
        result = await connector.fetch_top_job_pages(WINDOW)

        assert result.is_ok
        assert result.value == []

    @pytest.mark.asyncio
    async def test_job_pages_error_is_distinguishable_from_no_match(self):
        client = FakeGA4Client(errors={"top_job_pages": ValueError("invalid filter")})

        result = await GA4Connector(client=client, property_id="1").fetch_top_job_pages(WINDOW)

        assert not result.is_ok


# ---------------------------------------------------------------------------
# Category rollup
# ---------------------------------------------------------------------------

class TestCategoryRollup:

    @pytest.mark.asyncio
    async def test_rollup_from_sampled_paths(self):
        client = FakeGA4Client(responses={"category": make_response(
            make_row(("/engineering/roles",), (10,)),
            make_row(("/sales/leads",), (5,)),
            make_row(("/engineering/blog",), (7,)),
        )})

        result = await GA4Connector(client=client, property_id="1").fetch_category_rollup(WINDOW)

        assert result.value == [CategoryTotal("Dev", 17), CategoryTotal("Sales", 5)]

    @pytest.mark.asyncio
    async def test_rollup_samples_100_unfiltered_paths(self, connector, fake_client):
        await connector.fetch_category_rollup(WINDOW)

        _, request = fake_client.requests[0]
        assert request.limit == 100
        assert request.dimension_filter.filter.field_name == ""

    @pytest.mark.asyncio
    async def test_rollup_error_is_failed_result(self):
        client = FakeGA4Client(errors={"category": RuntimeError("boom")})

        result = await GA4Connector(client=client, property_id="1").fetch_category_rollup(WINDOW)

        assert not result.is_ok


# ---------------------------------------------------------------------------
# Connection handling
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_missing_client_that_cannot_connect_fails_softly():
    connector = GA4Connector(property_id="1")
    connector.connect = AsyncMock(return_value=False)

    result = await connector.fetch_core_metrics(WINDOW)

    assert not result.is_ok
    connector.connect.assert_awaited_once()


@pytest.mark.asyncio
async def test_validate_connection(connector):
    assert await connector.validate_connection() is True

    broken = GA4Connector(client=FakeGA4Client(errors={"core": PermissionError("denied")}), property_id="1")
    assert await broken.validate_connection() is False


@pytest.mark.asyncio
async def test_status_counts_queries_and_errors():
    client = FakeGA4Client(errors={"top_pages": ConnectionError("down")})
    connector = GA4Connector(client=client, property_id="1")

    await connector.fetch_core_metrics(WINDOW)
    await connector.fetch_top_pages(WINDOW)

    status = connector.get_status()
    assert status["query_count"] == 2
    assert status["error_count"] == 1
    assert status["error_rate"] == 0.5
    assert status["last_query"] is not None
