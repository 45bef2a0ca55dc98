"""Shared test fixtures for the KPI dashboard tests."""

import pytest

from app.connectors.ga4_connector import GA4Connector
from tests.ga4_fakes import FakeGA4Client, make_response, make_row


@pytest.fixture
def fake_client():
    return FakeGA4Client()


@pytest.fixture
def connector(fake_client):
    return GA4Connector(client=fake_client, property_id="123456")


@pytest.fixture
def populated_client():
    """A client that answers every dashboard query with plausible data."""
    return FakeGA4Client(responses={
        "core": make_response(make_row(metrics=(120, 480, 150, 83.5))),
        "additional": make_response(make_row(metrics=(0.4567, 3, 900, 40))),
        "traffic_sources": make_response(
            make_row(("Organic Search",), (70,)),
            make_row(("Direct",), (50,)),
        ),
        "top_pages": make_response(
            make_row(("/",), (300,)),
            make_row(("/jobs",), (200,)),
        ),
        "top_job_pages": make_response(
            make_row(("/jobs/developer",), (90,)),
        ),
        "category": make_response(
            make_row(("/engineering/roles",), (10,)),
            make_row(("/sales/leads",), (5,)),
            make_row(("/engineering/blog",), (7,)),
        ),
    })
