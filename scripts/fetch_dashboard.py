#!/usr/bin/env python3
"""
Dashboard Report CLI

Builds the same report the /api/dashboard-data endpoint serves and prints
it as JSON. Useful for checking GA4 credentials and property access
without starting the API.

Usage:
    python scripts/fetch_dashboard.py [--start-date YYYY-MM-DD] [--end-date YYYY-MM-DD]

Examples:
    # Yesterday, month-to-date and year-to-date
    python scripts/fetch_dashboard.py

    # Report anchored on 15 March 2024
    python scripts/fetch_dashboard.py --end-date 2024-03-15

    # Only check that GA4 answers
    python scripts/fetch_dashboard.py --check
"""
import asyncio
import sys
import argparse
import json
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.connectors.ga4_connector import GA4Connector
from app.services.dashboard_service import DashboardService
from app.services.report_shaper import shape_report
from app.utils.credentials import bootstrap_credentials
from app.utils.logger import setup_logger


async def fetch_dashboard(start_date=None, end_date=None, check=False, indent=2) -> int:
    bootstrap_credentials()
    connector = GA4Connector()

    print("Connecting to GA4...", file=sys.stderr)
    if not await connector.connect():
        print("ERROR: Failed to connect to GA4. Check credentials.", file=sys.stderr)
        return 1

    if check:
        if await connector.validate_connection():
            print(f"GA4 property {connector.property_id} is reachable", file=sys.stderr)
            return 0
        print(f"ERROR: GA4 property {connector.property_id} rejected the probe query", file=sys.stderr)
        return 1

    service = DashboardService(connector)
    fetches = await service.fetch_all(start_date=start_date, end_date=end_date)

    report = shape_report(fetches)
    print(json.dumps(report.model_dump(exclude_none=True), indent=indent))

    failed = fetches.failures()
    if failed:
        print(f"\n{len(failed)} GA4 fetches failed: {', '.join(failed)}", file=sys.stderr)
    return 0


def main():
    parser = argparse.ArgumentParser(description="Print the KPI dashboard report as JSON")
    parser.add_argument("--start-date", help="Start of the selected range (YYYY-MM-DD)")
    parser.add_argument("--end-date", help="Anchor date (YYYY-MM-DD), defaults to yesterday")
    parser.add_argument("--check", action="store_true", help="Only validate the GA4 connection")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent")
    args = parser.parse_args()

    # Keep stdout for the report JSON
    setup_logger(sys.stderr)

    sys.exit(asyncio.run(fetch_dashboard(
        start_date=args.start_date,
        end_date=args.end_date,
        check=args.check,
        indent=args.indent,
    )))


if __name__ == "__main__":
    main()
