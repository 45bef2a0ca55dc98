"""
Dashboard data endpoint
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from app.services.dashboard_service import DashboardService
from app.utils.logger import log

router = APIRouter(prefix="/api", tags=["dashboard"])


def get_dashboard_service(request: Request) -> DashboardService:
    """One service per request around the app-wide GA4 connector"""
    return DashboardService(request.app.state.ga4_connector)


@router.get("/dashboard-data")
async def dashboard_data(
    start_date: Optional[str] = Query(None, alias="startDate", description="Start of the selected range (YYYY-MM-DD)"),
    end_date: Optional[str] = Query(None, alias="endDate", description="Anchor date (YYYY-MM-DD), defaults to yesterday"),
    service: DashboardService = Depends(get_dashboard_service),
):
    """
    KPI report for the selected range, month-to-date and year-to-date.

    Individual GA4 failures degrade to zeros or empty lists; only an
    unexpected error in the aggregation itself returns 500.
    """
    try:
        report = await service.build_report(start_date=start_date, end_date=end_date)
    except Exception:
        log.exception("Dashboard endpoint error")
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    return report.model_dump(exclude_none=True)
