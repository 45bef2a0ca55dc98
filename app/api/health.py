"""
Health check and status endpoints
"""
from fastapi import APIRouter, Request
from datetime import datetime
from app.config import get_settings
from app import __version__

settings = get_settings()

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "version": __version__
    }


@router.get("/status")
async def get_status(request: Request):
    """Get system status"""
    connector = getattr(request.app.state, "ga4_connector", None)
    return {
        "app_name": settings.app_name,
        "version": __version__,
        "environment": settings.environment,
        "ga4": {
            "property_id": settings.ga4_property_id or None,
            "job_page_keyword": settings.job_page_keyword,
            "connector": connector.get_status() if connector else None,
        },
        "timestamp": datetime.utcnow().isoformat()
    }
