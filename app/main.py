"""
KPI Dashboard
Main FastAPI application
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.middleware.gzip import GZipMiddleware
from contextlib import asynccontextmanager

from app.config import get_settings
from app.utils.logger import log
from app import __version__

# Import routers
from app.api import dashboard, health
from app.connectors.ga4_connector import GA4Connector

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup
    log.info(f"Starting {settings.app_name} v{__version__}")
    log.info(f"Environment: {settings.environment}")

    # Bootstrap credential files from env vars (for Render / PaaS)
    from app.utils.credentials import bootstrap_credentials
    try:
        bootstrap_credentials()
    except OSError as e:
        log.error(f"Credential bootstrap error: {str(e)}")

    # One GA4 client for the process, shared read-only by every request
    connector = GA4Connector()
    if not await connector.connect():
        log.warning("GA4 client unavailable at startup, will retry on first request")
    app.state.ga4_connector = connector

    yield

    # Shutdown
    log.info("Shutting down application")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=__version__,
    description="""
    KPI Dashboard API

    Aggregates Google Analytics 4 traffic and engagement metrics for the
    selected day, month-to-date and year-to-date into one report, alongside
    business KPIs that are not sourced from GA4.
    """,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Gzip compression
app.add_middleware(GZipMiddleware, minimum_size=500)

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(dashboard.router)


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception):
    """Any error outside a route's own guard, e.g. while resolving dependencies"""
    log.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


@app.get("/robots.txt", response_class=PlainTextResponse)
async def robots_txt():
    """Block all crawlers"""
    return "User-agent: *\nDisallow: /\n"


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
