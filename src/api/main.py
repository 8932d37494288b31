"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.responses import JSONResponse

from access.presentation import router as access_router
from dashboard.presentation import router as dashboard_router
from infrastructure.database import check_database_health, close_database_connections
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import get_session_settings, get_settings
from infrastructure.version import __version__
from site_health.presentation import router as site_health_router

@asynccontextmanager
async def portal_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Startup warning when no cookie signing key is set
    - Database engine disposal on shutdown
    """
    configure_logging()
    probe = DefaultStartupProbe()

    if not get_session_settings().signing_configured:
        probe.insecure_session_secret()
    probe.application_started(version=__version__)

    yield

    await close_database_connections()
    probe.application_stopped()


app = FastAPI(
    title=get_settings().app_name,
    description="Tenant access core of the client portal",
    version=__version__,
    lifespan=portal_lifespan,
)

app.include_router(access_router)
app.include_router(dashboard_router)
app.include_router(site_health_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db() -> JSONResponse:
    """Check database connection health."""
    healthy = await check_database_health()
    return JSONResponse(
        status_code=status.HTTP_200_OK
        if healthy
        else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "ok" if healthy else "unhealthy", "connected": healthy},
    )
