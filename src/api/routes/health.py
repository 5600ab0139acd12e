"""Health check endpoints."""

from datetime import datetime

import structlog
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy import text

from api.v1.dependencies import get_resources
from infrastructure.resources import Resources

logger = structlog.get_logger()

router = APIRouter(tags=["health"])

VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None
    cache: str | None = None


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check(request: Request) -> HealthResponse:
    """
    Basic health check for load balancers.

    Returns service status without checking dependencies. Fast and lightweight.
    """
    return HealthResponse(
        status="healthy",
        version=VERSION,
        timestamp=datetime.utcnow().isoformat(),
        environment=request.app.state.settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    resources: Resources = Depends(get_resources),
) -> HealthResponse:
    """
    Detailed health check including database and cache connectivity.

    The service stays usable without the cache, so a cache outage reports
    ``degraded`` rather than ``unhealthy``.
    """
    try:
        async with resources.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception as e:
        logger.warning("health_database_unreachable", error=str(e))
        db_status = f"unhealthy: {type(e).__name__}"

    cache_status = "healthy" if await resources.cache_store.ping() else "unhealthy"

    if db_status != "healthy":
        overall_status = "unhealthy"
    elif cache_status != "healthy":
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    return HealthResponse(
        status=overall_status,
        version=VERSION,
        timestamp=datetime.utcnow().isoformat(),
        environment=resources.settings.app_env,
        database=db_status,
        cache=cache_status,
    )
