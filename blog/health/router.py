"""Liveness, readiness and general health endpoints."""

from typing import Any

from cassandra import DriverException
from fastapi import APIRouter, Request

from blog.config import get_settings
from blog.core.logging import get_logger
from blog.core.redis import get_redis


logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])

PING_QUERY = "SELECT release_version FROM system.local"


async def _database_reachable(request: Request) -> bool:
    session = getattr(request.app.state, "cassandra_session", None)
    if session is None:
        return False
    try:
        await session.aexecute(PING_QUERY)
    except DriverException as e:
        logger.warning("readiness_check_failed", error=str(e))
        return False
    return True


@router.get("/live")
async def liveness() -> dict[str, str]:
    return {"status": "alive"}


@router.get("/ready")
async def readiness(request: Request) -> dict[str, Any]:
    """Ready once Cassandra answers. Redis is reported but never required."""
    database = await _database_reachable(request)
    return {
        "status": "ready" if database else "degraded",
        "environment": get_settings().environment,
        "database": database,
        "rate_limiting": get_redis() is not None,
    }


@router.get("")
async def health() -> dict[str, str]:
    settings = get_settings()
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }
