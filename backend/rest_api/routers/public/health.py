"""
Health check endpoints for the REST API.
Provides basic and detailed health status of the service and its dependencies.
"""

import asyncio

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from shared.config.logging import rest_api_logger as logger
from shared.config.settings import settings
from shared.infrastructure.db import SessionLocal
from shared.infrastructure.events import get_redis_client


router = APIRouter(prefix="/api", tags=["health"])

HEALTH_CHECK_TIMEOUT = 3.0


@router.get("/health")
def health_check():
    """
    Basic health check endpoint.
    Returns service status without checking dependencies.
    """
    return {
        "status": "healthy",
        "service": "rest-api",
        "environment": settings.environment,
    }


def _check_database() -> dict:
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        return {"status": "healthy"}
    except Exception as e:
        logger.warning("Database health check failed", error=str(e))
        return {"status": "unhealthy", "error": str(e)}


async def _check_redis() -> dict:
    if not settings.events_enabled:
        return {"status": "disabled"}
    try:
        redis_client = await get_redis_client()
        await asyncio.wait_for(redis_client.ping(), timeout=HEALTH_CHECK_TIMEOUT)
        return {"status": "healthy"}
    except Exception as e:
        logger.warning("Redis health check failed", error=str(e))
        return {"status": "unhealthy", "error": str(e)}


@router.get("/health/detailed")
async def detailed_health_check():
    """
    Detailed health check that verifies connectivity to dependencies.

    Returns 503 Service Unavailable if the database is down. Redis only
    degrades the status: orders keep working without notifications.
    """
    database = await asyncio.to_thread(_check_database)
    redis_status = await _check_redis()

    if database["status"] != "healthy":
        overall = "unhealthy"
    elif redis_status["status"] == "unhealthy":
        overall = "degraded"
    else:
        overall = "healthy"

    checks = {
        "service": "rest-api",
        "environment": settings.environment,
        "status": overall,
        "dependencies": {"database": database, "redis": redis_status},
    }

    if overall == "unhealthy":
        return JSONResponse(content=checks, status_code=503)
    return checks
