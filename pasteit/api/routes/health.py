"""
Health check endpoints.
"""

import logging
from typing import Any

from fastapi import APIRouter, Request, Response, status

from pasteit.core import check_database_connection
from pasteit.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns:
        Basic application information and status
    """
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
    }


@router.get("/ready")
async def readiness_check(request: Request, response: Response) -> dict[str, Any]:
    """
    Readiness check.

    Verifies that the store answers; responds 503 when it does not.
    """
    sessionmaker = getattr(request.app.state, "sessionmaker", None)
    db_healthy = await check_database_connection(sessionmaker)

    if not db_healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "status": "ready" if db_healthy else "degraded",
        "app": settings.app_name,
        "version": settings.version,
        "checks": {
            "database": "ok" if db_healthy else "unavailable",
        },
    }
