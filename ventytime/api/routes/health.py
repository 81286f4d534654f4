"""Health & Readiness Probes — liveness and readiness endpoints.

Invariants:
    - GET /api/health always returns 200 while the process is up
    - GET /api/health/ready returns 503 when the database is unreachable
    - Readiness also reports hub connection count and event cache statistics
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import ventytime.infrastructure.database as db_module
from ventytime import __version__
from ventytime.infrastructure.cache import get_event_cache
from ventytime.infrastructure.notification_hub import hub

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    return {
        "status": "healthy",
        "service": "ventytime-api",
        "version": __version__,
    }


@router.get("/ready")
async def readiness_check():
    manager = db_module.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "hub_connections": hub.connection_count,
        "event_cache": get_event_cache().stats(),
    }
