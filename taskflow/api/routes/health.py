"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /api/v1/health/ always returns 200 if process is up (liveness)
    - GET /api/v1/health/ready returns 503 if the database is unreachable or the
      event bus is not running (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from taskflow.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "taskflow-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe — database connectivity and event bus state."""
    db_ok = await database.db_manager.health_check() if database.db_manager else False
    runtime = getattr(request.app.state, "runtime", None)
    bus_ok = bool(runtime and runtime.event_bus.is_running)
    if not (db_ok and bus_ok):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "checks": {
                    "database": "healthy" if db_ok else "unavailable",
                    "event_bus": "running" if bus_ok else "stopped",
                },
            },
        )
    return {"status": "ready", "checks": {"database": "healthy", "event_bus": "running"}}
