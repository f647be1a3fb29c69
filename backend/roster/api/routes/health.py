"""Health Probe: liveness plus database reachability.

Invariants:
    - GET /health returns 200 only when the database answers SELECT 1
    - Returns 500 (not 503) when the database is unreachable or not initialized
    - Not behind the rate limiter (lives outside /api)
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

import roster.infrastructure.database as database

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request):
    """Liveness probe that also pings the database."""
    service = request.app.state.settings.service_name
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "status": "unhealthy",
                "error": "Database connection error",
                "service": service,
            },
        )
    return {"status": "healthy", "database": "connected", "service": service}
