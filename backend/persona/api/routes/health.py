"""Health Probes — liveness and readiness for the profile service.

Invariants:
    - GET /health/ answers 200 whenever the process can serve requests
    - GET /health/ready answers 503 until the lifespan has created the
      session manager, and whenever SELECT 1 fails

Design Decisions:
    - db_manager looked up on the database module per request: the lifespan
      assigns it after this router is imported
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from persona.infrastructure import database
from persona.infrastructure.observability import SERVICE_NAME, SERVICE_VERSION

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness():
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
    }


@router.get("/ready")
async def readiness():
    """Ready only when the profile database answers."""
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
