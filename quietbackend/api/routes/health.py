"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the post store is unreachable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from quietbackend.api.dependencies import get_store
from quietbackend.config import get_settings
from quietbackend.core.errors import TwoFaceError
from quietbackend.core.repository_protocols import PostStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "healthy", "service": get_settings().service_name}


@router.get("/ready")
async def readiness_check(store: PostStore = Depends(get_store)):
    """Readiness probe, including store connectivity."""
    try:
        store_ok = await store.health_check()
    except TwoFaceError as e:
        logger.error(f"Store health check failed: {e.internal}")
        store_ok = False
    if not store_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "store_unavailable",
            },
        )
    return {"status": "ready", "checks": {"store": "healthy"}}
