"""Health & Readiness — liveness and readiness endpoints.

Invariants:
    - GET /_health and /_health/ always return 200 if process is up (liveness)
    - GET /_health/ready returns 503 until the store has been loaded (readiness)

Design Decisions:
    - Underscore prefix: collection names come from user data, `_health` is
      registered before the catch-all resource routes
"""

import logging
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from docstore import __version__

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/_health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
@router.get("/", status_code=status.HTTP_200_OK, include_in_schema=False)
async def health_check():
    """Basic liveness check. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "docstore",
        "version": __version__,
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness check: the store must be loaded."""
    service = getattr(request.app.state, "service", None)
    if service is None:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "store_not_loaded",
            },
        )
    return {
        "status": "ready",
        "checks": {"store": "loaded", "collections": len(service.collections())},
    }
