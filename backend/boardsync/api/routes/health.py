"""Health & Readiness Probes: liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 until the board has been loaded once (readiness)
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from boardsync.api.dependencies import get_board_app
from boardsync.services.board_application import BoardApplication

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "boardsync-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(board_app: BoardApplication = Depends(get_board_app)):
    """Readiness probe: the board must have been loaded from the table store."""
    if not board_app.is_ready:
        sync_status = board_app.coordinator.get_sync_status()
        error = sync_status.last_error
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": error.code if error else "board_not_loaded",
            },
        )
    return {"status": "ready", "checks": {"board": "loaded"}}
