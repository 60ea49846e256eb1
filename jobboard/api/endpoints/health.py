"""
Health check endpoints.

Liveness says the process is serving; readiness reflects the last database
connectivity check.
"""

import logging
from typing import Dict
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from jobboard.core.database import Database, get_database

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """
    Basic health check endpoint.

    Returns 200 OK if the service is running.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/health/ready")
def readiness_check(db: Database = Depends(get_database)):
    """
    Readiness check for the process supervisor.

    Re-runs the database connectivity check and returns 503 until it passes.
    """
    if db.health_check():
        return {"status": "ready"}

    logger.warning("Readiness check failed: database unavailable")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready"},
    )
