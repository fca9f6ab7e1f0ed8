# troop_manager/api/routes/health.py
from fastapi import APIRouter
from typing import Dict, Any
from loguru import logger

from ...config.database import db_connection
from ...config.settings import settings
from ...utilities.helpers.date_utils import utc_now_iso

router = APIRouter()

@router.get("")
async def health_check() -> Dict[str, Any]:
    """Basic liveness check"""
    return {
        "status": "OK",
        "service": "scout-troop-management-api",
        "timestamp": utc_now_iso(),
        "environment": settings.ENVIRONMENT,
    }

@router.get("/ready")
async def readiness_check() -> Dict[str, Any]:
    """Readiness check with database connectivity"""
    db_healthy = db_connection.health_check()
    if not db_healthy:
        logger.warning("Readiness check failed: MongoDB unreachable")

    return {
        "status": "ready" if db_healthy else "not_ready",
        "database": "connected" if db_healthy else "disconnected",
        "ready": db_healthy,
    }
