"""
Health check endpoints
"""

from fastapi import APIRouter

from app.core.cache import cache_manager
from app.core.config import settings
from app.core.database import DatabaseHealthCheck

router = APIRouter()


@router.get("/health")
async def health_check():
    """Service, database and cache status"""
    database = DatabaseHealthCheck.check_connection()
    return {
        "status": "healthy" if database["status"] == "healthy" else "degraded",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "checks": {
            "database": database,
            "cache": "connected" if cache_manager.connected else "disabled",
        },
    }
