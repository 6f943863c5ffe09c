"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text

from app.core.dependencies import get_db, get_site_config
from app.state.site_config import SiteConfigLoader


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, db: Session, site_config: SiteConfigLoader):
        self._db = db
        self._site_config = site_config

    def check_database(self) -> str:
        """Check database connectivity."""
        try:
            self._db.execute(text("SELECT 1"))
            return "healthy"
        except SQLAlchemyError:
            return "unhealthy"

    def check_site_config(self) -> str:
        if self._site_config.error:
            return "error"
        return "loaded" if self._site_config.is_loaded else "not_loaded"

    def get_health(self) -> dict:
        """Get full health status."""
        db_status = self.check_database()

        overall = "healthy" if db_status == "healthy" else "degraded"

        return {
            "status": overall,
            "components": {
                "api": "healthy",
                "database": db_status,
                "site_config": self.check_site_config()
            }
        }


@router.get("")
async def health_check(
    db: Session = Depends(get_db),
    site_config: SiteConfigLoader = Depends(get_site_config)
):
    """
    Health check endpoint.

    Returns system status including API, database, and site configuration.
    """
    controller = HealthController(db, site_config)
    return controller.get_health()


@router.get("/ready")
async def readiness_check():
    """Readiness probe for container orchestration."""
    return {"ready": True}


@router.get("/live")
async def liveness_check():
    """Liveness probe for container orchestration."""
    return {"alive": True}
