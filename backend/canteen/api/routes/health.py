"""Health Routes — process liveness and database readiness for the canteen API.

Invariants:
    - GET /health/ answers 200 without touching the database
    - GET /health/ready is 503 only when the database check fails
    - Gateway and image-host settings are reported, never contacted over the network
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from canteen.config import get_settings
from canteen.infrastructure import database

router = APIRouter(prefix="/api/v1/health", tags=["health"])


def _integrations() -> dict[str, str]:
    settings = get_settings()
    payments = settings.razorpay_key_id and settings.razorpay_key_secret
    images = settings.cloudinary_cloud_name and settings.cloudinary_api_key
    return {
        "payments": "configured" if payments else "not_configured",
        "images": "configured" if images else "not_configured",
    }


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness():
    return {"status": "healthy", "service": "canteen-api", "version": "1.0.0"}


@router.get("/ready")
async def readiness():
    """Database round-trip plus which external integrations have credentials."""
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy", **_integrations()},
    }
