from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException

from collab_chat.api.dependencies import get_settings, get_store
from collab_chat.core.config import Settings
from collab_chat.database.base import KeyValueStore

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(
    store: KeyValueStore = Depends(get_store),
    config: Settings = Depends(get_settings)
):
    """Application health check endpoint"""
    store_health = await store.health_check()

    overall_status = "healthy" if store_health.get("status") == "healthy" else "unhealthy"

    return {
        "status": overall_status,
        "timestamp": datetime.now(timezone.utc),
        "store": store_health,
        "service": config.app_name
    }


@router.get("/health/ready")
async def readiness_check(store: KeyValueStore = Depends(get_store)):
    """Kubernetes readiness probe endpoint"""
    if not await store.ping():
        raise HTTPException(
            status_code=503,
            detail="Service not ready - key-value store unreachable"
        )

    return {"status": "ready"}


@router.get("/health/live")
async def liveness_check():
    """Kubernetes liveness probe endpoint"""
    return {"status": "alive", "timestamp": datetime.now(timezone.utc)}
