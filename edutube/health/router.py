"""Health check endpoints."""

from fastapi import APIRouter, Request

from edutube.config import get_settings


router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live")
async def liveness() -> dict[str, str]:
    """Liveness probe - checks if the application is running."""
    return {"status": "alive"}


@router.get("/ready")
async def readiness(request: Request) -> dict[str, str | bool]:
    """Readiness probe - ready once the progress store is initialized."""
    settings = get_settings()
    store = getattr(request.app.state, "progress_store", None)
    return {
        "status": "ready" if store is not None else "starting",
        "environment": settings.environment,
        "debug": settings.debug,
        "store_backend": getattr(request.app.state, "progress_store_backend", "none"),
    }


@router.get("")
async def health() -> dict[str, str]:
    """General health check endpoint."""
    settings = get_settings()
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }
