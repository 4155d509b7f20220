"""Health check and app home endpoints."""

from fastapi import APIRouter

from ..config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Return service health status."""
    return {
        "status": "healthy",
        "service": settings.service_name,
        "environment": settings.environment,
        "timezone": settings.timezone,
    }


@router.get("/")
async def home() -> dict[str, str]:
    """App entry point; only reachable with a session (see the routing guard)."""
    return {
        "service": settings.service_name,
        "todos": "/todos",
        "parse": "/parse",
        "analyze": "/analyze",
    }
