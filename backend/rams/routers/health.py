"""Health check endpoints."""

from fastapi import APIRouter

from rams.services.ai import is_ai_configured

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict:
    """Liveness check; reports whether AI augmentation is available."""
    return {
        "status": "healthy",
        "ai": "configured" if is_ai_configured() else "not_configured",
        "service": "rams-api",
        "version": "0.1.0",
    }
