"""Health check endpoint — no dependencies, always available."""

from fastapi import APIRouter, Request

from schoolboard.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Returns the current application health status."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "collections": sorted(request.app.state.fixture_sources),
    }
