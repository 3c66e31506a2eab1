"""Health check endpoints for monitoring application status."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from snaplink.api.dependencies import get_url_repository
from snaplink.core.config import settings
from snaplink.repositories.base import BaseURLRepository

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    summary="Get system health status",
    response_description="Health status of the service and its store"
)
async def health_check(url_repo: BaseURLRepository = Depends(get_url_repository)):
    """Check that the URL store answers."""
    healthy = await url_repo.ping()
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "version": settings.APP_VERSION,
            "store": url_repo.backend_name,
        },
    )


@router.get(
    "/health/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
    response_description="Application liveness status"
)
async def liveness_probe():
    """Simple check that application is running."""
    return {"alive": True}
