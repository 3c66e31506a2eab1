"""Routes package initialization.

This module exports the route collection for the application.
"""

from fastapi import APIRouter

from snaplink.api.routes import health, pages, redirect, shortener
from snaplink.core.config import settings

# Create root router
api_router = APIRouter()

api_router.include_router(shortener.router)

# Health checks live under the API prefix so they never shadow a short code
api_router.include_router(
    health.router,
    prefix=settings.API_PREFIX
)

api_router.include_router(pages.router)

# Include redirect routes last at the root path (no prefix)
# This makes short URLs available directly at /{short_code}
api_router.include_router(
    redirect.router
)

__all__ = ["api_router"]
