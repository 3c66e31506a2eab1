"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to access the URL store, service instances and request-derived values.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from snaplink.core.config import settings
from snaplink.repositories.base import BaseURLRepository
from snaplink.services.links import RequestOrigin
from snaplink.services.shortener import ShortenedURLService


def get_url_repository(request: Request) -> BaseURLRepository:
    """Get the process-wide URL repository opened at startup."""
    repository = getattr(request.app.state, "url_repository", None)
    if repository is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is starting up"
        )
    return repository


def get_shortener_service(
    url_repo: BaseURLRepository = Depends(get_url_repository),
) -> ShortenedURLService:
    """Get an instance of the URL shortening service."""
    return ShortenedURLService(url_repository=url_repo)


def get_base_url() -> Optional[str]:
    """Get the configured public origin for short links, if any."""
    return settings.BASE_URL


def get_request_origin(request: Request) -> RequestOrigin:
    """Describe how the client reached us, for building short URLs."""
    host = request.headers.get("host") or request.url.netloc
    return RequestOrigin(
        host=host,
        is_tls=request.url.scheme == "https",
        forwarded_proto=request.headers.get("x-forwarded-proto"),
    )
