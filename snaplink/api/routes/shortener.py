"""Short URL creation endpoint."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from snaplink.api import schemas
from snaplink.api.dependencies import get_base_url, get_request_origin, get_shortener_service
from snaplink.core.telemetry import links_created_counter
from snaplink.services.exceptions import URLCreationError, URLValidationError
from snaplink.services.links import RequestOrigin, build_short_url, to_display_url
from snaplink.services.shortener import ShortenedURLService

router = APIRouter(tags=["shortener"])


@router.post(
    "/shorten",
    response_model=schemas.ShortenResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": schemas.ErrorResponse, "description": "Invalid URL, scheme or host"},
        500: {"model": schemas.ErrorResponse, "description": "Store failure"},
    }
)
async def create_short_url(
    url_data: schemas.ShortenRequest,
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
    origin: RequestOrigin = Depends(get_request_origin),
    base_url: Optional[str] = Depends(get_base_url),
):
    try:
        mapping = await shortener_service.create_short_url(url_data.url)
    except URLValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except URLCreationError:
        raise HTTPException(status_code=500, detail="Could not create short URL")

    links_created_counter.add(1)
    short_url = build_short_url(mapping.code, origin, base_url)
    return schemas.ShortenResponse(
        short_url=short_url,
        display_url=to_display_url(short_url),
    )


@router.api_route(
    "/shorten",
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def shorten_method_not_allowed():
    """Answer every non-POST method on /shorten before the redirect route sees it."""
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
        headers={"Allow": "POST"},
    )
