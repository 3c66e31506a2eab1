"""Short code redirection endpoint."""

from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, status
from starlette.responses import Response

from snaplink.api.dependencies import get_shortener_service
from snaplink.core.telemetry import redirects_counter
from snaplink.services.exceptions import URLLookupError, URLNotFoundError
from snaplink.services.shortener import ShortenedURLService

# Create router with tags
router = APIRouter(tags=["redirect"])


def location_header(long_url: str) -> str:
    """Percent-encode non-ASCII characters only; ASCII passes through unchanged."""
    return "".join(ch if ord(ch) < 0x80 else quote(ch, safe="") for ch in long_url)


@router.get(
    "/{short_code}",
    status_code=status.HTTP_302_FOUND,
    responses={
        302: {"description": "Redirect to the stored URL"},
        404: {"description": "Unknown short code"},
    },
)
async def redirect_to_original_url(
    short_code: str,
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    """Redirect to the long URL stored for ``short_code``."""
    try:
        long_url = await shortener_service.get_url_for_redirect(short_code)
    except URLNotFoundError:
        raise HTTPException(status_code=404, detail="URL not found")
    except URLLookupError:
        raise HTTPException(status_code=500, detail="Could not resolve short URL")

    redirects_counter.add(1)
    # RedirectResponse would re-quote ASCII such as | { } " and change the stored URL
    return Response(
        status_code=status.HTTP_302_FOUND,
        headers={"location": location_header(long_url)},
    )
