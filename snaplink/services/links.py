"""Public short URL construction.

Short URLs are either anchored at the configured BASE_URL or rebuilt from the
request that created them, honouring TLS termination at a reverse proxy.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RequestOrigin:
    """What the shorten request tells us about how clients reach the service."""

    host: str
    is_tls: bool = False
    forwarded_proto: Optional[str] = None

    @property
    def scheme(self) -> str:
        if self.is_tls or (self.forwarded_proto or "").strip().lower() == "https":
            return "https"
        return "http"


def build_short_url(code: str, origin: RequestOrigin, base_url: Optional[str] = None) -> str:
    """
    Build the externally visible URL for ``code``.

    Args:
        code: The allocated short code
        origin: Host and transport details of the current request
        base_url: Configured public origin; wins over the request when set

    Returns:
        str: Absolute short URL
    """
    if base_url:
        return f"{base_url.rstrip('/')}/{code}"
    return f"{origin.scheme}://{origin.host}/{code}"


def to_display_url(short_url: str) -> str:
    """Strip a leading http:// or https:// for presentation."""
    for prefix in ("https://", "http://"):
        if short_url.startswith(prefix):
            return short_url[len(prefix):]
    return short_url
