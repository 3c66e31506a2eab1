"""
Input Validators and Sanitizers

This module turns raw user input into URLs and short codes the rest of the
service can trust.

- normalize_url: coerces a missing scheme to https and rejects anything that
  is not an absolute http(s) URL with a dotted host.
- sanitize_short_code: screens path segments before they reach the store.
"""

from typing import Optional
from urllib.parse import urlsplit

from snaplink.core.config import settings
from snaplink.services.exceptions import InvalidHostError, InvalidSchemeError, InvalidURLError

ALLOWED_SCHEMES = ("http", "https")
DEFAULT_SCHEME_PREFIX = "https://"


def normalize_url(raw_url: Optional[str], max_length: Optional[int] = None) -> str:
    """
    Normalize and validate a submitted long URL.

    Args:
        raw_url: The URL exactly as the client sent it
        max_length: Longest accepted URL (defaults to URL_MAX_LENGTH)

    Returns:
        The normalized URL, which is stored and redirected to verbatim

    Raises:
        InvalidURLError: Empty, too long, contains whitespace, or unparsable
        InvalidSchemeError: Scheme other than http or https
        InvalidHostError: Host is empty or has no dot (e.g. ``localhost``)
    """
    if max_length is None:
        max_length = settings.URL_MAX_LENGTH

    url = (raw_url or "").strip()
    if not url or len(url) > max_length:
        raise InvalidURLError()
    if any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in url):
        raise InvalidURLError()

    if not url.startswith(("http://", "https://")):
        url = DEFAULT_SCHEME_PREFIX + url

    try:
        parts = urlsplit(url)
        # Accessing port validates it
        parts.port
    except ValueError:
        raise InvalidURLError()

    if parts.scheme not in ALLOWED_SCHEMES:
        raise InvalidSchemeError()

    host = parts.netloc.rpartition("@")[2]
    if not host or "." not in host:
        raise InvalidHostError()

    return url


def sanitize_short_code(short_code: str) -> Optional[str]:
    """
    Validate that a path segment could be a short code.

    Short codes only contain characters from URL_CODE_CHARS, so anything else
    cannot exist in the store and never needs a lookup. This also keeps
    arbitrary input out of REST store filters.

    Returns:
        The code if it is well formed, None otherwise
    """
    if not short_code or len(short_code) > 32:
        return None
    alphabet = settings.URL_CODE_CHARS
    if any(ch not in alphabet for ch in short_code):
        return None
    return short_code
