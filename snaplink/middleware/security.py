"""Security response headers applied to every response."""

from typing import Dict, List, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from snaplink.core.config import settings


def build_content_security_policy(
    style_origins: List[str],
    font_origins: List[str],
    store_origin: Optional[str] = None,
) -> str:
    """Assemble the CSP: everything from self, plus the allowlisted origins."""
    connect_sources = ["'self'"] + ([store_origin] if store_origin else [])
    directives = [
        ("default-src", ["'self'"]),
        ("script-src", ["'self'"]),
        ("style-src", ["'self'", "'unsafe-inline'"] + style_origins),
        ("font-src", ["'self'"] + font_origins),
        ("connect-src", connect_sources),
        ("frame-ancestors", ["'none'"]),
    ]
    return "; ".join(f"{name} {' '.join(sources)}" for name, sources in directives)


def build_security_headers() -> Dict[str, str]:
    return {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "X-XSS-Protection": "1; mode=block",
        "Strict-Transport-Security": f"max-age={settings.HSTS_MAX_AGE}; includeSubDomains",
        "Content-Security-Policy": build_content_security_policy(
            settings.CSP_STYLE_ORIGINS,
            settings.CSP_FONT_ORIGINS,
            settings.STORE_ORIGIN,
        ),
    }


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that stamps the fixed security headers on each response."""

    def __init__(self, app: ASGIApp, headers: Optional[Dict[str, str]] = None) -> None:
        super().__init__(app)
        self.headers = headers or build_security_headers()

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers[name] = value
        return response
