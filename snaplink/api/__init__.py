"""API package for the snaplink application.

This package contains the API layer components including routes,
request/response schemas, and dependency providers.
"""

from snaplink.api.routes import api_router

__all__ = ["api_router"]
