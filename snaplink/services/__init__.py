"""Service layer for the snaplink application.

This package contains the business logic of the application: URL
normalization, short code allocation and resolution, and short URL building.
"""

from snaplink.services.shortener import ShortenedURLService

__all__ = ["ShortenedURLService"]
