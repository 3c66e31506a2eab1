"""
Data models for the snaplink application.

This module imports and exports all SQLModel models used in the application.
"""

from snaplink.models.url import URLMapping, URLMappingBase

__all__ = [
    "URLMapping",
    "URLMappingBase",
]
