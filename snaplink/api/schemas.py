"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization.
"""

from typing import Optional

from pydantic import BaseModel


class ShortenRequest(BaseModel):
    """Request schema for creating a short URL.

    ``url`` is kept as a plain string: scheme coercion and validation happen
    in the service layer so the client gets the same short diagnostics for
    every rejected form.
    """
    url: str


class ShortenResponse(BaseModel):
    """Response schema for a created short URL."""
    short_url: str
    display_url: str


class ErrorResponse(BaseModel):
    """Response schema for errors."""
    detail: str
    error_id: Optional[str] = None
