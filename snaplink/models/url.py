"""URL mapping data models.

This module defines the URLMapping model for storing short code to long URL
mappings in the database.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime, Text, func
from sqlmodel import Field, SQLModel


class URLMappingBase(SQLModel):
    """Base model for URL mapping data."""

    code: str = Field(
        description="Unique short code used in the short URL path",
        unique=True,   # Creates necessary index
        nullable=False,
        max_length=32,
    )
    long_url: str = Field(
        description="The normalized destination URL",
        sa_type=Text,
    )


class URLMapping(URLMappingBase, table=True):
    """
    Mapping between a short code and the URL it redirects to.

    Rows are written once by the allocator and never updated afterwards.
    """

    __tablename__ = "urls"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, server_default=func.now()),
        description="Timestamp when this mapping was created"
    )

