"""Repository layer for the snaplink application.

This module provides the URL store adapters and picks the one the
configuration asks for.
"""

from snaplink.core.config import Settings, StoreBackend
from snaplink.repositories.base import (
    BaseURLRepository,
    DuplicateEntityError,
    RepositoryError,
    StoreConfigurationError,
)
from snaplink.repositories.rest_repository import RESTURLRepository
from snaplink.repositories.url_repository import SQLURLRepository


def create_url_repository(config: Settings) -> BaseURLRepository:
    """Build the store adapter selected by SUPABASE_URL, DATABASE_URL or DB_PATH."""
    backend = config.STORE_BACKEND
    if backend is StoreBackend.REST:
        if not config.SUPABASE_KEY:
            raise StoreConfigurationError("SUPABASE_KEY is required when SUPABASE_URL is set")
        return RESTURLRepository(
            base_url=config.SUPABASE_URL,
            api_key=config.SUPABASE_KEY,
            table=config.SUPABASE_TABLE,
            timeout=config.STORE_TIMEOUT,
        )
    if backend is StoreBackend.SQL:
        return SQLURLRepository(database_url=config.SQLALCHEMY_DATABASE_URI)
    raise StoreConfigurationError(
        "No store configured: set SUPABASE_URL and SUPABASE_KEY, DATABASE_URL, or DB_PATH"
    )


__all__ = [
    # Base classes and exceptions
    "BaseURLRepository",
    "RepositoryError",
    "DuplicateEntityError",
    "StoreConfigurationError",

    # Concrete repositories
    "SQLURLRepository",
    "RESTURLRepository",
    "create_url_repository",
]
