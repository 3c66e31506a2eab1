"""Base repository definitions for the snaplink application.

This module provides the contract every URL store adapter implements, plus the
repository-level exceptions the service layer relies on to tell a uniqueness
conflict apart from any other storage failure.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional
import logging

from snaplink.models.url import URLMapping

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Base exception for repository errors."""
    pass


class DuplicateEntityError(RepositoryError):
    """Exception raised when a unique constraint is violated."""

    def __init__(self, field_name: str, value: Any):
        self.field_name = field_name
        self.value = value
        super().__init__(f"URLMapping with {field_name}={value} already exists")


class StoreConfigurationError(RepositoryError):
    """Raised when no usable store is configured."""
    pass


class BaseURLRepository(ABC):
    """
    Contract for persisting ``code -> long_url`` mappings.

    Implementations must enforce uniqueness of ``code`` at insert time and
    report a violation as DuplicateEntityError; every other failure is a
    RepositoryError.
    """

    backend_name: str = "unknown"

    async def connect(self) -> None:
        """Open resources and create the schema if the backend allows it."""

    async def close(self) -> None:
        """Release resources held by the repository."""

    @abstractmethod
    async def ping(self) -> bool:
        """Return True when the store is reachable."""

    @abstractmethod
    async def exists(self, code: str) -> bool:
        """
        Check whether a mapping with this code exists.

        Raises:
            RepositoryError: On store errors
        """

    @abstractmethod
    async def create(self, code: str, long_url: str) -> URLMapping:
        """
        Insert a new mapping.

        Raises:
            DuplicateEntityError: If the code is already taken
            RepositoryError: On other store errors
        """

    @abstractmethod
    async def get_long_url(self, code: str) -> Optional[str]:
        """
        Return the long URL stored for ``code``, or None if there is none.

        Raises:
            RepositoryError: On store errors
        """
