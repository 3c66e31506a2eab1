"""Session management for database operations.

This module provides utilities for handling SQLAlchemy async sessions
with proper lifecycle management, error handling, and transaction support.
"""

from typing import AsyncGenerator
import logging
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)


class SessionManager:
    """Session manager for managing database operations with context manager support.

    Provides a higher-level API for session management with automatic transaction handling.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Plain session for read-only work; always closed on exit."""
        session = self.session_factory()
        try:
            yield session
        finally:
            await session.close()

    @asynccontextmanager
    async def transaction_context(self) -> AsyncGenerator[AsyncSession, None]:
        """Context manager for a database session with transaction support.

        Automatically commits on successful completion or rolls back on error.

        Yields:
            AsyncSession: SQLAlchemy async session

        Example:
            ```python
            async with manager.transaction_context() as session:
                session.add(URLMapping(code="aZ3kP9", long_url="https://example.com"))
                # Commits automatically on context exit if no errors
            ```
        """
        async with self.session() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                await session.rollback()
                logger.debug(f"Transaction rolled back: {e}")
                raise
