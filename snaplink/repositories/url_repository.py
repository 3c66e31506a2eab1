"""SQL repository for the snaplink application.

This module provides the SQLURLRepository class, the relational adapter for the
URL store. It works against any async SQLAlchemy engine (SQLite via aiosqlite,
PostgreSQL via asyncpg) and relies on the unique index on ``urls.code``.
"""

from typing import Optional
import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from snaplink.db.base import check_connection, create_schema, get_engine, get_session_factory
from snaplink.db.session import SessionManager
from snaplink.models.url import URLMapping
from snaplink.repositories.base import BaseURLRepository, DuplicateEntityError, RepositoryError

logger = logging.getLogger(__name__)


def _is_unique_violation(error: IntegrityError) -> bool:
    message = str(error.orig if error.orig is not None else error).lower()
    return "unique" in message or "duplicate key" in message


class SQLURLRepository(BaseURLRepository):
    """
    Repository for URLMapping rows in a relational database.

    The engine is created once and shared by every request; each operation
    runs in its own short-lived session.
    """

    backend_name = "sql"

    def __init__(self, database_url: Optional[str] = None, engine: Optional[AsyncEngine] = None):
        """
        Initialize the repository.

        Args:
            database_url: Async SQLAlchemy URL used to build the engine
            engine: Pre-built engine, takes precedence over database_url
        """
        if engine is None:
            if not database_url:
                raise ValueError("SQLURLRepository needs a database_url or an engine")
            engine = get_engine(database_url)
        self.engine = engine
        self.sessions = SessionManager(get_session_factory(engine))

    async def connect(self) -> None:
        try:
            await create_schema(self.engine)
        except SQLAlchemyError as e:
            logger.error(f"Error creating schema: {e}")
            raise RepositoryError(f"Database error creating schema: {e}") from e

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")

    async def ping(self) -> bool:
        return await check_connection(self.engine)

    async def exists(self, code: str) -> bool:
        try:
            async with self.sessions.session() as db:
                query = select(func.count()).select_from(URLMapping).where(URLMapping.code == code)
                result = await db.execute(query)
                return result.scalar_one() > 0
        except SQLAlchemyError as e:
            logger.error(f"Error checking existence of code {code}: {e}")
            raise RepositoryError(f"Database error checking code existence: {e}") from e

    async def create(self, code: str, long_url: str) -> URLMapping:
        entity = URLMapping(code=code, long_url=long_url)
        try:
            async with self.sessions.transaction_context() as db:
                db.add(entity)
                await db.flush()
            return entity
        except IntegrityError as e:
            if _is_unique_violation(e):
                raise DuplicateEntityError("code", code) from e
            logger.error(f"Integrity error creating mapping: {e}")
            raise RepositoryError(f"Database error creating mapping: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating mapping: {e}")
            raise RepositoryError(f"Database error creating mapping: {e}") from e

    async def get_long_url(self, code: str) -> Optional[str]:
        try:
            async with self.sessions.session() as db:
                query = select(URLMapping.long_url).where(URLMapping.code == code)
                result = await db.execute(query)
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving URL by code {code}: {e}")
            raise RepositoryError(f"Error retrieving URL by code: {e}") from e
