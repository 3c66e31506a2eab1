"""Database base configuration for SQLAlchemy with SQLModel.

This module provides base database configuration for async SQLAlchemy with SQLModel.
It includes:
- Engine configuration per database backend
- Session factory setup
- Idempotent schema creation
- Health check functionality
"""

from typing import Dict
import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.sql import text
from sqlmodel import SQLModel

from snaplink.core.config import settings

# Import models so their tables are registered with SQLModel metadata
from snaplink.models.url import URLMapping  # noqa: F401

logger = logging.getLogger(__name__)


def get_engine_config(database_url: str) -> Dict:
    """Get the engine configuration for the backend named in the URL.

    Returns:
        Dict: Engine configuration parameters for the backend.
    """
    backend = make_url(database_url).get_backend_name()
    if backend == "sqlite":
        return {"echo": settings.DB_ECHO}
    return {
        "echo": settings.DB_ECHO,
        "pool_size": settings.POSTGRES_POOL_SIZE,
        "max_overflow": settings.POSTGRES_POOL_MAX_OVERFLOW,
        "pool_timeout": settings.POSTGRES_POOL_TIMEOUT,
        "pool_recycle": settings.POSTGRES_POOL_RECYCLE,
        "pool_pre_ping": True,
    }


def get_engine(database_url: str, **overrides) -> AsyncEngine:
    """Create and configure an async SQLAlchemy engine.

    Returns:
        AsyncEngine: Configured SQLAlchemy async engine instance.
    """
    engine_config = get_engine_config(database_url)
    engine_config.update(overrides)

    logger.info(f"Creating database engine for {make_url(database_url).render_as_string(hide_password=True)}")

    return create_async_engine(database_url, **engine_config)


def get_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Build the async session factory bound to an engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create the ``urls`` table and its unique index if they do not exist."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database schema is up to date")


async def check_connection(engine: AsyncEngine) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
