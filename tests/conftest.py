"""Test fixtures for the URL shortener application."""

import os

# Configure the environment before the application settings are loaded
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_TO_FILE"] = "false"
os.environ["OTEL_ENABLED"] = "false"
os.environ["REQUEST_LOGGING_ENABLED"] = "true"
for _name in ("BASE_URL", "SUPABASE_URL", "SUPABASE_KEY", "DATABASE_URL", "DB_PATH"):
    os.environ.pop(_name, None)

from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient

from snaplink.main import app as main_app
from snaplink.repositories.url_repository import SQLURLRepository
from snaplink.services.shortener import ShortenedURLService


@pytest.fixture
def database_url(tmp_path) -> str:
    """File-backed SQLite database unique to each test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'snaplink-test.db'}"


@pytest_asyncio.fixture
async def sql_repository(database_url) -> AsyncGenerator[SQLURLRepository, None]:
    """Connected SQL repository with a fresh schema."""
    repository = SQLURLRepository(database_url=database_url)
    await repository.connect()
    try:
        yield repository
    finally:
        await repository.close()


@pytest.fixture
def shortener_service(sql_repository) -> ShortenedURLService:
    """Shortener service backed by the SQL repository."""
    return ShortenedURLService(url_repository=sql_repository)


@pytest.fixture
def test_app(database_url) -> Generator[FastAPI, None, None]:
    """Application wired to a throwaway store; connected by the startup event."""
    app = main_app
    app.state.url_repository = SQLURLRepository(database_url=database_url)
    yield app
    app.dependency_overrides.clear()
    app.state.url_repository = None


@pytest.fixture
def client(test_app) -> Generator[TestClient, None, None]:
    """Return FastAPI TestClient instance."""
    with TestClient(test_app) as test_client:
        yield test_client
