"""Tests for the SQL URL repository."""

import asyncio

import pytest

from snaplink.repositories.base import DuplicateEntityError
from snaplink.repositories.url_repository import SQLURLRepository
from tests.utils import random_string, random_url


@pytest.mark.repository
class TestSQLURLRepository:
    """Test suite for the SQL URL repository."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, sql_repository):
        """Test mapping creation and lookup."""
        long_url = random_url()

        mapping = await sql_repository.create("testcr", long_url)

        assert mapping.code == "testcr"
        assert mapping.long_url == long_url
        assert await sql_repository.get_long_url("testcr") == long_url

    @pytest.mark.asyncio
    async def test_create_duplicate_code(self, sql_repository):
        """A second insert under the same code reports a duplicate."""
        await sql_repository.create("dupl01", random_url())

        with pytest.raises(DuplicateEntityError) as excinfo:
            await sql_repository.create("dupl01", random_url())

        assert excinfo.value.field_name == "code"
        assert excinfo.value.value == "dupl01"

    @pytest.mark.asyncio
    async def test_duplicate_keeps_first_mapping(self, sql_repository):
        """A rejected insert leaves the original mapping untouched."""
        await sql_repository.create("first1", "https://first.example")

        with pytest.raises(DuplicateEntityError):
            await sql_repository.create("first1", "https://second.example")

        assert await sql_repository.get_long_url("first1") == "https://first.example"

    @pytest.mark.asyncio
    async def test_exists(self, sql_repository):
        await sql_repository.create("exist1", random_url())

        assert await sql_repository.exists("exist1") is True
        assert await sql_repository.exists("nope01") is False

    @pytest.mark.asyncio
    async def test_get_nonexistent(self, sql_repository):
        """Test retrieving an unknown code."""
        assert await sql_repository.get_long_url("nonexistent") is None

    @pytest.mark.asyncio
    async def test_codes_are_case_sensitive(self, sql_repository):
        await sql_repository.create("AbCdEf", "https://upper.example")

        assert await sql_repository.get_long_url("AbCdEf") == "https://upper.example"
        assert await sql_repository.get_long_url("abcdef") is None

    @pytest.mark.asyncio
    async def test_concurrent_inserts_same_code(self, sql_repository):
        """Exactly one of several racing inserts for one code wins."""
        results = await asyncio.gather(
            *(sql_repository.create("race01", random_url()) for _ in range(5)),
            return_exceptions=True,
        )

        winners = [r for r in results if not isinstance(r, Exception)]
        losers = [r for r in results if isinstance(r, DuplicateEntityError)]
        assert len(winners) == 1
        assert len(losers) == 4
        assert await sql_repository.get_long_url("race01") == winners[0].long_url

    @pytest.mark.asyncio
    async def test_ping(self, sql_repository):
        assert await sql_repository.ping() is True

    @pytest.mark.asyncio
    async def test_mappings_survive_reconnect(self, database_url):
        """Data written before a restart is still resolvable afterwards."""
        code = random_string(6)
        first = SQLURLRepository(database_url=database_url)
        await first.connect()
        await first.create(code, "https://persist.example")
        await first.close()

        second = SQLURLRepository(database_url=database_url)
        await second.connect()
        try:
            assert await second.get_long_url(code) == "https://persist.example"
        finally:
            await second.close()

    def test_requires_url_or_engine(self):
        with pytest.raises(ValueError):
            SQLURLRepository()
