"""Tests for the URL shortening service."""

import asyncio

import pytest

from snaplink.services.exceptions import (
    InvalidHostError,
    ShortCodeGenerationError,
    URLCreationError,
    URLLookupError,
    URLNotFoundError,
)
from snaplink.services.shortener import ShortenedURLService
from tests.utils import InMemoryURLRepository, random_url, sequence_generator


class TestAllocation:
    """Tests for short code allocation against a controllable store."""

    @pytest.mark.asyncio
    async def test_first_free_code_is_used(self):
        repository = InMemoryURLRepository()
        service = ShortenedURLService(repository, code_generator=sequence_generator(["aaaaaa"]))

        mapping = await service.create_short_url("example.com/x")

        assert mapping.code == "aaaaaa"
        assert mapping.long_url == "https://example.com/x"
        assert repository.rows == {"aaaaaa": "https://example.com/x"}

    @pytest.mark.asyncio
    async def test_taken_code_is_skipped_without_insert(self):
        repository = InMemoryURLRepository({"taken1": "https://old.example"})
        service = ShortenedURLService(repository, code_generator=sequence_generator(["taken1", "fresh1"]))

        mapping = await service.allocate("https://new.example")

        assert mapping.code == "fresh1"
        assert repository.inserts == ["fresh1"]
        assert repository.rows["taken1"] == "https://old.example"

    @pytest.mark.asyncio
    async def test_lost_race_retries_with_new_code(self):
        """A code claimed between probe and insert is retried, not reported as an error."""
        repository = InMemoryURLRepository()
        repository.claimed_on_insert.add("raced1")
        service = ShortenedURLService(repository, code_generator=sequence_generator(["raced1", "fresh1"]))

        mapping = await service.allocate("https://example.com")

        assert mapping.code == "fresh1"
        assert repository.inserts == ["raced1", "fresh1"]

    @pytest.mark.asyncio
    async def test_probe_failure_falls_through_to_insert(self):
        repository = InMemoryURLRepository()
        repository.fail_probe = True
        service = ShortenedURLService(repository, code_generator=sequence_generator(["aaaaaa"]))

        mapping = await service.allocate("https://example.com")

        assert mapping.code == "aaaaaa"
        assert repository.rows["aaaaaa"] == "https://example.com"

    @pytest.mark.asyncio
    async def test_probe_failure_still_respects_uniqueness(self):
        repository = InMemoryURLRepository({"taken1": "https://old.example"})
        repository.fail_probe = True
        service = ShortenedURLService(repository, code_generator=sequence_generator(["taken1", "fresh1"]))

        mapping = await service.allocate("https://new.example")

        assert mapping.code == "fresh1"
        assert repository.rows["taken1"] == "https://old.example"

    @pytest.mark.asyncio
    async def test_exhaustion(self):
        repository = InMemoryURLRepository({"same01": "https://old.example"})
        service = ShortenedURLService(repository, code_generator=lambda: "same01", max_attempts=10)

        with pytest.raises(ShortCodeGenerationError):
            await service.allocate("https://new.example")

        assert len(repository.probes) == 10
        assert repository.inserts == []

    @pytest.mark.asyncio
    async def test_exhaustion_is_a_creation_error(self):
        repository = InMemoryURLRepository()
        repository.claimed_on_insert.add("same01")
        service = ShortenedURLService(repository, code_generator=lambda: "same01", max_attempts=3)

        with pytest.raises(URLCreationError):
            await service.allocate("https://example.com")

        assert len(repository.inserts) == 3

    @pytest.mark.asyncio
    async def test_store_failure_on_insert_is_not_retried(self):
        repository = InMemoryURLRepository()
        repository.fail_insert = True
        service = ShortenedURLService(repository, code_generator=sequence_generator(["aaaaaa", "bbbbbb"]))

        with pytest.raises(URLCreationError) as excinfo:
            await service.allocate("https://example.com")

        assert not isinstance(excinfo.value, ShortCodeGenerationError)
        assert repository.inserts == ["aaaaaa"]

    @pytest.mark.asyncio
    async def test_invalid_url_never_reaches_store(self):
        repository = InMemoryURLRepository()
        service = ShortenedURLService(repository)

        with pytest.raises(InvalidHostError):
            await service.create_short_url("https://localhost")

        assert repository.probes == []
        assert repository.inserts == []


class TestRedirectLookup:
    """Tests for resolving short codes."""

    @pytest.mark.asyncio
    async def test_found(self):
        service = ShortenedURLService(InMemoryURLRepository({"aZ3kP9": "https://example.com"}))

        assert await service.get_url_for_redirect("aZ3kP9") == "https://example.com"

    @pytest.mark.asyncio
    async def test_not_found(self):
        service = ShortenedURLService(InMemoryURLRepository())

        with pytest.raises(URLNotFoundError):
            await service.get_url_for_redirect("nope01")

    @pytest.mark.asyncio
    async def test_malformed_code_is_not_looked_up(self):
        repository = InMemoryURLRepository()
        repository.fail_lookup = True
        service = ShortenedURLService(repository)

        with pytest.raises(URLNotFoundError):
            await service.get_url_for_redirect("eq.abc")

    @pytest.mark.asyncio
    async def test_store_failure(self):
        repository = InMemoryURLRepository()
        repository.fail_lookup = True
        service = ShortenedURLService(repository)

        with pytest.raises(URLLookupError):
            await service.get_url_for_redirect("aZ3kP9")


class TestWithSQLStore:
    """Service behaviour on top of the real SQL repository."""

    @pytest.mark.asyncio
    async def test_round_trip(self, shortener_service):
        long_url = random_url()

        mapping = await shortener_service.create_short_url(long_url)

        assert len(mapping.code) == 6
        assert await shortener_service.get_url_for_redirect(mapping.code) == long_url

    @pytest.mark.asyncio
    async def test_same_url_twice_gets_two_codes(self, shortener_service):
        first = await shortener_service.create_short_url("https://example.com/same")
        second = await shortener_service.create_short_url("https://example.com/same")

        assert first.code != second.code

    @pytest.mark.asyncio
    async def test_concurrent_allocations_are_distinct(self, sql_repository):
        service = ShortenedURLService(sql_repository)
        urls = [random_url() for _ in range(20)]

        mappings = await asyncio.gather(*(service.create_short_url(url) for url in urls))

        codes = [m.code for m in mappings]
        assert len(set(codes)) == len(urls)
        for mapping in mappings:
            assert await service.get_url_for_redirect(mapping.code) == mapping.long_url

    @pytest.mark.asyncio
    async def test_forced_collisions_resolve_to_distinct_codes(self, sql_repository):
        """Racing allocators drawing the same candidates still commit distinct codes."""
        candidates = ["aaaaaa", "bbbbbb", "cccccc", "dddddd"]

        def make_service():
            return ShortenedURLService(sql_repository, code_generator=sequence_generator(list(candidates)))

        mappings = await asyncio.gather(*(make_service().allocate(f"https://site{i}.example") for i in range(3)))

        codes = [m.code for m in mappings]
        assert len(set(codes)) == 3
        assert set(codes) <= set(candidates)
