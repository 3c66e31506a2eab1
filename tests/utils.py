"""Test utilities for URL shortener tests."""

import random
import string
from typing import Dict, List, Optional

from snaplink.models.url import URLMapping
from snaplink.repositories.base import BaseURLRepository, DuplicateEntityError, RepositoryError


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random URL for testing."""
    domain = f"{random_string(8).lower()}.com"
    path = random_string(12)
    return f"https://{domain}/{path}"


def sequence_generator(codes: List[str]):
    """Code generator that hands out ``codes`` in order."""
    iterator = iter(codes)
    return lambda: next(iterator)


class InMemoryURLRepository(BaseURLRepository):
    """
    Dict-backed repository with switches for simulating store behaviour.

    ``claimed_on_insert`` holds codes that look free to the probe but are
    taken by the time the insert lands, as when another allocator wins a race.
    """

    backend_name = "memory"

    def __init__(self, rows: Optional[Dict[str, str]] = None):
        self.rows: Dict[str, str] = dict(rows or {})
        self.claimed_on_insert = set()
        self.fail_probe = False
        self.fail_insert = False
        self.fail_lookup = False
        self.probes: List[str] = []
        self.inserts: List[str] = []

    async def ping(self) -> bool:
        return True

    async def exists(self, code: str) -> bool:
        self.probes.append(code)
        if self.fail_probe:
            raise RepositoryError("probe failed")
        return code in self.rows

    async def create(self, code: str, long_url: str) -> URLMapping:
        self.inserts.append(code)
        if self.fail_insert:
            raise RepositoryError("insert failed")
        if code in self.rows or code in self.claimed_on_insert:
            raise DuplicateEntityError("code", code)
        self.rows[code] = long_url
        return URLMapping(code=code, long_url=long_url)

    async def get_long_url(self, code: str) -> Optional[str]:
        if self.fail_lookup:
            raise RepositoryError("lookup failed")
        return self.rows.get(code)
