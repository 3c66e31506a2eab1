"""REST repository for the snaplink application.

This module provides the RESTURLRepository class, which stores mappings in a
Supabase (PostgREST) collection. Probes and lookups are filtered GETs, inserts
are POSTs; PostgREST answers a unique-constraint violation with HTTP 409.
"""

from typing import Any, Dict, List, Optional
import logging

import httpx

from snaplink.models.url import URLMapping
from snaplink.repositories.base import BaseURLRepository, DuplicateEntityError, RepositoryError

logger = logging.getLogger(__name__)


class RESTURLRepository(BaseURLRepository):
    """
    Repository for mappings kept in a REST-accessible collection.

    One ``httpx.AsyncClient`` is opened on connect and reused for every
    request until close.
    """

    backend_name = "rest"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = "urls",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the repository.

        Args:
            base_url: Supabase project URL, e.g. https://xyz.supabase.co
            api_key: Service or anon key sent as apikey and bearer token
            table: Name of the collection holding the mappings
            timeout: Seconds allowed per request
            transport: Optional httpx transport (used by tests)
        """
        if not base_url or not api_key:
            raise ValueError("RESTURLRepository needs both a base_url and an api_key")
        self.endpoint = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
        }
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers=self._headers,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def connect(self) -> None:
        # The collection itself is managed on the Supabase side (see schema.sql)
        client = self.client
        logger.info(f"Using REST store at {self.endpoint} (timeout {client.timeout.read}s)")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("REST store client closed")

    async def ping(self) -> bool:
        try:
            await self._select({"select": "code", "limit": "1"})
            return True
        except RepositoryError as e:
            logger.error(f"REST store health check failed: {e}")
            return False

    async def exists(self, code: str) -> bool:
        rows = await self._select({"code": f"eq.{code}", "select": "code"})
        return len(rows) > 0

    async def create(self, code: str, long_url: str) -> URLMapping:
        mapping = URLMapping(code=code, long_url=long_url)
        try:
            response = await self.client.post(
                self.endpoint,
                json={"code": code, "long_url": long_url},
                headers={"Prefer": "return=minimal"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Error creating mapping via REST store: {e!r}")
            raise RepositoryError(f"REST store request failed: {e!r}") from e

        if response.status_code == httpx.codes.CONFLICT:
            raise DuplicateEntityError("code", code)
        if response.status_code not in (httpx.codes.OK, httpx.codes.CREATED, httpx.codes.NO_CONTENT):
            logger.error(f"REST store rejected insert with {response.status_code}: {response.text[:200]}")
            raise RepositoryError(f"REST store returned HTTP {response.status_code} on insert")
        return mapping

    async def get_long_url(self, code: str) -> Optional[str]:
        rows = await self._select({"code": f"eq.{code}", "select": "long_url"})
        if not rows:
            return None
        return rows[0].get("long_url")

    async def _select(self, params: Dict[str, str]) -> List[Dict[str, Any]]:
        """Run a filtered GET and return the decoded rows."""
        try:
            response = await self.client.get(self.endpoint, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Error querying REST store: {e!r}")
            raise RepositoryError(f"REST store request failed: {e!r}") from e

        if response.status_code != httpx.codes.OK:
            logger.error(f"REST store query failed with {response.status_code}: {response.text[:200]}")
            raise RepositoryError(f"REST store returned HTTP {response.status_code}")

        try:
            rows = response.json()
        except ValueError as e:
            raise RepositoryError("REST store returned a non-JSON body") from e
        if not isinstance(rows, list):
            raise RepositoryError("REST store returned an unexpected payload")
        return rows
