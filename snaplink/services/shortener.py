"""URL shortening service for the snaplink application.

This module contains the ShortenedURLService class which implements business logic
for URL shortening and short code resolution.
"""

import logging
from typing import Optional

from snaplink.core.config import settings
from snaplink.core.telemetry import get_tracer
from snaplink.models.url import URLMapping
from snaplink.repositories.base import BaseURLRepository, DuplicateEntityError, RepositoryError
from snaplink.services.codes import CodeGenerator, generate_short_code
from snaplink.services.exceptions import (
    ShortCodeGenerationError,
    URLCreationError,
    URLLookupError,
    URLNotFoundError,
)
from snaplink.services.validators import normalize_url, sanitize_short_code

logger = logging.getLogger(__name__)
tracer = get_tracer("snaplink.services.shortener")


class ShortenedURLService:
    """
    Service for URL shortening business logic.

    This service handles URL normalization, unique short code allocation
    and short code resolution on top of a URL repository.
    """

    def __init__(
        self,
        url_repository: BaseURLRepository,
        code_generator: Optional[CodeGenerator] = None,
        max_attempts: Optional[int] = None,
    ):
        """
        Initialize the URL shortening service.

        Args:
            url_repository: Store holding code -> long URL mappings
            code_generator: Callable returning candidate codes
            max_attempts: Cap on generate/insert rounds per allocation
        """
        self.url_repository = url_repository
        self.code_generator = code_generator or generate_short_code
        self.max_attempts = max_attempts or settings.URL_ALLOCATION_MAX_ATTEMPTS

    async def create_short_url(self, original_url: str) -> URLMapping:
        """
        Normalize a submitted URL and store it under a fresh short code.

        Args:
            original_url: The URL as submitted by the client

        Returns:
            URLMapping: The stored mapping

        Raises:
            URLValidationError: If the URL is rejected by the normalizer
            ShortCodeGenerationError: If no unique code was found in time
            URLCreationError: If the store fails
        """
        long_url = normalize_url(original_url)
        return await self.allocate(long_url)

    async def allocate(self, long_url: str) -> URLMapping:
        """
        Commit ``long_url`` under a newly generated, unused short code.

        Each round draws a candidate, probes the store and inserts. The unique
        constraint on ``code`` decides races between concurrent allocators; the
        probe only saves a doomed insert.

        Raises:
            ShortCodeGenerationError: If every attempt collided
            URLCreationError: If the insert fails for any other reason
        """
        with tracer.start_as_current_span("allocate_short_code") as span:
            for attempt in range(1, self.max_attempts + 1):
                candidate_code = self.code_generator()

                try:
                    if await self.url_repository.exists(candidate_code):
                        logger.debug(f"Short code {candidate_code} already taken (attempt {attempt})")
                        continue
                except RepositoryError as e:
                    logger.warning(f"Probe for short code failed, inserting directly: {e}")

                try:
                    mapping = await self.url_repository.create(candidate_code, long_url)
                except DuplicateEntityError:
                    logger.info(f"Short code {candidate_code} was claimed concurrently (attempt {attempt})")
                    continue
                except RepositoryError as e:
                    logger.error(f"Error creating short URL: {e}")
                    raise URLCreationError("Failed to store short URL") from e

                span.set_attribute("snaplink.allocation.attempts", attempt)
                logger.info(f"Allocated short code {mapping.code} after {attempt} attempt(s)")
                return mapping

            span.set_attribute("snaplink.allocation.attempts", self.max_attempts)

        logger.error(f"Failed to allocate a short code after {self.max_attempts} attempts")
        raise ShortCodeGenerationError(
            f"Failed to generate unique short code after {self.max_attempts} attempts"
        )

    async def get_url_for_redirect(self, short_code: str) -> str:
        """
        Resolve a short code to its long URL.

        Args:
            short_code: The path segment requested by the client

        Returns:
            str: The stored long URL

        Raises:
            URLNotFoundError: If no mapping exists for this code
            URLLookupError: If the store fails
        """
        code = sanitize_short_code(short_code)
        if code is None:
            raise URLNotFoundError(f"URL with code '{short_code}' not found")

        try:
            long_url = await self.url_repository.get_long_url(code)
        except RepositoryError as e:
            logger.error(f"Error retrieving URL for redirect: {e}")
            raise URLLookupError(f"Failed to retrieve URL with code '{code}'") from e

        if long_url is None:
            raise URLNotFoundError(f"URL with code '{code}' not found")
        return long_url
