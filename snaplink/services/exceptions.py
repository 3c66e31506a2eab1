"""Exceptions for the snaplink service layer.

This module contains the exception hierarchy for the service layer,
providing domain-specific exceptions that abstract underlying implementation details.
"""


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    pass


class URLError(ServiceError):
    """Base exception for URL-related errors."""
    pass


class URLValidationError(URLError):
    """URL failed validation checks.

    The message is a short diagnostic that is safe to show to clients.
    """
    pass


class InvalidURLError(URLValidationError):
    """The URL is empty or cannot be parsed."""

    def __init__(self, message: str = "invalid URL"):
        super().__init__(message)


class InvalidSchemeError(URLValidationError):
    """The URL scheme is not http or https."""

    def __init__(self, message: str = "invalid scheme"):
        super().__init__(message)


class InvalidHostError(URLValidationError):
    """The URL host is empty or not a dotted name."""

    def __init__(self, message: str = "invalid host"):
        super().__init__(message)


class URLCreationError(URLError):
    """Error occurred during URL creation."""
    pass


class ShortCodeGenerationError(URLCreationError):
    """Failed to generate a unique short code."""
    pass


class URLNotFoundError(URLError):
    """URL with the specified short code was not found."""
    pass


class URLLookupError(URLError):
    """The store failed while resolving a short code."""
    pass
