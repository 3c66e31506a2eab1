"""snaplink: a small URL shortening service."""

__version__ = "0.1.0"
