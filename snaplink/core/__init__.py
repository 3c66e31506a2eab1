"""Core module for the snaplink application."""

from snaplink.core.config import settings

__all__ = ["settings"]
