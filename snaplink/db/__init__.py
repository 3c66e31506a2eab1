"""Database module for the snaplink application."""
from snaplink.db.base import (
    check_connection,
    create_schema,
    get_engine,
    get_session_factory,
)
from snaplink.db.session import SessionManager

__all__ = [
    "check_connection",
    "create_schema",
    "get_engine",
    "get_session_factory",
    "SessionManager",
]
