"""Database infrastructure - engine, sessions and declarative base."""

from infrastructure.database.dependencies import (
    check_database_health,
    close_database_connections,
    get_engine,
    get_session,
)

__all__ = [
    "check_database_health",
    "close_database_connections",
    "get_engine",
    "get_session",
]
