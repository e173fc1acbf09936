"""SQLAlchemy persistence for durable key/value state."""

from .database import (
    Base,
    check_database_health,
    create_tables,
    get_engine,
    get_session,
    get_session_factory,
)
from .models import ConfigEntry
from .repositories import ConfigEntryRepository

__all__ = [
    "Base",
    "ConfigEntry",
    "ConfigEntryRepository",
    "check_database_health",
    "create_tables",
    "get_engine",
    "get_session",
    "get_session_factory",
]
