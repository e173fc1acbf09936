"""Repository pattern implementations for data access."""

from .base import BaseRepository
from .config_entry import ConfigEntryRepository

__all__ = ["BaseRepository", "ConfigEntryRepository"]
