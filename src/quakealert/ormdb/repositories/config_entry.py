"""Repository for persisted key/value configuration entries."""

from typing import List, Optional

from ..models import ConfigEntry
from .base import BaseRepository


class ConfigEntryRepository(BaseRepository):
    """Repository for config entry operations."""

    def get_value(self, key: str) -> Optional[str]:
        """Get the raw stored value for ``key``."""
        entry = self.session.get(ConfigEntry, key)
        return entry.value if entry is not None else None

    def set_value(self, key: str, value: str) -> ConfigEntry:
        """Insert or replace the value stored under ``key``."""
        entry = self.session.get(ConfigEntry, key)
        if entry is None:
            entry = ConfigEntry(key=key, value=value)
            self.session.add(entry)
        else:
            entry.value = value

        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        return entry

    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True if it existed."""
        entry = self.session.get(ConfigEntry, key)
        if entry is None:
            return False

        self.session.delete(entry)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        return True

    def list_keys(self) -> List[str]:
        return [row.key for row in self.session.query(ConfigEntry.key).all()]
