"""Best-effort durable storage for settings, theme, event cache and phone number."""

import json
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..config.logging import get_logger
from ..core.models import AlertSettings, SeismicEvent, Theme, parse_events
from ..ormdb.repositories import ConfigEntryRepository

logger = get_logger(__name__)

SETTINGS_KEY = "earthquake_alert_settings"
THEME_KEY = "earthquake_alert_theme"
EVENTS_CACHE_KEY = "earthquake_events_cache"
PHONE_NUMBER_KEY = "earthquake_alert_phone_number"


class PersistentConfigStore:
    """
    Keyed JSON storage over the config entry table.

    Every read and write failure is logged and swallowed: reads fall back to
    "nothing stored" and writes report False, so in-memory state is never
    interrupted by storage problems.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory
        self.logger = logger.bind(component="config_store")

    @contextmanager
    def _repository(self) -> Iterator[ConfigEntryRepository]:
        session = self._session_factory()
        try:
            yield ConfigEntryRepository(session)
        finally:
            session.close()

    def _read_json(self, key: str) -> Optional[Any]:
        try:
            with self._repository() as repo:
                raw = repo.get_value(key)
            return json.loads(raw) if raw is not None else None
        except (SQLAlchemyError, ValueError) as e:
            self.logger.error("Failed to load from storage", key=key, error=str(e))
            return None

    def _write_json(self, key: str, value: Any) -> bool:
        try:
            payload = json.dumps(value)
            with self._repository() as repo:
                repo.set_value(key, payload)
            return True
        except (SQLAlchemyError, TypeError, ValueError) as e:
            self.logger.error("Failed to save to storage", key=key, error=str(e))
            return False

    def _delete(self, key: str) -> bool:
        try:
            with self._repository() as repo:
                repo.delete(key)
            return True
        except SQLAlchemyError as e:
            self.logger.error("Failed to delete from storage", key=key, error=str(e))
            return False

    # Settings

    def load_settings(self, defaults: AlertSettings) -> AlertSettings:
        """Stored settings merged over ``defaults``; bad or missing keys keep the default."""
        stored = self._read_json(SETTINGS_KEY)
        if not isinstance(stored, dict):
            return defaults
        return defaults.merged_with(stored, strict=False)

    def save_settings(self, settings: AlertSettings) -> bool:
        return self._write_json(SETTINGS_KEY, settings.to_storage())

    # Theme

    def load_theme(self) -> Optional[Theme]:
        stored = self._read_json(THEME_KEY)
        try:
            return Theme(stored) if stored is not None else None
        except ValueError:
            self.logger.warning("Ignoring unknown stored theme", theme=stored)
            return None

    def save_theme(self, theme: Theme) -> bool:
        return self._write_json(THEME_KEY, Theme(theme).value)

    # Event snapshot cache

    def load_event_snapshot(self) -> List[SeismicEvent]:
        """The cached snapshot, or an empty list unless it is a non-empty well-formed array."""
        stored = self._read_json(EVENTS_CACHE_KEY)
        if not isinstance(stored, list) or not stored:
            return []

        try:
            return parse_events(stored)
        except ValueError as e:
            self.logger.warning("Discarding malformed event cache", error=str(e))
            return []

    def save_event_snapshot(self, events: Sequence[SeismicEvent]) -> bool:
        return self._write_json(
            EVENTS_CACHE_KEY, [event.model_dump(mode="json") for event in events]
        )

    # SMS phone number

    def load_phone_number(self) -> Optional[str]:
        stored = self._read_json(PHONE_NUMBER_KEY)
        return stored if isinstance(stored, str) and stored else None

    def save_phone_number(self, phone_number: str) -> bool:
        return self._write_json(PHONE_NUMBER_KEY, phone_number)

    def clear_phone_number(self) -> bool:
        return self._delete(PHONE_NUMBER_KEY)
