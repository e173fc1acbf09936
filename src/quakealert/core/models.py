"""Domain models for seismic events, alert state and user settings."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class Severity(str, Enum):
    """Severity class assigned to an event by the feed."""

    LOW = "Low"
    MODERATE = "Moderate"
    SEVERE = "Severe"


class AlertSound(str, Enum):
    """Audio alert profiles."""

    NONE = "none"
    BEEP = "beep"
    CHIME = "chime"
    URGENT = "urgent"


class Theme(str, Enum):
    """Dashboard colour theme."""

    LIGHT = "light"
    DARK = "dark"


class AlertStatus(str, Enum):
    """Send state of an alert log entry."""

    PENDING = "pending"
    SENDING = "sending"
    SENT = "sent"
    FAILED = "failed"


class SmsSubscriptionStatus(str, Enum):
    """Lifecycle of the SMS subscription."""

    IDLE = "idle"
    SUBSCRIBING = "subscribing"
    SUBSCRIBED = "subscribed"
    UNSUBSCRIBING = "unsubscribing"
    ERROR = "error"


class NotificationKind(str, Enum):
    """Presentation kind of a transient notification."""

    SUCCESS = "success"
    ALERT = "alert"


class Location(BaseModel):
    """Geographic location of an event."""

    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float
    city: str
    state: str


class SeismicEvent(BaseModel):
    """A single event as published by the feed. Immutable once received."""

    model_config = ConfigDict(frozen=True)

    id: int
    magnitude: float
    depth: float
    location: Location
    timestamp: str
    severity: Severity


def parse_events(payload: Any) -> List[SeismicEvent]:
    """
    Parse a feed payload into events, preserving the feed order.

    Raises:
        ValueError: If the payload is not a list of well-formed events
    """
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of events, got {type(payload).__name__}")

    try:
        return [SeismicEvent.model_validate(item) for item in payload]
    except ValidationError as e:
        raise ValueError(f"Malformed event in payload: {e}") from e


class AlertSettings(BaseModel):
    """User-configured alerting preferences, stored under camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    alert_threshold: float = Field(6.0, alias="alertThreshold", ge=0, le=10)
    alert_sound: AlertSound = Field(AlertSound.BEEP, alias="alertSound")

    def to_storage(self) -> Dict[str, Any]:
        """Serialize using the persisted key names."""
        return self.model_dump(by_alias=True, mode="json")

    def merged_with(
        self, overrides: Mapping[str, Any], strict: bool = True
    ) -> "AlertSettings":
        """
        Return a copy with the known keys of ``overrides`` applied.

        Keys may use either the field name or the stored alias; unknown keys are
        ignored. With ``strict`` an invalid value raises ``ValidationError``,
        otherwise the invalid key keeps its current value.
        """
        aliases = {
            name: info.alias or name for name, info in type(self).model_fields.items()
        }
        known_keys = set(aliases.values())

        updates: Dict[str, Any] = {}
        for key, value in overrides.items():
            stored_key = aliases.get(key, key)
            if stored_key in known_keys:
                updates[stored_key] = value

        base = self.to_storage()
        if strict:
            return type(self).model_validate({**base, **updates})

        merged = dict(base)
        for key, value in updates.items():
            try:
                type(self).model_validate({**merged, key: value})
            except ValidationError:
                continue
            merged[key] = value
        return type(self).model_validate(merged)


@dataclass
class AlertLogEntry:
    """A dispatch-eligible alert with its broadcast send state."""

    id: int
    event: SeismicEvent
    message: str
    type: str = "Broadcast"
    status: AlertStatus = AlertStatus.PENDING
    timestamp: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert entry to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "type": self.type,
            "event": self.event.model_dump(mode="json"),
            "message": self.message,
            "status": self.status.value,
            "timestamp": self.timestamp,
            "error": self.error,
        }


@dataclass(frozen=True)
class Notification:
    """Transient message shown to the user."""

    message: str
    kind: NotificationKind
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "kind": self.kind.value,
            "created_at": self.created_at.isoformat(),
        }
