"""Domain events for the seismic alerting system."""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4


@dataclass
class DomainEvent(ABC):
    """Base class for all domain events."""

    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_version: str = "1.0"
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        result = {
            "event_type": self.__class__.__name__,
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "event_version": self.event_version,
            "metadata": self.metadata,
        }

        for field_name, field_value in self.__dict__.items():
            if field_name not in ["event_id", "timestamp", "event_version", "metadata"]:
                if isinstance(field_value, datetime):
                    result[field_name] = field_value.isoformat()
                else:
                    result[field_name] = field_value

        return result


@dataclass
class SnapshotUpdatedEvent(DomainEvent):
    """A poll replaced the live event snapshot."""

    event_count: int = 0
    newest_event_id: Optional[int] = None
    previous_newest_event_id: Optional[int] = None


@dataclass
class SevereAlertRaisedEvent(DomainEvent):
    """A newly arrived event crossed the alert threshold."""

    seismic_event_id: int = 0
    magnitude: float = 0.0
    city: str = ""
    threshold: float = 0.0
    alert_entry_id: Optional[int] = None


@dataclass
class AlertStatusChangedEvent(DomainEvent):
    """An alert log entry moved to a new send state."""

    alert_entry_id: int = 0
    previous_status: Optional[str] = None
    status: str = ""
    error: Optional[str] = None


@dataclass
class SmsSubscriptionChangedEvent(DomainEvent):
    """The SMS subscription moved to a new state."""

    previous_status: str = ""
    status: str = ""
    has_phone_number: bool = False
