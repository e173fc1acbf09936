"""Event-driven plumbing shared by the alerting components."""

from .event_bus import EventBus
from .events import (
    AlertStatusChangedEvent,
    DomainEvent,
    SevereAlertRaisedEvent,
    SmsSubscriptionChangedEvent,
    SnapshotUpdatedEvent,
)

__all__ = [
    "AlertStatusChangedEvent",
    "DomainEvent",
    "EventBus",
    "SevereAlertRaisedEvent",
    "SmsSubscriptionChangedEvent",
    "SnapshotUpdatedEvent",
]
