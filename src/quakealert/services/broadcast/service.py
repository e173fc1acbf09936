"""Alert log and push broadcast dispatch."""

import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol, Sequence

from ...config.logging import get_logger
from ...core.models import AlertLogEntry, AlertStatus, SeismicEvent
from ...events import AlertStatusChangedEvent, EventBus
from ...exceptions import BroadcastError
from ..notification import NotificationPresenter

logger = get_logger(__name__)

CHANNEL_NOT_READY_MESSAGE = "Notification channel not configured. Please wait a moment."
TOPIC_PREFIX = "quake-alerts"


class BroadcastChannel(Protocol):
    """Protocol for push broadcast transports."""

    async def publish(
        self,
        topic: str,
        message: str,
        title: str,
        priority: str = "urgent",
        tags: Sequence[str] = ("warning", "earthquake"),
    ) -> None:
        """Deliver ``message``; raise BroadcastError if it was not acknowledged."""
        ...


def build_alert_message(event: SeismicEvent) -> str:
    """Plaintext body sent for a severe event."""
    return (
        f"SEVERE EARTHQUAKE ALERT: M{event.magnitude:.1f} earthquake near "
        f"{event.location.city}, {event.location.state} at {event.depth:.1f} km depth "
        f"({event.timestamp}). Drop, cover and hold on."
    )


def build_broadcast_title(event: SeismicEvent) -> str:
    return f"SEVERE EARTHQUAKE: M{event.magnitude:.1f} near {event.location.city}"


def generate_topic() -> str:
    """A fresh, hard-to-guess topic name."""
    return f"{TOPIC_PREFIX}-{uuid.uuid4().hex[:12]}"


class AlertLogService:
    """
    Ordered log of dispatch-eligible alerts and their broadcast send state.

    Entries are appended once per qualifying event and never removed. Status
    moves pending -> sending -> sent | failed, and failed -> sending on a
    user-initiated retry. At most one send per entry is in flight.
    """

    def __init__(
        self,
        channel: BroadcastChannel,
        presenter: NotificationPresenter,
        event_bus: Optional[EventBus] = None,
        topic: Optional[str] = None,
    ):
        self.channel = channel
        self.presenter = presenter
        self.event_bus = event_bus
        self.logger = logger.bind(service="alert_log")

        self._entries: Dict[int, AlertLogEntry] = {}
        self._entry_by_event: Dict[int, int] = {}
        self._next_id = 1
        self._topic: Optional[str] = None
        self.configure_topic(topic)

    # Channel configuration

    @property
    def topic(self) -> Optional[str]:
        return self._topic

    @property
    def channel_ready(self) -> bool:
        return bool(self._topic)

    def configure_topic(self, topic: Optional[str]) -> None:
        """Set the broadcast topic; blank or None marks the channel as not ready."""
        topic = topic.strip() if topic else None
        self._topic = topic or None
        self.logger.info("Broadcast topic configured", topic=self._topic)

    def generate_topic(self) -> str:
        topic = generate_topic()
        self.configure_topic(topic)
        return topic

    # Log access

    def entries(self) -> List[AlertLogEntry]:
        return list(self._entries.values())

    def get(self, entry_id: int) -> Optional[AlertLogEntry]:
        return self._entries.get(entry_id)

    def latest_sent(self) -> Optional[AlertLogEntry]:
        """The most recently completed broadcast, if any."""
        sent = [e for e in self._entries.values() if e.status == AlertStatus.SENT]
        if not sent:
            return None
        return max(sent, key=lambda e: e.timestamp or "")

    def record(self, event: SeismicEvent) -> AlertLogEntry:
        """Append a pending entry for ``event``; an event already logged returns its entry."""
        existing_id = self._entry_by_event.get(event.id)
        if existing_id is not None:
            self.logger.debug("Event already in alert log", event_id=event.id)
            return self._entries[existing_id]

        entry = AlertLogEntry(
            id=self._next_id,
            event=event.model_copy(),
            message=build_alert_message(event),
        )
        self._next_id += 1
        self._entries[entry.id] = entry
        self._entry_by_event[event.id] = entry.id

        self.logger.info(
            "Alert log entry created",
            entry_id=entry.id,
            event_id=event.id,
            magnitude=event.magnitude,
        )
        return entry

    # Dispatch

    async def send_broadcast(self, entry_id: int) -> Optional[AlertLogEntry]:
        """
        Push the entry's message to the configured topic.

        Returns:
            The entry after the attempt, or None when the entry is unknown or no
            topic is configured (in which case nothing changes)
        """
        entry = self._entries.get(entry_id)
        if entry is None or not self._topic:
            self.logger.warning(
                "Broadcast channel not ready",
                entry_id=entry_id,
                entry_found=entry is not None,
                topic_configured=bool(self._topic),
            )
            self.presenter.alert(CHANNEL_NOT_READY_MESSAGE)
            return None

        if entry.status in (AlertStatus.SENDING, AlertStatus.SENT):
            self.logger.info(
                "Ignoring broadcast request", entry_id=entry_id, status=entry.status.value
            )
            return entry

        topic = self._topic
        city = entry.event.location.city
        await self._transition(entry, AlertStatus.SENDING)

        try:
            await self.channel.publish(
                topic,
                entry.message,
                title=build_broadcast_title(entry.event),
                priority="urgent",
                tags=("warning", "earthquake"),
            )
        except BroadcastError as e:
            await self._fail(entry, e.reason)
            return entry
        except Exception as e:
            self.logger.error("Unexpected broadcast error", entry_id=entry_id, exc_info=True)
            await self._fail(entry, str(e) or type(e).__name__)
            return entry

        entry.timestamp = datetime.now(timezone.utc).isoformat(timespec="microseconds")
        entry.error = None
        await self._transition(entry, AlertStatus.SENT)
        self.presenter.success(f"Broadcast sent for alert near {city}.")
        return entry

    async def _fail(self, entry: AlertLogEntry, reason: str) -> None:
        city = entry.event.location.city
        entry.error = reason
        await self._transition(entry, AlertStatus.FAILED)

        self.logger.error("Broadcast failed", entry_id=entry.id, reason=reason)
        self.presenter.alert(
            f"Broadcast failed for alert near {city}: {reason.rstrip('.')}. "
            "Please check your connection and retry."
        )

    async def _transition(self, entry: AlertLogEntry, status: AlertStatus) -> None:
        previous = entry.status
        entry.status = status

        self.logger.info(
            "Alert status changed",
            entry_id=entry.id,
            previous_status=previous.value,
            status=status.value,
        )

        if self.event_bus is not None:
            await self.event_bus.publish(
                AlertStatusChangedEvent(
                    alert_entry_id=entry.id,
                    previous_status=previous.value,
                    status=status.value,
                    error=entry.error,
                )
            )
