"""Seismic monitor orchestration."""

from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy.orm import sessionmaker

from ..comm import FeedClient, NtfyBroadcastClient, SmsGatewayClient
from ..config.logging import get_logger
from ..config.settings import Settings
from ..core import (
    AlertLogEntry,
    AlertSettings,
    AlertSound,
    AudioDevice,
    EventPoller,
    SeismicEvent,
    SevereAlertManager,
    SmsSubscriptionStatus,
    SoundSynthesizer,
    Theme,
    evaluate_severity,
)
from ..core.poller import EventSource
from ..events import EventBus, SevereAlertRaisedEvent
from .broadcast import AlertLogService, BroadcastChannel
from .config_store import PersistentConfigStore
from .notification import NotificationPresenter
from .sms import SmsGateway, SmsSubscriptionService

logger = get_logger(__name__)


class SeismicMonitor:
    """
    Composes the alerting components and owns their lifecycles.

    Poll ticks flow through the severity evaluator into the notification,
    severe alert slot, sound and alert log, in that order. User commands are
    routed to the component that owns the affected state.
    """

    def __init__(
        self,
        source: EventSource,
        broadcast_channel: BroadcastChannel,
        sms_gateway: SmsGateway,
        store: Optional[PersistentConfigStore] = None,
        audio_device: Optional[AudioDevice] = None,
        default_settings: Optional[AlertSettings] = None,
        default_theme: Union[Theme, str] = Theme.DARK,
        broadcast_topic: Optional[str] = None,
        poll_interval_seconds: float = 30,
        severe_alert_duration_seconds: float = 30.0,
        event_bus: Optional[EventBus] = None,
    ):
        self.logger = logger.bind(service="seismic_monitor")
        self.store = store
        self.poll_interval_seconds = poll_interval_seconds

        self.event_bus = event_bus or EventBus(name="quakealert")
        self.presenter = NotificationPresenter()
        self.severe_alert = SevereAlertManager(severe_alert_duration_seconds)
        self.audio_device = audio_device or AudioDevice()
        self.sound = SoundSynthesizer(self.audio_device)
        self.alert_log = AlertLogService(
            broadcast_channel, self.presenter, self.event_bus, topic=broadcast_topic
        )
        self.sms = SmsSubscriptionService(
            sms_gateway, store, self.presenter, self.event_bus
        )
        self.poller = EventPoller(
            source, on_snapshot=self._on_snapshot, event_bus=self.event_bus
        )

        self._default_settings = default_settings or AlertSettings()
        self._settings = self._default_settings
        self._theme = Theme(default_theme)
        self._selected_event_id: Optional[int] = None
        self._started = False

    @classmethod
    def from_settings(
        cls, settings: Settings, session_factory: Optional[sessionmaker] = None
    ) -> "SeismicMonitor":
        """Build a monitor wired to the configured feed, broadcast host and SMS gateway."""
        return cls(
            source=FeedClient(
                settings.get_feed_url(),
                limit=settings.feed_limit,
                timeout_seconds=settings.feed_timeout_seconds,
            ),
            broadcast_channel=NtfyBroadcastClient(
                settings.broadcast_host,
                timeout_seconds=settings.broadcast_timeout_seconds,
            ),
            sms_gateway=SmsGatewayClient(
                settings.sms_gateway_url,
                token=settings.sms_gateway_token,
                timeout_seconds=settings.sms_timeout_seconds,
            ),
            store=PersistentConfigStore(session_factory) if session_factory else None,
            audio_device=AudioDevice(sample_rate=settings.audio_sample_rate),
            default_settings=AlertSettings(
                alert_threshold=settings.default_alert_threshold,
                alert_sound=settings.default_alert_sound,
            ),
            default_theme=settings.default_theme,
            broadcast_topic=settings.broadcast_topic,
            poll_interval_seconds=settings.poll_interval_seconds,
            severe_alert_duration_seconds=settings.severe_alert_duration_seconds,
        )

    # Lifecycle

    def restore(self) -> None:
        """Load persisted settings, theme, event snapshot and SMS subscription."""
        if self.store is None:
            return

        self._settings = self.store.load_settings(self._default_settings)
        theme = self.store.load_theme()
        if theme is not None:
            self._theme = theme

        cached = self.store.load_event_snapshot()
        if cached:
            self.poller.seed(cached)

        self.sms.restore()
        self.logger.info(
            "Restored persisted state",
            alert_threshold=self._settings.alert_threshold,
            alert_sound=self._settings.alert_sound.value,
            theme=self._theme.value,
            cached_events=len(cached),
            sms_status=self.sms.status.value,
        )

    async def start(self) -> None:
        """Restore state, then begin polling with an immediate first fetch."""
        if self._started:
            return

        self.restore()
        self.poller.start(self.poll_interval_seconds)
        self._started = True
        self.logger.info("Seismic monitor started")

    async def shutdown(self) -> None:
        self.poller.stop()
        self.severe_alert.shutdown()
        self.audio_device.close()
        self._started = False
        self.logger.info("Seismic monitor shut down")

    @property
    def running(self) -> bool:
        return self._started and self.poller.running

    # Poll tick

    async def _on_snapshot(
        self, previous: List[SeismicEvent], new: List[SeismicEvent]
    ) -> None:
        if self.store is not None:
            self.store.save_event_snapshot(new)

        threshold = self._settings.alert_threshold
        event = evaluate_severity(previous, new, threshold)
        if event is None:
            return

        self.presenter.alert(
            f"New Alert: M{event.magnitude:.1f} near {event.location.city}!"
        )
        self.severe_alert.raise_alert(event)
        self.sound.play(self._settings.alert_sound)
        entry = self.alert_log.record(event)

        await self.event_bus.publish(
            SevereAlertRaisedEvent(
                seismic_event_id=event.id,
                magnitude=event.magnitude,
                city=event.location.city,
                threshold=threshold,
                alert_entry_id=entry.id,
            )
        )

    # Events

    @property
    def events(self) -> List[SeismicEvent]:
        return self.poller.snapshot

    @property
    def selected_event(self) -> Optional[SeismicEvent]:
        """The user's selection if still in the snapshot, otherwise the newest event."""
        snapshot = self.poller.snapshot
        if self._selected_event_id is not None:
            for event in snapshot:
                if event.id == self._selected_event_id:
                    return event
        return snapshot[0] if snapshot else None

    def select_event(self, event_id: int) -> Optional[SeismicEvent]:
        """Select an event from the current snapshot; None if the id is not in it."""
        for event in self.poller.snapshot:
            if event.id == event_id:
                self._selected_event_id = event_id
                return event
        self.logger.warning("Selected event not in snapshot", event_id=event_id)
        return None

    # Settings and theme

    @property
    def settings(self) -> AlertSettings:
        return self._settings

    def update_settings(self, changes: Mapping[str, Any]) -> AlertSettings:
        """
        Apply a partial settings update and persist it.

        Raises:
            pydantic.ValidationError: If a supplied value is invalid
        """
        self._settings = self._settings.merged_with(changes, strict=True)
        if self.store is not None:
            self.store.save_settings(self._settings)

        self.logger.info("Alert settings updated", **self._settings.to_storage())
        return self._settings

    @property
    def theme(self) -> Theme:
        return self._theme

    def set_theme(self, theme: Union[Theme, str]) -> Theme:
        self._theme = Theme(theme)
        if self.store is not None:
            self.store.save_theme(self._theme)
        return self._theme

    def toggle_theme(self) -> Theme:
        return self.set_theme(Theme.LIGHT if self._theme == Theme.DARK else Theme.DARK)

    # Severe alert

    @property
    def current_severe_alert(self) -> Optional[SeismicEvent]:
        return self.severe_alert.current

    def dismiss_severe_alert(self) -> None:
        self.severe_alert.dismiss()

    def preview_sound(self, sound: Union[AlertSound, str]) -> bool:
        return self.sound.play(sound)

    # Broadcast

    async def send_broadcast(self, entry_id: int) -> Optional[AlertLogEntry]:
        return await self.alert_log.send_broadcast(entry_id)

    def configure_broadcast_topic(self, topic: Optional[str]) -> Optional[str]:
        self.alert_log.configure_topic(topic)
        return self.alert_log.topic

    def generate_broadcast_topic(self) -> str:
        return self.alert_log.generate_topic()

    # SMS

    async def subscribe_sms(self, phone_number: str) -> SmsSubscriptionStatus:
        return await self.sms.subscribe(phone_number)

    async def unsubscribe_sms(self) -> SmsSubscriptionStatus:
        return await self.sms.unsubscribe()

    # Notifications

    def dismiss_notification(self) -> None:
        self.presenter.dismiss()

    def get_status(self) -> Dict[str, Any]:
        return {
            "running": self.running,
            "poller": self.poller.get_statistics(),
            "event_bus": self.event_bus.get_statistics(),
            "alert_log_size": len(self.alert_log.entries()),
            "broadcast_channel_ready": self.alert_log.channel_ready,
            "sms_status": self.sms.status.value,
            "audio_available": not self.audio_device.unavailable,
        }
