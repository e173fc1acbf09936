"""Single-slot severe alert state with an auto-expiry timer."""

import asyncio
from typing import Optional

from ..config.logging import get_logger
from .models import SeismicEvent

logger = get_logger(__name__)

DEFAULT_SEVERE_ALERT_DURATION_SECONDS = 30.0


class SevereAlertManager:
    """
    Owns the currently displayed critical alert.

    A new alert always pre-empts the displayed one; the replaced alert is not
    queued. At most one expiry timer is live at any time.
    """

    def __init__(self, duration_seconds: float = DEFAULT_SEVERE_ALERT_DURATION_SECONDS):
        self.duration_seconds = duration_seconds
        self.logger = logger.bind(component="severe_alert")
        self._slot: Optional[SeismicEvent] = None
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def current(self) -> Optional[SeismicEvent]:
        """The event currently occupying the slot, if any."""
        return self._slot

    @property
    def timer_active(self) -> bool:
        return self._timer is not None

    def raise_alert(self, event: SeismicEvent) -> None:
        """
        Show ``event`` and (re)start the expiry timer.

        Must be called from within the running event loop.
        """
        loop = asyncio.get_running_loop()
        self._cancel_timer()

        if self._slot is not None:
            self.logger.info(
                "Severe alert pre-empted",
                previous_event_id=self._slot.id,
                event_id=event.id,
            )

        self._slot = event
        self._timer = loop.call_later(self.duration_seconds, self._expire)

        self.logger.info(
            "Severe alert raised",
            event_id=event.id,
            magnitude=event.magnitude,
            city=event.location.city,
            expires_in_seconds=self.duration_seconds,
        )

    def dismiss(self) -> None:
        """Clear the slot and cancel any pending expiry. Safe when already empty."""
        self._cancel_timer()
        if self._slot is not None:
            self.logger.info("Severe alert dismissed", event_id=self._slot.id)
        self._slot = None

    def shutdown(self) -> None:
        self.dismiss()

    def _expire(self) -> None:
        # The handle has fired; forget it before clearing so dismiss() does not cancel it
        self._timer = None
        if self._slot is not None:
            self.logger.info("Severe alert expired", event_id=self._slot.id)
        self._slot = None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
