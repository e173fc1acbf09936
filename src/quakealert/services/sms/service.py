"""SMS alert subscription state machine."""

import re
from typing import Any, Dict, Optional, Protocol

from ...config.logging import get_logger
from ...core.models import SmsSubscriptionStatus
from ...events import EventBus, SmsSubscriptionChangedEvent
from ...exceptions import SmsGatewayError
from ..config_store import PersistentConfigStore
from ..notification import NotificationPresenter

logger = get_logger(__name__)

PHONE_NUMBER_PATTERN = re.compile(r"^\+?[1-9]\d{7,14}$")

INVALID_NUMBER_MESSAGE = (
    "Invalid phone number. Please use international format, e.g. +15551234567."
)
SUBSCRIBE_SUCCESS_MESSAGE = "Subscription successful! You will now receive SMS alerts."
SUBSCRIBE_FAILURE_MESSAGE = "Subscription failed. Please try again."
UNSUBSCRIBE_SUCCESS_MESSAGE = "You have been unsubscribed from SMS alerts."
UNSUBSCRIBE_FAILURE_MESSAGE = "Failed to unsubscribe. Please try again."


class SmsGateway(Protocol):
    async def subscribe(self, phone_number: str) -> None: ...

    async def unsubscribe(self, phone_number: str) -> None: ...


def normalize_phone_number(phone_number: str) -> Optional[str]:
    """Strip separators and return the number if it looks like E.164, else None."""
    candidate = re.sub(r"[\s\-().]", "", phone_number or "")
    return candidate if PHONE_NUMBER_PATTERN.match(candidate) else None


class SmsSubscriptionService:
    """
    Single SMS subscription against the messaging gateway.

    The phone number is held while subscribing, subscribed or unsubscribing.
    A failed unsubscribe keeps it (status ``error``) so the user can retry
    without re-entering it; a failed subscribe discards it.
    """

    def __init__(
        self,
        gateway: SmsGateway,
        store: Optional[PersistentConfigStore],
        presenter: NotificationPresenter,
        event_bus: Optional[EventBus] = None,
    ):
        self.gateway = gateway
        self.store = store
        self.presenter = presenter
        self.event_bus = event_bus
        self.logger = logger.bind(service="sms_subscription")

        self._status = SmsSubscriptionStatus.IDLE
        self._phone_number: Optional[str] = None

    @property
    def status(self) -> SmsSubscriptionStatus:
        return self._status

    @property
    def phone_number(self) -> Optional[str]:
        return self._phone_number

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self._status.value, "phone_number": self._phone_number}

    def restore(self) -> None:
        """Resume a subscription persisted by a previous session without contacting the gateway."""
        if self.store is None:
            return

        phone_number = self.store.load_phone_number()
        if phone_number:
            self._status = SmsSubscriptionStatus.SUBSCRIBED
            self._phone_number = phone_number
            self.logger.info("Restored SMS subscription")

    async def subscribe(self, phone_number: str) -> SmsSubscriptionStatus:
        if self._status not in (SmsSubscriptionStatus.IDLE, SmsSubscriptionStatus.ERROR):
            self.logger.info("Ignoring subscribe request", status=self._status.value)
            return self._status

        normalized = normalize_phone_number(phone_number)
        if normalized is None:
            self.logger.warning("Rejected invalid phone number")
            self.presenter.alert(INVALID_NUMBER_MESSAGE)
            return self._status

        await self._transition(SmsSubscriptionStatus.SUBSCRIBING, normalized)

        try:
            await self.gateway.subscribe(normalized)
        except SmsGatewayError as e:
            self.logger.error("SMS subscribe failed", error=str(e))
            await self._transition(SmsSubscriptionStatus.ERROR, None)
            self.presenter.alert(SUBSCRIBE_FAILURE_MESSAGE)
            return self._status
        except Exception:
            self.logger.error("Unexpected SMS subscribe error", exc_info=True)
            await self._transition(SmsSubscriptionStatus.ERROR, None)
            self.presenter.alert(SUBSCRIBE_FAILURE_MESSAGE)
            return self._status

        if self.store is not None:
            self.store.save_phone_number(normalized)
        await self._transition(SmsSubscriptionStatus.SUBSCRIBED, normalized)
        self.presenter.success(SUBSCRIBE_SUCCESS_MESSAGE)
        return self._status

    async def unsubscribe(self) -> SmsSubscriptionStatus:
        phone_number = self._phone_number
        if not phone_number or self._status not in (
            SmsSubscriptionStatus.SUBSCRIBED,
            SmsSubscriptionStatus.ERROR,
        ):
            self.logger.info(
                "Ignoring unsubscribe request",
                status=self._status.value,
                has_phone_number=phone_number is not None,
            )
            return self._status

        await self._transition(SmsSubscriptionStatus.UNSUBSCRIBING, phone_number)

        try:
            await self.gateway.unsubscribe(phone_number)
        except SmsGatewayError as e:
            self.logger.error("SMS unsubscribe failed", error=str(e))
            await self._transition(SmsSubscriptionStatus.ERROR, phone_number)
            self.presenter.alert(UNSUBSCRIBE_FAILURE_MESSAGE)
            return self._status
        except Exception:
            self.logger.error("Unexpected SMS unsubscribe error", exc_info=True)
            await self._transition(SmsSubscriptionStatus.ERROR, phone_number)
            self.presenter.alert(UNSUBSCRIBE_FAILURE_MESSAGE)
            return self._status

        if self.store is not None:
            self.store.clear_phone_number()
        await self._transition(SmsSubscriptionStatus.IDLE, None)
        self.presenter.success(UNSUBSCRIBE_SUCCESS_MESSAGE)
        return self._status

    async def _transition(
        self, status: SmsSubscriptionStatus, phone_number: Optional[str]
    ) -> None:
        previous = self._status
        self._status = status
        self._phone_number = phone_number

        self.logger.info(
            "SMS subscription status changed",
            previous_status=previous.value,
            status=status.value,
        )

        if self.event_bus is not None:
            await self.event_bus.publish(
                SmsSubscriptionChangedEvent(
                    previous_status=previous.value,
                    status=status.value,
                    has_phone_number=phone_number is not None,
                )
            )
