"""Tests for the SMS subscription state machine."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from quakealert.core.models import NotificationKind, SmsSubscriptionStatus
from quakealert.events import EventBus, SmsSubscriptionChangedEvent
from quakealert.exceptions import SmsGatewayError
from quakealert.services.notification import NotificationPresenter
from quakealert.services.sms import SmsSubscriptionService, normalize_phone_number

PHONE = "+15551234567"


@pytest.fixture
def gateway():
    mock_gateway = Mock()
    mock_gateway.subscribe = AsyncMock(return_value=None)
    mock_gateway.unsubscribe = AsyncMock(return_value=None)
    return mock_gateway


@pytest.fixture
def presenter():
    return NotificationPresenter()


@pytest.fixture
def service(gateway, config_store, presenter):
    return SmsSubscriptionService(gateway, config_store, presenter, EventBus(name="test"))


class TestPhoneNumberValidation:
    """Test E.164-like validation."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("+15551234567", "+15551234567"),
            ("15551234567", "15551234567"),
            ("+1 (555) 123-4567", "+15551234567"),
            ("+447911123456", "+447911123456"),
        ],
    )
    def test_valid_numbers(self, raw, expected):
        assert normalize_phone_number(raw) == expected

    @pytest.mark.parametrize(
        "raw", ["", "12345", "+0123456789", "+1555123456789012", "555-CALL-NOW"]
    )
    def test_invalid_numbers(self, raw):
        assert normalize_phone_number(raw) is None


class TestSubscribe:
    """Test the subscribe transition."""

    @pytest.mark.asyncio
    async def test_successful_subscribe(self, service, gateway, config_store, presenter):
        status = await service.subscribe(PHONE)

        assert status == SmsSubscriptionStatus.SUBSCRIBED
        assert service.phone_number == PHONE
        gateway.subscribe.assert_awaited_once_with(PHONE)
        assert config_store.load_phone_number() == PHONE
        assert presenter.current.kind == NotificationKind.SUCCESS
        assert presenter.current.message == (
            "Subscription successful! You will now receive SMS alerts."
        )

    @pytest.mark.asyncio
    async def test_failed_subscribe_discards_number(
        self, service, gateway, config_store, presenter
    ):
        gateway.subscribe.side_effect = SmsGatewayError("subscribe", "HTTP 500")

        status = await service.subscribe(PHONE)

        assert status == SmsSubscriptionStatus.ERROR
        assert service.phone_number is None
        assert config_store.load_phone_number() is None
        assert presenter.current.kind == NotificationKind.ALERT
        assert presenter.current.message == "Subscription failed. Please try again."

    @pytest.mark.asyncio
    async def test_unexpected_gateway_error_moves_to_error(self, service, gateway, presenter):
        gateway.subscribe.side_effect = [
            UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"),
            None,
        ]

        status = await service.subscribe(PHONE)

        assert status == SmsSubscriptionStatus.ERROR
        assert service.phone_number is None
        assert presenter.current.message == "Subscription failed. Please try again."

        # Not wedged: a retry reaches the gateway again
        assert await service.subscribe(PHONE) == SmsSubscriptionStatus.SUBSCRIBED
        assert gateway.subscribe.await_count == 2

    @pytest.mark.asyncio
    async def test_subscribe_retry_from_error(self, service, gateway):
        gateway.subscribe.side_effect = [SmsGatewayError("subscribe", "down"), None]

        await service.subscribe(PHONE)
        status = await service.subscribe(PHONE)

        assert status == SmsSubscriptionStatus.SUBSCRIBED
        assert gateway.subscribe.await_count == 2

    @pytest.mark.asyncio
    async def test_invalid_number_changes_nothing(self, service, gateway, presenter):
        status = await service.subscribe("12")

        assert status == SmsSubscriptionStatus.IDLE
        gateway.subscribe.assert_not_awaited()
        assert presenter.current.message.startswith("Invalid phone number.")

    @pytest.mark.asyncio
    async def test_subscribe_while_subscribed_is_ignored(self, service, gateway):
        await service.subscribe(PHONE)

        await service.subscribe("+15559876543")

        gateway.subscribe.assert_awaited_once()
        assert service.phone_number == PHONE

    @pytest.mark.asyncio
    async def test_phone_number_held_while_subscribing(self, service, gateway):
        release = asyncio.Event()
        observed = []

        async def slow_subscribe(phone_number):
            observed.append((service.status, service.phone_number))
            await release.wait()

        gateway.subscribe.side_effect = slow_subscribe

        task = asyncio.create_task(service.subscribe(PHONE))
        await asyncio.sleep(0)
        # Concurrent subscribe is ignored while the first is in flight
        assert await service.subscribe(PHONE) == SmsSubscriptionStatus.SUBSCRIBING

        release.set()
        await task

        assert observed == [(SmsSubscriptionStatus.SUBSCRIBING, PHONE)]
        assert gateway.subscribe.await_count == 1


class TestUnsubscribe:
    """Test the unsubscribe transition."""

    @pytest.mark.asyncio
    async def test_successful_unsubscribe_clears_number(
        self, service, gateway, config_store, presenter
    ):
        await service.subscribe(PHONE)

        status = await service.unsubscribe()

        assert status == SmsSubscriptionStatus.IDLE
        assert service.phone_number is None
        gateway.unsubscribe.assert_awaited_once_with(PHONE)
        assert config_store.load_phone_number() is None
        assert presenter.current.message == "You have been unsubscribed from SMS alerts."

    @pytest.mark.asyncio
    async def test_failed_unsubscribe_retains_number(
        self, service, gateway, config_store, presenter
    ):
        await service.subscribe(PHONE)
        gateway.unsubscribe.side_effect = SmsGatewayError("unsubscribe", "HTTP 503")

        status = await service.unsubscribe()

        assert status == SmsSubscriptionStatus.ERROR
        assert service.phone_number == PHONE
        assert config_store.load_phone_number() == PHONE
        assert presenter.current.kind == NotificationKind.ALERT
        assert presenter.current.message == "Failed to unsubscribe. Please try again."

    @pytest.mark.asyncio
    async def test_unexpected_unsubscribe_error_retains_number(
        self, service, gateway, config_store, presenter
    ):
        await service.subscribe(PHONE)
        gateway.unsubscribe.side_effect = RuntimeError("connection reset")

        status = await service.unsubscribe()

        assert status == SmsSubscriptionStatus.ERROR
        assert service.phone_number == PHONE
        assert config_store.load_phone_number() == PHONE
        assert presenter.current.message == "Failed to unsubscribe. Please try again."

    @pytest.mark.asyncio
    async def test_unsubscribe_retry_after_failure(self, service, gateway):
        await service.subscribe(PHONE)
        gateway.unsubscribe.side_effect = [SmsGatewayError("unsubscribe", "down"), None]

        await service.unsubscribe()
        status = await service.unsubscribe()

        assert status == SmsSubscriptionStatus.IDLE
        assert gateway.unsubscribe.await_count == 2

    @pytest.mark.asyncio
    async def test_unsubscribe_without_number_is_ignored(self, service, gateway):
        status = await service.unsubscribe()

        assert status == SmsSubscriptionStatus.IDLE
        gateway.unsubscribe.assert_not_awaited()


class TestRestore:
    """Test optimistic restore of a persisted subscription."""

    def test_restore_with_persisted_number(self, gateway, config_store, presenter):
        config_store.save_phone_number(PHONE)
        service = SmsSubscriptionService(gateway, config_store, presenter)

        service.restore()

        assert service.status == SmsSubscriptionStatus.SUBSCRIBED
        assert service.phone_number == PHONE
        gateway.subscribe.assert_not_called()

    def test_restore_without_persisted_number(self, gateway, config_store, presenter):
        service = SmsSubscriptionService(gateway, config_store, presenter)

        service.restore()

        assert service.status == SmsSubscriptionStatus.IDLE
        assert service.phone_number is None


class TestSubscriptionEvents:
    """Test that every transition is published."""

    @pytest.mark.asyncio
    async def test_transitions_are_published(self, gateway, config_store, presenter):
        bus = EventBus(name="test")
        received = []
        bus.subscribe(SmsSubscriptionChangedEvent, received.append)
        service = SmsSubscriptionService(gateway, config_store, presenter, bus)

        await service.subscribe(PHONE)
        await service.unsubscribe()

        assert [(e.previous_status, e.status) for e in received] == [
            ("idle", "subscribing"),
            ("subscribing", "subscribed"),
            ("subscribed", "unsubscribing"),
            ("unsubscribing", "idle"),
        ]
        assert received[-1].has_phone_number is False
