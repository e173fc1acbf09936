"""Tests for the in-process event bus."""

import pytest

from quakealert.events import (
    AlertStatusChangedEvent,
    EventBus,
    SevereAlertRaisedEvent,
    SnapshotUpdatedEvent,
)


class TestEventBus:
    """Test publish/subscribe semantics."""

    @pytest.mark.asyncio
    async def test_sync_and_async_handlers_run_in_order(self):
        bus = EventBus(name="test")
        calls = []

        def sync_handler(event):
            calls.append(("sync", event.event_count))

        async def async_handler(event):
            calls.append(("async", event.event_count))

        bus.subscribe(SnapshotUpdatedEvent, sync_handler)
        bus.subscribe(SnapshotUpdatedEvent, async_handler)

        result = await bus.publish(SnapshotUpdatedEvent(event_count=3))

        assert calls == [("sync", 3), ("async", 3)]
        assert result["successful_handlers"] == 2
        assert result["failed_handlers"] == 0

    @pytest.mark.asyncio
    async def test_handlers_only_receive_their_event_type(self):
        bus = EventBus(name="test")
        received = []
        bus.subscribe(SevereAlertRaisedEvent, received.append)

        await bus.publish(SnapshotUpdatedEvent())

        assert received == []

    @pytest.mark.asyncio
    async def test_failing_handler_is_counted_not_raised(self):
        bus = EventBus(name="test")
        received = []

        def broken(event):
            raise RuntimeError("handler bug")

        bus.subscribe(AlertStatusChangedEvent, broken)
        bus.subscribe(AlertStatusChangedEvent, received.append)

        result = await bus.publish(AlertStatusChangedEvent(alert_entry_id=1, status="sent"))

        assert result["failed_handlers"] == 1
        assert len(received) == 1
        assert bus.get_statistics()["errors_count"] == 1

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        bus = EventBus(name="test")
        received = []
        bus.subscribe(SnapshotUpdatedEvent, received.append)

        assert bus.unsubscribe(SnapshotUpdatedEvent, received.append) is True
        assert bus.unsubscribe(SnapshotUpdatedEvent, received.append) is False

        await bus.publish(SnapshotUpdatedEvent())
        assert received == []

    @pytest.mark.asyncio
    async def test_history_and_statistics(self):
        bus = EventBus(name="test")

        await bus.publish(SnapshotUpdatedEvent(event_count=1))
        await bus.publish(SevereAlertRaisedEvent(seismic_event_id=7, magnitude=7.1))

        history = bus.get_event_history()
        assert [h["event_type"] for h in history] == [
            "SnapshotUpdatedEvent",
            "SevereAlertRaisedEvent",
        ]
        stats = bus.get_statistics()
        assert stats["events_published"] == 2
        assert stats["last_event_time"] is not None

    def test_event_to_dict(self):
        event = SevereAlertRaisedEvent(
            seismic_event_id=7, magnitude=7.1, city="Ridgecrest", threshold=6.0
        )

        data = event.to_dict()

        assert data["event_type"] == "SevereAlertRaisedEvent"
        assert data["seismic_event_id"] == 7
        assert data["city"] == "Ridgecrest"
        assert "timestamp" in data
