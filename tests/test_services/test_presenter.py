"""Tests for the single-slot notification presenter."""

from unittest.mock import Mock

from quakealert.core.models import NotificationKind
from quakealert.services.notification import NotificationPresenter


class TestNotificationPresenter:
    """Test last-write-wins behaviour."""

    def test_starts_empty(self):
        assert NotificationPresenter().current is None

    def test_newest_notification_overwrites(self):
        presenter = NotificationPresenter()

        presenter.success("first")
        presenter.alert("second")

        assert presenter.current.message == "second"
        assert presenter.current.kind == NotificationKind.ALERT
        assert presenter.overwritten_count == 1

    def test_dismiss_clears_slot(self):
        presenter = NotificationPresenter()
        presenter.success("done")

        presenter.dismiss()

        assert presenter.current is None

    def test_listeners_receive_updates(self):
        presenter = NotificationPresenter()
        listener = Mock()
        presenter.add_listener(listener)

        shown = presenter.alert("careful")
        presenter.dismiss()

        assert listener.call_args_list[0][0][0] is shown
        assert listener.call_args_list[1][0][0] is None

    def test_failing_listener_does_not_break_presenter(self):
        presenter = NotificationPresenter()
        presenter.add_listener(Mock(side_effect=RuntimeError("ui gone")))

        presenter.success("still shown")

        assert presenter.current.message == "still shown"

    def test_to_dict(self):
        notification = NotificationPresenter().show("hello", "success")

        data = notification.to_dict()

        assert data["message"] == "hello"
        assert data["kind"] == "success"
        assert "created_at" in data
