"""Single-slot transient notification queue."""

from collections import deque
from typing import Callable, Deque, List, Optional, Union

from ...config.logging import get_logger
from ...core.models import Notification, NotificationKind

logger = get_logger(__name__)

NotificationListener = Callable[[Optional[Notification]], None]


class NotificationPresenter:
    """
    Holds at most one notification; the newest always overwrites.

    Listeners are called synchronously with the new notification, or with None
    when the slot is cleared.
    """

    def __init__(self):
        self.logger = logger.bind(component="notification_presenter")
        self._slot: Deque[Notification] = deque(maxlen=1)
        self._listeners: List[NotificationListener] = []
        self.overwritten_count = 0

    @property
    def current(self) -> Optional[Notification]:
        return self._slot[0] if self._slot else None

    def add_listener(self, listener: NotificationListener) -> None:
        self._listeners.append(listener)

    def show(
        self, message: str, kind: Union[NotificationKind, str] = NotificationKind.SUCCESS
    ) -> Notification:
        """Replace whatever is displayed with a new notification."""
        notification = Notification(message=message, kind=NotificationKind(kind))

        if self._slot:
            self.overwritten_count += 1
        self._slot.append(notification)

        self.logger.info("Notification shown", kind=notification.kind.value, message=message)
        self._notify(notification)
        return notification

    def success(self, message: str) -> Notification:
        return self.show(message, NotificationKind.SUCCESS)

    def alert(self, message: str) -> Notification:
        return self.show(message, NotificationKind.ALERT)

    def dismiss(self) -> None:
        if not self._slot:
            return
        self._slot.clear()
        self._notify(None)

    def _notify(self, notification: Optional[Notification]) -> None:
        for listener in self._listeners:
            try:
                listener(notification)
            except Exception as e:
                self.logger.error("Notification listener failed", error=str(e), exc_info=True)
