"""Event bus for managing and dispatching domain events."""

import asyncio
import inspect
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Type, Union

from ..config.logging import get_logger
from .events import DomainEvent

logger = get_logger(__name__)

EventHandler = Callable[[DomainEvent], Union[None, Awaitable[None]]]


class EventBus:
    """
    Event bus for publishing and subscribing to domain events.

    Everything runs on the event loop: sync handlers are called inline and
    async handlers are awaited in subscription order. A failing handler is
    logged and counted; it never reaches the publisher.
    """

    def __init__(self, name: str = "default"):
        self.name = name
        self.logger = logger.bind(event_bus=name)

        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)

        self._event_history: List[Dict[str, Any]] = []
        self._max_history_size = 1000

        self._stats = {
            "events_published": 0,
            "handlers_executed": 0,
            "errors_count": 0,
            "last_event_time": None,
        }

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """
        Subscribe a handler to an event type.

        Args:
            event_type: Type of event to subscribe to
            handler: Handler function (sync or async)
        """
        self._handlers[event_type].append(handler)

        self.logger.debug(
            "Event handler subscribed",
            event_type=event_type.__name__,
            handler=getattr(handler, "__name__", repr(handler)),
            total_handlers=len(self._handlers[event_type]),
        )

    def unsubscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> bool:
        """
        Unsubscribe a handler from an event type.

        Returns:
            True if handler was found and removed
        """
        if event_type in self._handlers and handler in self._handlers[event_type]:
            self._handlers[event_type].remove(handler)
            return True

        return False

    async def publish(self, event: DomainEvent) -> Dict[str, Any]:
        """
        Publish an event to all subscribed handlers and wait for them.

        Returns:
            Dictionary with publication results
        """
        event_type = type(event)

        self._stats["events_published"] += 1
        self._stats["last_event_time"] = datetime.now(timezone.utc)
        self._add_to_history(event)

        handlers = list(self._handlers.get(event_type, []))
        successful = 0
        failed = 0

        for handler in handlers:
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
                successful += 1
            except asyncio.CancelledError:
                raise
            except Exception as e:
                failed += 1
                self._stats["errors_count"] += 1
                self.logger.error(
                    "Handler execution failed",
                    event_type=event_type.__name__,
                    handler=getattr(handler, "__name__", repr(handler)),
                    error=str(e),
                    exc_info=True,
                )

        self._stats["handlers_executed"] += len(handlers)

        self.logger.debug(
            "Event published",
            event_type=event_type.__name__,
            event_id=event.event_id,
            successful_handlers=successful,
            failed_handlers=failed,
        )

        return {
            "event_id": event.event_id,
            "handlers_executed": len(handlers),
            "successful_handlers": successful,
            "failed_handlers": failed,
        }

    def _add_to_history(self, event: DomainEvent) -> None:
        self._event_history.append(
            {
                "event_type": type(event).__name__,
                "event_id": event.event_id,
                "timestamp": event.timestamp.isoformat(),
            }
        )

        if len(self._event_history) > self._max_history_size:
            self._event_history = self._event_history[-self._max_history_size :]

    def get_statistics(self) -> Dict[str, Any]:
        """Get event bus statistics."""
        last_event_time = self._stats["last_event_time"]
        return {
            **self._stats,
            "last_event_time": last_event_time.isoformat() if last_event_time else None,
            "registered_event_types": len(self._handlers),
            "total_handlers": sum(len(h) for h in self._handlers.values()),
            "history_size": len(self._event_history),
        }

    def get_event_history(self, limit: int = 100) -> List[Dict[str, Any]]:
        """Get recent event history."""
        return self._event_history[-limit:] if self._event_history else []
