"""Periodic polling of the event feed."""

import asyncio
import inspect
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence, Union

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_MAX_INSTANCES
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from ..config.logging import get_logger
from ..events import EventBus, SnapshotUpdatedEvent
from ..exceptions import FeedError
from .models import SeismicEvent

logger = get_logger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 30
POLL_JOB_ID = "event_feed_poll"
# Ticks fire on a fixed cadence; a slow fetch may still be in flight when the next starts
MAX_OVERLAPPING_FETCHES = 3

SnapshotHook = Callable[
    [List[SeismicEvent], List[SeismicEvent]], Union[None, Awaitable[None]]
]


class EventSource(Protocol):
    """Anything that can produce a newest-first event snapshot."""

    async def fetch_events(self) -> List[SeismicEvent]:
        ...


class EventPoller:
    """
    Owns the live event snapshot and refreshes it on a fixed interval.

    On every successful fetch the snapshot is replaced wholesale, then the
    ``on_snapshot`` hook receives ``(previous, new)`` before the update is
    published on the event bus. Failed fetches keep the previous snapshot.
    Completions apply in the order they finish, so a slow stale fetch can
    overwrite a newer snapshot.
    """

    def __init__(
        self,
        source: EventSource,
        on_snapshot: Optional[SnapshotHook] = None,
        event_bus: Optional[EventBus] = None,
        initial_snapshot: Optional[Sequence[SeismicEvent]] = None,
    ):
        self.source = source
        self.on_snapshot = on_snapshot
        self.event_bus = event_bus
        self.logger = logger.bind(component="event_poller")

        self._snapshot: List[SeismicEvent] = list(initial_snapshot or [])
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._stats = {
            "polls_succeeded": 0,
            "polls_failed": 0,
            "last_success_time": None,
        }

    @property
    def snapshot(self) -> List[SeismicEvent]:
        return list(self._snapshot)

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def get_statistics(self) -> dict:
        last_success = self._stats["last_success_time"]
        return {
            **self._stats,
            "last_success_time": last_success.isoformat() if last_success else None,
            "running": self.running,
            "snapshot_size": len(self._snapshot),
        }

    def seed(self, events: Sequence[SeismicEvent]) -> None:
        """Replace the snapshot without running the hook, e.g. from a persisted cache."""
        self._snapshot = list(events)
        self.logger.debug("Snapshot seeded", event_count=len(self._snapshot))

    def start(self, interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS) -> None:
        """
        Begin polling. The first fetch runs immediately, then every
        ``interval_seconds``. Must be called from within the running event loop.
        """
        if self.running:
            self.logger.warning("Poller already running")
            return

        scheduler = AsyncIOScheduler(
            event_loop=asyncio.get_running_loop(), timezone="UTC"
        )
        scheduler.add_listener(self._job_error_listener, EVENT_JOB_ERROR)
        scheduler.add_listener(self._job_skipped_listener, EVENT_JOB_MAX_INSTANCES)
        scheduler.add_job(
            self.poll_once,
            trigger="interval",
            seconds=interval_seconds,
            id=POLL_JOB_ID,
            name="Seismic event feed poll",
            next_run_time=datetime.now(timezone.utc),
            max_instances=MAX_OVERLAPPING_FETCHES,
            coalesce=False,
            misfire_grace_time=int(interval_seconds),
        )
        scheduler.start()
        self._scheduler = scheduler

        self.logger.info("Event poller started", interval_seconds=interval_seconds)

    def stop(self) -> None:
        """Cancel the repeating timer. In-flight fetches are not aborted."""
        if self._scheduler is None:
            return

        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
        self.logger.info("Event poller stopped")

    async def poll_once(self) -> bool:
        """
        Run a single poll tick.

        Returns:
            True if the snapshot was replaced, False if the fetch failed
        """
        try:
            events = await self.source.fetch_events()
        except FeedError as e:
            self._stats["polls_failed"] += 1
            self.logger.warning(
                "Event feed poll failed; keeping previous snapshot",
                error=str(e),
                status_code=e.status_code,
            )
            return False

        previous = self._snapshot
        self._snapshot = list(events)
        self._stats["polls_succeeded"] += 1
        self._stats["last_success_time"] = datetime.now(timezone.utc)

        # Alert side effects are scheduled before external consumers see the update
        if self.on_snapshot is not None:
            result = self.on_snapshot(list(previous), list(self._snapshot))
            if inspect.isawaitable(result):
                await result

        if self.event_bus is not None:
            await self.event_bus.publish(
                SnapshotUpdatedEvent(
                    event_count=len(self._snapshot),
                    newest_event_id=self._snapshot[0].id if self._snapshot else None,
                    previous_newest_event_id=previous[0].id if previous else None,
                )
            )

        return True

    def _job_error_listener(self, event) -> None:
        self.logger.error(
            "Poll tick crashed",
            job_id=event.job_id,
            error=str(event.exception),
            traceback=event.traceback,
        )

    def _job_skipped_listener(self, event) -> None:
        self.logger.warning(
            "Poll tick skipped; too many fetches in flight",
            job_id=event.job_id,
            max_instances=MAX_OVERLAPPING_FETCHES,
        )
