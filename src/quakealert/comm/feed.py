"""HTTP client for the seismic event feed."""

import asyncio
from typing import List

import aiohttp

from ..config.logging import get_logger
from ..core.models import SeismicEvent, parse_events
from ..exceptions import FeedError

logger = get_logger(__name__)


class FeedClient:
    """Fetches the latest event snapshot, newest first."""

    def __init__(self, url: str, limit: int = 50, timeout_seconds: float = 10.0):
        self.url = url
        self.limit = limit
        self.timeout_seconds = timeout_seconds
        self.logger = logger.bind(client="feed", url=url)

    async def fetch_events(self) -> List[SeismicEvent]:
        """
        Fetch one snapshot from the feed.

        Returns:
            Events in feed order (index 0 is the most recent)

        Raises:
            FeedError: On transport errors, non-2xx responses or malformed payloads
        """
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(
                    self.url, params={"limit": str(self.limit)}
                ) as response:
                    if not 200 <= response.status < 300:
                        raise FeedError(
                            f"Feed returned HTTP {response.status}",
                            status_code=response.status,
                        )
                    payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FeedError(f"Feed request failed: {str(e) or type(e).__name__}") from e
        except ValueError as e:
            raise FeedError(f"Feed returned invalid JSON: {e}") from e

        try:
            events = parse_events(payload)
        except ValueError as e:
            raise FeedError(str(e)) from e

        self.logger.debug("Fetched event snapshot", event_count=len(events))
        return events
