"""Push broadcast client for ntfy-style topic endpoints."""

import asyncio
from typing import Sequence

import aiohttp

from ..config.logging import get_logger
from ..exceptions import BroadcastError

logger = get_logger(__name__)

GENERIC_FAILURE_REASON = "Failed to send broadcast."


class NtfyBroadcastClient:
    """Publishes plaintext messages to ``<host>/<topic>``."""

    def __init__(self, host: str = "https://ntfy.sh", timeout_seconds: float = 10.0):
        self.host = host.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.logger = logger.bind(client="ntfy", host=self.host)

    def topic_url(self, topic: str) -> str:
        return f"{self.host}/{topic}"

    async def publish(
        self,
        topic: str,
        message: str,
        title: str,
        priority: str = "urgent",
        tags: Sequence[str] = ("warning", "earthquake"),
    ) -> None:
        """
        Publish ``message`` to ``topic``.

        Raises:
            BroadcastError: On transport failure or a non-2xx response. The reason
                is the response's ``detail`` when it can be parsed.
        """
        headers = {
            "Title": title,
            "Priority": priority,
            "Tags": ",".join(tags),
        }
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    self.topic_url(topic),
                    data=message.encode("utf-8"),
                    headers=headers,
                ) as response:
                    if 200 <= response.status < 300:
                        self.logger.info(
                            "Broadcast published", topic=topic, status=response.status
                        )
                        return

                    reason = await self._failure_reason(response)
                    raise BroadcastError(reason, status_code=response.status)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise BroadcastError(str(e) or type(e).__name__) from e

    @staticmethod
    async def _failure_reason(response: aiohttp.ClientResponse) -> str:
        try:
            body = await response.json(content_type=None)
        except (aiohttp.ClientError, ValueError):
            return GENERIC_FAILURE_REASON

        if isinstance(body, dict):
            detail = body.get("detail") or body.get("error")
            if detail:
                return str(detail)
        return GENERIC_FAILURE_REASON
