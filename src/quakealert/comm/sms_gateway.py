"""HTTP client for the SMS subscription gateway."""

import asyncio
from typing import Dict, Optional

import aiohttp

from ..config.logging import get_logger
from ..exceptions import SmsGatewayError

logger = get_logger(__name__)


class SmsGatewayClient:
    """Registers and removes phone numbers with the out-of-band SMS gateway."""

    def __init__(
        self,
        base_url: Optional[str],
        token: Optional[str] = None,
        timeout_seconds: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.token = token
        self.timeout_seconds = timeout_seconds
        self.logger = logger.bind(client="sms_gateway")

    @property
    def configured(self) -> bool:
        return self.base_url is not None

    async def subscribe(self, phone_number: str) -> None:
        """Raises SmsGatewayError unless the gateway accepted the number."""
        await self._call("subscribe", phone_number)

    async def unsubscribe(self, phone_number: str) -> None:
        """Raises SmsGatewayError unless the gateway removed the number."""
        await self._call("unsubscribe", phone_number)

    def _headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    async def _call(self, operation: str, phone_number: str) -> None:
        if not self.base_url:
            raise SmsGatewayError(operation, "gateway URL not configured")

        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    f"{self.base_url}/{operation}",
                    json={"phone_number": phone_number},
                    headers=self._headers(),
                ) as response:
                    if not 200 <= response.status < 300:
                        error_text = await response.text(errors="replace")
                        raise SmsGatewayError(
                            operation, f"HTTP {response.status} - {error_text[:200]}"
                        )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SmsGatewayError(operation, str(e) or type(e).__name__) from e

        self.logger.info("SMS gateway call succeeded", operation=operation)
