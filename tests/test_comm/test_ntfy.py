"""Tests for the push broadcast client."""

import aiohttp
import pytest

from quakealert.comm.ntfy import GENERIC_FAILURE_REASON, NtfyBroadcastClient
from quakealert.exceptions import BroadcastError

SESSION_TARGET = "quakealert.comm.ntfy.aiohttp.ClientSession"


@pytest.fixture
def ntfy_http(mock_aiohttp_session):
    return mock_aiohttp_session(SESSION_TARGET)


class TestNtfyBroadcastClient:
    """Test topic publishing and failure reason extraction."""

    @pytest.mark.asyncio
    async def test_publish_posts_plaintext_with_headers(self, ntfy_http):
        client = NtfyBroadcastClient("https://ntfy.example/")

        await client.publish(
            "quake-alerts-abc",
            "SEVERE EARTHQUAKE ALERT: M7.2",
            title="SEVERE EARTHQUAKE: M7.2 near Ridgecrest",
        )

        args, kwargs = ntfy_http["session"].post.call_args
        assert args[0] == "https://ntfy.example/quake-alerts-abc"
        assert kwargs["data"] == b"SEVERE EARTHQUAKE ALERT: M7.2"
        assert kwargs["headers"] == {
            "Title": "SEVERE EARTHQUAKE: M7.2 near Ridgecrest",
            "Priority": "urgent",
            "Tags": "warning,earthquake",
        }

    @pytest.mark.asyncio
    async def test_error_detail_becomes_reason(self, ntfy_http):
        ntfy_http["response"].status = 500
        ntfy_http["response"].json.return_value = {"detail": "topic not found"}
        client = NtfyBroadcastClient()

        with pytest.raises(BroadcastError) as exc_info:
            await client.publish("t", "m", title="x")

        assert exc_info.value.reason == "topic not found"
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_ntfy_error_field_becomes_reason(self, ntfy_http):
        ntfy_http["response"].status = 429
        ntfy_http["response"].json.return_value = {
            "code": 42901,
            "error": "limit reached: too many requests",
        }
        client = NtfyBroadcastClient()

        with pytest.raises(BroadcastError, match="limit reached"):
            await client.publish("t", "m", title="x")

    @pytest.mark.asyncio
    async def test_unparsable_body_uses_generic_reason(self, ntfy_http):
        ntfy_http["response"].status = 502
        ntfy_http["response"].json.side_effect = ValueError("not json")
        client = NtfyBroadcastClient()

        with pytest.raises(BroadcastError) as exc_info:
            await client.publish("t", "m", title="x")

        assert exc_info.value.reason == GENERIC_FAILURE_REASON

    @pytest.mark.asyncio
    async def test_body_without_detail_uses_generic_reason(self, ntfy_http):
        ntfy_http["response"].status = 500
        ntfy_http["response"].json.return_value = ["unexpected"]
        client = NtfyBroadcastClient()

        with pytest.raises(BroadcastError) as exc_info:
            await client.publish("t", "m", title="x")

        assert exc_info.value.reason == GENERIC_FAILURE_REASON

    @pytest.mark.asyncio
    async def test_transport_error_raises_broadcast_error(self, ntfy_http):
        ntfy_http["session"].post.side_effect = aiohttp.ClientConnectionError(
            "Cannot connect to host"
        )
        client = NtfyBroadcastClient()

        with pytest.raises(BroadcastError, match="Cannot connect to host"):
            await client.publish("t", "m", title="x")

    def test_topic_url_strips_trailing_slash(self):
        client = NtfyBroadcastClient("https://ntfy.sh/")

        assert client.topic_url("abc") == "https://ntfy.sh/abc"
