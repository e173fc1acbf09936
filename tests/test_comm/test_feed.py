"""Tests for the event feed client."""

import asyncio
import json

import aiohttp
import pytest

from quakealert.comm.feed import FeedClient
from quakealert.core.models import Severity
from quakealert.exceptions import FeedError

SESSION_TARGET = "quakealert.comm.feed.aiohttp.ClientSession"


@pytest.fixture
def feed_http(mock_aiohttp_session):
    return mock_aiohttp_session(SESSION_TARGET)


class TestFeedClient:
    """Test fetching and parsing the event snapshot."""

    @pytest.mark.asyncio
    async def test_fetch_events_parses_payload(self, feed_http, event_payload):
        feed_http["response"].json.return_value = event_payload
        client = FeedClient("http://feed.test/api/events", limit=50)

        events = await client.fetch_events()

        assert [e.id for e in events] == [42, 41]
        assert events[0].severity == Severity.SEVERE
        assert events[0].location.city == "Ridgecrest"

    @pytest.mark.asyncio
    async def test_fetch_sends_limit_parameter(self, feed_http):
        feed_http["response"].json.return_value = []
        client = FeedClient("http://feed.test/api/events", limit=25)

        await client.fetch_events()

        args, kwargs = feed_http["session"].get.call_args
        assert args[0] == "http://feed.test/api/events"
        assert kwargs["params"] == {"limit": "25"}

    @pytest.mark.asyncio
    async def test_non_2xx_raises_feed_error(self, feed_http):
        feed_http["response"].status = 502
        client = FeedClient("http://feed.test/api/events")

        with pytest.raises(FeedError) as exc_info:
            await client.fetch_events()

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_transport_error_raises_feed_error(self, feed_http):
        feed_http["session"].get.side_effect = aiohttp.ClientConnectionError("refused")
        client = FeedClient("http://feed.test/api/events")

        with pytest.raises(FeedError, match="Feed request failed"):
            await client.fetch_events()

    @pytest.mark.asyncio
    async def test_timeout_raises_feed_error(self, feed_http):
        feed_http["session"].get.side_effect = asyncio.TimeoutError()
        client = FeedClient("http://feed.test/api/events")

        with pytest.raises(FeedError):
            await client.fetch_events()

    @pytest.mark.asyncio
    async def test_invalid_json_raises_feed_error(self, feed_http):
        feed_http["response"].json.side_effect = json.JSONDecodeError("bad", "<html>", 0)
        client = FeedClient("http://feed.test/api/events")

        with pytest.raises(FeedError, match="invalid JSON"):
            await client.fetch_events()

    @pytest.mark.asyncio
    async def test_malformed_event_raises_feed_error(self, feed_http, event_payload):
        del event_payload[0]["magnitude"]
        feed_http["response"].json.return_value = event_payload
        client = FeedClient("http://feed.test/api/events")

        with pytest.raises(FeedError, match="Malformed event"):
            await client.fetch_events()

    @pytest.mark.asyncio
    async def test_non_list_payload_raises_feed_error(self, feed_http):
        feed_http["response"].json.return_value = {"events": []}
        client = FeedClient("http://feed.test/api/events")

        with pytest.raises(FeedError, match="Expected a list"):
            await client.fetch_events()
