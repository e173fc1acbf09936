"""Shared test configuration and fixtures."""

from typing import Callable, Dict, List
from unittest.mock import AsyncMock, Mock, patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from quakealert.core.models import Location, SeismicEvent, Severity
from quakealert.core.sound import AudioDevice
from quakealert.services.config_store import PersistentConfigStore


@pytest.fixture
def isolated_db(tmp_path):
    """Create an isolated database for testing."""
    db_path = tmp_path / "quakealert-test.db"
    db_url = f"sqlite:///{db_path}"

    engine = create_engine(db_url, connect_args={"check_same_thread": False})
    SessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )

    # Register models on Base.metadata before creating tables
    from quakealert.ormdb import models  # noqa: F401
    from quakealert.ormdb.database import Base

    Base.metadata.create_all(bind=engine)

    yield {
        "engine": engine,
        "session_factory": SessionLocal,
        "db_url": db_url,
        "db_path": db_path,
    }

    engine.dispose()


@pytest.fixture
def config_store(isolated_db):
    """Persistent config store backed by the isolated database."""
    return PersistentConfigStore(isolated_db["session_factory"])


@pytest.fixture
def make_event() -> Callable[..., SeismicEvent]:
    """Factory for seismic events with sensible defaults."""

    def _make_event(
        event_id: int,
        magnitude: float = 4.0,
        city: str = "Ridgecrest",
        state: str = "CA",
        depth: float = 10.0,
        severity: Severity = Severity.LOW,
        timestamp: str = "2024-05-01T12:00:00Z",
    ) -> SeismicEvent:
        return SeismicEvent(
            id=event_id,
            magnitude=magnitude,
            depth=depth,
            location=Location(lat=35.77, lon=-117.6, city=city, state=state),
            timestamp=timestamp,
            severity=severity,
        )

    return _make_event


@pytest.fixture
def event_payload() -> List[Dict]:
    """Raw feed payload as returned by the events endpoint, newest first."""
    return [
        {
            "id": 42,
            "magnitude": 6.4,
            "depth": 8.2,
            "location": {"lat": 35.77, "lon": -117.6, "city": "Ridgecrest", "state": "CA"},
            "timestamp": "2024-05-01T12:00:00Z",
            "severity": "Severe",
        },
        {
            "id": 41,
            "magnitude": 2.1,
            "depth": 3.0,
            "location": {"lat": 34.05, "lon": -118.24, "city": "Los Angeles", "state": "CA"},
            "timestamp": "2024-05-01T11:40:00Z",
            "severity": "Low",
        },
    ]


@pytest.fixture
def mock_audio_device():
    """Audio device that records playback without touching real hardware."""
    device = Mock(spec=AudioDevice)
    device.sample_rate = 8000
    device.unavailable = False
    device.play.return_value = True
    return device


@pytest.fixture
def mock_aiohttp_session():
    """
    Patch ``aiohttp.ClientSession`` in a module to prevent real HTTP requests.

    Call the fixture with the dotted path of the module's ``aiohttp`` reference,
    e.g. ``mock_aiohttp_session("quakealert.comm.ntfy.aiohttp.ClientSession")``.
    """

    class MockResponseContext:
        def __init__(self, response):
            self.response = response

        async def __aenter__(self):
            return self.response

        async def __aexit__(self, exc_type, exc_val, exc_tb):
            return None

    class MockSessionContext:
        def __init__(self, session):
            self.session = session

        async def __aenter__(self):
            return self.session

        async def __aexit__(self, exc_type, exc_val, exc_tb):
            return None

    patchers = []

    def _patch(target: str) -> Dict[str, Mock]:
        patcher = patch(target)
        mock_client_session = patcher.start()
        patchers.append(patcher)

        mock_response = AsyncMock()
        mock_response.status = 200
        mock_response.json = AsyncMock(return_value={})
        mock_response.text = AsyncMock(return_value="OK")

        mock_session = Mock()
        mock_session.post = Mock(return_value=MockResponseContext(mock_response))
        mock_session.get = Mock(return_value=MockResponseContext(mock_response))

        mock_client_session.return_value = MockSessionContext(mock_session)

        return {
            "session": mock_session,
            "response": mock_response,
            "client_session": mock_client_session,
        }

    yield _patch

    for patcher in patchers:
        patcher.stop()
