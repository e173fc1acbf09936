"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from quakealert.config.settings import Settings


def _settings(**overrides):
    return Settings(_env_file=None, **overrides)


class TestSettings:
    """Test defaults and validation."""

    def test_defaults(self):
        settings = _settings()

        assert settings.poll_interval_seconds == 30
        assert settings.severe_alert_duration_seconds == 30.0
        assert settings.feed_limit == 50
        assert settings.broadcast_host == "https://ntfy.sh"
        assert settings.default_alert_threshold == 6.0
        assert settings.default_alert_sound == "beep"
        assert settings.default_theme == "dark"

    def test_feed_url_joins_base_and_path(self):
        settings = _settings(feed_base_url="http://feed.test/", feed_path="/api/events")

        assert settings.get_feed_url() == "http://feed.test/api/events"

    def test_blank_topic_is_unset(self):
        assert _settings(broadcast_topic="  ").broadcast_topic is None

    def test_environment_variables_are_read(self, monkeypatch):
        monkeypatch.setenv("BROADCAST_TOPIC", "quake-alerts-env")
        monkeypatch.setenv("DEFAULT_ALERT_THRESHOLD", "5.5")

        settings = _settings()

        assert settings.broadcast_topic == "quake-alerts-env"
        assert settings.default_alert_threshold == 5.5

    @pytest.mark.parametrize(
        "field, value",
        [
            ("poll_interval_seconds", 0),
            ("default_alert_threshold", 10.5),
            ("default_alert_sound", "siren"),
            ("default_theme", "sepia"),
            ("environment", "staging"),
            ("log_format", "xml"),
            ("endpoint_port", 70000),
        ],
    )
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValidationError):
            _settings(**{field: value})

    def test_database_url_defaults_to_sqlite_in_data_directory(self, tmp_path):
        settings = _settings(data_directory=str(tmp_path / "data"))

        assert settings.get_database_url() == f"sqlite:///{tmp_path / 'data' / 'quakealert.db'}"
        assert (tmp_path / "data").is_dir()
