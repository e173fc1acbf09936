"""Application settings and configuration management using Pydantic."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

VALID_ALERT_SOUNDS = ["none", "beep", "chime", "urgent"]
VALID_THEMES = ["light", "dark"]


class Settings(BaseSettings):
    """Main application settings combining all configuration sections."""

    # Environment and deployment
    environment: str = "development"
    debug: bool = False
    app_version: str = "1.0.0"

    # Event feed settings
    feed_base_url: str = "http://localhost:8000"
    feed_path: str = "/api/events"
    feed_limit: int = 50
    feed_timeout_seconds: float = 10.0

    # Polling and severe alert timing
    poll_interval_seconds: int = 30
    severe_alert_duration_seconds: float = 30.0

    # Push broadcast settings
    broadcast_host: str = "https://ntfy.sh"
    broadcast_topic: Optional[str] = None
    broadcast_timeout_seconds: float = 10.0

    # SMS gateway settings
    sms_gateway_url: Optional[str] = None
    sms_gateway_token: Optional[str] = None
    sms_timeout_seconds: float = 10.0

    # Defaults for user-facing settings
    default_alert_threshold: float = 6.0
    default_alert_sound: str = "beep"
    default_theme: str = "dark"

    # Audio output
    audio_sample_rate: int = 44100

    # API settings
    endpoint_host: str = "0.0.0.0"
    endpoint_port: int = 8000
    api_reload: bool = False
    api_log_level: str = "INFO"

    # Database settings
    database_url: Optional[str] = None
    data_directory: str = "data"
    database_echo_sql: bool = False
    database_pool_pre_ping: bool = True
    database_pool_recycle: int = 3600

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "structured"  # 'structured' or 'plain'
    log_file_enabled: bool = True
    log_file_path: str = "data/quakealert.log"
    log_max_file_size: str = "10MB"
    log_backup_count: int = 5

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        valid_environments = ["development", "testing", "production"]
        if v.lower() not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v.lower()

    @field_validator("poll_interval_seconds")
    @classmethod
    def validate_interval(cls, v):
        """Validate poll interval is reasonable."""
        if v < 1 or v > 3600:
            raise ValueError("Poll interval must be between 1 and 3600 seconds")
        return v

    @field_validator("feed_limit")
    @classmethod
    def validate_feed_limit(cls, v):
        """Validate the number of events requested per poll."""
        if v < 1 or v > 500:
            raise ValueError("Feed limit must be between 1 and 500")
        return v

    @field_validator("default_alert_threshold")
    @classmethod
    def validate_threshold(cls, v):
        """Validate magnitude threshold."""
        if v < 0 or v > 10:
            raise ValueError("Alert threshold must be between 0 and 10")
        return v

    @field_validator("default_alert_sound")
    @classmethod
    def validate_alert_sound(cls, v):
        """Validate alert sound profile."""
        if v.lower() not in VALID_ALERT_SOUNDS:
            raise ValueError(f"Alert sound must be one of: {VALID_ALERT_SOUNDS}")
        return v.lower()

    @field_validator("default_theme")
    @classmethod
    def validate_theme(cls, v):
        """Validate theme name."""
        if v.lower() not in VALID_THEMES:
            raise ValueError(f"Theme must be one of: {VALID_THEMES}")
        return v.lower()

    @field_validator("broadcast_topic", "sms_gateway_url", "sms_gateway_token")
    @classmethod
    def blank_to_none(cls, v):
        """Treat blank optional values as unset."""
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("endpoint_port")
    @classmethod
    def validate_port(cls, v):
        """Validate port number is in valid range."""
        if v < 1 or v > 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("log_level", "api_log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log format."""
        valid_formats = ["structured", "plain"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()

    def get_database_url(self) -> str:
        """Get the complete database URL."""
        if self.database_url:
            return self.database_url

        # Default to SQLite in data directory
        db_dir = Path(self.data_directory)
        db_dir.mkdir(parents=True, exist_ok=True)
        db_path = db_dir / "quakealert.db"
        return f"sqlite:///{db_path}"

    def get_feed_url(self) -> str:
        """Get the full event feed URL without query parameters."""
        return f"{self.feed_base_url.rstrip('/')}/{self.feed_path.lstrip('/')}"

    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
