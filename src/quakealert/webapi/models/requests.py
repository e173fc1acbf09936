"""Request models for the QuakeAlert API."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...core.models import AlertSound, Theme


class SettingsUpdateRequest(BaseModel):
    """Partial update of the user alert settings."""

    model_config = ConfigDict(populate_by_name=True)

    alert_threshold: Optional[float] = Field(
        None, alias="alertThreshold", ge=0, le=10, description="Minimum magnitude to alert on"
    )
    alert_sound: Optional[AlertSound] = Field(
        None, alias="alertSound", description="Sound profile: none, beep, chime, urgent"
    )

    def changes(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True, mode="json")


class ThemeRequest(BaseModel):
    """Request model for changing the dashboard theme."""

    theme: Theme = Field(..., description="light or dark")


class TopicRequest(BaseModel):
    """Request model for configuring the broadcast topic."""

    topic: str = Field(..., min_length=1, max_length=64, description="Broadcast topic name")

    @field_validator("topic")
    @classmethod
    def validate_topic(cls, v):
        """Topics are restricted to URL-safe characters."""
        v = v.strip()
        if not v or not all(c.isalnum() or c in "-_" for c in v):
            raise ValueError("Topic may contain only letters, digits, '-' and '_'")
        return v


class SmsSubscribeRequest(BaseModel):
    """Request model for SMS alert subscription."""

    phone_number: str = Field(
        ..., min_length=1, max_length=32, description="Phone number in international format"
    )
