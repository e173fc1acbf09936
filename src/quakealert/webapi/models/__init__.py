"""API Models package for request/response schemas."""

from .requests import (
    SettingsUpdateRequest,
    SmsSubscribeRequest,
    ThemeRequest,
    TopicRequest,
)
from .responses import (
    BaseResponse,
    ErrorResponse,
    HealthResponse,
    HealthStatus,
    MessageResponse,
    StatusResponse,
    SuccessResponse,
)

__all__ = [
    # Response models
    "BaseResponse",
    "SuccessResponse",
    "ErrorResponse",
    "HealthResponse",
    "HealthStatus",
    "MessageResponse",
    "StatusResponse",
    # Request models
    "SettingsUpdateRequest",
    "SmsSubscribeRequest",
    "ThemeRequest",
    "TopicRequest",
]
