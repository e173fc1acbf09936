"""Alert log and push broadcast dispatch."""

from .service import (
    CHANNEL_NOT_READY_MESSAGE,
    AlertLogService,
    BroadcastChannel,
    build_alert_message,
    build_broadcast_title,
    generate_topic,
)

__all__ = [
    "AlertLogService",
    "BroadcastChannel",
    "CHANNEL_NOT_READY_MESSAGE",
    "build_alert_message",
    "build_broadcast_title",
    "generate_topic",
]
