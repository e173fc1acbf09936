"""Core alert detection: models, polling, severity evaluation, alert slot and sound."""

from .evaluator import evaluate_severity
from .models import (
    AlertLogEntry,
    AlertSettings,
    AlertSound,
    AlertStatus,
    Location,
    Notification,
    NotificationKind,
    SeismicEvent,
    Severity,
    SmsSubscriptionStatus,
    Theme,
)
from .poller import EventPoller
from .severe_alert import SevereAlertManager
from .sound import AudioDevice, SoundSynthesizer

__all__ = [
    "AlertLogEntry",
    "AlertSettings",
    "AlertSound",
    "AlertStatus",
    "AudioDevice",
    "EventPoller",
    "Location",
    "Notification",
    "NotificationKind",
    "SeismicEvent",
    "SevereAlertManager",
    "Severity",
    "SmsSubscriptionStatus",
    "SoundSynthesizer",
    "Theme",
    "evaluate_severity",
]
