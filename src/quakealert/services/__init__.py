"""Service layer for alert dispatch, SMS subscription and orchestration."""

from .broadcast import AlertLogService
from .config_store import PersistentConfigStore
from .monitor import SeismicMonitor
from .notification import NotificationPresenter
from .sms import SmsSubscriptionService

__all__ = [
    "AlertLogService",
    "NotificationPresenter",
    "PersistentConfigStore",
    "SeismicMonitor",
    "SmsSubscriptionService",
]
