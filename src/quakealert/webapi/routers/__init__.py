"""API routers for QuakeAlert."""

from .alerts import router as alerts_router
from .broadcast import router as broadcast_router
from .events import router as events_router
from .notifications import router as notifications_router
from .settings import router as settings_router
from .sms import router as sms_router

__all__ = [
    "alerts_router",
    "broadcast_router",
    "events_router",
    "notifications_router",
    "settings_router",
    "sms_router",
]
