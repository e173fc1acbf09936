"""FastAPI dependencies."""

from fastapi import Request

from ..services import SeismicMonitor
from .exceptions import ConfigurationError


def get_monitor(request: Request) -> SeismicMonitor:
    """The monitor owned by the running application."""
    monitor = getattr(request.app.state, "monitor", None)
    if monitor is None:
        raise ConfigurationError("monitor", "seismic monitor is not running")
    return monitor


def get_request_id(request: Request):
    return getattr(request.state, "request_id", None)
