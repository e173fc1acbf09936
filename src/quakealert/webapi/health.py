"""Health check endpoints for the QuakeAlert API."""

import time
from typing import Any, Dict

from fastapi import APIRouter, Request

from .. import __version__
from ..config.logging import get_logger
from ..ormdb.database import check_database_health
from .models.responses import HealthResponse, HealthStatus

logger = get_logger(__name__)
router = APIRouter()

# Track application start time for uptime calculation
_app_start_time = time.time()


def check_monitor_health(monitor) -> Dict[str, Any]:
    """Poller, event bus and channel status of the running monitor."""
    if monitor is None:
        return {"status": "unhealthy", "error": "monitor not initialized"}

    status = monitor.get_status()
    poller = status["poller"]
    if not status["running"]:
        overall = "unhealthy"
    elif poller["polls_failed"] and not poller["polls_succeeded"]:
        overall = "degraded"
    else:
        overall = "healthy"

    return {"status": overall, **status}


def _overall_status(services: Dict[str, Dict[str, Any]]) -> str:
    statuses = [service.get("status", "unknown") for service in services.values()]
    if "unhealthy" in statuses:
        return "unhealthy"
    if "degraded" in statuses:
        return "degraded"
    return "healthy"


@router.get("/health", response_model=HealthResponse, summary="Health Check")
async def health_check(request: Request) -> HealthResponse:
    """
    Report application health.

    Includes database connectivity, poller state and event bus statistics.
    """
    services = {"monitor": check_monitor_health(getattr(request.app.state, "monitor", None))}

    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is not None:
        services["database"] = check_database_health(session_factory)

    overall_status = _overall_status(services)
    logger.debug("Health check completed", status=overall_status)

    return HealthResponse(
        success=True,
        health=HealthStatus(
            status=overall_status,
            services=services,
            uptime_seconds=time.time() - _app_start_time,
            version=__version__,
        ),
        request_id=getattr(request.state, "request_id", None),
    )
