"""Severe alert slot and alert log endpoints."""

from fastapi import APIRouter, Depends, Request

from ...config.logging import get_logger
from ...core.models import AlertStatus
from ...services import SeismicMonitor
from ..dependencies import get_monitor, get_request_id
from ..exceptions import ConfigurationError, NotFoundError
from ..models.responses import MessageResponse, StatusResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/alerts")


@router.get(
    "/severe",
    response_model=StatusResponse,
    summary="Get Severe Alert",
    description="The currently displayed severe alert, if any",
)
async def get_severe_alert(
    request: Request, monitor: SeismicMonitor = Depends(get_monitor)
):
    event = monitor.current_severe_alert
    return StatusResponse.create(
        data={"event": event.model_dump(mode="json") if event else None},
        request_id=get_request_id(request),
    )


@router.delete(
    "/severe",
    response_model=MessageResponse,
    summary="Dismiss Severe Alert",
)
async def dismiss_severe_alert(
    request: Request, monitor: SeismicMonitor = Depends(get_monitor)
):
    monitor.dismiss_severe_alert()
    return MessageResponse.create("Severe alert dismissed", request_id=get_request_id(request))


@router.get(
    "/log",
    response_model=StatusResponse,
    summary="List Alert Log",
    description="All dispatch-eligible alerts with their broadcast state",
)
async def list_alert_log(request: Request, monitor: SeismicMonitor = Depends(get_monitor)):
    entries = monitor.alert_log.entries()
    return StatusResponse.create(
        data={"entries": [entry.to_dict() for entry in entries], "count": len(entries)},
        request_id=get_request_id(request),
    )


@router.get(
    "/log/latest-sent",
    response_model=StatusResponse,
    summary="Latest Sent Broadcast",
)
async def get_latest_sent(request: Request, monitor: SeismicMonitor = Depends(get_monitor)):
    entry = monitor.alert_log.latest_sent()
    return StatusResponse.create(
        data={"entry": entry.to_dict() if entry else None},
        request_id=get_request_id(request),
    )


@router.post(
    "/log/{entry_id}/broadcast",
    response_model=StatusResponse,
    summary="Send Broadcast",
    description="Push an alert log entry to the broadcast topic; retries failed entries",
)
async def send_broadcast(
    entry_id: int, request: Request, monitor: SeismicMonitor = Depends(get_monitor)
):
    """
    Send (or re-send) the broadcast for an alert log entry.

    A delivery failure is not an HTTP error: the entry is returned with status
    ``failed`` and the reason, and the current notification describes it.
    """
    request_id = get_request_id(request)

    if monitor.alert_log.get(entry_id) is None:
        raise NotFoundError("Alert log entry", str(entry_id), request_id=request_id)

    entry = await monitor.send_broadcast(entry_id)
    if entry is None:
        raise ConfigurationError(
            "broadcast_topic", "broadcast channel not configured", request_id=request_id
        )

    notification = monitor.presenter.current
    logger.info(
        "Broadcast request handled",
        entry_id=entry_id,
        status=entry.status.value,
        request_id=request_id,
    )

    return StatusResponse.create(
        data={
            "entry": entry.to_dict(),
            "notification": notification.to_dict() if notification else None,
        },
        message="Broadcast sent" if entry.status == AlertStatus.SENT else None,
        request_id=request_id,
    )
