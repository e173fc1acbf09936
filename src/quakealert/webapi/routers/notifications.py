"""Transient notification endpoints."""

from fastapi import APIRouter, Depends, Request

from ...services import SeismicMonitor
from ..dependencies import get_monitor, get_request_id
from ..models.responses import MessageResponse, StatusResponse

router = APIRouter(prefix="/notifications")


@router.get("/current", response_model=StatusResponse, summary="Current Notification")
async def get_current_notification(
    request: Request, monitor: SeismicMonitor = Depends(get_monitor)
):
    notification = monitor.presenter.current
    return StatusResponse.create(
        data={"notification": notification.to_dict() if notification else None},
        request_id=get_request_id(request),
    )


@router.delete("/current", response_model=MessageResponse, summary="Dismiss Notification")
async def dismiss_notification(
    request: Request, monitor: SeismicMonitor = Depends(get_monitor)
):
    monitor.dismiss_notification()
    return MessageResponse.create("Notification dismissed", request_id=get_request_id(request))
