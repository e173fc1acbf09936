"""User settings and theme endpoints."""

from fastapi import APIRouter, Depends, Request

from ...config.logging import get_logger
from ...services import SeismicMonitor
from ..dependencies import get_monitor, get_request_id
from ..exceptions import ValidationException
from ..models.requests import SettingsUpdateRequest, ThemeRequest
from ..models.responses import StatusResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/settings")


@router.get("", response_model=StatusResponse, summary="Get Alert Settings")
async def get_alert_settings(
    request: Request, monitor: SeismicMonitor = Depends(get_monitor)
):
    return StatusResponse.create(
        data=monitor.settings.to_storage(), request_id=get_request_id(request)
    )


@router.patch(
    "",
    response_model=StatusResponse,
    summary="Update Alert Settings",
    description="Partially update the alert threshold and sound",
)
async def update_alert_settings(
    update: SettingsUpdateRequest,
    request: Request,
    monitor: SeismicMonitor = Depends(get_monitor),
):
    request_id = get_request_id(request)

    changes = update.changes()
    if not changes:
        raise ValidationException("No settings supplied", request_id=request_id)

    settings = monitor.update_settings(changes)
    return StatusResponse.create(
        data=settings.to_storage(), message="Settings updated", request_id=request_id
    )


@router.get("/theme", response_model=StatusResponse, summary="Get Theme")
async def get_theme(request: Request, monitor: SeismicMonitor = Depends(get_monitor)):
    return StatusResponse.create(
        data={"theme": monitor.theme.value}, request_id=get_request_id(request)
    )


@router.put("/theme", response_model=StatusResponse, summary="Set Theme")
async def set_theme(
    theme_request: ThemeRequest,
    request: Request,
    monitor: SeismicMonitor = Depends(get_monitor),
):
    theme = monitor.set_theme(theme_request.theme)
    return StatusResponse.create(
        data={"theme": theme.value}, request_id=get_request_id(request)
    )
