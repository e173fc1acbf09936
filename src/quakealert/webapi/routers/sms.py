"""SMS alert subscription endpoints."""

from fastapi import APIRouter, Depends, Request

from ...config.logging import get_logger
from ...services import SeismicMonitor
from ..dependencies import get_monitor, get_request_id
from ..models.requests import SmsSubscribeRequest
from ..models.responses import StatusResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/sms")


def _subscription_data(monitor: SeismicMonitor) -> dict:
    notification = monitor.presenter.current
    return {
        **monitor.sms.to_dict(),
        "notification": notification.to_dict() if notification else None,
    }


@router.get("", response_model=StatusResponse, summary="Get SMS Subscription")
async def get_subscription(request: Request, monitor: SeismicMonitor = Depends(get_monitor)):
    return StatusResponse.create(
        data=monitor.sms.to_dict(), request_id=get_request_id(request)
    )


@router.post(
    "/subscribe",
    response_model=StatusResponse,
    summary="Subscribe to SMS Alerts",
    description="Register a phone number; the outcome is reported in the status",
)
async def subscribe(
    subscribe_request: SmsSubscribeRequest,
    request: Request,
    monitor: SeismicMonitor = Depends(get_monitor),
):
    status = await monitor.subscribe_sms(subscribe_request.phone_number)
    logger.info("SMS subscribe handled", status=status.value)
    return StatusResponse.create(
        data=_subscription_data(monitor), request_id=get_request_id(request)
    )


@router.post("/unsubscribe", response_model=StatusResponse, summary="Unsubscribe from SMS Alerts")
async def unsubscribe(request: Request, monitor: SeismicMonitor = Depends(get_monitor)):
    status = await monitor.unsubscribe_sms()
    logger.info("SMS unsubscribe handled", status=status.value)
    return StatusResponse.create(
        data=_subscription_data(monitor), request_id=get_request_id(request)
    )
