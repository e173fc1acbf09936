"""Broadcast topic configuration endpoints."""

from fastapi import APIRouter, Depends, Request

from ...config.logging import get_logger
from ...services import SeismicMonitor
from ..dependencies import get_monitor, get_request_id
from ..models.requests import TopicRequest
from ..models.responses import StatusResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/broadcast")


def _topic_data(monitor: SeismicMonitor) -> dict:
    return {
        "topic": monitor.alert_log.topic,
        "ready": monitor.alert_log.channel_ready,
    }


@router.get("/topic", response_model=StatusResponse, summary="Get Broadcast Topic")
async def get_topic(request: Request, monitor: SeismicMonitor = Depends(get_monitor)):
    return StatusResponse.create(data=_topic_data(monitor), request_id=get_request_id(request))


@router.put("/topic", response_model=StatusResponse, summary="Set Broadcast Topic")
async def set_topic(
    topic_request: TopicRequest,
    request: Request,
    monitor: SeismicMonitor = Depends(get_monitor),
):
    monitor.configure_broadcast_topic(topic_request.topic)
    return StatusResponse.create(
        data=_topic_data(monitor),
        message="Broadcast topic updated",
        request_id=get_request_id(request),
    )


@router.post(
    "/topic/generate",
    response_model=StatusResponse,
    summary="Generate Broadcast Topic",
    description="Create and activate a fresh unique topic",
)
async def generate_topic(request: Request, monitor: SeismicMonitor = Depends(get_monitor)):
    topic = monitor.generate_broadcast_topic()
    logger.info("Generated broadcast topic", topic=topic)
    return StatusResponse.create(
        data=_topic_data(monitor),
        message="Broadcast topic generated",
        request_id=get_request_id(request),
    )
