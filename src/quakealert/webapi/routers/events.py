"""Seismic event snapshot and selection endpoints."""

from fastapi import APIRouter, Depends, Request

from ...config.logging import get_logger
from ...services import SeismicMonitor
from ..dependencies import get_monitor, get_request_id
from ..exceptions import NotFoundError
from ..models.responses import StatusResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/events")


@router.get(
    "",
    response_model=StatusResponse,
    summary="List Events",
    description="Current event snapshot, newest first",
)
async def list_events(request: Request, monitor: SeismicMonitor = Depends(get_monitor)):
    events = monitor.events
    return StatusResponse.create(
        data={
            "events": [event.model_dump(mode="json") for event in events],
            "count": len(events),
        },
        request_id=get_request_id(request),
    )


@router.get(
    "/selected",
    response_model=StatusResponse,
    summary="Get Selected Event",
    description="The selected event, defaulting to the newest one",
)
async def get_selected_event(
    request: Request, monitor: SeismicMonitor = Depends(get_monitor)
):
    event = monitor.selected_event
    return StatusResponse.create(
        data={"event": event.model_dump(mode="json") if event else None},
        request_id=get_request_id(request),
    )


@router.post(
    "/{event_id}/select",
    response_model=StatusResponse,
    summary="Select Event",
    description="Select an event from the current snapshot",
)
async def select_event(
    event_id: int, request: Request, monitor: SeismicMonitor = Depends(get_monitor)
):
    request_id = get_request_id(request)

    event = monitor.select_event(event_id)
    if event is None:
        raise NotFoundError("Event", str(event_id), request_id=request_id)

    return StatusResponse.create(
        data={"event": event.model_dump(mode="json")},
        message=f"Selected event near {event.location.city}",
        request_id=request_id,
    )
