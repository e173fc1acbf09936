"""FastAPI application exposing the seismic monitor to the dashboard."""

import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import sessionmaker

from .. import __version__
from ..config.logging import get_logger
from ..config.settings import get_settings
from ..ormdb.database import create_tables, get_session_factory
from ..services import SeismicMonitor
from .exceptions import setup_exception_handlers
from .health import router as health_router
from .models.responses import MessageResponse
from .routers import (
    alerts_router,
    broadcast_router,
    events_router,
    notifications_router,
    settings_router,
    sms_router,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the monitor if none was injected, start it, and shut it down on exit."""
    logger.info("Starting QuakeAlert API")

    if app.state.monitor is None:
        settings = get_settings()
        session_factory = get_session_factory()
        create_tables()

        app.state.session_factory = session_factory
        app.state.monitor = SeismicMonitor.from_settings(settings, session_factory)

    monitor: SeismicMonitor = app.state.monitor
    try:
        await monitor.start()
    except Exception as e:
        logger.error("Failed to start seismic monitor", error=str(e), exc_info=True)
        raise RuntimeError(f"Seismic monitor start failed: {str(e)}")

    logger.info("QuakeAlert API started successfully")

    yield

    logger.info("Shutting down QuakeAlert API")
    try:
        await monitor.shutdown()
    except Exception as e:
        logger.error("Error during monitor shutdown", error=str(e), exc_info=True)

    logger.info("QuakeAlert API shutdown completed")


async def add_request_id_middleware(request: Request, call_next):
    """Add unique request ID to each request for tracking."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    logger.info(
        "Request started",
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        remote_addr=request.client.host if request.client else None,
    )

    response = await call_next(request)

    response.headers["X-Request-ID"] = request_id

    logger.info(
        "Request completed",
        request_id=request_id,
        status_code=response.status_code,
        method=request.method,
        path=request.url.path,
    )

    return response


def create_app(
    monitor: Optional[SeismicMonitor] = None,
    session_factory: Optional[sessionmaker] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        monitor: Pre-built monitor to serve; built from configuration on startup if omitted
        session_factory: Session factory used by the database health check
    """
    app = FastAPI(
        title="QuakeAlert API",
        description="""
        Alert detection and dispatch for a seismic monitoring dashboard.

        ## Features

        * **Event Feed**: Latest seismic events, refreshed on a fixed interval
        * **Severe Alerts**: Timed critical alert with audio cue
        * **Alert Log**: Alert-worthy events with push broadcast send state
        * **SMS Alerts**: Subscription management against an SMS gateway
        * **Settings**: Alert threshold, sound and theme, persisted across restarts
        """,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.monitor = monitor
    app.state.session_factory = session_factory

    app.middleware("http")(add_request_id_middleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(health_router, prefix="/api/v1", tags=["Health & Status"])
    app.include_router(events_router, prefix="/api/v1", tags=["Events"])
    app.include_router(alerts_router, prefix="/api/v1", tags=["Alerts & Broadcast"])
    app.include_router(broadcast_router, prefix="/api/v1", tags=["Alerts & Broadcast"])
    app.include_router(settings_router, prefix="/api/v1", tags=["Settings"])
    app.include_router(sms_router, prefix="/api/v1", tags=["SMS Alerts"])
    app.include_router(notifications_router, prefix="/api/v1", tags=["Notifications"])

    @app.get(
        "/",
        response_model=MessageResponse,
        summary="API Root Endpoint",
    )
    async def root(request: Request) -> MessageResponse:
        return MessageResponse.create(
            message="QuakeAlert API", request_id=request.state.request_id
        )

    return app


app = create_app()
