"""
QuakeAlert - Main application entry point.

Polls a seismic event feed, raises severe alerts and serves the dashboard API
through which alerts are broadcast and SMS alerts are managed.
"""

import uvicorn
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from quakealert.config.logging import get_logger
from quakealert.config.settings import get_settings
from quakealert.utils.config import initialize_application


def main() -> None:
    """Main application entry point."""
    # Initialize application (logging, config, data directory and tables)
    initialize_application()

    logger = get_logger(__name__)
    settings = get_settings()

    logger.info(
        "Starting QuakeAlert",
        environment=settings.environment,
        host=settings.endpoint_host,
        port=settings.endpoint_port,
        poll_interval_seconds=settings.poll_interval_seconds,
        broadcast_topic_configured=bool(settings.broadcast_topic),
    )

    try:
        uvicorn.run(
            "quakealert.webapi.app:app",
            host=settings.endpoint_host,
            port=settings.endpoint_port,
            reload=settings.api_reload,
            log_level=settings.api_log_level.lower(),
        )
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
        print("\nShutting down...")


if __name__ == "__main__":
    main()
