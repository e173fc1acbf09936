"""Application bootstrap utilities."""

from pathlib import Path

from ..config.logging import get_logger, setup_logging_from_settings
from ..config.settings import get_settings


def ensure_data_directory() -> None:
    """Ensure the data directory and database tables exist."""
    logger = get_logger(__name__)

    settings = get_settings()
    data_path = Path(settings.data_directory)
    data_path.mkdir(parents=True, exist_ok=True)

    logger.info("Ensured data directory exists", path=str(data_path))

    from ..ormdb.database import create_tables

    create_tables()
    logger.info("Ensured database tables exist")


def initialize_application() -> None:
    """Initialize application configuration, logging and storage."""
    settings = get_settings()

    setup_logging_from_settings(settings)

    ensure_data_directory()

    logger = get_logger(__name__)
    logger.info(
        "Application initialized successfully",
        environment=settings.environment,
        debug=settings.debug,
        data_dir=settings.data_directory,
        feed_url=settings.get_feed_url(),
    )
