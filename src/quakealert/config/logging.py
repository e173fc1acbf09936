"""Structured logging for the alerting pipeline, built on structlog."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

APP_NAME = "quakealert"

FILE_SIZE_UNITS = {
    "KB": 1024,
    "MB": 1024 * 1024,
    "GB": 1024 * 1024 * 1024,
}

# Marks the rotating handler installed here so repeated setup replaces it
_FILE_HANDLER_NAME = "quakealert-file"


def app_context_processor(environment: str) -> Processor:
    """Stamp every record with the application name and deployment environment."""

    def add_app_context(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("app", APP_NAME)
        event_dict.setdefault("environment", environment)
        return event_dict

    return add_app_context


def setup_logging(
    level: str = "INFO",
    format_type: str = "structured",
    file_enabled: bool = True,
    file_path: str = "data/quakealert.log",
    max_file_size: str = "10MB",
    backup_count: int = 5,
    environment: str = "development",
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: 'structured' for JSON lines when writing a file, 'plain' for console output
        file_enabled: Also write to a rotating log file
        file_path: Path of the log file
        max_file_size: Rotation size such as '10MB'
        backup_count: Number of rotated files to keep
        environment: Deployment environment added to every record
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    logging.getLogger().setLevel(log_level)

    processors: list[Processor] = [
        structlog.processors.TimeStamper(fmt="ISO", utc=True),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        app_context_processor(environment),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if format_type == "structured" and file_enabled:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=format_type == "plain"))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    _install_file_handler(
        file_path if file_enabled else None, max_file_size, backup_count, log_level
    )


def setup_logging_from_settings(settings) -> None:
    """Configure logging from the application ``Settings``."""
    setup_logging(
        level=settings.log_level,
        format_type=settings.log_format,
        file_enabled=settings.log_file_enabled,
        file_path=settings.log_file_path,
        max_file_size=settings.log_max_file_size,
        backup_count=settings.log_backup_count,
        environment=settings.environment,
    )


def _install_file_handler(
    file_path: Optional[str], max_file_size: str, backup_count: int, log_level: int
) -> None:
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _FILE_HANDLER_NAME:
            root.removeHandler(handler)
            handler.close()

    if file_path is None:
        return

    log_file = Path(file_path)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file,
        maxBytes=parse_file_size(max_file_size),
        backupCount=backup_count,
    )
    file_handler.set_name(_FILE_HANDLER_NAME)
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(file_handler)


def parse_file_size(size: str) -> int:
    """Convert '512KB', '10MB' or a plain byte count into bytes."""
    size = size.strip().upper()
    for suffix, multiplier in FILE_SIZE_UNITS.items():
        if size.endswith(suffix):
            return int(size[: -len(suffix)].strip()) * multiplier
    return int(size)


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, usually named after the calling module."""
    return structlog.get_logger(name)
