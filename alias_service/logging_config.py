"""
Structured logging setup.

JSON output in production (or when LOG_FORMAT=json), pretty console output
otherwise. Modules get a logger through get_logger(__name__) and log
snake_case event names with key/value context.
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import Processor

from alias_service.config import Settings, settings as default_settings


def configure_stdlib_logging(level: str) -> None:
    """Route stdlib logging to stdout at the configured level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    # Reduce noise from third-party libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def configure_structlog(json_output: bool, cache_loggers: bool = True) -> None:
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True, pad_event_to=15, sort_keys=False)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # capture_logs in tests only sees loggers that are not cached
        cache_logger_on_first_use=cache_loggers,
    )


def setup_logging(config: Optional[Settings] = None) -> None:
    """
    Initialize logging for the application.

    Should be called once, early in application startup (in main.py).
    """
    config = config or default_settings
    json_output = config.log_format == "json" or config.environment == "production"

    configure_stdlib_logging(config.log_level)
    configure_structlog(json_output, cache_loggers=config.environment == "production")

    structlog.get_logger(__name__).info(
        "logging_initialized",
        env=config.environment,
        log_level=config.log_level,
        log_format="json" if json_output else "console",
    )


def get_logger(name: str) -> BoundLogger:
    """
    Get a structlog logger.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("alias_created", alias="abc123", url_id=1)
    """
    return structlog.get_logger(name)
