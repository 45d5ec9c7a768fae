"""Logging configuration and utilities."""

import sys
import logging
import structlog
from structlog.stdlib import LoggerFactory

from esplora_client.models.config import EsploraSettings


def setup_logging(level: str = "WARNING", log_format: str = "text") -> None:
    """Setup structured logging over the standard library logging module."""

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",
        stream=sys.stderr,
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format.lower() == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_logging_from_settings(settings: EsploraSettings) -> None:
    setup_logging(settings.log_level, settings.log_format)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger that always emits through the standard library
    logger `name`, whether or not `setup_logging` has run. Output is then
    governed by the host's logging configuration instead of going to stdout.
    """
    return structlog.wrap_logger(logging.getLogger(name),
                                 wrapper_class=structlog.stdlib.BoundLogger)
