"""Structured logging configuration with structlog.

This module provides centralized structlog configuration for applications
embedding the message batcher, supporting both production (JSON) and
development (console) output modes.

Log Entry Format:
    {
        "timestamp": "2024-01-01T00:00:00.000000Z",
        "level": "info",
        "event": "batch_dispatched",
        "batch_id": "uuid",
        "service": "message_batcher",
        ...additional context
    }

Usage:
    # At application startup
    from message_batcher.infrastructure.observability import configure_structlog

    configure_structlog(environment="production")  # JSON output
    configure_structlog(environment="development")  # Console output
"""

import logging
import os
from typing import cast

import structlog
from structlog.typing import Processor

from message_batcher.infrastructure.observability.correlation import batch_id_processor

# Environment variable for log level (default: INFO)
LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _get_log_level() -> int:
    """Get the configured log level from environment.

    Returns:
        The logging level integer (e.g., logging.INFO).
    """
    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.INFO)


def configure_structlog(environment: str = "production") -> None:
    """Configure structlog for the application.

    Should be called once at application startup. The batcher itself only
    obtains loggers and never configures structlog.

    Args:
        environment: 'production' for JSON output, 'development' for console.
                    Defaults to 'production'.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        cast(Processor, batch_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger_for_service(
    service_name: str, component: str = "message_batcher"
) -> structlog.BoundLogger:
    """Get a pre-bound logger for a service.

    Args:
        service_name: The name of the service.
        component: The component type (default: "message_batcher").

    Returns:
        A BoundLogger with service and component bound.
    """
    return structlog.get_logger().bind(
        service=service_name,
        component=component,
    )
