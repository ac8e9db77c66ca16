"""Observability infrastructure for structured logging and batch correlation.

This module provides cross-cutting observability concerns:
- Structured JSON logging with structlog
- Batch ID management for correlating dispatch logs
"""

from message_batcher.infrastructure.observability.correlation import (
    batch_id_processor,
    generate_batch_id,
    get_batch_id,
    reset_batch_id,
    set_batch_id,
)
from message_batcher.infrastructure.observability.logging import (
    configure_structlog,
    get_logger_for_service,
)

__all__: list[str] = [
    "batch_id_processor",
    "configure_structlog",
    "generate_batch_id",
    "get_batch_id",
    "get_logger_for_service",
    "reset_batch_id",
    "set_batch_id",
]
