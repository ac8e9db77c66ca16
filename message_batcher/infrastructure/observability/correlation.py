"""Batch correlation ID management.

Every topic flush gets its own batch ID, held in a context variable so the
ID is available across async boundaries. Tasks created while dispatching a
batch inherit the context, so log lines emitted inside processors carry the
batch ID of the batch they are handling.

Usage:
    # In the batcher (flush start)
    set_batch_id(generate_batch_id())

    # In processors
    log = structlog.get_logger().bind(batch_id=get_batch_id())

    # In structlog configuration
    processors = [..., batch_id_processor, ...]
"""

from contextvars import ContextVar, Token
from typing import Any
from uuid import uuid4

# Default is empty string to avoid None type issues
_batch_id: ContextVar[str] = ContextVar("batch_id", default="")


def generate_batch_id() -> str:
    """Generate a new batch ID (UUID4).

    Returns:
        A new UUID4 string suitable for batch correlation.
    """
    return str(uuid4())


def get_batch_id() -> str:
    """Get the current batch ID from context.

    Returns:
        The current batch ID or empty string if not set.
    """
    return _batch_id.get()


def set_batch_id(batch_id: str) -> Token[str]:
    """Set the batch ID in the current context.

    Args:
        batch_id: The batch ID to set.

    Returns:
        Token that restores the previous value via reset_batch_id().
    """
    return _batch_id.set(batch_id)


def reset_batch_id(token: Token[str]) -> None:
    """Restore the batch ID that was current before set_batch_id().

    Args:
        token: Token returned by set_batch_id().
    """
    _batch_id.reset(token)


def batch_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor to add batch_id to every log entry.

    Args:
        logger: The logger instance (unused, required by structlog).
        method_name: The logging method name (unused, required by structlog).
        event_dict: The event dictionary to modify.

    Returns:
        The event dictionary with batch_id added.
    """
    batch_id = get_batch_id()
    if batch_id:
        event_dict.setdefault("batch_id", batch_id)
    return event_dict
