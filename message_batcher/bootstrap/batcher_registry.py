"""Bootstrap wiring for a process-wide shared message batcher.

Opt-in get-or-create access to a single batcher instance. The first call
creates and starts the batcher; later calls return the same instance and
ignore their arguments. Code that needs its own configuration should call
create_message_batcher() directly instead.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog

from message_batcher.application.ports.message_processor import (
    MessageProcessor,
    processor_name,
)
from message_batcher.application.services.message_batcher_service import (
    MessageBatcher,
    create_message_batcher,
)
from message_batcher.application.services.processor_dispatcher import ErrorReporter
from message_batcher.config.batcher_config import BatcherConfig

logger = structlog.get_logger()

_batcher_instance: MessageBatcher | None = None
_batcher_lock: asyncio.Lock | None = None


def _get_batcher_lock() -> asyncio.Lock:
    """Get or create the registry lock for the current event loop.

    This lazily creates the lock to avoid event loop binding issues
    when the module is imported before an event loop exists.

    Returns:
        The asyncio.Lock for registry access.
    """
    global _batcher_lock
    if _batcher_lock is None:
        _batcher_lock = asyncio.Lock()
    return _batcher_lock


async def get_message_batcher(
    processors: Sequence[MessageProcessor] = (),
    config: BatcherConfig | None = None,
    *,
    error_reporter: ErrorReporter | None = None,
) -> MessageBatcher:
    """Get the shared batcher, creating and starting it on first use.

    Args:
        processors: Base processors, used only when creating the instance.
        config: Configuration, used only when creating the instance.
        error_reporter: Error reporter, used only when creating the instance.

    Returns:
        The shared MessageBatcher.
    """
    global _batcher_instance
    if _batcher_instance is None:
        async with _get_batcher_lock():
            if _batcher_instance is None:
                _batcher_instance = await create_message_batcher(
                    processors, config, error_reporter=error_reporter
                )
                return _batcher_instance

    requested = [processor_name(p) for p in processors]
    if (config is not None and config != _batcher_instance.config) or (
        requested and requested != _batcher_instance.processor_names
    ):
        logger.warning(
            "shared_batcher_config_ignored",
            requested_processors=requested,
            active_processors=_batcher_instance.processor_names,
        )
    return _batcher_instance


def reset_message_batcher() -> None:
    """Destroy and forget the shared batcher (for testing).

    Also resets the lock to ensure clean state across different
    event loops in test scenarios.
    """
    global _batcher_instance, _batcher_lock
    if _batcher_instance is not None:
        _batcher_instance.destroy()
    _batcher_instance = None
    _batcher_lock = None
