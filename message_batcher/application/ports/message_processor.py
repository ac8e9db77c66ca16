"""Message processor port.

Protocols defining the capability a downstream sink implements to receive
batches of messages. A processor supplies either or both dispatch
operations:

- process_batch: async, used by flush() and the periodic timer
- process_batch_sync: sync, used by flush_sync()

Developer Golden Rules:
1. Protocol-based DI - all sinks go through this port
2. No cross-mode fallback - a missing operation is a dispatch error
3. Batches are read-only snapshots - processors MUST NOT mutate them
4. Retries are the processor's responsibility, never the batcher's
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from message_batcher.domain.models.message import Message

# Name of the operation required by each dispatch mode
ASYNC_OPERATION = "process_batch"
SYNC_OPERATION = "process_batch_sync"


@runtime_checkable
class MessageProcessorProtocol(Protocol):
    """Protocol for processors that accept batches asynchronously.

    Attributes:
        name: Unique name among the processors registered with a batcher.
    """

    name: str

    async def process_batch(self, messages: Sequence[Message]) -> Any:
        """Deliver a batch of messages.

        Args:
            messages: Read-only snapshot of the batch, in enqueue order.

        Returns:
            Processor-specific result (ignored by the batcher).

        Raises:
            Exception: Any failure; the batcher isolates and reports it.
        """
        ...


@runtime_checkable
class SyncMessageProcessorProtocol(Protocol):
    """Protocol for processors that accept batches synchronously.

    Attributes:
        name: Unique name among the processors registered with a batcher.
    """

    name: str

    def process_batch_sync(self, messages: Sequence[Message]) -> Any:
        """Deliver a batch of messages, blocking until done.

        Args:
            messages: Read-only snapshot of the batch, in enqueue order.

        Returns:
            Processor-specific result (ignored by the batcher).
        """
        ...


# Either capability is acceptable at registration time
MessageProcessor = MessageProcessorProtocol | SyncMessageProcessorProtocol


def supports_async_dispatch(processor: object) -> bool:
    """Check whether a processor implements process_batch."""
    return callable(getattr(processor, ASYNC_OPERATION, None))


def supports_sync_dispatch(processor: object) -> bool:
    """Check whether a processor implements process_batch_sync."""
    return callable(getattr(processor, SYNC_OPERATION, None))


def processor_name(processor: object) -> str:
    """Get the registered name of a processor.

    Args:
        processor: The processor to inspect.

    Returns:
        The processor's name attribute.

    Raises:
        TypeError: If the processor has no usable name.
    """
    name = getattr(processor, "name", None)
    if not isinstance(name, str) or not name:
        raise TypeError(
            f"Message processor {processor!r} must have a non-empty string 'name'"
        )
    return name
