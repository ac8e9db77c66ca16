"""Application ports (interfaces) for the message batcher.

This module defines the abstract interfaces that infrastructure adapters
must implement. Ports enable dependency inversion and testability.

Available ports:
- MessageProcessorProtocol: Async batch delivery to a downstream sink
- SyncMessageProcessorProtocol: Sync batch delivery to a downstream sink
- MessageBatcherProtocol: Runtime operations exposed to producers
"""

from message_batcher.application.ports.message_batcher import MessageBatcherProtocol
from message_batcher.application.ports.message_processor import (
    ASYNC_OPERATION,
    SYNC_OPERATION,
    MessageProcessor,
    MessageProcessorProtocol,
    SyncMessageProcessorProtocol,
    processor_name,
    supports_async_dispatch,
    supports_sync_dispatch,
)

__all__: list[str] = [
    "ASYNC_OPERATION",
    "SYNC_OPERATION",
    "MessageBatcherProtocol",
    "MessageProcessor",
    "MessageProcessorProtocol",
    "SyncMessageProcessorProtocol",
    "processor_name",
    "supports_async_dispatch",
    "supports_sync_dispatch",
]
