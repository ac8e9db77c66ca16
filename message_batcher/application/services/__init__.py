"""Application services for the message batcher.

Available services:
- TopicQueueStore: Per-topic FIFO buffers of pending messages
- ProcessorDispatcher: Fan-out to processors with error isolation
- MessageBatcher: Triggers, flushing and lifecycle of the batching core
"""

from message_batcher.application.services.message_batcher_service import (
    BatcherState,
    MessageBatcher,
    create_message_batcher,
)
from message_batcher.application.services.processor_dispatcher import (
    DispatchMode,
    DispatchOutcome,
    ErrorReporter,
    ProcessorDispatcher,
)
from message_batcher.application.services.topic_queue_store import TopicQueueStore

__all__ = [
    "BatcherState",
    "DispatchMode",
    "DispatchOutcome",
    "ErrorReporter",
    "MessageBatcher",
    "ProcessorDispatcher",
    "TopicQueueStore",
    "create_message_batcher",
]
