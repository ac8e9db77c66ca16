"""
Message Batcher - batched notification dispatch

Collects info/warning/error notifications per topic and delivers them in
batches to one or more message processors, either when a topic reaches its
size threshold or when the periodic flush timer fires.

Usage:
    from message_batcher import BatcherConfig, create_message_batcher

    batcher = await create_message_batcher(
        [processor],
        BatcherConfig(max_batch_size=20, max_wait_ms=5000),
    )
    batcher.info("deploy started")
    batcher.error("deploy failed", error=exc)
    await batcher.flush()
    batcher.destroy()
"""

from message_batcher.application.services.message_batcher_service import (
    BatcherState,
    MessageBatcher,
    create_message_batcher,
)
from message_batcher.application.services.processor_dispatcher import (
    DispatchMode,
    DispatchOutcome,
)
from message_batcher.config.batcher_config import BatcherConfig
from message_batcher.domain.models.message import (
    DEFAULT_TOPIC,
    ErrorInfo,
    Message,
    NotificationLevel,
)
from message_batcher.infrastructure.adapters.custom_processor import CustomProcessor

__version__ = "0.1.0"
__all__ = [
    "__version__",
    "BatcherConfig",
    "BatcherState",
    "CustomProcessor",
    "DEFAULT_TOPIC",
    "DispatchMode",
    "DispatchOutcome",
    "ErrorInfo",
    "Message",
    "MessageBatcher",
    "NotificationLevel",
    "create_message_batcher",
]
