"""Domain models for batched notifications."""

from message_batcher.domain.models.message import (
    DEFAULT_TOPIC,
    ErrorInfo,
    Message,
    NotificationLevel,
)

__all__ = [
    "DEFAULT_TOPIC",
    "ErrorInfo",
    "Message",
    "NotificationLevel",
]
