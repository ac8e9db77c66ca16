"""Bootstrap wiring for shared batcher access."""

from message_batcher.bootstrap.batcher_registry import (
    get_message_batcher,
    reset_message_batcher,
)

__all__ = ["get_message_batcher", "reset_message_batcher"]
