"""Domain errors for the message batcher."""

from message_batcher.domain.errors.batcher import (
    BatcherConfigurationError,
    BatcherDestroyedError,
    MissingDispatchModeError,
    ProcessorDispatchError,
    ProcessorNotRegisteredError,
)

__all__ = [
    "BatcherConfigurationError",
    "BatcherDestroyedError",
    "MissingDispatchModeError",
    "ProcessorDispatchError",
    "ProcessorNotRegisteredError",
]
