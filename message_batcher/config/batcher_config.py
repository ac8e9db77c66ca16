"""Message batcher configuration.

This module defines the batching thresholds with environment variable
overrides for production tuning. A configuration is immutable: changing it
requires constructing a new batcher.

Environment Variables:
- MESSAGE_BATCHER_MAX_BATCH_SIZE: Pending messages per topic that trigger
  an immediate flush (default: 10)
- MESSAGE_BATCHER_MAX_WAIT_MS: Period of the flush timer in milliseconds
  (default: 1000)
- MESSAGE_BATCHER_CONCURRENT_PROCESSORS: Max processor calls in flight per
  batch (default: unbounded)
- MESSAGE_BATCHER_DEFAULT_TOPIC: Topic used by info/warning/error
  (default: "default")
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from message_batcher.domain.errors.batcher import BatcherConfigurationError
from message_batcher.domain.models.message import DEFAULT_TOPIC


def _get_int_env(key: str, default: int | None) -> int | None:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class BatcherConfig:
    """Configuration for a message batcher.

    Attributes:
        max_batch_size: Pending messages in a topic that trigger an
                        immediate flush of that topic. Must be positive.
        max_wait_ms: Period of the flush timer in milliseconds. Every tick
                     flushes all topics with pending messages. Must be positive.
        concurrent_processors: Limit on processor calls in flight for
                               one batch. None means no limit.
        default_topic: Topic used by the level-specific convenience operations.
    """

    max_batch_size: int = 10
    max_wait_ms: int = 1000
    concurrent_processors: int | None = None
    default_topic: str = DEFAULT_TOPIC

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if isinstance(self.max_batch_size, bool) or not isinstance(self.max_batch_size, int):
            raise BatcherConfigurationError(
                "max_batch_size", self.max_batch_size, "must be an integer"
            )
        if self.max_batch_size < 1:
            raise BatcherConfigurationError(
                "max_batch_size", self.max_batch_size, "must be positive"
            )
        if isinstance(self.max_wait_ms, bool) or not isinstance(self.max_wait_ms, int):
            raise BatcherConfigurationError(
                "max_wait_ms", self.max_wait_ms, "must be an integer"
            )
        if self.max_wait_ms < 1:
            raise BatcherConfigurationError(
                "max_wait_ms", self.max_wait_ms, "must be positive"
            )
        if self.concurrent_processors is not None and self.concurrent_processors < 1:
            raise BatcherConfigurationError(
                "concurrent_processors",
                self.concurrent_processors,
                "must be positive when set",
            )
        if not self.default_topic:
            raise BatcherConfigurationError(
                "default_topic", self.default_topic, "must be a non-empty string"
            )

    @property
    def max_wait_seconds(self) -> float:
        """Flush timer period in seconds."""
        return self.max_wait_ms / 1000.0

    @classmethod
    def from_environment(cls) -> "BatcherConfig":
        """Create config from environment variables with defaults.

        Invalid (non-integer) values fall back to the defaults; values that
        parse but are out of range still fail validation.

        Returns:
            BatcherConfig with values from environment or defaults.
        """
        return cls(
            max_batch_size=_get_int_env("MESSAGE_BATCHER_MAX_BATCH_SIZE", 10),
            max_wait_ms=_get_int_env("MESSAGE_BATCHER_MAX_WAIT_MS", 1000),
            concurrent_processors=_get_int_env(
                "MESSAGE_BATCHER_CONCURRENT_PROCESSORS", None
            ),
            default_topic=os.environ.get("MESSAGE_BATCHER_DEFAULT_TOPIC", DEFAULT_TOPIC),
        )


# Pre-defined configurations for common use cases

# Default production config
DEFAULT_BATCHER_CONFIG = BatcherConfig()

# Testing config with a small batch size and short timer for unit tests
TEST_BATCHER_CONFIG = BatcherConfig(
    max_batch_size=3,
    max_wait_ms=50,
)
