"""Configuration module for the message batcher.

Available Configurations:
- BatcherConfig: Batch size and flush timer thresholds
"""

from message_batcher.config.batcher_config import (
    DEFAULT_BATCHER_CONFIG,
    TEST_BATCHER_CONFIG,
    BatcherConfig,
)

__all__ = [
    "BatcherConfig",
    "DEFAULT_BATCHER_CONFIG",
    "TEST_BATCHER_CONFIG",
]
