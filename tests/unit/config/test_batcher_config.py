"""Unit tests for BatcherConfig.

Tests for batcher configuration including:
- Default value validation
- Environment variable loading
- Input validation
"""

from __future__ import annotations

import os
from dataclasses import FrozenInstanceError
from unittest.mock import patch

import pytest

from message_batcher.config.batcher_config import (
    DEFAULT_BATCHER_CONFIG,
    TEST_BATCHER_CONFIG,
    BatcherConfig,
)
from message_batcher.domain.errors.batcher import BatcherConfigurationError


class TestBatcherConfig:
    """Tests for BatcherConfig dataclass."""

    class TestDefaults:
        """Tests for default configuration values."""

        def test_default_max_batch_size(self) -> None:
            """Default max batch size should be 10."""
            assert BatcherConfig().max_batch_size == 10

        def test_default_max_wait_ms(self) -> None:
            """Default timer period should be 1000 ms."""
            assert BatcherConfig().max_wait_ms == 1000

        def test_default_concurrency_unbounded(self) -> None:
            """Concurrency limit is unset by default."""
            assert BatcherConfig().concurrent_processors is None

        def test_default_topic(self) -> None:
            """Default topic should be 'default'."""
            assert BatcherConfig().default_topic == "default"

        def test_max_wait_seconds(self) -> None:
            """Timer period converts to seconds."""
            assert BatcherConfig(max_wait_ms=250).max_wait_seconds == 0.25

        def test_config_is_immutable(self) -> None:
            """Configuration cannot change after construction."""
            config = BatcherConfig()
            with pytest.raises(FrozenInstanceError):
                config.max_batch_size = 5  # type: ignore[misc]

    class TestValidation:
        """Tests for configuration validation."""

        @pytest.mark.parametrize("value", [0, -1])
        def test_non_positive_batch_size_rejected(self, value: int) -> None:
            """max_batch_size must be positive."""
            with pytest.raises(BatcherConfigurationError, match="max_batch_size"):
                BatcherConfig(max_batch_size=value)

        @pytest.mark.parametrize("value", [0, -100])
        def test_non_positive_wait_rejected(self, value: int) -> None:
            """max_wait_ms must be positive."""
            with pytest.raises(BatcherConfigurationError, match="max_wait_ms"):
                BatcherConfig(max_wait_ms=value)

        def test_non_integer_batch_size_rejected(self) -> None:
            """max_batch_size must be an integer."""
            with pytest.raises(BatcherConfigurationError):
                BatcherConfig(max_batch_size=2.5)  # type: ignore[arg-type]

        def test_bool_wait_rejected(self) -> None:
            """Booleans are not accepted as integers."""
            with pytest.raises(BatcherConfigurationError):
                BatcherConfig(max_wait_ms=True)

        def test_non_positive_concurrency_rejected(self) -> None:
            """concurrent_processors must be positive when set."""
            with pytest.raises(BatcherConfigurationError, match="concurrent_processors"):
                BatcherConfig(concurrent_processors=0)

        def test_empty_default_topic_rejected(self) -> None:
            """default_topic must be non-empty."""
            with pytest.raises(BatcherConfigurationError, match="default_topic"):
                BatcherConfig(default_topic="")

        def test_configuration_error_is_value_error(self) -> None:
            """Callers catching ValueError also catch configuration errors."""
            with pytest.raises(ValueError):
                BatcherConfig(max_batch_size=0)

    class TestFromEnvironment:
        """Tests for environment variable loading."""

        def test_defaults_without_environment(self) -> None:
            """Unset variables fall back to defaults."""
            with patch.dict(os.environ, {}, clear=True):
                config = BatcherConfig.from_environment()

            assert config == BatcherConfig()

        def test_reads_environment(self) -> None:
            """All values can be overridden from the environment."""
            env = {
                "MESSAGE_BATCHER_MAX_BATCH_SIZE": "25",
                "MESSAGE_BATCHER_MAX_WAIT_MS": "5000",
                "MESSAGE_BATCHER_CONCURRENT_PROCESSORS": "2",
                "MESSAGE_BATCHER_DEFAULT_TOPIC": "alerts",
            }
            with patch.dict(os.environ, env, clear=True):
                config = BatcherConfig.from_environment()

            assert config.max_batch_size == 25
            assert config.max_wait_ms == 5000
            assert config.concurrent_processors == 2
            assert config.default_topic == "alerts"

        def test_invalid_integer_falls_back_to_default(self) -> None:
            """Unparseable integers use the default value."""
            with patch.dict(
                os.environ, {"MESSAGE_BATCHER_MAX_BATCH_SIZE": "lots"}, clear=True
            ):
                config = BatcherConfig.from_environment()

            assert config.max_batch_size == 10

        def test_out_of_range_value_still_validated(self) -> None:
            """Parsed but invalid values fail validation."""
            with patch.dict(os.environ, {"MESSAGE_BATCHER_MAX_WAIT_MS": "0"}, clear=True):
                with pytest.raises(BatcherConfigurationError):
                    BatcherConfig.from_environment()

    class TestPresets:
        """Tests for predefined configurations."""

        def test_default_preset(self) -> None:
            """DEFAULT_BATCHER_CONFIG uses defaults."""
            assert DEFAULT_BATCHER_CONFIG == BatcherConfig()

        def test_test_preset_is_small(self) -> None:
            """TEST_BATCHER_CONFIG has a small batch and short timer."""
            assert TEST_BATCHER_CONFIG.max_batch_size == 3
            assert TEST_BATCHER_CONFIG.max_wait_ms == 50
