"""
Integration test configuration.

Integration tests run the batcher with its real periodic timer, so they
use a short max_wait_ms and real sleeps instead of calling run_once().

Usage:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_example(fast_config: BatcherConfig) -> None:
        ...
"""

import pytest

from message_batcher.config.batcher_config import BatcherConfig

# Timer period used by integration tests, in milliseconds
FAST_WAIT_MS = 20


@pytest.fixture
def fast_config() -> BatcherConfig:
    """Configuration whose timer fires every FAST_WAIT_MS milliseconds."""
    return BatcherConfig(max_batch_size=100, max_wait_ms=FAST_WAIT_MS)


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Mark every test in this directory as an integration test."""
    for item in items:
        if "/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
