"""
Pytest configuration and shared fixtures for message batcher tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async function mocking
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

from collections.abc import Iterator

import pytest

from message_batcher.bootstrap.batcher_registry import reset_message_batcher
from message_batcher.config.batcher_config import BatcherConfig
from message_batcher.infrastructure.stubs import (
    AsyncRecordingProcessorStub,
    RecordingProcessorStub,
    SyncRecordingProcessorStub,
)


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from message_batcher import __version__

    return __version__


@pytest.fixture
def batcher_config() -> BatcherConfig:
    """Small batch size and a timer long enough never to fire in unit tests."""
    return BatcherConfig(max_batch_size=3, max_wait_ms=60_000)


@pytest.fixture
def processor() -> RecordingProcessorStub:
    """Processor supporting both dispatch modes."""
    return RecordingProcessorStub(name="primary")


@pytest.fixture
def async_only_processor() -> AsyncRecordingProcessorStub:
    """Processor supporting async dispatch only."""
    return AsyncRecordingProcessorStub(name="async-only")


@pytest.fixture
def sync_only_processor() -> SyncRecordingProcessorStub:
    """Processor supporting sync dispatch only."""
    return SyncRecordingProcessorStub(name="sync-only")


@pytest.fixture(autouse=True)
def _reset_shared_batcher() -> Iterator[None]:
    """Ensure no shared batcher leaks between tests."""
    yield
    reset_message_batcher()
