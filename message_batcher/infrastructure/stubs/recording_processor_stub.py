"""Recording message processor stubs.

In-memory processor implementations for development and testing. They
record every batch they receive and provide configurable success/failure
behavior.

Three shapes are provided so that both dispatch modes can be exercised:

- RecordingProcessorStub: implements process_batch and process_batch_sync
- AsyncRecordingProcessorStub: implements process_batch only
- SyncRecordingProcessorStub: implements process_batch_sync only

Developer Golden Rules:
1. Configurable success/failure for testing
2. Track every received batch for verification
3. Never mutate the received batch
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

import structlog

from message_batcher.domain.models.message import Message

logger = structlog.get_logger()


class StubProcessorFailure(RuntimeError):
    """Raised by a stub processor configured to fail."""


@dataclass(frozen=True)
class ReceivedBatch:
    """Record of a batch handed to a stub processor.

    Attributes:
        messages: The batch as received.
        mode: Dispatch mode that delivered the batch ("async" or "sync").
        received_at: When the batch was received.
        success: Whether the stub reported success.
    """

    messages: tuple[Message, ...]
    mode: str
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    success: bool = True

    @property
    def texts(self) -> list[str]:
        """Get the message texts in batch order."""
        return [m.text for m in self.messages]


class _RecordingProcessorBase:
    """Shared recording behaviour of the stub processors.

    Attributes:
        name: Processor name.
        _default_success: Default success response.
        _delay_seconds: Simulated processing time for async dispatch.
        _batch_callback: Optional callback deciding success per batch.
        _batches: Received batches.
    """

    def __init__(
        self,
        name: str,
        default_success: bool = True,
        delay_seconds: float = 0.0,
    ) -> None:
        """Initialize the stub.

        Args:
            name: Processor name.
            default_success: Whether batches succeed by default.
            delay_seconds: Simulated processing time for async dispatch.
        """
        self.name = name
        self._default_success = default_success
        self._delay_seconds = delay_seconds
        self._batch_callback: Callable[[Sequence[Message]], bool] | None = None
        self._batches: list[ReceivedBatch] = []

    def _record(self, messages: Sequence[Message], mode: str) -> None:
        """Record a batch and raise if the stub is configured to fail."""
        if self._batch_callback is not None:
            success = self._batch_callback(messages)
        else:
            success = self._default_success

        self._batches.append(
            ReceivedBatch(messages=tuple(messages), mode=mode, success=success)
        )
        logger.debug(
            "stub_processor_received_batch",
            processor=self.name,
            mode=mode,
            batch_size=len(messages),
            success=success,
        )
        if not success:
            raise StubProcessorFailure(f"{self.name} configured to fail")

    async def _record_async(self, messages: Sequence[Message]) -> None:
        if self._delay_seconds > 0:
            await asyncio.sleep(self._delay_seconds)
        self._record(messages, "async")

    # Configuration methods for testing

    def set_default_success(self, success: bool) -> None:
        """Set the default success response.

        Args:
            success: Whether batches should succeed by default.
        """
        self._default_success = success

    def set_batch_callback(
        self, callback: Callable[[Sequence[Message]], bool] | None
    ) -> None:
        """Set a custom callback deciding success for each batch.

        Args:
            callback: Receives the batch; return True for success. None clears.
        """
        self._batch_callback = callback

    @property
    def call_count(self) -> int:
        """Get the number of batches received."""
        return len(self._batches)

    def get_batches(self) -> list[ReceivedBatch]:
        """Get all received batches.

        Returns:
            List of received batches, in arrival order.
        """
        return list(self._batches)

    def get_messages(self) -> list[Message]:
        """Get every received message across all batches, in arrival order."""
        return [m for batch in self._batches for m in batch.messages]

    def get_failed_batches(self) -> list[ReceivedBatch]:
        """Get batches the stub reported as failed."""
        return [b for b in self._batches if not b.success]

    def reset(self) -> None:
        """Reset stub to default state."""
        self._default_success = True
        self._batch_callback = None
        self._batches.clear()


class RecordingProcessorStub(_RecordingProcessorBase):
    """Stub processor supporting both async and sync dispatch."""

    async def process_batch(self, messages: Sequence[Message]) -> None:
        """Record a batch delivered by async dispatch."""
        await self._record_async(messages)

    def process_batch_sync(self, messages: Sequence[Message]) -> None:
        """Record a batch delivered by sync dispatch."""
        self._record(messages, "sync")


class AsyncRecordingProcessorStub(_RecordingProcessorBase):
    """Stub processor supporting async dispatch only."""

    async def process_batch(self, messages: Sequence[Message]) -> None:
        """Record a batch delivered by async dispatch."""
        await self._record_async(messages)


class SyncRecordingProcessorStub(_RecordingProcessorBase):
    """Stub processor supporting sync dispatch only."""

    def process_batch_sync(self, messages: Sequence[Message]) -> None:
        """Record a batch delivered by sync dispatch."""
        self._record(messages, "sync")
