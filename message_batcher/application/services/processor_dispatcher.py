"""Processor fan-out with per-processor error isolation.

Delivers one batch snapshot to every registered processor and collects an
independent outcome for each. A failing processor is reported (logged and
passed to the optional error reporter) tagged with its name; it never
affects sibling processors, the caller of the flush, or later batches.

Developer Golden Rules:
1. Every processor gets the same read-only snapshot
2. Catch at the fan-out boundary - nothing propagates except cancellation
3. No retries - retrying is the processor's responsibility
4. No cross-mode fallback - a missing operation is a dispatch error
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from message_batcher.application.ports.message_processor import (
    ASYNC_OPERATION,
    SYNC_OPERATION,
    processor_name,
    supports_async_dispatch,
    supports_sync_dispatch,
)
from message_batcher.application.services.base import LoggingMixin
from message_batcher.domain.errors.batcher import (
    MissingDispatchModeError,
    ProcessorDispatchError,
)
from message_batcher.domain.exceptions import MessageBatcherError
from message_batcher.domain.models.message import Message

# Callback receiving every reported (non-fatal) error
ErrorReporter = Callable[[MessageBatcherError], None]


def current_task_cancelling() -> bool:
    """Check if the running task has a pending cancellation request.

    Distinguishes a real cancellation of the caller from a CancelledError
    raised by processor code.
    """
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0


class DispatchMode(StrEnum):
    """How a batch is handed to processors."""

    ASYNC = "async"
    SYNC = "sync"


@dataclass(frozen=True)
class DispatchOutcome:
    """Result of delivering one batch to one processor.

    Attributes:
        processor_name: Name of the processor.
        succeeded: Whether the processor handled the batch without error.
        error: The reported error when the processor failed.
        result: Value returned by the processor, if any.
    """

    processor_name: str
    succeeded: bool
    error: ProcessorDispatchError | None = None
    result: Any = None


class ProcessorDispatcher(LoggingMixin):
    """Fans a batch out to processors and isolates their failures.

    Attributes:
        _concurrent_processors: Max processor calls in flight per batch.
        _error_reporter: Optional callback for reported errors.
    """

    def __init__(
        self,
        concurrent_processors: int | None = None,
        error_reporter: ErrorReporter | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            concurrent_processors: Limit on processor calls in flight for a
                single batch. None means every processor runs at once.
            error_reporter: Called with each reported error.
        """
        self._concurrent_processors = concurrent_processors
        self._error_reporter = error_reporter
        self._init_logger()

    @property
    def concurrent_processors(self) -> int | None:
        """Get the per-batch concurrency limit."""
        return self._concurrent_processors

    async def dispatch(
        self,
        processors: Sequence[object],
        batch: tuple[Message, ...],
    ) -> list[DispatchOutcome]:
        """Deliver a batch to every processor concurrently.

        Waits until every processor has settled. One processor's failure
        neither cancels nor delays another.

        Args:
            processors: Processors to deliver to.
            batch: Snapshot of the messages, in enqueue order.

        Returns:
            One outcome per processor, in the order given.
        """
        if not batch or not processors:
            return []

        semaphore: asyncio.Semaphore | None = None
        if self._concurrent_processors is not None:
            semaphore = asyncio.Semaphore(self._concurrent_processors)

        return list(
            await asyncio.gather(
                *(self._invoke_async(p, batch, semaphore) for p in processors)
            )
        )

    def dispatch_sync(
        self,
        processors: Sequence[object],
        batch: tuple[Message, ...],
    ) -> list[DispatchOutcome]:
        """Deliver a batch to every processor, one after another.

        Args:
            processors: Processors to deliver to.
            batch: Snapshot of the messages, in enqueue order.

        Returns:
            One outcome per processor, in the order given.
        """
        if not batch:
            return []
        return [self._invoke_sync(p, batch) for p in processors]

    def report(self, error: MessageBatcherError) -> None:
        """Pass a non-fatal error to the error reporter.

        A failing reporter is logged and otherwise ignored.

        Args:
            error: The error to report.
        """
        if self._error_reporter is None:
            return
        try:
            self._error_reporter(error)
        except Exception as e:
            self._log_operation("report").error(
                "error_reporter_failed",
                reported_error=str(error),
                error=str(e),
            )

    async def _invoke_async(
        self,
        processor: object,
        batch: tuple[Message, ...],
        semaphore: asyncio.Semaphore | None,
    ) -> DispatchOutcome:
        """Invoke process_batch on one processor, capturing any failure."""
        name = processor_name(processor)
        if not supports_async_dispatch(processor):
            return self._failed(
                MissingDispatchModeError(name, DispatchMode.ASYNC, ASYNC_OPERATION),
                batch,
            )

        try:
            if semaphore is None:
                result = await self._await_batch(processor, batch)
            else:
                async with semaphore:
                    result = await self._await_batch(processor, batch)
        except asyncio.CancelledError as e:
            # Only a cancellation aimed at this dispatch propagates
            if current_task_cancelling():
                raise
            return self._failed(
                ProcessorDispatchError(name, DispatchMode.ASYNC, cause=e), batch
            )
        except Exception as e:
            return self._failed(
                ProcessorDispatchError(name, DispatchMode.ASYNC, cause=e), batch
            )
        return DispatchOutcome(processor_name=name, succeeded=True, result=result)

    async def _await_batch(self, processor: Any, batch: tuple[Message, ...]) -> Any:
        """Call process_batch and await the returned awaitable."""
        pending = processor.process_batch(batch)
        if not inspect.isawaitable(pending):
            raise TypeError(
                f"{ASYNC_OPERATION} must return an awaitable, "
                f"got {type(pending).__name__}"
            )
        return await pending

    def _invoke_sync(
        self,
        processor: Any,
        batch: tuple[Message, ...],
    ) -> DispatchOutcome:
        """Invoke process_batch_sync on one processor, capturing any failure."""
        name = processor_name(processor)
        if not supports_sync_dispatch(processor):
            return self._failed(
                MissingDispatchModeError(name, DispatchMode.SYNC, SYNC_OPERATION),
                batch,
            )

        try:
            result = processor.process_batch_sync(batch)
            if inspect.isawaitable(result):
                if inspect.iscoroutine(result):
                    result.close()
                raise TypeError(f"{SYNC_OPERATION} returned an awaitable")
        except Exception as e:
            return self._failed(
                ProcessorDispatchError(name, DispatchMode.SYNC, cause=e), batch
            )
        return DispatchOutcome(processor_name=name, succeeded=True, result=result)

    def _failed(
        self,
        error: ProcessorDispatchError,
        batch: tuple[Message, ...],
    ) -> DispatchOutcome:
        """Log and report a processor failure, returning its outcome."""
        log = self._log_operation(
            "dispatch",
            processor=error.processor_name,
            mode=str(error.mode),
        )
        log.error(
            "processor_dispatch_failed",
            topic=batch[0].topic,
            batch_size=len(batch),
            error=str(error),
            error_type=type(error.cause).__name__ if error.cause else type(error).__name__,
        )
        self.report(error)
        return DispatchOutcome(
            processor_name=error.processor_name,
            succeeded=False,
            error=error,
        )
