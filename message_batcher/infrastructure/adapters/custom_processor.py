"""Custom processor adapter.

Wraps plain callables as a message processor so that ad-hoc sinks can be
registered without writing a class:

    processor = CustomProcessor(
        name="audit-log",
        process_batch=send_to_audit_log,
    )
    batcher.add_extra_processor(processor)

Only the operations that were supplied are exposed. A missing operation
is not filled in from the other one, so dispatching in that mode fails for
this processor with MissingDispatchModeError.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from message_batcher.domain.errors.batcher import BatcherConfigurationError
from message_batcher.domain.models.message import Message

AsyncBatchHandler = Callable[[Sequence[Message]], Awaitable[Any]]
SyncBatchHandler = Callable[[Sequence[Message]], Any]


class CustomProcessor:
    """Message processor built from callables.

    Attributes:
        name: Unique processor name.
        kind: Processor kind, always "external" for custom processors.
    """

    kind = "external"

    def __init__(
        self,
        name: str,
        process_batch: AsyncBatchHandler | None = None,
        process_batch_sync: SyncBatchHandler | None = None,
    ) -> None:
        """Initialize the custom processor.

        Args:
            name: Unique processor name.
            process_batch: Async handler used for async dispatch.
            process_batch_sync: Sync handler used for sync dispatch.

        Raises:
            BatcherConfigurationError: If name is empty or no handler is given.
        """
        if not name:
            raise BatcherConfigurationError("name", name, "must be a non-empty string")
        if process_batch is None and process_batch_sync is None:
            raise BatcherConfigurationError(
                "process_batch",
                None,
                "a custom processor needs process_batch or process_batch_sync",
            )
        self.name = name
        # Absent handlers stay absent for the dispatch-time capability check
        if process_batch is not None:
            self.process_batch = process_batch
        if process_batch_sync is not None:
            self.process_batch_sync = process_batch_sync

    def __repr__(self) -> str:
        modes = [
            mode
            for mode, attr in (("async", "process_batch"), ("sync", "process_batch_sync"))
            if hasattr(self, attr)
        ]
        return f"CustomProcessor(name={self.name!r}, modes={modes})"
