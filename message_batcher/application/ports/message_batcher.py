"""Message batcher port.

Protocol defining the runtime operations a batcher exposes to producers.

Developer Golden Rules:
1. Producers never fail because of downstream processor issues
2. Processor failures are reported, not returned as flush failures
3. Destroyed batchers are inert - enqueue and flush become no-ops
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from message_batcher.application.ports.message_processor import MessageProcessor
from message_batcher.domain.models.message import ErrorInfo, NotificationLevel


class MessageBatcherProtocol(Protocol):
    """Protocol for batching notification messages.

    This port handles:
    - Level-specific and low-level enqueue
    - Async and sync flushing of all pending topics
    - Runtime registration of extra processors
    - Teardown of the batcher
    """

    @abstractmethod
    def queue_message(
        self,
        topic: str,
        text: str,
        level: NotificationLevel | str,
        error: BaseException | ErrorInfo | None = None,
    ) -> None:
        """Queue a message and apply the size trigger for its topic.

        Args:
            topic: Topic to batch the message under.
            text: Notification text.
            level: Notification level.
            error: Optional error details (error level only).
        """
        ...

    @abstractmethod
    def info(self, text: str, *, topic: str | None = None) -> None:
        """Queue an info-level message on the default topic."""
        ...

    @abstractmethod
    def warning(self, text: str, *, topic: str | None = None) -> None:
        """Queue a warning-level message on the default topic."""
        ...

    @abstractmethod
    def error(
        self,
        text: str,
        error: BaseException | ErrorInfo | None = None,
        *,
        topic: str | None = None,
    ) -> None:
        """Queue an error-level message on the default topic."""
        ...

    @abstractmethod
    async def flush(self) -> None:
        """Dispatch every pending topic and wait for all processors to settle."""
        ...

    @abstractmethod
    def flush_sync(self) -> None:
        """Dispatch every pending topic using synchronous dispatch."""
        ...

    @abstractmethod
    def add_extra_processor(self, processor: MessageProcessor) -> bool:
        """Register an extra processor.

        Returns:
            True if added, False if a processor with that name exists.
        """
        ...

    @abstractmethod
    def remove_extra_processor(self, processor: MessageProcessor | str) -> bool:
        """Unregister an extra processor by name.

        Returns:
            True if removed, False if no extra processor matched (reported).
        """
        ...

    @abstractmethod
    def destroy(self) -> None:
        """Stop the flush timer and discard all pending messages."""
        ...
