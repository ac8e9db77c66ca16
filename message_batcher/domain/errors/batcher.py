"""Message batcher errors.

This module defines the error taxonomy of the batching core:

- Configuration errors: invalid batcher configuration, fatal at construction
- Registration errors: removing a processor that was never registered
- Dispatch errors: a processor failed or lacks the requested dispatch mode
- Lifecycle errors: using a batcher after it has been destroyed

Dispatch and registration errors are reported, never raised to producers.
"""

from __future__ import annotations

from message_batcher.domain.exceptions import MessageBatcherError


class BatcherConfigurationError(MessageBatcherError, ValueError):
    """Raised when batcher configuration values are invalid.

    Attributes:
        field: Name of the offending configuration field.
        value: The rejected value.
    """

    def __init__(self, field: str, value: object, reason: str) -> None:
        """Initialize configuration error.

        Args:
            field: Name of the offending configuration field.
            value: The rejected value.
            reason: Why the value was rejected.
        """
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}={value!r}: {reason}")


class ProcessorNotRegisteredError(MessageBatcherError):
    """Reported when removing an extra processor that is not registered.

    The removal is a no-op; the batcher and its other processors are
    unaffected.

    Attributes:
        processor_name: Name that did not match any extra processor.
    """

    def __init__(self, processor_name: str) -> None:
        self.processor_name = processor_name
        super().__init__(f"No extra processor registered with name '{processor_name}'")


class ProcessorDispatchError(MessageBatcherError):
    """A processor failed while handling a batch.

    Isolated to the failing processor: sibling processors and later
    batches are unaffected.

    Attributes:
        processor_name: Name of the failing processor.
        mode: Dispatch mode that was requested ("async" or "sync").
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        processor_name: str,
        mode: str,
        cause: BaseException | None = None,
        message: str | None = None,
    ) -> None:
        """Initialize dispatch error.

        Args:
            processor_name: Name of the failing processor.
            mode: Dispatch mode that was requested.
            cause: The underlying exception raised by the processor.
            message: Override for the default error message.
        """
        self.processor_name = processor_name
        self.mode = mode
        self.cause = cause
        if message is None:
            message = (
                f"Processor '{processor_name}' failed during {mode} dispatch: "
                f"{type(cause).__name__}: {cause}"
            )
        super().__init__(message)


class MissingDispatchModeError(ProcessorDispatchError):
    """A processor does not implement the operation for the requested mode."""

    def __init__(self, processor_name: str, mode: str, operation: str) -> None:
        """Initialize missing dispatch mode error.

        Args:
            processor_name: Name of the processor.
            mode: Dispatch mode that was requested.
            operation: The missing operation name.
        """
        self.operation = operation
        super().__init__(
            processor_name=processor_name,
            mode=mode,
            message=(
                f"Processor '{processor_name}' does not support {mode} dispatch "
                f"(missing {operation})"
            ),
        )


class BatcherDestroyedError(MessageBatcherError):
    """Raised when starting a batcher that has already been destroyed."""

    def __init__(self) -> None:
        super().__init__("Message batcher has been destroyed and cannot be restarted")
