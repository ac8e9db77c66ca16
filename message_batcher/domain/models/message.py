"""Message domain model for batched notifications.

Value objects representing a single notification event queued for
batched delivery to message processors.

Developer Golden Rules:
1. Messages are IMMUTABLE once created - frozen dataclass
2. Error details are informational only; they never fail the pipeline
3. Every message belongs to exactly one topic
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum

# Topic used by the level-specific convenience operations
DEFAULT_TOPIC = "default"


class NotificationLevel(StrEnum):
    """Severity of a notification message.

    Levels:
        INFO: Informational event
        WARNING: Something unexpected that did not fail
        ERROR: A failure, optionally carrying error details
    """

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ErrorInfo:
    """Snapshot of an exception attached to an error-level message.

    The exception object itself is not retained so that a queued message
    never keeps frames or resources of the failing code alive.

    Attributes:
        error_type: Qualified name of the exception class.
        message: String form of the exception.
        traceback: Formatted traceback, if the exception carried one.
    """

    error_type: str
    message: str
    traceback: str | None = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> ErrorInfo:
        """Capture the relevant details of an exception.

        Args:
            exc: The exception to describe.

        Returns:
            ErrorInfo describing the exception.
        """
        exc_type = type(exc)
        formatted: str | None = None
        if exc.__traceback__ is not None:
            formatted = "".join(
                traceback.format_exception(exc_type, exc, exc.__traceback__)
            )
        return cls(
            error_type=f"{exc_type.__module__}.{exc_type.__qualname__}",
            message=str(exc),
            traceback=formatted,
        )


@dataclass(frozen=True)
class Message:
    """A single notification event waiting for batched delivery.

    Attributes:
        topic: Topic the message is batched under.
        text: Free-form notification text.
        level: Severity of the notification.
        error: Error details (error-level messages only).
        created_at: When the message was created (UTC).
    """

    topic: str
    text: str
    level: NotificationLevel
    error: ErrorInfo | None = None
    created_at: datetime = field(default_factory=_utc_now, compare=False)

    def __post_init__(self) -> None:
        """Validate message fields."""
        if not self.topic:
            raise ValueError("topic must be a non-empty string")
        if not isinstance(self.level, NotificationLevel):
            # Accept plain strings such as "info" and normalize them
            object.__setattr__(self, "level", NotificationLevel(self.level))
        if self.error is not None and self.level != NotificationLevel.ERROR:
            raise ValueError(
                f"error details are only allowed on error-level messages, "
                f"got level={self.level.value}"
            )

    @property
    def is_error(self) -> bool:
        """Check if this is an error-level message."""
        return self.level == NotificationLevel.ERROR
