"""Base service logging mixin.

This module provides the LoggingMixin class for standardized structured
logging across the batcher services.

Usage:
    from message_batcher.application.services.base import LoggingMixin

    class MyService(LoggingMixin):
        def __init__(self) -> None:
            self._init_logger()

        async def do_something(self, topic: str) -> None:
            log = self._log_operation("do_something", topic=topic)
            log.info("operation_started")
"""

import structlog

from message_batcher.infrastructure.observability.correlation import get_batch_id


class LoggingMixin:
    """Mixin providing structured logging for services.

    The logger is bound with:
    - service: The class name of the service
    - component: The component type (default: "message_batcher")

    Each operation gets:
    - operation: The name of the operation being performed
    - batch_id: From context, when a batch is being dispatched
    - Any additional context passed to _log_operation()

    Attributes:
        _log: The structlog BoundLogger for this service instance.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "message_batcher") -> None:
        """Initialize the logger with service name binding.

        Args:
            component: The component type for log categorization.
        """
        self._log = structlog.get_logger().bind(
            service=self.__class__.__name__,
            component=component,
        )

    def _log_operation(
        self,
        operation: str,
        **context: object,
    ) -> structlog.BoundLogger:
        """Create operation-scoped logger with batch ID.

        Args:
            operation: Name of the operation being performed.
            **context: Additional context to bind to the logger.

        Returns:
            BoundLogger with operation and batch context.
        """
        batch_id = get_batch_id()
        if batch_id:
            context["batch_id"] = batch_id
        return self._log.bind(operation=operation, **context)
