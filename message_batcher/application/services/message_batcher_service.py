"""Message batcher service.

Collects notification messages per topic and delivers them in batches to
every registered processor. Two independent triggers flush a topic:

- Size trigger: evaluated on every enqueue; reaching max_batch_size drains
  the topic immediately and dispatches the batch in the background
- Time trigger: a periodic timer flushes every topic with pending messages
  each max_wait_ms

Lifecycle:
    CREATED --start()--> RUNNING --destroy()--> DESTROYED (terminal)

A CREATED batcher already accepts enqueue and flush calls but has no
timer, which allows purely synchronous use through flush_sync(). A
DESTROYED batcher is inert: enqueues are dropped with a warning, flushes
return immediately, and processor registration is refused.

Developer Golden Rules:
1. Producers never fail because of processor issues
2. Drain before dispatch - no suspension between snapshot and clear
3. Destroy discards pending messages; in-flight dispatches are left to settle
4. No retries - retrying is the processor's responsibility

Usage:
    batcher = await create_message_batcher(
        [chat_processor],
        BatcherConfig(max_batch_size=20, max_wait_ms=5000),
    )
    batcher.warning("disk usage at 91%")
    await batcher.flush()
    batcher.destroy()
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from enum import StrEnum

from message_batcher.application.ports.message_batcher import MessageBatcherProtocol
from message_batcher.application.ports.message_processor import (
    MessageProcessor,
    processor_name,
    supports_async_dispatch,
    supports_sync_dispatch,
)
from message_batcher.application.services.base import LoggingMixin
from message_batcher.application.services.processor_dispatcher import (
    DispatchMode,
    DispatchOutcome,
    ErrorReporter,
    ProcessorDispatcher,
    current_task_cancelling,
)
from message_batcher.application.services.topic_queue_store import TopicQueueStore
from message_batcher.config.batcher_config import BatcherConfig
from message_batcher.domain.errors.batcher import (
    BatcherConfigurationError,
    BatcherDestroyedError,
    ProcessorNotRegisteredError,
)
from message_batcher.domain.models.message import (
    ErrorInfo,
    Message,
    NotificationLevel,
)
from message_batcher.infrastructure.observability.correlation import (
    generate_batch_id,
    get_batch_id,
    reset_batch_id,
    set_batch_id,
)


class BatcherState(StrEnum):
    """Lifecycle state of a message batcher."""

    CREATED = "created"
    RUNNING = "running"
    DESTROYED = "destroyed"


def _validate_processor(processor: object) -> str:
    """Check a processor can be registered and return its name.

    Raises:
        TypeError: If the processor has no name or no batch operation.
    """
    name = processor_name(processor)
    if not (supports_async_dispatch(processor) or supports_sync_dispatch(processor)):
        raise TypeError(
            f"Message processor '{name}' implements neither process_batch "
            f"nor process_batch_sync"
        )
    return name


class MessageBatcher(LoggingMixin, MessageBatcherProtocol):
    """Batches notification messages and fans them out to processors.

    Processors are split into a fixed base set supplied at construction and
    an extra set managed at runtime by name. Every batch goes to all of them.

    Attributes:
        _config: Immutable batching configuration.
        _base_processors: Processors supplied at construction (not removable).
        _extra_processors: Runtime-registered processors keyed by name.
        _store: Pending messages per topic.
        _dispatcher: Fan-out with per-processor error isolation.
        _timer_task: Periodic flush task while RUNNING.
        _inflight: Background flush tasks that have not settled yet.
    """

    def __init__(
        self,
        processors: Sequence[MessageProcessor],
        config: BatcherConfig | None = None,
        *,
        error_reporter: ErrorReporter | None = None,
    ) -> None:
        """Initialize the message batcher.

        Args:
            processors: Base processors; each name must be unique.
            config: Batching configuration (defaults to BatcherConfig()).
            error_reporter: Called with every reported processor or
                registration error, in addition to logging.

        Raises:
            BatcherConfigurationError: If processor names are not unique.
            TypeError: If a processor has no name or no batch operation.
        """
        self._config = config if config is not None else BatcherConfig()
        base: dict[str, MessageProcessor] = {}
        for processor in processors:
            name = _validate_processor(processor)
            if name in base:
                raise BatcherConfigurationError(
                    "processors", name, "processor names must be unique"
                )
            base[name] = processor
        self._base_processors: tuple[MessageProcessor, ...] = tuple(base.values())
        self._extra_processors: dict[str, MessageProcessor] = {}
        self._store = TopicQueueStore()
        self._dispatcher = ProcessorDispatcher(
            concurrent_processors=self._config.concurrent_processors,
            error_reporter=error_reporter,
        )
        self._state = BatcherState.CREATED
        self._timer_task: asyncio.Task[None] | None = None
        self._inflight: set[asyncio.Task[object]] = set()
        self._init_logger()

    @property
    def config(self) -> BatcherConfig:
        """Get the batching configuration."""
        return self._config

    @property
    def state(self) -> BatcherState:
        """Get the lifecycle state."""
        return self._state

    @property
    def running(self) -> bool:
        """Check if the flush timer is running."""
        return self._state == BatcherState.RUNNING

    @property
    def processor_names(self) -> list[str]:
        """Get the names of all registered processors, base first."""
        names = [processor_name(p) for p in self._base_processors]
        names.extend(self._extra_processors)
        return names

    def pending_count(self, topic: str | None = None) -> int:
        """Count messages waiting to be flushed.

        Args:
            topic: Topic to count, or None for all topics.
        """
        return self._store.pending_count(topic)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start the periodic flush timer.

        Calling start on a running batcher is safe (idempotent).

        Raises:
            BatcherDestroyedError: If the batcher has been destroyed.
        """
        if self._state == BatcherState.DESTROYED:
            raise BatcherDestroyedError()
        if self._state == BatcherState.RUNNING:
            return

        self._state = BatcherState.RUNNING
        self._timer_task = asyncio.create_task(self._run_loop())
        self._log.info(
            "message_batcher_started",
            max_batch_size=self._config.max_batch_size,
            max_wait_ms=self._config.max_wait_ms,
            processors=self.processor_names,
        )

    def destroy(self) -> None:
        """Stop the flush timer and discard every pending message.

        Background dispatches already in flight are not cancelled and not
        awaited. Calling destroy more than once is safe.
        """
        if self._state == BatcherState.DESTROYED:
            return

        self._state = BatcherState.DESTROYED
        if self._timer_task is not None:
            self._timer_task.cancel()
            self._timer_task = None
        discarded = self._store.clear()
        self._log.info(
            "message_batcher_destroyed",
            discarded_messages=discarded,
            inflight_flushes=len(self._inflight),
        )

    async def _run_loop(self) -> None:
        """Periodic flush loop.

        Each tick waits for all of its topic flushes to settle before the
        next period starts. A tick runs shielded so that destroy() does not
        cancel dispatches that have already started.
        """
        loop = asyncio.get_running_loop()
        interval = self._config.max_wait_seconds
        while True:
            await asyncio.sleep(interval)
            started = loop.time()
            try:
                tick = self._track(asyncio.ensure_future(self.run_once()))
                await asyncio.shield(tick)
            except asyncio.CancelledError:
                if current_task_cancelling():
                    raise
                self._log.error("timer_tick_failed", error="tick cancelled")
            except Exception as e:
                self._log.error("timer_tick_failed", error=str(e))
            # Sleep for remainder of interval on the next iteration
            interval = max(0.0, self._config.max_wait_seconds - (loop.time() - started))

    async def run_once(self) -> int:
        """Run a single timer tick: flush every topic with pending messages.

        Topics without pending messages are skipped, so a tick with nothing
        queued contacts no processor.

        Returns:
            Number of messages dispatched.
        """
        if self._state == BatcherState.DESTROYED:
            return 0

        batches = [(topic, self._store.drain(topic)) for topic in sorted(self._store.topics())]
        await asyncio.gather(
            *(self._dispatch_batch(topic, batch) for topic, batch in batches)
        )
        return sum(len(batch) for _, batch in batches)

    # ------------------------------------------------------------------
    # Enqueue
    # ------------------------------------------------------------------

    def queue_message(
        self,
        topic: str,
        text: str,
        level: NotificationLevel | str,
        error: BaseException | ErrorInfo | None = None,
    ) -> None:
        """Queue a message and apply the size trigger for its topic.

        When the topic reaches max_batch_size it is drained right away. The
        batch is dispatched as a background task when an event loop is
        running, otherwise inline with synchronous dispatch.

        Args:
            topic: Topic to batch the message under.
            text: Notification text.
            level: Notification level.
            error: Optional exception or error details. Only error-level
                messages carry them; on other levels they are logged and
                dropped.

        Raises:
            ValueError: If the level is unknown or the topic is empty.
        """
        if self._state == BatcherState.DESTROYED:
            self._log.warning(
                "message_dropped_batcher_destroyed",
                topic=topic,
                level=str(level),
            )
            return

        level = NotificationLevel(level)
        if error is not None and level != NotificationLevel.ERROR:
            self._log.warning(
                "error_details_dropped",
                topic=topic,
                level=str(level),
                error=str(error),
            )
            error = None

        error_info = ErrorInfo.from_exception(error) if isinstance(error, BaseException) else error
        message = Message(
            topic=topic,
            text=text,
            level=level,
            error=error_info,
        )
        pending = self._store.enqueue(topic, message)
        if pending >= self._config.max_batch_size:
            self._fire_size_trigger(topic, pending)

    def info(self, text: str, *, topic: str | None = None) -> None:
        """Queue an info-level message on the default topic."""
        self.queue_message(topic or self._config.default_topic, text, NotificationLevel.INFO)

    def warning(self, text: str, *, topic: str | None = None) -> None:
        """Queue a warning-level message on the default topic."""
        self.queue_message(topic or self._config.default_topic, text, NotificationLevel.WARNING)

    def error(
        self,
        text: str,
        error: BaseException | ErrorInfo | None = None,
        *,
        topic: str | None = None,
    ) -> None:
        """Queue an error-level message on the default topic.

        Args:
            text: Notification text.
            error: Optional exception or error details to attach.
            topic: Topic override.
        """
        self.queue_message(
            topic or self._config.default_topic,
            text,
            NotificationLevel.ERROR,
            error,
        )

    def _fire_size_trigger(self, topic: str, pending: int) -> None:
        """Drain a full topic and dispatch it without blocking the producer."""
        batch = self._store.drain(topic)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        self._log.debug(
            "size_trigger_fired",
            topic=topic,
            pending=pending,
            mode=DispatchMode.ASYNC if loop is not None else DispatchMode.SYNC,
        )
        if loop is None:
            self._dispatch_batch_sync(topic, batch)
            return
        self._track(loop.create_task(self._dispatch_batch(topic, batch)))

    def _track(self, task: asyncio.Future[object]) -> asyncio.Future[object]:
        """Keep a reference to a background flush until it settles."""
        self._inflight.add(task)  # type: ignore[arg-type]
        task.add_done_callback(self._on_background_flush_done)
        return task

    def _on_background_flush_done(self, task: asyncio.Future[object]) -> None:
        """Forget a settled background flush and log unexpected failures."""
        self._inflight.discard(task)  # type: ignore[arg-type]
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log.error("background_flush_failed", error=str(exc))

    # ------------------------------------------------------------------
    # Flush
    # ------------------------------------------------------------------

    async def flush(self) -> None:
        """Dispatch every pending topic and wait for all processors to settle.

        Also waits for background flushes already in flight, so that every
        message queued before the call has been dispatched on return. Called
        from a processor during a dispatch, it does not wait for in-flight
        flushes, one of which is the dispatch calling it.
        Processor failures are reported, never raised.
        """
        if self._state == BatcherState.DESTROYED:
            return

        inflight = [] if get_batch_id() else list(self._inflight)
        await self.run_once()
        if inflight:
            await asyncio.wait(inflight)

    def flush_sync(self) -> None:
        """Dispatch every pending topic using synchronous dispatch.

        Topics are flushed one after another and processors are called in
        registration order.
        """
        if self._state == BatcherState.DESTROYED:
            return

        for topic in sorted(self._store.topics()):
            self.flush_topic_sync(topic)

    async def flush_topic(self, topic: str) -> list[DispatchOutcome]:
        """Drain one topic and dispatch it asynchronously.

        Args:
            topic: Topic to flush.

        Returns:
            One outcome per processor; empty if nothing was pending.
        """
        if self._state == BatcherState.DESTROYED:
            return []
        batch = self._store.drain(topic)
        return await self._dispatch_batch(topic, batch)

    def flush_topic_sync(self, topic: str) -> list[DispatchOutcome]:
        """Drain one topic and dispatch it synchronously.

        Args:
            topic: Topic to flush.

        Returns:
            One outcome per processor; empty if nothing was pending.
        """
        if self._state == BatcherState.DESTROYED:
            return []
        batch = self._store.drain(topic)
        return self._dispatch_batch_sync(topic, batch)

    async def _dispatch_batch(
        self,
        topic: str,
        batch: tuple[Message, ...],
    ) -> list[DispatchOutcome]:
        """Fan a drained batch out to every processor asynchronously."""
        if not batch:
            return []
        token = set_batch_id(generate_batch_id())
        try:
            outcomes = await self._dispatcher.dispatch(self._all_processors(), batch)
            self._log_batch(topic, batch, outcomes, DispatchMode.ASYNC)
            return outcomes
        finally:
            reset_batch_id(token)

    def _dispatch_batch_sync(
        self,
        topic: str,
        batch: tuple[Message, ...],
    ) -> list[DispatchOutcome]:
        """Fan a drained batch out to every processor synchronously."""
        if not batch:
            return []
        token = set_batch_id(generate_batch_id())
        try:
            outcomes = self._dispatcher.dispatch_sync(self._all_processors(), batch)
            self._log_batch(topic, batch, outcomes, DispatchMode.SYNC)
            return outcomes
        finally:
            reset_batch_id(token)

    def _all_processors(self) -> list[MessageProcessor]:
        """Snapshot of base and extra processors at dispatch time."""
        return [*self._base_processors, *self._extra_processors.values()]

    def _log_batch(
        self,
        topic: str,
        batch: tuple[Message, ...],
        outcomes: list[DispatchOutcome],
        mode: DispatchMode,
    ) -> None:
        """Log the result of dispatching one batch."""
        failed = [o.processor_name for o in outcomes if not o.succeeded]
        log = self._log_operation("flush", topic=topic, mode=str(mode))
        if not outcomes:
            log.warning("batch_dropped_no_processors", batch_size=len(batch))
            return
        log.info(
            "batch_dispatched",
            batch_size=len(batch),
            processors=len(outcomes),
            failed_processors=failed,
        )

    # ------------------------------------------------------------------
    # Processor registration
    # ------------------------------------------------------------------

    def add_extra_processor(self, processor: MessageProcessor) -> bool:
        """Register an extra processor.

        Args:
            processor: Processor to add; its name must not be registered.

        Returns:
            True if added, False if the name is taken or the batcher is
            destroyed.

        Raises:
            TypeError: If the processor has no name or no batch operation.
        """
        if self._state == BatcherState.DESTROYED:
            return False

        name = _validate_processor(processor)
        if name in self.processor_names:
            self._log.warning("extra_processor_already_registered", processor=name)
            return False

        self._extra_processors[name] = processor
        self._log.info("extra_processor_added", processor=name)
        return True

    def remove_extra_processor(self, processor: MessageProcessor | str) -> bool:
        """Unregister an extra processor by name.

        Base processors are never removed. An unknown name leaves the
        registration unchanged and is reported as ProcessorNotRegisteredError
        through the log and the error reporter.

        Args:
            processor: The processor, or its name.

        Returns:
            True if removed, False otherwise.
        """
        if self._state == BatcherState.DESTROYED:
            return False

        name = processor if isinstance(processor, str) else processor_name(processor)
        if name not in self._extra_processors:
            error = ProcessorNotRegisteredError(name)
            self._log.error(
                "extra_processor_not_registered",
                processor=name,
                is_base_processor=name in self.processor_names,
                error=str(error),
            )
            self._dispatcher.report(error)
            return False

        del self._extra_processors[name]
        self._log.info("extra_processor_removed", processor=name)
        return True


async def create_message_batcher(
    processors: Sequence[MessageProcessor],
    config: BatcherConfig | None = None,
    *,
    error_reporter: ErrorReporter | None = None,
) -> MessageBatcher:
    """Create a message batcher and start its flush timer.

    Every call returns a new, independent instance. For a process-wide
    shared batcher use message_batcher.bootstrap.get_message_batcher().

    Args:
        processors: Base processors.
        config: Batching configuration.
        error_reporter: Optional callback for reported errors.

    Returns:
        A RUNNING MessageBatcher.
    """
    batcher = MessageBatcher(processors, config, error_reporter=error_reporter)
    await batcher.start()
    return batcher
