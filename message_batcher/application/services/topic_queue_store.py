"""Per-topic queue store for pending messages.

Holds the messages that have not been flushed yet, one FIFO sequence per
topic. The store is mutated only by the batcher core; processors receive
drained snapshots and never see the live sequences.

Drain is atomic with respect to asyncio scheduling: the current sequence
is swapped for a fresh one with no suspension point in between, so a
message is observed by exactly one drain and messages enqueued while a
drained batch is being dispatched start a new sequence.
"""

from __future__ import annotations

from message_batcher.domain.models.message import Message


class TopicQueueStore:
    """In-memory FIFO buffers of pending messages keyed by topic.

    Attributes:
        _queues: Pending messages per topic, in enqueue order.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._queues: dict[str, list[Message]] = {}

    def enqueue(self, topic: str, message: Message) -> int:
        """Append a message to a topic, creating the topic if absent.

        Args:
            topic: Topic to append to.
            message: Message to append.

        Returns:
            Number of pending messages in the topic after the append.
        """
        queue = self._queues.setdefault(topic, [])
        queue.append(message)
        return len(queue)

    def drain(self, topic: str) -> tuple[Message, ...]:
        """Take every pending message of a topic and reset it to empty.

        Args:
            topic: Topic to drain.

        Returns:
            The drained messages in enqueue order (empty if none pending).
        """
        queue = self._queues.get(topic)
        if not queue:
            return ()
        self._queues[topic] = []
        return tuple(queue)

    def topics(self) -> set[str]:
        """Get the topics that currently have pending messages."""
        return {topic for topic, queue in self._queues.items() if queue}

    def pending_count(self, topic: str | None = None) -> int:
        """Count pending messages.

        Args:
            topic: Topic to count, or None for all topics.

        Returns:
            Number of pending messages.
        """
        if topic is not None:
            return len(self._queues.get(topic, ()))
        return sum(len(queue) for queue in self._queues.values())

    def clear(self) -> int:
        """Discard every pending message in every topic.

        Returns:
            Number of messages discarded.
        """
        discarded = self.pending_count()
        self._queues.clear()
        return discarded
