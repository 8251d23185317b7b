"""Queues bridging the connection worker and the polling consumer.

Each queue has exactly one writing thread and one reading thread for its whole
life. ``queue.SimpleQueue`` is safe for one producer and one consumer thread
without extra locking.
"""

from __future__ import annotations

import queue
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .models import ChatMessage, ConnectionEvent, OutboundRequest

T = TypeVar("T")


class SpscQueue(Generic[T]):
    """Unbounded FIFO with a non-blocking producer and consumer side."""

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[T] = queue.SimpleQueue()

    def put(self, item: T) -> None:
        self._queue.put_nowait(item)

    def get_one(self) -> T | None:
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def drain(self) -> list[T]:
        """Return every item queued at call time, oldest first."""
        items: list[T] = []
        while True:
            try:
                items.append(self._queue.get_nowait())
            except queue.Empty:
                return items

    def empty(self) -> bool:
        return self._queue.empty()

    def __len__(self) -> int:
        return self._queue.qsize()


@dataclass(slots=True)
class Mailbox:
    # worker -> consumer, one batch per received chunk
    inbound: SpscQueue[list[ChatMessage]] = field(default_factory=SpscQueue)
    # consumer -> worker
    outbound: SpscQueue[OutboundRequest] = field(default_factory=SpscQueue)
    # worker -> consumer
    status: SpscQueue[ConnectionEvent] = field(default_factory=SpscQueue)

    def drain_messages(self) -> list[ChatMessage]:
        messages: list[ChatMessage] = []
        for batch in self.inbound.drain():
            messages.extend(batch)
        return messages
