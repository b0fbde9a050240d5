"""message_queue.py

The supervisor's single inbox. Everything the dispatch path reacts to comes
through here, so handlers never race each other:

- protocol events from the connection pump
- completed `dict` lookups, with the reply target they belong to
- "connection lost" from the pump
- the operator's shutdown request

Items are served by priority, then in arrival order. Shutdown outranks
everything that is already queued.

Usage:
    inbox = MessageQueue()
    inbox.put_event(event)
    item = await inbox.get()
"""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Optional


class Priority(IntEnum):
    """Lower number = served first."""
    CRITICAL = 0  # shutdown
    HIGH = 1      # connection lost
    NORMAL = 2    # protocol events, lookup completions


class ItemKind(str, Enum):
    EVENT = "event"
    COMPLETION = "completion"
    DISCONNECTED = "disconnected"
    SHUTDOWN = "shutdown"


@dataclass(order=True)
class QueueItem:
    priority: int
    seq: int
    kind: ItemKind = field(compare=False)
    payload: Any = field(compare=False, default=None)
    # Completions only: where the text goes
    reply: Any = field(compare=False, default=None)


class MessageQueue:
    """Unbounded priority inbox; FIFO within a priority level."""

    def __init__(self) -> None:
        self._queue: asyncio.PriorityQueue[QueueItem] = asyncio.PriorityQueue()
        self._seq = itertools.count()
        self.processed_count = 0

    def _put(self, priority: Priority, kind: ItemKind, payload: Any = None, reply: Any = None) -> None:
        self._queue.put_nowait(QueueItem(priority.value, next(self._seq), kind, payload, reply))

    def put_event(self, event: Any) -> None:
        self._put(Priority.NORMAL, ItemKind.EVENT, event)

    def put_completion(self, text: str, reply: Any) -> None:
        self._put(Priority.NORMAL, ItemKind.COMPLETION, text, reply)

    def put_disconnected(self, exc: Optional[BaseException] = None) -> None:
        self._put(Priority.HIGH, ItemKind.DISCONNECTED, exc)

    def put_shutdown(self) -> None:
        self._put(Priority.CRITICAL, ItemKind.SHUTDOWN)

    async def get(self) -> QueueItem:
        item = await self._queue.get()
        self.processed_count += 1
        return item

    @property
    def size(self) -> int:
        """Current queue size."""
        return self._queue.qsize()
