"""A bounded first-in first-out queue whose operations block threads."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Deque


class QueueClosed(Exception):
    """Raised when a closed queue cannot accept or deliver an item."""


class BlockingQueue:
    """A bounded FIFO queue shared between threads.

    ``put`` blocks while the queue is full and ``get`` blocks while it is
    empty. Once the queue is closed, ``put`` raises :class:`QueueClosed`,
    and ``get`` hands out the items still held before raising it too.
    """

    def __init__(self, max_size: int) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self.max_size = max_size
        self._items: Deque[Any] = deque()
        self._closed = False
        self._lock = threading.Lock()
        self._not_full = threading.Condition(self._lock)
        self._not_empty = threading.Condition(self._lock)

    def put(self, item: Any) -> None:
        """Append ``item``, waiting while the queue is full."""
        with self._not_full:
            while True:
                if self._closed:
                    raise QueueClosed("cannot put into a closed queue")
                if len(self._items) < self.max_size:
                    break
                self._not_full.wait()
            self._items.append(item)
            self._not_empty.notify()

    def get(self) -> Any:
        """Remove and return the oldest item, waiting while the queue is empty."""
        with self._not_empty:
            while not self._items:
                if self._closed:
                    raise QueueClosed("queue is closed and empty")
                self._not_empty.wait()
            item = self._items.popleft()
            self._not_full.notify()
            return item

    def close(self) -> None:
        """Close the queue and wake every waiting thread."""
        with self._lock:
            self._closed = True
            self._not_full.notify_all()
            self._not_empty.notify_all()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __repr__(self) -> str:
        return f"BlockingQueue(max_size={self.max_size}, size={len(self)})"