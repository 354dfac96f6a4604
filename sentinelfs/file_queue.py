"""Thread-safe FIFO queue of pending sync operations."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass


@dataclass
class SyncItem:
    """A file operation waiting to be synchronised."""

    file_path: str
    operation: str  # "add", "update" or "delete"
    hash: str = ""


class FileQueue:
    """FIFO queue of SyncItems shared between threads."""

    def __init__(self) -> None:
        self._items: deque[SyncItem] = deque()
        self._condition = threading.Condition()

    def enqueue(self, item: SyncItem) -> None:
        with self._condition:
            self._items.append(item)
            self._condition.notify()

    def dequeue(self) -> SyncItem | None:
        """Remove and return the oldest item, or None if the queue is empty."""
        with self._condition:
            return self._items.popleft() if self._items else None

    def is_empty(self) -> bool:
        with self._condition:
            return not self._items

    def __len__(self) -> int:
        with self._condition:
            return len(self._items)

    def wait_for_item(self, timeout: float | None = None) -> bool:
        """Block until the queue is non-empty; False if the timeout ran out."""
        with self._condition:
            return self._condition.wait_for(lambda: bool(self._items), timeout)

    def dequeue_batch(self, max_items: int = 100) -> list[SyncItem]:
        """Remove and return up to max_items items, oldest first."""
        with self._condition:
            count = min(max(max_items, 0), len(self._items))
            return [self._items.popleft() for _ in range(count)]