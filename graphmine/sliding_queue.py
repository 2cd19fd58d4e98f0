"""Double-buffered work queue whose appends stay hidden until the window slides."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_BUFFER_SIZE = 16384


class SlidingQueue(Generic[T]):
    """Fixed-capacity queue; items pushed become visible after ``slide_window``.

    The visible window is the range of items between the previous slide and
    the most recent one.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self._items: list[T | None] = [None] * capacity
        self._lock = threading.Lock()
        self.reset()

    @property
    def capacity(self) -> int:
        return len(self._items)

    def push_back(self, item: T) -> None:
        """Append one item to the hidden tail of the queue."""
        start = self._reserve(1)
        self._items[start] = item

    def empty(self) -> bool:
        """True when the visible window holds no items."""
        return self._out_start == self._out_end

    def reset(self) -> None:
        """Forget every item and close the window."""
        self._in = 0
        self._out_start = 0
        self._out_end = 0

    def slide_window(self) -> None:
        """Make everything appended since the last slide the new window."""
        self._out_start = self._out_end
        self._out_end = self._in

    def __iter__(self) -> Iterator[T]:
        for index in range(self._out_start, self._out_end):
            yield self._items[index]  # type: ignore[misc]

    def __len__(self) -> int:
        return self._out_end - self._out_start

    def _reserve(self, count: int) -> int:
        """Claim ``count`` slots atomically and return the first one."""
        with self._lock:
            start = self._in
            if start + count > len(self._items):
                raise IndexError("sliding queue is full")
            self._in = start + count
            return start

    def _store(self, start: int, items: list[T]) -> None:
        self._items[start:start + len(items)] = items


class QueueBuffer(Generic[T]):
    """Local staging buffer that appends to a ``SlidingQueue`` in bulk."""

    def __init__(self, queue: SlidingQueue[T], size: int = DEFAULT_BUFFER_SIZE) -> None:
        if size < 1:
            raise ValueError("buffer size must be positive")
        self._queue = queue
        self._size = size
        self._local: list[T] = []

    def push_back(self, item: T) -> None:
        """Stage one item, flushing first when the buffer is full."""
        if len(self._local) == self._size:
            self.flush()
        self._local.append(item)

    def flush(self) -> None:
        """Copy staged items to the shared queue and empty the buffer."""
        if self._local:
            start = self._queue._reserve(len(self._local))
            self._queue._store(start, self._local)
        self._local = []

    def __len__(self) -> int:
        return len(self._local)

    def __enter__(self) -> QueueBuffer[T]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.flush()