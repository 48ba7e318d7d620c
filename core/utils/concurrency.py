"""
Thread concurrency primitives

- Channel: bounded, closable multi-producer/multi-consumer queue
- ReadWriteLock: many concurrent readers or one writer
"""

import queue
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from core.exceptions import ChannelClosedError

_CLOSED = object()


class Channel:
    """
    Bounded queue that can be closed by its producer

    Consumers iterate until the channel is closed and drained. Sending on a
    closed channel raises ChannelClosedError instead of silently dropping.

    Example:
        >>> ch = Channel(maxsize=10)
        >>> ch.put("RELIANCE")
        >>> ch.close()
        >>> list(ch)
        ['RELIANCE']
    """

    def __init__(self, maxsize: int = 0):
        self._queue: queue.Queue = queue.Queue(maxsize)
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, item: Any) -> None:
        """
        Send an item, blocking while the channel is full

        Raises:
            ChannelClosedError: If the channel was already closed
        """
        with self._lock:
            if self._closed:
                raise ChannelClosedError("send on closed channel")
            self._queue.put(item)

    def close(self) -> None:
        """
        Close the channel; buffered items are still delivered

        Raises:
            ChannelClosedError: If the channel was already closed
        """
        with self._lock:
            if self._closed:
                raise ChannelClosedError("close of closed channel")
            self._closed = True
            self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[Any]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                # Hand the marker on so sibling consumers stop too
                self._queue.put(_CLOSED)
                return
            yield item


class ReadWriteLock:
    """
    Reader/writer lock with writer preference

    Readers share the lock; a writer waits for active readers to leave and
    blocks new readers while it is waiting.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
