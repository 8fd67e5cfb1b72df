"""Close-able work queues.

:class:`WorkQueue` is an unbounded FIFO shared between producer and
consumer threads.  Once closed, no more items may be pushed; consumers
drain what is left and then see ``None``.

:class:`TaskQueue` holds zero-argument callables and runs them to
exhaustion with :meth:`TaskQueue.execute_all`.
"""

from __future__ import annotations

import functools
import threading
from collections import deque
from collections.abc import Callable
from concurrent.futures import CancelledError, Executor, Future
from typing import Any, Generic, TypeVar

from .exceptions import QueueClosedError

T = TypeVar("T")

Task = Callable[[], Any]


class WorkQueue(Generic[T]):
    """Unbounded multi-producer, multi-consumer FIFO with a closed flag.

    ``None`` is reserved as the "no item" marker and cannot be pushed.
    """

    def __init__(self) -> None:
        self._items: deque[T] = deque()
        self._closed = False
        self._cond = threading.Condition()

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def push(self, item: T) -> None:
        """Append *item*.

        Raises:
            QueueClosedError: if the queue has been closed.
            ValueError: if *item* is None.
        """
        if item is None:
            raise ValueError("Cannot push None to a WorkQueue")
        with self._cond:
            if self._closed:
                raise QueueClosedError("Cannot push to a closed WorkQueue")
            self._items.append(item)
            self._cond.notify()

    def close(self) -> None:
        """Mark that no further pushes will happen.  Idempotent."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def try_pop(self) -> T | None:
        """Return the oldest item, or None if the queue is empty."""
        with self._cond:
            if self._items:
                return self._items.popleft()
            return None

    def pop(self, timeout: float | None = None) -> T | None:
        """Return the oldest item, waiting for one if necessary.

        Returns None once the queue is closed and empty, or when *timeout*
        seconds pass without an item showing up.
        """
        with self._cond:
            self._cond.wait_for(lambda: self._items or self._closed, timeout)
            if self._items:
                return self._items.popleft()
            return None


class TaskQueue(WorkQueue[Task]):
    """A :class:`WorkQueue` of callables."""

    def execute_all(self, executor: Executor | None = None) -> None:
        """Run queued tasks until the queue is closed and drained.

        With an *executor*, every task is submitted as soon as it is popped
        and this method waits for all of them before returning.  Without
        one, tasks run one after the other on the calling thread.

        The first task failure (in pop order) is re-raised once every
        submitted task has finished.
        """
        if executor is None:
            while True:
                task = self.pop()
                if task is None:
                    return
                task()

        outstanding = _Outstanding()
        index = 0
        while True:
            task = self.pop()
            if task is None:
                break
            outstanding.watch(index, executor.submit(task))
            index += 1
        failure = outstanding.wait()
        if failure is not None:
            raise failure


class _Outstanding:
    """Count of unfinished futures and the failure of the earliest task.

    Finished futures are not kept, only the exception of the
    lowest-indexed task that failed.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._pending = 0
        self._failure: tuple[int, BaseException] | None = None

    def watch(self, index: int, future: Future) -> None:
        with self._cond:
            self._pending += 1
        future.add_done_callback(functools.partial(self._done, index))

    def _done(self, index: int, future: Future) -> None:
        exc = CancelledError() if future.cancelled() else future.exception()
        with self._cond:
            self._pending -= 1
            if exc is not None and (self._failure is None or index < self._failure[0]):
                self._failure = (index, exc)
            self._cond.notify_all()

    def wait(self) -> BaseException | None:
        """Block until every watched future is done; return the failure."""
        with self._cond:
            self._cond.wait_for(lambda: self._pending == 0)
            return self._failure[1] if self._failure else None
