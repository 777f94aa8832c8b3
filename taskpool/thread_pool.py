"""A fixed-size pool of worker threads fed from a bounded task queue."""

from __future__ import annotations

import enum
import logging
import threading
from typing import Any, Callable, Optional

from taskpool.blocking_queue import BlockingQueue, QueueClosed

logger = logging.getLogger(__name__)


class TaskState(enum.IntEnum):
    """Lifecycle of a task."""

    CREATED = 0
    QUEUED = 1
    RUNNING = 2
    COMPLETED = 3
    FAILED = 4


class PoolState(enum.IntEnum):
    """Lifecycle of a pool."""

    RUNNING = 0
    STOPPING = 1
    STOPPED = 2


class PoolStillRunningError(RuntimeError):
    """Raised when a pool is closed before it has been stopped."""


class Task:
    """A callable and its argument, with the state and result of its run.

    ``run`` is called with ``args`` as its single argument.
    """

    def __init__(self, run: Callable[[Any], Any], args: Any) -> None:
        self.run = run
        self.args = args
        self.state = TaskState.CREATED
        self.result: Any = None
        self.error: Optional[BaseException] = None

    def _execute(self) -> None:
        self.state = TaskState.RUNNING
        try:
            result = self.run(self.args)
        except Exception as exc:
            logger.exception("task %r raised", self)
            self.error = exc
            self.state = TaskState.FAILED
        else:
            self.result = result
            self.state = TaskState.COMPLETED

    def __repr__(self) -> str:
        return f"Task(run={self.run!r}, state={self.state.name})"


class ThreadPool:
    """Runs tasks on ``n_threads`` worker threads.

    Submitted tasks wait in a queue holding at most ``capacity`` tasks;
    ``execute`` blocks while that queue is full.
    """

    def __init__(self, n_threads: int, capacity: int) -> None:
        if n_threads < 0:
            raise ValueError(f"n_threads must not be negative, got {n_threads}")
        self.n_threads = n_threads
        self.capacity = capacity
        self.state = PoolState.RUNNING
        self._queue = BlockingQueue(capacity)
        self._stopped = threading.Event()
        self._stop_lock = threading.Lock()
        self._threads = [
            threading.Thread(target=self._work, name=f"taskpool-worker-{i}", daemon=True)
            for i in range(n_threads)
        ]
        for thread in self._threads:
            thread.start()

    def _work(self) -> None:
        while True:
            try:
                task = self._queue.get()
            except QueueClosed:
                return
            task._execute()

    def execute(self, task: Task) -> Task:
        """Queue ``task``; mark it failed if the pool is no longer running."""
        if self.state is not PoolState.RUNNING:
            task.state = TaskState.FAILED
            return task
        task.state = TaskState.QUEUED
        try:
            self._queue.put(task)
        except QueueClosed:
            task.state = TaskState.FAILED
        return task

    def stop(self) -> None:
        """Refuse new tasks, let the workers finish queued ones, and join them."""
        with self._stop_lock:
            if self.state is PoolState.STOPPED:
                return
            logger.debug("stopping thread pool")
            self.state = PoolState.STOPPING
            self._queue.close()
            for thread in self._threads:
                thread.join()
                logger.debug("thread %s stopped", thread.name)
            self.state = PoolState.STOPPED
            self._stopped.set()

    def close(self) -> None:
        """Release the pool; it must have been stopped first."""
        if self.state is PoolState.RUNNING:
            raise PoolStillRunningError("stop the pool before closing it")
        self._stopped.wait()
        self._threads.clear()

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
        self.close()

    def __repr__(self) -> str:
        return (
            f"ThreadPool(n_threads={self.n_threads}, capacity={self.capacity}, "
            f"state={self.state.name})"
        )