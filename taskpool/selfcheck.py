"""Checks that exercise the queue and the pool and report success or failure."""

from __future__ import annotations

import argparse
import sys
import threading
import time
from typing import Callable, List, Optional, Sequence, Tuple

from taskpool.blocking_queue import BlockingQueue
from taskpool.thread_pool import PoolState, Task, TaskState, ThreadPool

_ITEMS = 5
_QUEUE_SIZE = 4


def _produce(queue: BlockingQueue, delay: float) -> None:
    for number in range(_ITEMS):
        queue.put(number)
        time.sleep(delay)


def _consume(queue: BlockingQueue, delay: float, received: List[int]) -> None:
    for _ in range(_ITEMS):
        received.append(queue.get())
        time.sleep(delay)


def _spawn(target, *args) -> threading.Thread:
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


def check_size() -> bool:
    """The queue's length follows puts and gets."""
    queue = BlockingQueue(5)
    ok = len(queue) == 0
    for _ in range(3):
        queue.put("hello world")
    ok &= len(queue) == 3
    for _ in range(3):
        queue.get()
    ok &= len(queue) == 0
    return ok


def check_storage() -> bool:
    """Items are returned in the order they were stored."""
    queue = BlockingQueue(5)
    item1 = "my item"
    item2 = "my item 2"
    queue.put(item1)
    queue.put(item2)
    return queue.get() is item1 and queue.get() is item2


def check_put_blocking(delay: float = 1.0) -> bool:
    """A producer blocks on a full queue until a consumer arrives."""
    queue = BlockingQueue(_QUEUE_SIZE)
    received: List[int] = []
    producer = _spawn(_produce, queue, delay)
    time.sleep(delay * 10)
    was_blocked = producer.is_alive() and len(queue) == _QUEUE_SIZE
    consumer = _spawn(_consume, queue, delay, received)
    producer.join()
    consumer.join()
    return was_blocked and len(queue) == 0 and received == list(range(_ITEMS))


def check_get_blocking(delay: float = 1.0) -> bool:
    """A consumer blocks on an empty queue until a producer arrives."""
    queue = BlockingQueue(_QUEUE_SIZE)
    received: List[int] = []
    consumer = _spawn(_consume, queue, delay, received)
    time.sleep(delay * 10)
    was_blocked = consumer.is_alive() and not received
    producer = _spawn(_produce, queue, delay)
    consumer.join()
    producer.join()
    return was_blocked and len(queue) == 0 and received == list(range(_ITEMS))


def check_task_results() -> bool:
    """Tasks run by the pool hold the values they returned."""
    numbers = (4, 2)
    pool = ThreadPool(2, 10)
    add_task = pool.execute(Task(lambda pair: pair[0] + pair[1], numbers))
    sub_task = pool.execute(Task(lambda pair: pair[0] - pair[1], numbers))
    pool.stop()
    pool.close()
    return (
        add_task.state is TaskState.COMPLETED
        and sub_task.state is TaskState.COMPLETED
        and add_task.result == 6
        and sub_task.result == 2
    )


def check_task_fails_when_stopped() -> bool:
    """A task handed to a stopped pool is marked failed."""
    pool = ThreadPool(1, 10)
    task = Task(lambda _: None, None)
    pool.stop()
    pool.execute(task)
    pool.close()
    return task.state is TaskState.FAILED


def check_pool_shutdown(delay: float = 1.0) -> bool:
    """A busy pool stops and closes without deadlocking."""
    pool = ThreadPool(3, 10)
    task = Task(lambda _: time.sleep(delay), None)
    for _ in range(10):
        pool.execute(task)
    time.sleep(delay * 7)
    pool.stop()
    pool.close()
    return pool.state is PoolState.STOPPED and task.state is TaskState.COMPLETED


def _checks(delay: float) -> List[Tuple[str, Callable[[], bool]]]:
    return [
        ("size test", check_size),
        ("storage test", check_storage),
        ("enqueue blocking test", lambda: check_put_blocking(delay)),
        ("dequeue blocking test", lambda: check_get_blocking(delay)),
        ("tasks return correct result", check_task_results),
        ("tasks fail if pool is stopping", check_task_fails_when_stopped),
        ("pool shuts down without deadlock", lambda: check_pool_shutdown(delay)),
    ]


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run every check, print one status line each, and return the exit code."""
    parser = argparse.ArgumentParser(
        prog="taskpool-selfcheck", description="Exercise the queue and the thread pool."
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=1.0,
        help="seconds each simulated unit of work takes (default: 1.0)",
    )
    args = parser.parse_args(argv)
    if args.delay < 0:
        parser.error("--delay must not be negative")

    all_ok = True
    for name, check in _checks(args.delay):
        ok = check()
        all_ok &= ok
        print(f"{name}: {'success' if ok else 'failed'}")
    return 0 if all_ok else 1


if __name__ == "__main__":
    sys.exit(main())