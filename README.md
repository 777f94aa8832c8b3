# taskpool

A small concurrency toolkit made of two pieces:

- `taskpool.blocking_queue.BlockingQueue` is a bounded FIFO queue. `put` blocks while the queue is full, and `get` blocks while it is empty.
- `taskpool.thread_pool.ThreadPool` is a fixed number of worker threads. The workers take `Task` objects from a bounded `BlockingQueue` and run them.

The package uses only the standard library.

## Installation

```
pip install .
```

To install and run the test suite:

```
pip install .[test]
pytest
```

## Blocking queue

```python
from taskpool.blocking_queue import BlockingQueue

queue = BlockingQueue(5)
queue.put("first")
queue.put("second")
assert len(queue) == 2
assert queue.get() == "first"
assert queue.get() == "second"
```

- `BlockingQueue(max_size)` holds at most `max_size` items. A `max_size` below 1 raises `ValueError`.
- `put(item)` appends an item. It waits while the queue is full.
- `get()` removes and returns the oldest item. It waits while the queue is empty.
- `len(queue)` gives the number of items currently held.
- `close()` closes the queue and wakes every waiting thread. After that:
  - `put` raises `QueueClosed`.
  - `get` keeps handing out the items still in the queue. Once the queue is empty, `get` raises `QueueClosed`.

## Thread pool

```python
from taskpool.thread_pool import Task, TaskState, ThreadPool

def add(numbers):
    return numbers[0] + numbers[1]

with ThreadPool(2, 10) as pool:
    task = pool.execute(Task(add, (4, 2)))

assert task.state is TaskState.COMPLETED
assert task.result == 6
```

### Tasks

`Task(run, args)` wraps a callable and the single argument it is called with. Its `state` starts as `TaskState.CREATED` and moves through `QUEUED` and `RUNNING` to one of two outcomes:

- `COMPLETED`: the return value is stored in `result`.
- `FAILED`: the callable raised an exception. The exception is stored in `error` and logged.

### Pools

`ThreadPool(n_threads, capacity)` starts `n_threads` worker threads. The worker threads are daemon threads. Tasks wait in a queue of at most `capacity` tasks. A negative `n_threads` raises `ValueError`, and so does a `capacity` below 1.

The pool passes through the `PoolState` values `RUNNING`, `STOPPING` and `STOPPED`. It offers these operations:

- `execute(task)`
  - Queues the task and returns it.
  - Blocks while the queue is full.
  - If the pool is no longer running, the task is marked `TaskState.FAILED` and is not run. The same happens if the pool is stopped while `execute` is waiting for room.
- `stop()`
  - Refuses new tasks.
  - Lets the workers finish the running tasks and every task still waiting in the queue.
  - Joins the workers.
  - Calling it again after the pool has stopped does nothing.
- `close()`
  - Releases the pool after it has stopped.
  - On a pool that is still running, it raises `PoolStillRunningError`.
- Used as a context manager, the pool calls `stop()` and then `close()` when the block ends.

## Self-check

The `taskpool.selfcheck` module holds a set of checks. They cover the following:

- the queue's length;
- the queue's ordering;
- blocking producers and blocking consumers;
- task results;
- tasks handed to a stopped pool;
- shutting down a busy pool.

Run all of them with:

```
taskpool-selfcheck
```

Each check prints its name followed by `success` or `failed`. The command exits with status 0 when every check succeeds and 1 otherwise.

The checks use a simulated unit of work. `--delay SECONDS` sets how long that unit takes. The default is 1.0, so a full run takes more than half a minute. Every check is also available as a function, for example `check_size()` or `check_put_blocking(delay)`, and each one returns `True` or `False`.