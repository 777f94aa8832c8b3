import threading
import time

import pytest

from taskpool.blocking_queue import BlockingQueue, QueueClosed


def _start(target, *args):
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


def test_size_tracks_puts_and_gets():
    queue = BlockingQueue(5)
    assert len(queue) == 0
    for _ in range(3):
        queue.put("hello world")
    assert len(queue) == 3
    for _ in range(3):
        queue.get()
    assert len(queue) == 0


def test_items_come_out_in_order():
    queue = BlockingQueue(5)
    item1 = "my item"
    item2 = "my item 2"
    queue.put(item1)
    queue.put(item2)
    assert queue.get() is item1
    assert queue.get() is item2


def test_max_size_must_be_positive():
    with pytest.raises(ValueError):
        BlockingQueue(0)


def test_put_blocks_when_full():
    queue = BlockingQueue(2)
    queue.put(1)
    queue.put(2)
    thread = _start(queue.put, 3)
    time.sleep(0.1)
    assert thread.is_alive()
    assert len(queue) == 2
    assert queue.get() == 1
    thread.join(timeout=2)
    assert not thread.is_alive()
    assert [queue.get(), queue.get()] == [2, 3]


def test_get_blocks_when_empty():
    queue = BlockingQueue(2)
    received = []
    thread = _start(lambda: received.append(queue.get()))
    time.sleep(0.1)
    assert thread.is_alive()
    assert received == []
    queue.put("item")
    thread.join(timeout=2)
    assert received == ["item"]


def test_get_on_closed_empty_queue_raises():
    queue = BlockingQueue(3)
    queue.close()
    with pytest.raises(QueueClosed):
        queue.get()


def test_closed_queue_drains_then_raises():
    queue = BlockingQueue(3)
    queue.put("a")
    queue.put("b")
    queue.close()
    assert queue.get() == "a"
    assert queue.get() == "b"
    with pytest.raises(QueueClosed):
        queue.get()


def test_put_on_closed_queue_raises():
    queue = BlockingQueue(3)
    queue.close()
    with pytest.raises(QueueClosed):
        queue.put("x")
    assert len(queue) == 0


def test_close_wakes_blocked_get():
    queue = BlockingQueue(1)
    outcomes = []

    def consume():
        try:
            outcomes.append(("item", queue.get()))
        except QueueClosed:
            outcomes.append(("closed", None))

    thread = _start(consume)
    time.sleep(0.05)
    assert thread.is_alive()
    queue.close()
    thread.join(timeout=2)
    assert not thread.is_alive()
    assert outcomes == [("closed", None)]
    assert len(queue) == 0
    with pytest.raises(QueueClosed):
        queue.get()


def test_close_wakes_blocked_put():
    queue = BlockingQueue(1)
    queue.put("first")
    errors = []

    def produce():
        try:
            queue.put("second")
        except QueueClosed as exc:
            errors.append(exc)

    thread = _start(produce)
    time.sleep(0.05)
    queue.close()
    thread.join(timeout=2)
    assert len(errors) == 1
    assert len(queue) == 1


def test_many_producers_and_consumers_keep_every_item():
    queue = BlockingQueue(4)
    received = []
    lock = threading.Lock()

    def consume():
        while True:
            try:
                item = queue.get()
            except QueueClosed:
                return
            with lock:
                received.append(item)

    consumers = [_start(consume) for _ in range(3)]
    producers = [
        _start(lambda base=base: [queue.put(base + i) for i in range(50)])
        for base in (0, 100, 200)
    ]
    for producer in producers:
        producer.join(timeout=5)
    queue.close()
    for consumer in consumers:
        consumer.join(timeout=5)
    expected = [base + i for base in (0, 100, 200) for i in range(50)]
    assert sorted(received) == expected