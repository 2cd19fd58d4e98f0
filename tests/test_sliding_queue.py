import threading

import pytest

from graphmine.sliding_queue import QueueBuffer, SlidingQueue


def test_new_queue_is_empty():
    q = SlidingQueue(4)
    assert q.empty()
    assert len(q) == 0
    assert list(q) == []


def test_pushes_hidden_until_slide():
    q = SlidingQueue(8)
    for item in (5, 6, 7):
        q.push_back(item)
    assert q.empty()
    assert list(q) == []
    q.slide_window()
    assert not q.empty()
    assert list(q) == [5, 6, 7]
    assert len(q) == 3


def test_window_moves_to_new_items():
    q = SlidingQueue(8)
    q.push_back("a")
    q.slide_window()
    q.push_back("b")
    q.push_back("c")
    assert list(q) == ["a"]
    q.slide_window()
    assert list(q) == ["b", "c"]
    q.slide_window()
    assert q.empty()


def test_reset_clears_everything():
    q = SlidingQueue(4)
    q.push_back(1)
    q.slide_window()
    q.reset()
    assert q.empty()
    q.slide_window()
    assert list(q) == []


def test_overflow_raises():
    q = SlidingQueue(2)
    q.push_back(1)
    q.push_back(2)
    with pytest.raises(IndexError):
        q.push_back(3)


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        SlidingQueue(-1)


def test_buffer_items_visible_only_after_flush_and_slide():
    q = SlidingQueue(10)
    buf = QueueBuffer(q, 4)
    buf.push_back(1)
    buf.push_back(2)
    q.slide_window()
    assert list(q) == []
    buf.flush()
    q.slide_window()
    assert list(q) == [1, 2]
    assert len(buf) == 0


def test_buffer_flushes_automatically_when_full():
    q = SlidingQueue(10)
    buf = QueueBuffer(q, 2)
    for item in (1, 2, 3):
        buf.push_back(item)
    q.slide_window()
    assert list(q) == [1, 2]
    assert len(buf) == 1


def test_buffer_context_manager_flushes():
    q = SlidingQueue(10)
    with QueueBuffer(q, 8) as buf:
        buf.push_back(9)
        buf.push_back(8)
    q.slide_window()
    assert list(q) == [9, 8]


def test_buffer_rejects_bad_size():
    with pytest.raises(ValueError):
        QueueBuffer(SlidingQueue(2), 0)


def test_parallel_buffers_keep_every_item():
    q = SlidingQueue(4000)

    def worker(base):
        with QueueBuffer(q, 7) as buf:
            for i in range(1000):
                buf.push_back(base + i)

    threads = [threading.Thread(target=worker, args=(k * 1000,)) for k in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    q.slide_window()
    assert sorted(q) == list(range(4000))