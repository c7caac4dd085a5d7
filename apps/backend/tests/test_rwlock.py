from __future__ import annotations

import threading
import time
from collections.abc import Callable

import pytest

from camera_mgr.util.rwlock import ReadWriteLock


def _wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def test_readers_share_the_lock() -> None:
    lock = ReadWriteLock()
    inside = threading.Barrier(3, timeout=2.0)
    release = threading.Event()

    def _reader() -> None:
        with lock.read_locked():
            inside.wait()
            release.wait(2.0)

    threads = [threading.Thread(target=_reader) for _ in range(2)]
    for thread in threads:
        thread.start()
    inside.wait()
    assert lock.readers == 2
    release.set()
    for thread in threads:
        thread.join(timeout=2.0)
    assert lock.readers == 0


def test_writer_excludes_readers() -> None:
    lock = ReadWriteLock()
    reader_done = threading.Event()

    lock.acquire_write()

    def _reader() -> None:
        with lock.read_locked():
            reader_done.set()

    thread = threading.Thread(target=_reader)
    thread.start()
    assert not reader_done.wait(0.1)
    lock.release_write()
    assert reader_done.wait(2.0)
    thread.join(timeout=2.0)


def test_waiting_writer_blocks_new_readers() -> None:
    lock = ReadWriteLock()
    order: list[str] = []
    second_reader_in = threading.Event()

    lock.acquire_read()

    def _writer() -> None:
        with lock.write_locked():
            order.append("writer")

    def _late_reader() -> None:
        with lock.read_locked():
            order.append("reader")
            second_reader_in.set()

    writer = threading.Thread(target=_writer)
    writer.start()
    assert _wait_until(lambda: lock.writers_waiting == 1)

    late_reader = threading.Thread(target=_late_reader)
    late_reader.start()
    assert not second_reader_in.wait(0.1)

    lock.release_read()
    writer.join(timeout=2.0)
    late_reader.join(timeout=2.0)
    assert order == ["writer", "reader"]


def test_unbalanced_release_raises() -> None:
    lock = ReadWriteLock()
    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()
