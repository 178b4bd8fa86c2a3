"""Tests for the reader/writer lock."""

import threading

import pytest

from loghandles.locks import ReadWriteLock


def test_readers_share():
    lock = ReadWriteLock()
    both_inside = threading.Barrier(2, timeout=5)

    def reader():
        with lock.shared():
            both_inside.wait()

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(5)
    assert not both_inside.broken


def test_writer_excludes_readers():
    lock = ReadWriteLock()
    read = threading.Event()

    def reader():
        with lock.shared():
            read.set()

    with lock.exclusive():
        thread = threading.Thread(target=reader)
        thread.start()
        assert not read.wait(0.2)
    assert read.wait(5)
    thread.join(5)


def test_waiting_writer_blocks_new_readers():
    lock = ReadWriteLock()
    lock.acquire_shared()
    wrote = threading.Event()
    read = threading.Event()

    def writer():
        with lock.exclusive():
            wrote.set()

    def late_reader():
        with lock.shared():
            read.set()

    writer_thread = threading.Thread(target=writer)
    writer_thread.start()
    # give the writer time to queue up
    assert not wrote.wait(0.1)
    reader_thread = threading.Thread(target=late_reader)
    reader_thread.start()
    assert not read.wait(0.1)

    lock.release_shared()
    assert wrote.wait(5)
    assert read.wait(5)
    writer_thread.join(5)
    reader_thread.join(5)


def test_unbalanced_release_raises():
    lock = ReadWriteLock()
    with pytest.raises(RuntimeError):
        lock.release_shared()
    with pytest.raises(RuntimeError):
        lock.release_exclusive()
