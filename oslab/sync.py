"""Producer-consumer and readers-writers synchronisation demonstrations."""

from __future__ import annotations

import argparse
import random
import threading
import time
from collections import deque
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import partial
from typing import Any

BUFFER_SIZE = 100
DEFAULT_DELAY = 0.5
_POLL = 0.05

Log = Callable[[str], Any]


class BoundedBuffer:
    """A fixed-capacity FIFO shared between threads."""

    def __init__(self, capacity: int = BUFFER_SIZE) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._items: deque[Any] = deque()
        self._empty = threading.Semaphore(capacity)
        self._full = threading.Semaphore(0)
        self._mutex = threading.Lock()

    def put(self, item: Any) -> None:
        """Add *item*, waiting while the buffer is full."""
        self._put(item, None)

    def get(self) -> Any:
        """Remove and return the oldest item, waiting while the buffer is empty."""
        return self._take(None)[1]

    def _put(self, item: Any, timeout: float | None) -> bool:
        if not self._empty.acquire(timeout=timeout):
            return False
        with self._mutex:
            self._items.append(item)
        self._full.release()
        return True

    def _take(self, timeout: float | None) -> tuple[bool, Any]:
        if not self._full.acquire(timeout=timeout):
            return False, None
        with self._mutex:
            item = self._items.popleft()
        self._empty.release()
        return True, item

    def __len__(self) -> int:
        with self._mutex:
            return len(self._items)


class ReadersWriterLock:
    """A readers-preference lock: many readers or one writer."""

    def __init__(self) -> None:
        self._mutex = threading.Lock()
        self._write = threading.BoundedSemaphore(1)
        self._readers = 0

    def acquire_read(self) -> None:
        with self._mutex:
            self._readers += 1
            if self._readers == 1:
                self._write.acquire()

    def release_read(self) -> None:
        with self._mutex:
            if self._readers == 0:
                raise RuntimeError("read lock is not held")
            self._readers -= 1
            if self._readers == 0:
                self._write.release()

    def acquire_write(self) -> None:
        self._write.acquire()

    def release_write(self) -> None:
        try:
            self._write.release()
        except ValueError:
            raise RuntimeError("write lock is not held") from None

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


def producer(buffer: BoundedBuffer, stop: threading.Event, rng: random.Random, delay: float, log: Log) -> None:
    """Put random items from 0 to 99 into *buffer* until *stop* is set."""
    while not stop.is_set():
        item = rng.randrange(100)
        while not buffer._put(item, _POLL):
            if stop.is_set():
                return
        log(f"Producer produced: {item}")
        stop.wait(delay)


def consumer(buffer: BoundedBuffer, stop: threading.Event, delay: float, log: Log) -> None:
    """Take items from *buffer* until *stop* is set."""
    while not stop.is_set():
        taken, item = buffer._take(_POLL)
        if not taken:
            continue
        log(f"Consumer consumed: {item}")
        stop.wait(delay)


def _wait_for_enter() -> None:
    try:
        input()
    except EOFError:
        pass


def _run_workers(workers: list[Callable[[threading.Event], None]], duration: float | None) -> None:
    stop = threading.Event()
    threads = [threading.Thread(target=work, args=(stop,), daemon=True) for work in workers]
    for thread in threads:
        thread.start()
    try:
        if duration is None:
            _wait_for_enter()
        else:
            time.sleep(duration)
    finally:
        stop.set()
        for thread in threads:
            thread.join()


def _producer_consumer(duration: float | None, delay: float, seed: int | None, log: Log) -> None:
    buffer = BoundedBuffer()
    rng = random.Random(seed)
    _run_workers(
        [
            lambda stop: producer(buffer, stop, rng, delay, log),
            lambda stop: consumer(buffer, stop, delay, log),
        ],
        duration,
    )


class _SharedData:
    def __init__(self) -> None:
        self.value = 0


def _readers_writers(readers: int, writers: int, duration: float | None, delay: float, log: Log) -> None:
    if readers < 0 or writers < 0:
        raise ValueError("numbers of readers and writers must not be negative")
    lock = ReadersWriterLock()
    data = _SharedData()

    def reader(index: int, stop: threading.Event) -> None:
        while not stop.is_set():
            with lock.read_locked():
                log(f"Reader {index} reads: {data.value}")
                stop.wait(delay)
            stop.wait(delay)

    def writer(index: int, stop: threading.Event) -> None:
        while not stop.is_set():
            with lock.write_locked():
                data.value += 1
                log(f"Writer {index} writes: {data.value}")
                stop.wait(delay)
            stop.wait(delay)

    workers = [partial(reader, i) for i in range(readers)] + [partial(writer, i) for i in range(writers)]
    _run_workers(workers, duration)


def run_producer_consumer(duration: float = 1.0, delay: float = DEFAULT_DELAY, seed: int | None = None) -> list[str]:
    """Run one producer and one consumer for *duration* seconds; return the log."""
    lines: list[str] = []
    _producer_consumer(duration, delay, seed, lines.append)
    return lines


def run_readers_writers(
    readers: int = 5, writers: int = 5, duration: float = 1.0, delay: float = DEFAULT_DELAY
) -> list[str]:
    """Run readers and writers over a shared counter; return the log."""
    lines: list[str] = []
    _readers_writers(readers, writers, duration, delay, lines.append)
    return lines


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="oslab-sync", description="Synchronisation demonstrations.")
    parser.add_argument("problem", choices=("producer-consumer", "readers-writers"))
    parser.add_argument("--duration", type=float, default=None, help="seconds to run; default waits for Enter")
    parser.add_argument("--delay", type=float, default=DEFAULT_DELAY)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--readers", type=int, default=5)
    parser.add_argument("--writers", type=int, default=5)
    args = parser.parse_args(argv)

    def log(line: str) -> None:
        print(line, flush=True)

    try:
        if args.problem == "producer-consumer":
            _producer_consumer(args.duration, args.delay, args.seed, log)
        else:
            _readers_writers(args.readers, args.writers, args.duration, args.delay, log)
    except ValueError as exc:
        parser.error(str(exc))
    return 0