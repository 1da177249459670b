"""In-memory per-key request counters with lazy fixed-window expiry."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from threading import Condition, Lock
from time import monotonic

MAX_COUNT = 2**64 - 1


@dataclass(slots=True)
class Entry:
    """Counter for one key and the origin of its current window."""

    value: int
    origin: float

    @classmethod
    def new(cls, now: float) -> Entry:
        return cls(value=0, origin=now)

    def is_stale(self, ttl: float, now: float) -> bool:
        return now - self.origin > ttl

    def reset(self, now: float) -> None:
        self.value = 0
        self.origin = now

    def increment(self, ttl: float, now: float) -> int:
        if self.is_stale(ttl, now):
            self.reset(now)
        self.value = min(self.value + 1, MAX_COUNT)
        return self.value

    def get(self) -> int:
        return self.value


class ReadWriteLock:
    """Many concurrent readers or one exclusive writer.

    Waiting writers block new readers so a steady read load cannot starve them.
    """

    def __init__(self) -> None:
        self._cond = Condition(Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class CountingStore:
    """Concurrency-safe mapping from request key to windowed counter.

    Staleness is resolved only when a key is touched; nothing sweeps the
    mapping, so it grows with the number of distinct keys ever seen. Callers
    receive plain values, never a live ``Entry``.
    """

    def __init__(self, *, clock: Callable[[], float] = monotonic) -> None:
        self._entries: dict[str, Entry] = {}
        self._lock = ReadWriteLock()
        self._clock = clock

    def record_and_get(self, key: str, ttl: float) -> int:
        """Count one request for ``key`` and return the updated value."""

        _check_ttl(ttl)
        with self._lock.write():
            now = self._clock()
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = Entry.new(now)
            return entry.increment(ttl, now)

    def get(self, key: str, ttl: float) -> int:
        """Return the count for ``key``; 0 if it is unknown or its window expired."""

        _check_ttl(ttl)
        with self._lock.read():
            entry = self._entries.get(key)
            if entry is None or entry.is_stale(ttl, self._clock()):
                return 0
            return entry.get()

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)


def _check_ttl(ttl: float) -> None:
    if ttl < 0:
        raise ValueError("ttl must be >= 0")
