from __future__ import annotations

import threading

from .errors import InvalidConfig, LimiterError


class ConcurrencyLimiter:
    """
    Caps how many probes may be in flight at once.

    acquire() blocks until a slot is free, release() hands one back and
    wakes at most one waiter. active and peak are kept for progress
    output and tests; they never drive control decisions.
    """

    def __init__(self, limit: int):
        if limit < 1:
            raise InvalidConfig(f"Concurrency limit must be >= 1 (got {limit})")
        self.limit = limit
        self._slots = threading.BoundedSemaphore(limit)
        self._lock = threading.Lock()
        self._active = 0
        self._peak = 0

    @property
    def active(self) -> int:
        with self._lock:
            return self._active

    @property
    def peak(self) -> int:
        with self._lock:
            return self._peak

    def acquire(self) -> None:
        self._slots.acquire()
        with self._lock:
            self._active += 1
            if self._active > self._peak:
                self._peak = self._active

    def release(self) -> None:
        with self._lock:
            if self._active == 0:
                raise LimiterError("release() called without a matching acquire()")
            self._active -= 1
        self._slots.release()

    def __enter__(self) -> "ConcurrencyLimiter":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
