"""
Per-path locks

Serializes find-then-delete sequences on the same physical file within
one process. Locks are created on first use and dropped once no thread
holds or waits on them.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class PathLockRegistry:
    """Hands out one lock per physical filename."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}
        self._waiters: Dict[str, int] = {}

    @contextmanager
    def hold(self, name: str) -> Iterator[None]:
        """Hold the lock for ``name`` for the duration of the block."""
        with self._guard:
            lock = self._locks.setdefault(name, threading.Lock())
            self._waiters[name] = self._waiters.get(name, 0) + 1

        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                self._waiters[name] -= 1
                if self._waiters[name] == 0:
                    del self._waiters[name]
                    del self._locks[name]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
