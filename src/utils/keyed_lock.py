"""
Per-key mutual exclusion for in-process writers.

Shift writes for the same doctor must not interleave between the conflict
query and the insert. KeyedLock hands out one lock per key (doctor id) and
drops it again once no thread holds or waits for it.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Generator, Hashable, Tuple


class KeyedLock:
    """Registry of reference-counted locks keyed by an arbitrary hashable."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, Tuple[threading.Lock, int]] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Generator[None, None, None]:
        """Block until the lock for key is free, hold it for the with-block."""
        lock = self._acquire_ref(key)
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            self._release_ref(key)

    def active_keys(self) -> int:
        """Number of keys currently held or waited on."""
        with self._guard:
            return len(self._locks)

    def _acquire_ref(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock, refs = self._locks.get(key, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._locks[key] = (lock, refs + 1)
            return lock

    def _release_ref(self, key: Hashable) -> None:
        with self._guard:
            lock, refs = self._locks[key]
            if refs <= 1:
                del self._locks[key]
            else:
                self._locks[key] = (lock, refs - 1)
