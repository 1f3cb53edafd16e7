"""
Per-unit admission locks.

One threading.Lock per bookable unit id, created on first use and dropped once
no thread holds or waits on it. Admissions for the same unit run one at a time
inside a process; different units never share a lock. Cross-process ordering
comes from the unit row lock and the reservations exclusion constraint.
"""
import threading
from contextlib import contextmanager
from typing import Hashable, Iterator


class UnitLockRegistry:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        # key -> [lock, number of holders + waiters]
        self._locks: dict[Hashable, list] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        """Hold the lock for key for the duration of the with-block."""
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._locks[key] = entry
            entry[1] += 1
        lock = entry[0]
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def active_keys(self) -> list[Hashable]:
        """Keys currently held or waited on (for debugging and tests)."""
        with self._guard:
            return list(self._locks)


# Process-wide registry used by the engine.
unit_locks = UnitLockRegistry()
