# =============================================================================
# lib/locks.py - Per-ZIP Locks
# =============================================================================
# Serializes the read-modify-write of a ZIP's entries within one process, so
# two concurrent reports for the same ZIP cannot lose an increment.
#
# Reports for different ZIPs never wait on each other. Separate worker
# processes are NOT coordinated by this registry.
#
# Usage:
#   locks = ZipLockRegistry()
#   with locks.hold("91344"):
#       ...fetch, merge, write...
# =============================================================================

import threading
from contextlib import contextmanager
from typing import Iterator


class ZipLockRegistry:
    """Lazily created lock per ZIP code."""

    def __init__(self):
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def get(self, zip_code: str) -> threading.Lock:
        """Lock for a ZIP (the same object for every call with that ZIP)."""
        with self._guard:
            lock = self._locks.get(zip_code)
            if lock is None:
                lock = threading.Lock()
                self._locks[zip_code] = lock
            return lock

    @contextmanager
    def hold(self, zip_code: str) -> Iterator[None]:
        """Context manager holding the ZIP's lock."""
        lock = self.get(zip_code)
        with lock:
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
