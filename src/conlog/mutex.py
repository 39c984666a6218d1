"""
Process-wide console mutex.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class ConsoleMutex:
    """Recursive lock guarding the color-set, write, color-restore, terminator sequence.

    Recursive because a redirect holds it while flushing the caller's pending
    line, and that flush takes it again.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()

    def lock(self) -> None:
        self._lock.acquire()

    def unlock(self) -> None:
        self._lock.release()

    @contextmanager
    def try_lock(self) -> Iterator[bool]:
        """Yield whether the lock was acquired; release it on exit if it was."""
        owned = self._lock.acquire(blocking=False)
        try:
            yield owned
        finally:
            if owned:
                self._lock.release()

    def __enter__(self) -> ConsoleMutex:
        self._lock.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._lock.release()


console_mutex = ConsoleMutex()
