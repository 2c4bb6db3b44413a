"""In-process locks keyed by an arbitrary string."""

from collections.abc import Iterator
from contextlib import contextmanager
from threading import Lock


class KeyedLock:
    """Hands out one lock per key so mutations of the same record serialize.

    Entries are reference counted and dropped once no caller holds or waits
    on them, so the table only ever contains keys that are in use.
    """

    def __init__(self) -> None:
        self._locks: dict[str, tuple[Lock, int]] = {}
        self._guard = Lock()

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock, users = self._locks.get(key, (Lock(), 0))
            self._locks[key] = (lock, users + 1)

        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                lock, users = self._locks[key]
                if users <= 1:
                    del self._locks[key]
                else:
                    self._locks[key] = (lock, users - 1)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


invoice_locks = KeyedLock()
