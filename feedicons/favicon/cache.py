"""In-memory favicon cache shared between the fetch workers and page renders"""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional


class ReadWriteLock:
    """A lock allowing many concurrent readers or a single writer.

    Waiting writers take precedence over new readers so a steady stream of reads can't
    starve a write.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_lock(self) -> Iterator[None]:
        """Hold the lock in shared mode."""
        with self._condition:
            while self._writer or self._writers_waiting:
                self._condition.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._condition:
                self._readers -= 1
                if self._readers == 0:
                    self._condition.notify_all()

    @contextmanager
    def write_lock(self) -> Iterator[None]:
        """Hold the lock in exclusive mode."""
        with self._condition:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._condition.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._condition:
                self._writer = False
                self._condition.notify_all()


class FaviconCache:
    """Map a domain to the `data:` URL of its favicon.

    Entries are written once and kept for the lifetime of the process. A missing entry
    means the domain was either never attempted or could not be resolved.
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}
        self._lock = ReadWriteLock()

    def get(self, domain: str) -> Optional[str]:
        """Return the cached data URL for `domain`, or None."""
        with self._lock.read_lock():
            return self._entries.get(domain)

    def put(self, domain: str, data_url: str) -> bool:
        """Store the data URL for `domain` unless one is already cached.

        Returns True if the entry was written.
        """
        with self._lock.write_lock():
            if domain in self._entries:
                return False
            self._entries[domain] = data_url
            return True

    def __contains__(self, domain: object) -> bool:
        with self._lock.read_lock():
            return domain in self._entries

    def __len__(self) -> int:
        with self._lock.read_lock():
            return len(self._entries)
