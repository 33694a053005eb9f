"""A thread-safe byte cache whose entries expire after a fixed interval."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass


@dataclass(frozen=True)
class _Entry:
    created_at: float
    value: bytes


class Cache:
    """Key/value store of bytes, reaped periodically by a background thread.

    Every ``interval`` seconds, entries older than ``interval`` are removed.
    """

    def __init__(self, interval: float) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = float(interval)
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()
        self._stopped = threading.Event()
        self._thread = threading.Thread(
            target=self._reap_loop, name="cache-reaper", daemon=True
        )
        self._thread.start()

    def _reap_loop(self) -> None:
        while not self._stopped.wait(self.interval):
            self.reap()

    def reap(self) -> None:
        """Remove every entry created more than ``interval`` seconds ago."""
        now = time.monotonic()
        with self._lock:
            expired = [
                key
                for key, entry in self._entries.items()
                if entry.created_at + self.interval < now
            ]
            for key in expired:
                del self._entries[key]

    def get(self, key: str) -> bytes | None:
        """Return the value stored under ``key``, or None if absent."""
        with self._lock:
            entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def add(self, key: str, value: bytes) -> None:
        """Store ``value`` under ``key``, replacing any previous entry."""
        entry = _Entry(created_at=time.monotonic(), value=bytes(value))
        with self._lock:
            self._entries[key] = entry

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def close(self) -> None:
        """Stop the background reaper."""
        self._stopped.set()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join()

    def __enter__(self) -> Cache:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()