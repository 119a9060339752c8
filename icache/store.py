"""In-memory string key/value store with optional per-key expiry."""

from __future__ import annotations

import re
import threading
import time
from dataclasses import dataclass


@dataclass
class Item:
    """A stored value and the epoch time it expires at, if any."""

    value: str
    expires: float | None = None

    def is_expired(self) -> bool:
        return self.expires is not None and time.time() > self.expires


class KeyValueStore:
    """Thread-safe string store; expired keys are dropped lazily and by a cleaner."""

    def __init__(self, cleanup_interval: float | None = 5.0) -> None:
        self._data: dict[str, Item] = {}
        self._lock = threading.RLock()
        self._stop: threading.Event | None = None
        self._cleaner: threading.Thread | None = None
        if cleanup_interval is not None:
            self.start_cleaner(cleanup_interval)

    def __enter__(self) -> KeyValueStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def set(self, key: str, value: str, ttl: float = 0) -> None:
        """Store ``value``; a positive ``ttl`` (seconds) makes it expire."""
        expires = time.time() + ttl if ttl > 0 else None
        with self._lock:
            self._data[key] = Item(value, expires)

    def get(self, key: str) -> str | None:
        """Return the value, or None if it is missing or has expired."""
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return None
            if item.is_expired():
                del self._data[key]
                return None
            return item.value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def expire(self, key: str, seconds: int) -> bool:
        """Set the key to expire ``seconds`` from now; False if it is missing."""
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return False
            item.expires = time.time() + seconds
            return True

    def flush_all(self) -> None:
        with self._lock:
            self._data = {}

    def get_set(self, key: str, value: str) -> str:
        """Store ``value`` without expiry and return the old value, or ''."""
        with self._lock:
            old = self._data.get(key)
            self._data[key] = Item(value)
            return old.value if old is not None else ""

    def info(self) -> str:
        with self._lock:
            count = len(self._data)
            total = sum(len(item.value.encode()) for item in self._data.values())
        return (
            "ICache Server\n"
            f"Number of Keys: {count}\n"
            f"Total Size: {total} bytes\n"
            f"Memory Usage: {total / 1024:.2f} KB\n"
        )

    def keys(self, pattern: str) -> list[str]:
        """Return keys matching a ``*`` wildcard pattern.

        A pattern without ``*`` matches nothing.
        """
        if "*" not in pattern:
            return []
        regex = re.compile(re.escape(pattern).replace(r"\*", ".*"), re.DOTALL)
        with self._lock:
            return [key for key in self._data if regex.fullmatch(key)]

    def mget(self, *keys: str) -> list[str]:
        """Return each key's value, or ``'(nil)'`` for missing or expired keys."""
        with self._lock:
            results = []
            for key in keys:
                item = self._data.get(key)
                if item is None or item.is_expired():
                    results.append("(nil)")
                else:
                    results.append(item.value)
            return results

    def mset(self, *pairs: str) -> None:
        """Store key/value pairs without expiry; an odd count stores nothing."""
        if len(pairs) % 2:
            return
        with self._lock:
            for key, value in zip(pairs[::2], pairs[1::2]):
                self._data[key] = Item(value)

    def persist(self, key: str) -> bool:
        """Remove the key's expiry; False if it is missing."""
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return False
            item.expires = None
            return True

    def ping(self) -> str:
        return "PONG"

    def ttl(self, key: str) -> int:
        """Whole seconds left; -1 without expiry, -2 if missing, 0 once expired."""
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return -2
            if item.expires is None:
                return -1
            remaining = item.expires - time.time()
        if remaining <= 0:
            return 0
        return int(remaining)

    def update(self, key: str, value: str) -> str:
        """Replace an existing value, keeping its expiry; return the old value or ''."""
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return ""
            old = item.value
            self._data[key] = Item(value, item.expires)
            return old

    def clean_expired(self) -> list[str]:
        """Drop every expired key and return the keys removed."""
        with self._lock:
            expired = [key for key, item in self._data.items() if item.is_expired()]
            for key in expired:
                del self._data[key]
        return expired

    def start_cleaner(self, interval: float) -> None:
        """Start a background thread that drops expired keys every ``interval`` seconds."""
        if interval <= 0:
            raise ValueError("cleaner interval must be positive")
        with self._lock:
            if self._cleaner is not None and self._cleaner.is_alive():
                return
            stop = threading.Event()
            thread = threading.Thread(
                target=self._clean_loop,
                args=(interval, stop),
                name="icache-cleaner",
                daemon=True,
            )
            self._stop = stop
            self._cleaner = thread
        thread.start()

    def _clean_loop(self, interval: float, stop: threading.Event) -> None:
        while not stop.wait(interval):
            self.clean_expired()

    def close(self) -> None:
        """Stop the background cleaner, if one is running."""
        with self._lock:
            stop, thread = self._stop, self._cleaner
            self._stop = None
            self._cleaner = None
        if stop is not None:
            stop.set()
        if thread is not None:
            thread.join()