"""In-memory store of string lists keyed by name."""

from __future__ import annotations

import threading

NOT_FOUND = "404:NOT_FOUND"
OUT_OF_RANGE = "401:INDEX_OUT_OF_RANGE"


class ListStoreError(Exception):
    """Base class for list store errors."""


class KeyNotFoundError(ListStoreError, LookupError):
    """The list does not exist."""

    def __init__(self, message: str = NOT_FOUND) -> None:
        super().__init__(message)


class IndexOutOfRangeError(ListStoreError, IndexError):
    """An index or range lies outside the list."""

    def __init__(self, message: str = OUT_OF_RANGE) -> None:
        super().__init__(message)


class ListStore:
    """Thread-safe mapping of keys to lists of strings."""

    def __init__(self) -> None:
        self._lists: dict[str, list[str]] = {}
        self._lock = threading.RLock()

    def lpush(self, key: str, *values: str) -> None:
        """Insert ``values``, in the order given, at the head of the list."""
        with self._lock:
            self._lists[key] = [*values, *self._lists.get(key, [])]

    def rpush(self, key: str, *values: str) -> None:
        """Append ``values`` to the tail of the list."""
        with self._lock:
            self._lists.setdefault(key, []).extend(values)

    def lpop(self, key: str) -> str | None:
        """Remove and return the first element, or None if there is none."""
        with self._lock:
            items = self._lists.get(key)
            if not items:
                return None
            return items.pop(0)

    def rpop(self, key: str) -> str | None:
        """Remove and return the last element, or None if there is none."""
        with self._lock:
            items = self._lists.get(key)
            if not items:
                return None
            return items.pop()

    def _resolve(self, key: str, start: int, stop: int) -> tuple[list[str], int, int]:
        items = self._lists.get(key)
        if items is None:
            raise KeyNotFoundError()
        if start < 0:
            start += len(items)
        if stop < 0:
            stop += len(items)
        return items, start, stop

    def lrange(self, key: str, start: int, stop: int) -> list[str]:
        """Return elements ``start`` through ``stop`` inclusive; negatives count from the end."""
        with self._lock:
            items, start, stop = self._resolve(key, start, stop)
            if start < 0 or stop >= len(items) or start > stop:
                raise IndexOutOfRangeError()
            return items[start : stop + 1]

    def llen(self, key: str) -> int:
        with self._lock:
            return len(self._lists.get(key, ()))

    def ltrim(self, key: str, start: int, stop: int) -> None:
        """Keep only elements ``start`` through ``stop``.

        A range whose stop lies after its start is rejected.
        """
        with self._lock:
            items, start, stop = self._resolve(key, start, stop)
            if start < 0 or stop >= len(items) or stop > start or start > stop + 1:
                raise IndexOutOfRangeError()
            self._lists[key] = items[start : stop + 1]

    def lindex(self, key: str, index: int) -> str:
        """Return the element at ``index``; negatives count from the end."""
        with self._lock:
            items = self._lists.get(key)
            if items is None:
                raise KeyNotFoundError()
            if index < 0:
                index += len(items)
            if index < 0 or index >= len(items):
                raise IndexOutOfRangeError()
            return items[index]