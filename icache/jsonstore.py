"""In-memory store of JSON documents with optional expiry."""

from __future__ import annotations

import json
import threading
import time
from typing import Any

_MISSING = "key not found or expired"


class JSONStoreError(Exception):
    """A JSON store operation failed."""


def _encode(value: Any) -> str:
    try:
        return json.dumps(
            value,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as exc:
        raise JSONStoreError(str(exc)) from exc


class JSONStore:
    """Thread-safe mapping of keys to serialised JSON documents."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._expiration: dict[str, float] = {}
        self._lock = threading.RLock()

    def set_json(self, key: str, value: Any, ttl: float = 0) -> None:
        """Store ``value``; a positive ``ttl`` (seconds) makes it expire."""
        encoded = _encode(value)
        with self._lock:
            self._data[key] = encoded
            if ttl > 0:
                self._expiration[key] = time.time() + ttl
            else:
                self._expiration.pop(key, None)

    def get_json(self, key: str) -> Any:
        """Return the decoded document; raise JSONStoreError if missing or expired."""
        with self._lock:
            encoded = self._data.get(key)
            if encoded is None:
                raise JSONStoreError(_MISSING)
            expires = self._expiration.get(key)
            if expires is not None and expires < time.time():
                del self._data[key]
                del self._expiration[key]
                raise JSONStoreError(_MISSING)
        return json.loads(encoded)

    def delete_json(self, key: str) -> bool:
        with self._lock:
            if key not in self._data:
                return False
            del self._data[key]
            self._expiration.pop(key, None)
            return True

    def update_json(self, key: str, field: str, value: Any) -> None:
        """Set ``field`` of the stored object to ``value``."""
        with self._lock:
            encoded = self._data.get(key)
            if encoded is None:
                raise JSONStoreError("key not found")
            document = json.loads(encoded)
            if not isinstance(document, dict):
                raise JSONStoreError("stored value is not a JSON object")
            document[field] = value
            self._data[key] = _encode(document)

    def ttl(self, key: str) -> float:
        """Seconds until expiry; raise JSONStoreError without expiry or once expired."""
        with self._lock:
            expires = self._expiration.get(key)
        now = time.time()
        if expires is None or expires < now:
            raise JSONStoreError(_MISSING)
        return expires - now