"""Publish/subscribe hub with exact-channel and wildcard-pattern subscribers."""

from __future__ import annotations

import queue
import threading
from collections import deque
from collections.abc import Iterator

BUFFER_SIZE = 30

_CLOSED = object()


class SubscriptionClosed(Exception):
    """The subscription was closed and holds no more messages."""


class Subscription:
    """A subscriber's mailbox of published messages."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._queue: queue.SimpleQueue[object] = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _deliver(self, message: str) -> None:
        with self._lock:
            if not self._closed:
                self._queue.put(message)

    def close(self) -> None:
        """Stop accepting messages; readers see the end after queued ones."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSED)

    def get(self, timeout: float | None = None) -> str:
        """Return the next message.

        Raises queue.Empty when ``timeout`` passes first and
        SubscriptionClosed once the subscription is closed and drained.
        """
        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            self._queue.put(_CLOSED)
            raise SubscriptionClosed(self.name)
        return item  # type: ignore[return-value]

    def __iter__(self) -> Iterator[str]:
        while True:
            try:
                yield self.get()
            except SubscriptionClosed:
                return


def matches_pattern(pattern: str, channel: str) -> bool:
    """Match ``channel`` against a pattern in which ``*`` stands for any text."""
    if pattern == "*":
        return True
    parts = pattern.split("*")
    if len(parts) == 1:
        return pattern == channel
    if not channel.startswith(parts[0]) or not channel.endswith(parts[-1]):
        return False
    return all(part in channel for part in parts)


class PubSub:
    """Thread-safe hub that fans published messages out to subscribers.

    The last ``BUFFER_SIZE`` messages of each channel are kept and replayed
    to new channel subscribers.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._channels: dict[str, list[Subscription]] = {}
        self._patterns: dict[str, list[Subscription]] = {}
        self._buffers: dict[str, deque[str]] = {}

    def subscribe(self, channel: str) -> Subscription:
        """Subscribe to ``channel``; buffered messages are delivered first."""
        subscription = Subscription(channel)
        with self._lock:
            for message in self._buffers.get(channel, ()):
                subscription._deliver(message)
            self._channels.setdefault(channel, []).append(subscription)
        return subscription

    def subscribe_pattern(self, pattern: str) -> Subscription:
        """Subscribe to every channel matching ``pattern``."""
        subscription = Subscription(pattern)
        with self._lock:
            self._patterns.setdefault(pattern, []).append(subscription)
        return subscription

    def publish(self, channel: str, message: str) -> None:
        """Buffer ``message`` and deliver it to channel and pattern subscribers."""
        with self._lock:
            self._buffers.setdefault(channel, deque(maxlen=BUFFER_SIZE)).append(message)
            targets = list(self._channels.get(channel, ()))
            for pattern, subscribers in self._patterns.items():
                if matches_pattern(pattern, channel):
                    targets.extend(subscribers)
        for subscription in targets:
            subscription._deliver(message)

    @staticmethod
    def _remove(
        registry: dict[str, list[Subscription]], name: str, subscriber: Subscription | None
    ) -> None:
        subscribers = registry.get(name)
        if not subscribers:
            return
        for position, candidate in enumerate(subscribers):
            if candidate is subscriber:
                del subscribers[position]
                candidate.close()
                break
        if not subscribers:
            del registry[name]

    def unsubscribe(self, channel: str, subscriber: Subscription | None) -> None:
        """Remove and close ``subscriber`` from ``channel``; unknown ones are ignored."""
        with self._lock:
            self._remove(self._channels, channel, subscriber)

    def unsubscribe_pattern(self, pattern: str, subscriber: Subscription | None) -> None:
        """Remove and close ``subscriber`` from ``pattern``; unknown ones are ignored."""
        with self._lock:
            self._remove(self._patterns, pattern, subscriber)

    def num_subscribers(self, channel: str) -> int:
        """Number of exact subscribers of ``channel``."""
        with self._lock:
            return len(self._channels.get(channel, ()))