"""Command handlers for publish/subscribe.

Handlers return the immediate reply text; subscriptions forward each later
message through ``send`` from a background thread.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence

from icache.pubsub import PubSub, Subscription

Send = Callable[[str], object]


def _forward(subscription: Subscription, send: Send, render: Callable[[str], str]) -> None:
    def pump() -> None:
        for message in subscription:
            try:
                send(render(message))
            except OSError:
                return

    threading.Thread(
        target=pump, name=f"icache-sub-{subscription.name}", daemon=True
    ).start()


def handle_publish(pubsub: PubSub, command: Sequence[str]) -> str:
    if len(command) != 3:
        return "Usage: PUBLISH <channel> <message>\n"
    pubsub.publish(command[1], command[2])
    return "Message published\n"


def handle_subscribe(pubsub: PubSub, command: Sequence[str], send: Send) -> str:
    if len(command) != 2:
        return "Usage: SUBSCRIBE <channel>\n"
    channel = command[1]
    _forward(pubsub.subscribe(channel), send, lambda message: message + "\n")
    return f"Subscribed to channel: {channel}\n"


def handle_unsubscribe(pubsub: PubSub, command: Sequence[str]) -> str:
    """Acknowledge the request; no connection's subscription is identified, so none is removed."""
    if len(command) != 2:
        return "Usage: UNSUBSCRIBE <channel>\n"
    channel = command[1]
    pubsub.unsubscribe(channel, None)
    return f"Unsubscribed from channel: {channel}\n"


def handle_get_num_sub(pubsub: PubSub, command: Sequence[str]) -> str:
    if len(command) != 2:
        return "Usage: GETNSUB <channel> \n"
    return f"{pubsub.num_subscribers(command[1])}\n"


def handle_pattern_subscribe(pubsub: PubSub, command: Sequence[str], send: Send) -> str:
    if len(command) != 2:
        return "Invalid PSUBSCRIBE command\n"
    pattern = command[1]
    _forward(pubsub.subscribe_pattern(pattern), send, lambda message: f"Message: {message}\n")
    return f"Subscribed to pattern: {pattern}\n"


def handle_pattern_unsubscribe(pubsub: PubSub, command: Sequence[str]) -> str:
    """Acknowledge the request; no connection's subscription is identified, so none is removed."""
    if len(command) != 2:
        return "Invalid PUNSUBSCRIBE command\n"
    pattern = command[1]
    pubsub.unsubscribe_pattern(pattern, None)
    return f"Unsubscribed from pattern: {pattern}\n"