import queue

import pytest

from icache.pubsub import PubSub
from icache.pubsubcommands import (
    handle_get_num_sub,
    handle_pattern_subscribe,
    handle_pattern_unsubscribe,
    handle_publish,
    handle_subscribe,
    handle_unsubscribe,
)


@pytest.fixture
def pubsub():
    return PubSub()


@pytest.fixture
def inbox():
    return queue.Queue()


def test_subscribe_receives_published_message(pubsub, inbox):
    assert handle_subscribe(pubsub, ["SUBSCRIBE", "news"], inbox.put) == (
        "Subscribed to channel: news\n"
    )
    assert handle_publish(pubsub, ["PUBLISH", "news", "hello"]) == "Message published\n"
    assert inbox.get(timeout=2) == "hello\n"


def test_buffered_messages_replayed_on_subscribe(pubsub, inbox):
    handle_publish(pubsub, ["PUBLISH", "news", "first"])
    handle_publish(pubsub, ["PUBLISH", "news", "second"])
    handle_subscribe(pubsub, ["SUBSCRIBE", "news"], inbox.put)
    assert [inbox.get(timeout=2), inbox.get(timeout=2)] == ["first\n", "second\n"]


def test_pattern_subscribe_prefixes_messages(pubsub, inbox):
    assert handle_pattern_subscribe(pubsub, ["PSUBSCRIBE", "news.*"], inbox.put) == (
        "Subscribed to pattern: news.*\n"
    )
    handle_publish(pubsub, ["PUBLISH", "sport", "ignored"])
    handle_publish(pubsub, ["PUBLISH", "news.tech", "hello"])
    assert inbox.get(timeout=2) == "Message: hello\n"
    with pytest.raises(queue.Empty):
        inbox.get(timeout=0.2)


def test_num_subscribers(pubsub, inbox):
    assert handle_get_num_sub(pubsub, ["GETNSUB", "news"]) == "0\n"
    handle_subscribe(pubsub, ["SUBSCRIBE", "news"], inbox.put)
    assert handle_get_num_sub(pubsub, ["GETNSUB", "news"]) == "1\n"
    assert handle_get_num_sub(pubsub, ["GETNSUB"]) == "Usage: GETNSUB <channel> \n"


def test_unsubscribe_acknowledges_without_removing(pubsub, inbox):
    handle_subscribe(pubsub, ["SUBSCRIBE", "news"], inbox.put)
    assert handle_unsubscribe(pubsub, ["UNSUBSCRIBE", "news"]) == (
        "Unsubscribed from channel: news\n"
    )
    assert handle_get_num_sub(pubsub, ["GETNSUB", "news"]) == "1\n"


def test_pattern_unsubscribe_reply(pubsub):
    assert handle_pattern_unsubscribe(pubsub, ["PUNSUBSCRIBE", "a*"]) == (
        "Unsubscribed from pattern: a*\n"
    )
    assert handle_pattern_unsubscribe(pubsub, ["PUNSUBSCRIBE"]) == "Invalid PUNSUBSCRIBE command\n"


def test_usage_errors(pubsub, inbox):
    assert handle_publish(pubsub, ["PUBLISH", "news"]) == "Usage: PUBLISH <channel> <message>\n"
    assert handle_subscribe(pubsub, ["SUBSCRIBE"], inbox.put) == "Usage: SUBSCRIBE <channel>\n"
    assert handle_unsubscribe(pubsub, ["UNSUBSCRIBE", "a", "b"]) == "Usage: UNSUBSCRIBE <channel>\n"
    assert handle_pattern_subscribe(pubsub, ["PSUBSCRIBE"], inbox.put) == (
        "Invalid PSUBSCRIBE command\n"
    )
    assert handle_get_num_sub(pubsub, ["GETNSUB", "a"]) == "0\n"