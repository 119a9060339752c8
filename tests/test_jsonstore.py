from datetime import timedelta

import pytest
from freezegun import freeze_time

from icache.jsonstore import JSONStore, JSONStoreError


@pytest.fixture
def store():
    return JSONStore()


def test_set_json(store):
    store.set_json("user1", {"name": "John", "age": 30}, 0)
    result = store.get_json("user1")
    assert result["name"] == "John"
    assert result["age"] == 30


def test_set_json_with_ttl(store):
    with freeze_time("2024-01-01 00:00:00") as frozen:
        store.set_json("user2", {"name": "John"}, 1)
        frozen.tick(timedelta(seconds=2))
        with pytest.raises(JSONStoreError):
            store.get_json("user2")
        assert store.delete_json("user2") is False


def test_delete_json(store):
    store.set_json("user3", {"name": "Jane"}, 0)
    assert store.delete_json("user3") is True
    with pytest.raises(JSONStoreError):
        store.get_json("user3")
    assert store.delete_json("user3") is False


def test_update_json(store):
    store.set_json("user4", {"name": "Doe", "age": 25}, 0)
    store.update_json("user4", "age", 26)
    assert store.get_json("user4") == {"name": "Doe", "age": 26}


def test_update_json_missing_key(store):
    with pytest.raises(JSONStoreError, match="key not found"):
        store.update_json("nope", "a", 1)


def test_update_json_non_object(store):
    store.set_json("list", [1, 2], 0)
    with pytest.raises(JSONStoreError):
        store.update_json("list", "a", 1)


def test_ttl_json(store):
    with freeze_time("2024-01-01 00:00:00") as frozen:
        store.set_json("user5", {"name": "Test"}, 2)
        assert store.ttl("user5") > 0
        frozen.tick(timedelta(seconds=3))
        with pytest.raises(JSONStoreError):
            store.ttl("user5")


def test_ttl_without_expiry_raises(store):
    store.set_json("k", {"a": 1}, 0)
    with pytest.raises(JSONStoreError):
        store.ttl("k")


def test_set_without_ttl_clears_expiry(store):
    store.set_json("k", {"a": 1}, 10)
    store.set_json("k", {"a": 2}, 0)
    with pytest.raises(JSONStoreError):
        store.ttl("k")
    assert store.get_json("k") == {"a": 2}


def test_unserialisable_value_raises(store):
    with pytest.raises(JSONStoreError):
        store.set_json("k", {"a": object()}, 0)
    with pytest.raises(JSONStoreError):
        store.get_json("k")


def test_get_returns_independent_copy(store):
    store.set_json("k", {"items": [1]}, 0)
    first = store.get_json("k")
    first["items"].append(2)
    assert store.get_json("k") == {"items": [1]}