"""Command handlers for the string key/value store.

Each handler takes the whole command (name first) and returns the reply text.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from icache.store import KeyValueStore

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"([0-9]*)(\.[0-9]*)?(ns|us|µs|μs|ms|s|m|h)")


def _parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    value = int(text)
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _parse_duration(text: str) -> float:
    """Parse a duration such as ``1m30s`` or ``1.5s`` into seconds."""
    body = text
    sign = 1.0
    if body[:1] in ("+", "-"):
        sign = -1.0 if body[0] == "-" else 1.0
        body = body[1:]
    if not body:
        raise ValueError(f"invalid duration: {text!r}")
    total = 0.0
    position = 0
    while position < len(body):
        match = _DURATION_PART.match(body, position)
        if match is None:
            raise ValueError(f"invalid duration: {text!r}")
        whole, fraction, unit = match.groups()
        digits = whole + (fraction or "")[1:]
        if not digits:
            raise ValueError(f"invalid duration: {text!r}")
        total += float((whole or "0") + (fraction or "")) * _UNIT_SECONDS[unit]
        position = match.end()
    return sign * total


def handle_set(store: KeyValueStore, command: Sequence[str]) -> str:
    if len(command) != 3:
        return "Usage: SET <key> <value>\n"
    store.set(command[1], command[2], 0)
    return "OK\n"


def handle_setex(store: KeyValueStore, command: Sequence[str]) -> str:
    if len(command) != 4:
        return "Usage: SETEX <key> <value> <ttl>\n"
    try:
        ttl = _parse_duration(command[3] + "s")
    except ValueError:
        return "Invalid TTL\n"
    store.set(command[1], command[2], ttl)
    return "OK\n"


def handle_get(store: KeyValueStore, command: Sequence[str]) -> str:
    if len(command) != 2:
        return "Usage: GET <key>\n"
    value = store.get(command[1])
    return "(nil)\n" if value is None else value + "\n"


def handle_del(store: KeyValueStore, command: Sequence[str]) -> str:
    if len(command) != 2:
        return "Usage: DEL <key>\n"
    store.delete(command[1])
    return "OK\n"


def handle_keys(store: KeyValueStore, command: Sequence[str]) -> str:
    if len(command) != 2:
        return "Usage: KEYS <pattern>\n"
    return "".join(
        f'{number}) "{key}"\n' for number, key in enumerate(store.keys(command[1]), start=1)
    )


def handle_exists(store: KeyValueStore, command: Sequence[str]) -> str:
    if len(command) != 2:
        return "Usage: EXISTS <key>\n"
    return "(integer) 1\n" if store.exists(command[1]) else "(integer) 0\n"


def handle_ttl(store: KeyValueStore, command: Sequence[str]) -> str:
    if len(command) != 2:
        return "Usage: TTL <key>\n"
    ttl = store.ttl(command[1])
    if ttl == -2:
        return "(nil)\n"
    return f"(integer) {ttl}\n"


def handle_flushall(store: KeyValueStore) -> str:
    store.flush_all()
    return "OK\n"


def handle_info(store: KeyValueStore) -> str:
    return store.info() + "\n"


def handle_ping(store: KeyValueStore) -> str:
    return store.ping() + "\n"


def handle_persist(store: KeyValueStore, command: Sequence[str]) -> str:
    if len(command) != 2:
        return "Usage: PERSIST <key>\n"
    return "OK\n" if store.persist(command[1]) else "(nil)\n"


def handle_expire(store: KeyValueStore, command: Sequence[str]) -> str:
    if len(command) != 3:
        return "Usage: EXPIRE <key> <seconds>\n"
    try:
        seconds = _parse_int(command[2])
    except ValueError:
        return "Invalid seconds\n"
    return "OK\n" if store.expire(command[1], seconds) else "(nil)\n"


def handle_mset(store: KeyValueStore, command: Sequence[str]) -> str:
    if len(command) < 3 or len(command) % 2 == 0:
        return "Usage: MSET <key1> <value1> [<key2> <value2> ...]\n"
    store.mset(*command[1:])
    return "OK\n"


def handle_mget(store: KeyValueStore, command: Sequence[str]) -> str:
    if len(command) < 2:
        return "Usage: MGET <key1> [<key2> ...]\n"
    return "\n".join(store.mget(*command[1:])) + "\n"


def handle_update(store: KeyValueStore, command: Sequence[str]) -> str:
    if len(command) != 3:
        return "Usage: UPDATE <key> <value>\n"
    old = store.update(command[1], command[2])
    return "Key does not exist\n" if old == "" else "OK\n"


def handle_getset(store: KeyValueStore, command: Sequence[str]) -> str:
    if len(command) != 3:
        return "Usage: GETSET <key> <value>\n"
    return store.get_set(command[1], command[2]) + "\n"