"""Command handlers for the list store.

Each handler takes the whole command (name first) and returns the reply text.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from icache.liststore import ListStore, ListStoreError

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1


def _parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    value = int(text)
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _parse_bounds(command: Sequence[str]) -> tuple[int, int]:
    return _parse_int(command[2]), _parse_int(command[3])


def handle_lpush(store: ListStore, command: Sequence[str]) -> str:
    if len(command) < 3:
        return "Usage: LPUSH <key> <value1> <value2> ...\n"
    store.lpush(command[1], *command[2:])
    return "OK\n"


def handle_rpush(store: ListStore, command: Sequence[str]) -> str:
    if len(command) < 3:
        return "Usage: RPUSH <key> <value1> <value2> ...\n"
    store.rpush(command[1], *command[2:])
    return "OK\n"


def handle_lpop(store: ListStore, command: Sequence[str]) -> str:
    if len(command) != 2:
        return "Usage: LPOP <key>\n"
    value = store.lpop(command[1])
    return "nil\n" if value is None else value + "\n"


def handle_rpop(store: ListStore, command: Sequence[str]) -> str:
    if len(command) != 2:
        return "Usage: RPOP <key>\n"
    value = store.rpop(command[1])
    return "nil\n" if value is None else value + "\n"


def handle_lrange(store: ListStore, command: Sequence[str]) -> str:
    if len(command) != 4:
        return "Usage: LRANGE <key> <start> <stop>\n"
    try:
        start, stop = _parse_bounds(command)
    except ValueError:
        return "Invalid start or stop index\n"
    try:
        values = store.lrange(command[1], start, stop)
    except ListStoreError:
        return "nil\n"
    if not values:
        return "nil\n"
    return "".join(value + "\n" for value in values)


def handle_llen(store: ListStore, command: Sequence[str]) -> str:
    if len(command) != 2:
        return "Usage: LEN <key>\n"
    return f"{store.llen(command[1])}\n"


def handle_ltrim(store: ListStore, command: Sequence[str]) -> str:
    if len(command) != 4:
        return "Usage: LRANGE <key> <start> <stop>\n"
    try:
        start, stop = _parse_bounds(command)
    except ValueError:
        return "Invalid start or stop index\n"
    try:
        store.ltrim(command[1], start, stop)
    except ListStoreError:
        return "nil\n"
    return "OK\n"


def handle_lindex(store: ListStore, command: Sequence[str]) -> str:
    if len(command) < 3:
        return "ERR: LINDEX requires key and index\n"
    try:
        index = _parse_int(command[2])
    except ValueError:
        return "ERR: Invalid index\n"
    try:
        value = store.lindex(command[1], index)
    except ListStoreError as exc:
        return f"ERR: {exc}\n"
    return value + "\n"