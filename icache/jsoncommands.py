"""Command handlers for the JSON document store.

Each handler takes the whole command (name first) and returns the reply text.
"""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from typing import Any

from icache.jsonstore import JSONStore, JSONStoreError

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}
_HTML_RE = re.compile("[<>&\u2028\u2029]")


def _parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    value = int(text)
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant: {name}")


def _loads(text: str) -> Any:
    return json.loads(text, parse_constant=_reject_constant)


def _normalise(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _normalise(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_normalise(item) for item in value]
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return int(value)
    return value


def _dumps(value: Any) -> str:
    text = json.dumps(
        _normalise(value), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )
    return _HTML_RE.sub(lambda match: _HTML_ESCAPES[match.group()], text)


def handle_json_set(store: JSONStore, command: Sequence[str]) -> str:
    """Store a JSON object; the last argument is always taken as the TTL."""
    if len(command) < 3:
        return "ERR wrong number of arguments for 'SETJSON' command\n"
    key = command[1]
    text = " ".join(command[2:-1])
    try:
        document = _loads(text)
    except ValueError:
        return "ERR invalid JSON\n"
    if document is not None and not isinstance(document, dict):
        return "ERR invalid JSON\n"

    ttl = 0
    if len(command) > 3:
        try:
            ttl = _parse_int(command[-1])
        except ValueError:
            ttl = 0

    try:
        store.set_json(key, document, ttl)
    except JSONStoreError as exc:
        return f"ERR {exc}\n"
    return "OK\n"


def handle_json_get(store: JSONStore, command: Sequence[str]) -> str:
    if len(command) != 2:
        return "ERR wrong number of arguments for 'GETJSON' command\n"
    try:
        document = store.get_json(command[1])
    except JSONStoreError:
        return "ERR no such key\n"
    return _dumps(document) + "\n"


def handle_json_del(store: JSONStore, command: Sequence[str]) -> str:
    if len(command) != 2:
        return "ERR wrong number of arguments for 'DELJSON' command\n"
    return ":1\n" if store.delete_json(command[1]) else ":0\n"


def handle_json_update(store: JSONStore, command: Sequence[str]) -> str:
    if len(command) < 4:
        return "ERR wrong number of arguments for 'UPDATEJSON' command\n"
    key, field, raw = command[1], command[2], command[3]
    try:
        value = _loads(raw)
    except ValueError:
        return "ERR invalid JSON value\n"
    try:
        store.update_json(key, field, value)
    except JSONStoreError as exc:
        return f"ERR {exc}\n"
    return "OK\n"


def handle_json_ttl(store: JSONStore, command: Sequence[str]) -> str:
    if len(command) != 2:
        return "ERR wrong number of arguments for 'TTL' command\n"
    try:
        remaining = store.ttl(command[1])
    except JSONStoreError:
        return "-2\n"
    return f":{int(remaining)}\n"