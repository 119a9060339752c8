"""TCP command server: line protocol, dispatch and MULTI/EXEC transactions."""

from __future__ import annotations

import argparse
import socket
import sys
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from icache import logger
from icache.jsoncommands import (
    handle_json_del,
    handle_json_get,
    handle_json_set,
    handle_json_ttl,
    handle_json_update,
)
from icache.jsonstore import JSONStore
from icache.kvcommands import (
    handle_del,
    handle_exists,
    handle_expire,
    handle_flushall,
    handle_get,
    handle_getset,
    handle_info,
    handle_keys,
    handle_mget,
    handle_mset,
    handle_persist,
    handle_ping,
    handle_set,
    handle_setex,
    handle_ttl,
    handle_update,
)
from icache.listcommands import (
    handle_lindex,
    handle_llen,
    handle_lpop,
    handle_lpush,
    handle_lrange,
    handle_rpop,
    handle_rpush,
    handle_ltrim,
)
from icache.liststore import ListStore
from icache.pubsub import PubSub
from icache.pubsubcommands import (
    handle_get_num_sub,
    handle_pattern_subscribe,
    handle_pattern_unsubscribe,
    handle_publish,
    handle_subscribe,
    handle_unsubscribe,
)
from icache.store import KeyValueStore
from icache.transaction import Transaction, TransactionError

DEFAULT_PORT = 6379

Send = Callable[[str], object]


@dataclass
class Stores:
    """The data stores shared by every connection."""

    kv: KeyValueStore = field(default_factory=KeyValueStore)
    lists: ListStore = field(default_factory=ListStore)
    json: JSONStore = field(default_factory=JSONStore)
    pubsub: PubSub = field(default_factory=PubSub)


_Handler = Callable[[Stores, Sequence[str], Send], str]

_COMMANDS: dict[str, _Handler] = {
    "SET": lambda s, c, _: handle_set(s.kv, c),
    "SETEX": lambda s, c, _: handle_setex(s.kv, c),
    "GET": lambda s, c, _: handle_get(s.kv, c),
    "DEL": lambda s, c, _: handle_del(s.kv, c),
    "KEYS": lambda s, c, _: handle_keys(s.kv, c),
    "EXISTS": lambda s, c, _: handle_exists(s.kv, c),
    "TTL": lambda s, c, _: handle_ttl(s.kv, c),
    "FLUSHALL": lambda s, c, _: handle_flushall(s.kv),
    "INFO": lambda s, c, _: handle_info(s.kv),
    "PING": lambda s, c, _: handle_ping(s.kv),
    "PERSIST": lambda s, c, _: handle_persist(s.kv, c),
    "EXPIRE": lambda s, c, _: handle_expire(s.kv, c),
    "MSET": lambda s, c, _: handle_mset(s.kv, c),
    "MGET": lambda s, c, _: handle_mget(s.kv, c),
    "UPDATE": lambda s, c, _: handle_update(s.kv, c),
    "GETSET": lambda s, c, _: handle_getset(s.kv, c),
    "PUBLISH": lambda s, c, _: handle_publish(s.pubsub, c),
    "SUBSCRIBE": lambda s, c, send: handle_subscribe(s.pubsub, c, send),
    "UNSUBSCRIBE": lambda s, c, _: handle_unsubscribe(s.pubsub, c),
    "GETNSUM": lambda s, c, _: handle_get_num_sub(s.pubsub, c),
    "PSUBSCRIBE": lambda s, c, send: handle_pattern_subscribe(s.pubsub, c, send),
    "PUNSUBSCRIBE": lambda s, c, _: handle_pattern_unsubscribe(s.pubsub, c),
    "LPUSH": lambda s, c, _: handle_lpush(s.lists, c),
    "RPUSH": lambda s, c, _: handle_rpush(s.lists, c),
    "LPOP": lambda s, c, _: handle_lpop(s.lists, c),
    "RPOP": lambda s, c, _: handle_rpop(s.lists, c),
    "LRANGE": lambda s, c, _: handle_lrange(s.lists, c),
    "LLEN": lambda s, c, _: handle_llen(s.lists, c),
    "LTRIM": lambda s, c, _: handle_ltrim(s.lists, c),
    "LINDEX": lambda s, c, _: handle_lindex(s.lists, c),
    "JSON.SET": lambda s, c, _: handle_json_set(s.json, c),
    "JSON.GET": lambda s, c, _: handle_json_get(s.json, c),
    "JSON.DEL": lambda s, c, _: handle_json_del(s.json, c),
    "JSON.UPDATE": lambda s, c, _: handle_json_update(s.json, c),
    "JSON.TTL": lambda s, c, _: handle_json_ttl(s.json, c),
}

# Inside EXEC, a queued RPOP pops from the head of the list.
_COMMIT_ALIASES = {"RPOP": "LPOP"}


def _dispatch(stores: Stores, name: str, command: Sequence[str], send: Send) -> str | None:
    handler = _COMMANDS.get(name)
    if handler is None:
        return None
    return handler(stores, command, send)


def execute_command(stores: Stores, command: Sequence[str], send: Send) -> str | None:
    """Run one command and return its reply, or None if the command is unknown."""
    return _dispatch(stores, command[0].upper(), command, send)


def handle_command(
    stores: Stores, transaction: Transaction, command: Sequence[str], send: Send
) -> None:
    """Queue the command inside a transaction, otherwise run it and send the reply."""
    if transaction.is_active:
        transaction.add_command(command[0].upper(), list(command))
        send("QUEUED\n")
        return
    reply = execute_command(stores, command, send)
    send("Unknown command\n" if reply is None else reply)


def commit_transaction(stores: Stores, transaction: Transaction, send: Send) -> None:
    """Run every queued command, sending each reply, then end the transaction."""
    if not transaction.is_active:
        send("ERROR: Transaction already executed or discarded\n")
        return
    for queued in transaction.commands:
        name = _COMMIT_ALIASES.get(queued.name, queued.name)
        reply = _dispatch(stores, name, queued.args, send)
        if reply is None:
            send(f"ERROR: Unknown command {queued.name}\n")
            transaction.is_active = False
            return
        send(reply)
    transaction.is_active = False
    transaction.commands = []
    send("OK: Transaction committed\n")


def handle_line(stores: Stores, transaction: Transaction, line: str, send: Send) -> bool:
    """Handle one input line; return False when the connection must be closed."""
    command = line.split()
    if not command:
        send("Invalid command\n")
        return True
    name = command[0].upper()
    if name == "MULTI":
        try:
            transaction.start_transaction()
        except TransactionError:
            pass
        send("OK: Transaction started\n")
    elif name == "EXEC":
        commit_transaction(stores, transaction, send)
    elif name == "DISCARD":
        try:
            transaction.abort_transaction()
        except TransactionError as exc:
            send(f"ERR: {exc}\n")
            return False
        send("OK: Transaction discarded\n")
    else:
        handle_command(stores, transaction, command, send)
    return True


def handle_connection(sock: socket.socket, stores: Stores, transaction: Transaction) -> None:
    """Serve one client until it disconnects; the socket is closed afterwards."""
    write_lock = threading.Lock()

    def send(text: str) -> None:
        with write_lock:
            sock.sendall(text.encode("utf-8"))

    try:
        with sock, sock.makefile("rb") as reader:
            for raw in reader:
                if not raw.endswith(b"\n"):
                    break
                line = raw.decode("utf-8", errors="replace")
                if not handle_line(stores, transaction, line, send):
                    return
    except OSError:
        pass
    print("Client disconnected!")


def serve(host: str = "", port: int = DEFAULT_PORT, stores: Stores | None = None) -> None:
    """Listen on ``host:port`` and serve clients forever, one thread each."""
    transaction = Transaction()
    with socket.create_server((host, port)) as listener:
        if stores is None:
            stores = Stores()
        logger.info(f"Server is running on port {port}")
        logger.info("Server initialized")
        logger.info("Ready to accept connections tcp")
        while True:
            try:
                conn, _ = listener.accept()
            except OSError as exc:
                print("Failed to accept connection:", exc, file=sys.stderr)
                continue
            threading.Thread(
                target=handle_connection,
                args=(conn, stores, transaction),
                name="icache-connection",
                daemon=True,
            ).start()


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="icache-server", description="Run the cache server.")
    parser.add_argument("--host", default="", help="address to listen on (default: all)")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="TCP port")
    args = parser.parse_args(argv)
    try:
        serve(args.host, args.port)
    except OSError as exc:
        print(f"Failed to start server: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0