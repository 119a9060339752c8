# icache

icache is a small in-memory data server. It holds string keys with optional
expiry, lists, JSON documents and publish/subscribe channels, and it can queue
commands in a transaction. It speaks a plain line protocol over TCP: one
command per line, words separated by whitespace, and every reply line ends
with a newline.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
icache-server [--host HOST] [--port PORT]
```

By default the server listens on all addresses, TCP port 6379. Each client is
served on its own thread. Start-up messages are logged with a timestamp, in
colour when standard output is a terminal and `NO_COLOR` is not set.

## Talking to it

```
icache-cli [--host HOST] [--port PORT]
```

The client connects to `localhost:6379` by default. It reads commands from
standard input, sends each one to the server and prints one line of reply.
Type `exit`, or end the input, to leave. Replies that span several lines
(`INFO`, `KEYS`, `MGET`, `LRANGE`) are read one line per command, so their
remaining lines show up after the commands that follow.

```
> SET greeting hello
OK
> GET greeting
hello
> TTL greeting
(integer) -1
```

## Commands

Command names are not case-sensitive. An empty line is answered with
`Invalid command`, an unknown command with `Unknown command`, and a command
with the wrong number of arguments with a usage line.

### Keys and values

| Command | Reply |
| --- | --- |
| `SET <key> <value>` | `OK` |
| `SETEX <key> <value> <seconds>` | `OK`, or `Invalid TTL`; fractional seconds are accepted |
| `GET <key>` | the value, or `(nil)` |
| `DEL <key>` | `OK` |
| `EXISTS <key>` | `(integer) 1` or `(integer) 0` |
| `KEYS <pattern>` | numbered list of matching keys; `*` matches any run of characters, and a pattern without `*` matches nothing |
| `TTL <key>` | `(integer) n`: seconds left, `-1` if the key never expires, `0` once it has expired but is still held; `(nil)` if the key is missing |
| `EXPIRE <key> <seconds>` | `OK`, `(nil)` if the key is missing, or `Invalid seconds` |
| `PERSIST <key>` | `OK`, or `(nil)` if the key is missing |
| `MSET <k1> <v1> [<k2> <v2> ...]` | `OK` |
| `MGET <k1> [<k2> ...]` | one value per line, `(nil)` for a missing key |
| `UPDATE <key> <value>` | `OK`, or `Key does not exist`; the expiry is kept |
| `GETSET <key> <value>` | the old value (an empty line if there was none) |
| `FLUSHALL` | `OK` |
| `INFO` | number of keys, total size and memory usage |
| `PING` | `PONG` |

Expired keys are dropped when they are read, and by a background cleaner that
runs every five seconds.

### Lists

| Command | Reply |
| --- | --- |
| `LPUSH <key> <v1> [<v2> ...]` | `OK`; the values go to the head in the order given |
| `RPUSH <key> <v1> [<v2> ...]` | `OK` |
| `LPOP <key>` / `RPOP <key>` | the element, or `nil` |
| `LRANGE <key> <start> <stop>` | one element per line, or `nil` if the key is missing or the range is out of bounds |
| `LLEN <key>` | the length (`0` for a missing key) |
| `LTRIM <key> <start> <stop>` | `OK`, or `nil`; only a range whose start equals its stop (keeping one element) or lies one past it (emptying the list) is accepted |
| `LINDEX <key> <index>` | the element, `ERR: 404:NOT_FOUND` or `ERR: 401:INDEX_OUT_OF_RANGE` |

Negative indexes count from the end of the list.

### JSON documents

| Command | Reply |
| --- | --- |
| `JSON.SET <key> <json-object> <seconds>` | `OK` or `ERR invalid JSON`; the last argument is always taken as the TTL, and a non-number or `0` means no expiry |
| `JSON.GET <key>` | the document as compact JSON with sorted keys, or `ERR no such key` |
| `JSON.DEL <key>` | `:1` or `:0` |
| `JSON.UPDATE <key> <field> <json-value>` | `OK`, `ERR invalid JSON value` or `ERR key not found` |
| `JSON.TTL <key>` | `:n` seconds left, or `-2` if the key has no expiry or has expired |

### Publish/subscribe

| Command | Reply |
| --- | --- |
| `PUBLISH <channel> <message>` | `Message published` |
| `SUBSCRIBE <channel>` | `Subscribed to channel: <channel>`; later messages arrive on the same connection, one per line |
| `PSUBSCRIBE <pattern>` | `Subscribed to pattern: <pattern>`; matching messages arrive as `Message: <message>` |
| `UNSUBSCRIBE <channel>` / `PUNSUBSCRIBE <pattern>` | an acknowledgement; no subscription is removed |
| `GETNSUM <channel>` | the number of channel subscribers |

A channel keeps its last 30 messages, and a new channel subscriber receives
them first.

### Transactions

`MULTI` starts a transaction, and every command after it is answered with
`QUEUED`. `EXEC` runs the queued commands in order, sends each reply and ends
with `OK: Transaction committed`; an unknown queued command stops it with
`ERROR: Unknown command <name>`. Inside `EXEC` a queued `RPOP` pops from the
head of the list. `DISCARD` drops the queued commands; sent with no
transaction active it replies with an error and closes the connection. The
server has a single transaction, shared by all of its connections.

## Using the stores from Python

The stores can be used directly, without the server:

```python
from icache.store import KeyValueStore
from icache.liststore import ListStore, IndexOutOfRangeError

with KeyValueStore() as kv:     # close() stops the background cleaner
    kv.set("key1", "value1", 0)
    kv.get("key1")              # "value1"
    kv.ttl("key1")              # -1: no expiry

lists = ListStore()
lists.rpush("mylist", "a", "b", "c")
lists.lrange("mylist", 0, -1)   # ["a", "b", "c"]
try:
    lists.lindex("mylist", 10)
except IndexOutOfRangeError:
    ...
```

`icache.jsonstore.JSONStore`, `icache.pubsub.PubSub` and
`icache.transaction.Transaction` cover JSON documents, channels and
transactions. The command handlers in `icache.kvcommands`,
`icache.listcommands`, `icache.jsoncommands` and `icache.pubsubcommands` take a
store and a split command and return the reply text, and
`icache.server.execute_command` runs one command against a `Stores` object.

## What it does not do

All data lives in memory only: nothing is written to disk, and everything is
lost when the server stops. There is no authentication, no replication and no
Redis wire protocol (RESP); clients talk to the server with the plain line
protocol above.