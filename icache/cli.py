"""Interactive command-line client for the cache server."""

from __future__ import annotations

import argparse
import socket
import sys
from collections.abc import Sequence
from typing import TextIO

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6379


def repl(conn: socket.socket, stdin: TextIO, stdout: TextIO) -> None:
    """Send each input line to the server and print its one-line reply.

    Stops on ``exit`` or at the end of input.
    """
    print("Welcome to ICache CLI! Type your commands below:", file=stdout)
    with conn.makefile("rb") as reader:
        while True:
            print("> ", end="", file=stdout, flush=True)
            raw = stdin.readline()
            if not raw:
                break
            text = raw.strip()
            if text == "exit":
                break
            try:
                conn.sendall((text + "\n").encode("utf-8"))
            except OSError as exc:
                print(f"Failed to send command: {exc}", file=stdout)
                continue
            try:
                response = reader.readline()
            except OSError as exc:
                print(f"Failed to read response: {exc}", file=stdout)
                continue
            if not response.endswith(b"\n"):
                print("Failed to read response: EOF", file=stdout)
                continue
            print(response.decode("utf-8", errors="replace"), file=stdout)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="icache-cli", description="Talk to a cache server.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="server address")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="server TCP port")
    args = parser.parse_args(argv)
    try:
        conn = socket.create_connection((args.host, args.port))
    except OSError as exc:
        print(f"Failed to connect to server: {exc}")
        return 1
    with conn:
        repl(conn, sys.stdin, sys.stdout)
    return 0