"""Timestamped, coloured log lines for the server console."""

from __future__ import annotations

import os
import sys
from datetime import datetime
from typing import TextIO

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_GREEN = "32"
_YELLOW = "33"
_BLUE = "34"
_CYAN = "36"


def get_now() -> str:
    """Return the current local time as ``YYYY-MM-DD HH:MM:SS``."""
    return datetime.now().strftime(TIME_FORMAT)


def _colours_enabled(stream: TextIO) -> bool:
    if "NO_COLOR" in os.environ:
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _paint(text: str, code: str, enabled: bool) -> str:
    return f"\x1b[{code}m{text}\x1b[0m" if enabled else text


def _emit(label: str, label_code: str, body_code: str, message: str) -> None:
    stream = sys.stdout
    enabled = _colours_enabled(stream)
    body = f"{get_now()} * {message}"
    print(_paint(label, label_code, enabled), _paint(body, body_code, enabled), file=stream)


def info(message: str) -> None:
    """Print an informational line to standard output."""
    _emit("[INFO]: ", _GREEN, _CYAN, message)


def warning(message: str) -> None:
    """Print a warning line to standard output."""
    _emit("[WARNING]: ", _YELLOW, _BLUE, message)