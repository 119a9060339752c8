"""Queue of commands collected between MULTI and EXEC."""

from __future__ import annotations

from dataclasses import dataclass, field


class TransactionError(Exception):
    """A transaction was started or aborted in the wrong state."""


@dataclass
class Command:
    """A queued command: its upper-cased name and the full argument list."""

    name: str
    args: list[str]


@dataclass
class Transaction:
    """Commands queued while a transaction is active."""

    commands: list[Command] = field(default_factory=list)
    is_active: bool = False

    def start_transaction(self) -> None:
        if self.is_active:
            raise TransactionError(
                "transaction start failed: active transaction already running"
            )
        self.is_active = True

    def abort_transaction(self) -> None:
        if not self.is_active:
            raise TransactionError("transaction abort failed: no active transaction")
        self.is_active = False
        self.commands = []

    def add_command(self, name: str, args: list[str]) -> None:
        """Queue a command; ignored when no transaction is active."""
        if self.is_active:
            self.commands.append(Command(name, list(args)))