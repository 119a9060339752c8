import pytest

from icache.transaction import Command, Transaction, TransactionError


def test_start_transaction():
    tx = Transaction()
    tx.start_transaction()
    assert tx.is_active is True
    with pytest.raises(TransactionError) as excinfo:
        tx.start_transaction()
    assert str(excinfo.value) == (
        "transaction start failed: active transaction already running"
    )


def test_add_command():
    tx = Transaction()
    tx.start_transaction()
    tx.add_command("SET", ["SET", "key1", "value1"])
    assert len(tx.commands) == 1
    assert tx.commands[0].name == "SET"
    assert tx.commands[0].args[1] == "key1"
    assert tx.commands[0].args[2] == "value1"


def test_add_command_ignored_when_inactive():
    tx = Transaction()
    tx.add_command("SET", ["SET", "k", "v"])
    assert tx.commands == []


def test_abort_transaction():
    tx = Transaction()
    tx.start_transaction()
    tx.add_command("SET", ["SET", "key1", "value1"])
    tx.abort_transaction()
    assert tx.is_active is False
    assert len(tx.commands) == 0
    with pytest.raises(TransactionError) as excinfo:
        tx.abort_transaction()
    assert str(excinfo.value) == "transaction abort failed: no active transaction"


def test_commands_keep_order_and_copy_args():
    tx = Transaction()
    tx.start_transaction()
    args = ["SET", "a", "1"]
    tx.add_command("SET", args)
    tx.add_command("GET", ["GET", "a"])
    args.append("extra")
    assert tx.commands == [
        Command("SET", ["SET", "a", "1"]),
        Command("GET", ["GET", "a"]),
    ]