"""Unit tests for command execution and dispatch."""
from __future__ import annotations

import threading
from unittest.mock import MagicMock

import pytest

from pgbrowse.errors import AuthError, QueryError
from pgbrowse.tui.commands import QUIT, Dispatcher, Op, issue, run
from pgbrowse.tui.messages import (
    Connected,
    Databases,
    Failed,
    RowInserted,
    ServiceAvailable,
    ServiceUnavailable,
    TableColumns,
    TableCreated,
    TableData,
    Tables,
    Users,
)


@pytest.fixture
def service():
    svc = MagicMock()
    svc.check_available.return_value = True
    svc.connect.return_value = "conn"
    svc.list_users.return_value = ["postgres", "alice"]
    svc.list_databases.return_value = ["postgres"]
    svc.list_tables.return_value = ["people"]
    svc.get_table_columns.return_value = ["id", "name"]
    svc.get_table_data.return_value = [{"id": 1, "name": "Alice"}]
    return svc


def test_issue_does_not_run_anything(service):
    command = issue(Op.LIST_TABLES, "conn")

    assert command.op == Op.LIST_TABLES
    assert command.args == ("conn",)
    service.list_tables.assert_not_called()


def test_command_repr_hides_arguments():
    command = issue(Op.CONNECT, "alice", "hunter2", "shop")
    assert "hunter2" not in repr(command)


def test_check_available(service):
    assert run(issue(Op.CHECK_AVAILABLE), service) == ServiceAvailable()
    service.check_available.return_value = False
    assert run(issue(Op.CHECK_AVAILABLE), service) == ServiceUnavailable()


def test_run_maps_each_operation_to_one_message(service):
    assert run(issue(Op.CONNECT, "u", "p", "d"), service) == Connected("conn")
    service.connect.assert_called_once_with("u", "p", "d")

    assert run(issue(Op.LIST_USERS, "c"), service) == Users(("postgres", "alice"))
    assert run(issue(Op.LIST_DATABASES, "c"), service) == Databases(("postgres",))
    assert run(issue(Op.LIST_TABLES, "c"), service) == Tables(("people",))
    assert run(issue(Op.GET_COLUMNS, "c", "people"), service) == TableColumns(
        ("id", "name"), table="people"
    )
    assert run(issue(Op.GET_TABLE_DATA, "c", "people"), service) == TableData(
        ({"id": 1, "name": "Alice"},), table="people"
    )


def test_create_table_and_insert_row(service):
    assert run(issue(Op.CREATE_TABLE, "c", "pets", "id int"), service) == TableCreated("pets")
    service.create_table.assert_called_once_with("c", "pets", "id int")

    assert run(issue(Op.INSERT_ROW, "c", "pets", {"id": "1"}), service) == RowInserted()
    service.insert_row.assert_called_once_with("c", "pets", {"id": "1"})


def test_taxonomy_errors_pass_through(service):
    error = AuthError("denied")
    service.connect.side_effect = error

    message = run(issue(Op.CONNECT, "u", "p", "d"), service)
    assert message == Failed(error)
    assert message.error is error


def test_unexpected_errors_become_query_errors(service):
    service.list_tables.side_effect = RuntimeError("socket closed")

    message = run(issue(Op.LIST_TABLES, "c"), service)
    assert isinstance(message, Failed)
    assert isinstance(message.error, QueryError)
    assert "socket closed" in str(message.error)


def test_quit_cannot_be_run(service):
    message = run(QUIT, service)
    assert isinstance(message, Failed)


def test_dispatcher_delivers_one_message_per_command(service):
    received = []
    done = threading.Event()

    def deliver(message):
        received.append(message)
        if len(received) == 2:
            done.set()

    dispatcher = Dispatcher(service, deliver=deliver, max_workers=2)
    try:
        dispatcher.submit(issue(Op.LIST_TABLES, "c"))
        dispatcher.submit(issue(Op.LIST_USERS, "c"))
        assert done.wait(timeout=5)
    finally:
        dispatcher.shutdown()

    assert sorted(type(m).__name__ for m in received) == ["Tables", "Users"]


def test_dispatcher_refuses_quit(service):
    dispatcher = Dispatcher(service, deliver=lambda m: None)
    try:
        with pytest.raises(ValueError):
            dispatcher.submit(QUIT)
    finally:
        dispatcher.shutdown()
