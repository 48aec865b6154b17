"""Unit tests for the session controller entry points."""
from __future__ import annotations

import pytest

from pgbrowse.errors import QueryError
from pgbrowse.tui.commands import Op
from pgbrowse.tui.components import SPINNER_FRAMES
from pgbrowse.tui.messages import (
    Connected,
    Databases,
    Failed,
    Key,
    RowInserted,
    ServiceAvailable,
    ServiceUnavailable,
    TableColumns,
    TableCreated,
    TableData,
    Tables,
    Tick,
    Users,
)
from pgbrowse.tui.router import SCREENS, advance, initial_session, register_screen
from pgbrowse.tui.state import Session, State


ACCEPTED = {
    State.LOADING: {ServiceAvailable, ServiceUnavailable},
    State.SELECT_USER: {Connected},
    State.CONNECTING: {Connected},
    State.LIST_TABLES: {TableCreated},
    State.CREATE_TABLE_NAME: {TableCreated},
    State.CREATE_TABLE_SCHEMA: {TableCreated},
    State.VIEW_TABLE: {TableData, TableColumns, RowInserted},
    State.ADD_ROW: {TableData, RowInserted},
}

SAMPLE_MESSAGES = [
    ServiceAvailable(),
    ServiceUnavailable(),
    Connected(object()),
    TableCreated("t"),
    TableData(({"id": 1},)),
    TableColumns(("id",)),
    RowInserted(),
]


def test_every_state_has_a_handler():
    for state in State:
        assert state in SCREENS


def test_register_screen_decorator():
    """Test screen registration decorator."""
    original_screens = SCREENS.copy()

    @register_screen(State.ERROR)
    def fake_handler(session, event):
        return session, []

    try:
        assert SCREENS[State.ERROR] is fake_handler
    finally:
        SCREENS.clear()
        SCREENS.update(original_screens)


def test_initial_session_probes_server():
    session, commands = initial_session(("admin", "pw", "db"))

    assert session.state == State.LOADING
    assert [c.op for c in commands] == [Op.CHECK_AVAILABLE]


@pytest.mark.parametrize("state", list(State))
def test_unaccepted_messages_leave_session_unchanged(state):
    session = Session(state=state)
    for message in SAMPLE_MESSAGES:
        if type(message) in ACCEPTED.get(state, set()):
            continue
        new, commands = advance(session, message)
        assert new == session, (state, message)
        assert new.conn is session.conn
        assert new.bootstrap_conn is session.bootstrap_conn
        assert commands == []


@pytest.mark.parametrize("state", list(State))
def test_list_results_only_touch_caches(state):
    session = Session(state=state)

    new, _ = advance(session, Tables(("a", "b")))
    assert new.tables == ("a", "b")
    assert new.remember(table_list=session.table_list) == session

    new, _ = advance(session, Databases(("db1",)))
    assert new.database_list.items == ("db1",)
    assert new.remember(database_list=session.database_list) == session

    new, _ = advance(session, Users(("postgres",)))
    assert new.user_list.items == ("postgres",)
    assert new.remember(user_list=session.user_list) == session


def test_tables_message_is_idempotent():
    session = Session(state=State.LIST_TABLES)
    once, _ = advance(session, Tables(("users", "orders")))
    twice, _ = advance(once, Tables(("users", "orders")))

    assert once.tables == ("users", "orders")
    assert twice.tables == once.tables
    assert twice == once


def test_stray_tables_in_add_row_only_updates_cache():
    inputs_session, _ = advance(
        Session(state=State.VIEW_TABLE, selected_table="t", pending_add_row=True),
        TableColumns(("a", "b"), table="t"),
    )
    assert inputs_session.state == State.ADD_ROW

    new, commands = advance(inputs_session, Tables(("t", "u")))
    assert new.tables == ("t", "u")
    assert new.state == State.ADD_ROW
    assert new.add_row_inputs == inputs_session.add_row_inputs
    assert commands == []


@pytest.mark.parametrize("state", list(State))
def test_failed_moves_to_error_from_any_state(state):
    error = QueryError("boom")
    new, commands = advance(Session(state=state), Failed(error))

    assert new.state == State.ERROR
    assert new.err is error
    assert new.add_row_inputs == ()
    assert commands == []


@pytest.mark.parametrize("state", list(State))
def test_ctrl_c_quits_from_any_state(state):
    _, commands = advance(Session(state=state), Key("ctrl+c"))
    assert [c.op for c in commands] == [Op.QUIT]


def test_q_quits_outside_text_entry():
    _, commands = advance(Session(state=State.LIST_TABLES), Key("q"))
    assert [c.op for c in commands] == [Op.QUIT]


def test_q_is_typed_into_text_inputs():
    session, _ = advance(Session(state=State.LIST_TABLES), Key("n"))
    new, commands = advance(session, Key("q"))

    assert commands == []
    assert new.state == State.CREATE_TABLE_NAME
    assert new.table_name_input.value == "q"


def test_tick_advances_spinner_only_while_waiting():
    loading, commands = advance(Session(), Tick())
    assert loading.spinner_frame == 1
    assert commands == []

    wrapped = Session(spinner_frame=len(SPINNER_FRAMES) - 1)
    assert advance(wrapped, Tick())[0].spinner_frame == 0

    listing = Session(state=State.LIST_TABLES)
    assert advance(listing, Tick()) == (listing, [])
