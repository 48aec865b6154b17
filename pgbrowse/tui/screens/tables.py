"""Table list and the two-step create-table wizard."""
from __future__ import annotations

from rich.console import Group, RenderableType
from rich.text import Text

from ...errors import ValidationError
from ..commands import Op, issue
from ..components import DataGrid, render_inline_error, render_instructions
from ..messages import Event, Key, TableCreated
from ..router import Transition, register_screen
from ..state import Session, State, table_name_input, table_schema_input
from ..view import register_view


def _refresh_tables(session: Session) -> Transition:
    return session, [issue(Op.LIST_TABLES, session.conn)]


def _discard_new_table(session: Session) -> Session:
    return session.remember(
        table_name_input=table_name_input(),
        table_schema_input=table_schema_input(),
        err=None,
        state=State.LIST_TABLES,
    )


@register_screen(State.LIST_TABLES)
def handle_list_tables(session: Session, event: Event) -> Transition:
    if isinstance(event, TableCreated):
        return _refresh_tables(session)
    if not isinstance(event, Key):
        return session, []

    session = session.remember(table_list=session.table_list.handle_key(event))
    if event.name == "n":
        return session.remember(
            table_name_input=table_name_input().focus(),
            table_schema_input=table_schema_input(),
            err=None,
            state=State.CREATE_TABLE_NAME,
        ), []
    if event.name == "enter":
        table = session.table_list.selected()
        if table is not None:
            return session.remember(
                selected_table=table,
                table_columns=(),
                table_rows=(),
                data_grid=DataGrid(),
                pending_add_row=False,
                err=None,
                state=State.VIEW_TABLE,
            ), [issue(Op.GET_TABLE_DATA, session.conn, table)]
    return session, []


@register_screen(State.CREATE_TABLE_NAME)
def handle_create_table_name(session: Session, event: Event) -> Transition:
    if isinstance(event, TableCreated):
        # A previous create finished while this one is being typed.
        return _refresh_tables(session)
    if not isinstance(event, Key):
        return session, []

    session = session.remember(table_name_input=session.table_name_input.handle_key(event))
    if event.name == "esc":
        return _discard_new_table(session), []
    if event.name == "enter":
        name = session.table_name_input.value.strip()
        if not name:
            return session.remember(err=ValidationError("Table name cannot be empty")), []
        return session.remember(
            table_name_input=session.table_name_input.blur(),
            table_schema_input=table_schema_input().focus(),
            err=None,
            state=State.CREATE_TABLE_SCHEMA,
        ), []
    return session, []


@register_screen(State.CREATE_TABLE_SCHEMA)
def handle_create_table_schema(session: Session, event: Event) -> Transition:
    if isinstance(event, TableCreated):
        return _refresh_tables(session)
    if not isinstance(event, Key):
        return session, []

    session = session.remember(table_schema_input=session.table_schema_input.handle_key(event))
    if event.name == "esc":
        return _discard_new_table(session), []
    if event.name == "enter":
        schema = session.table_schema_input.value
        if not schema.strip():
            return session.remember(err=ValidationError("Table schema cannot be empty")), []
        name = session.table_name_input.value.strip()
        create = issue(Op.CREATE_TABLE, session.conn, name, schema)
        return _discard_new_table(session), [create]
    return session, []


def _with_error(session: Session, parts: list[RenderableType]) -> list[RenderableType]:
    if session.err is not None:
        parts.extend([Text(""), render_inline_error(str(session.err))])
    return parts


@register_view(State.LIST_TABLES)
def view_list_tables(session: Session, height: int) -> RenderableType:
    parts: list[RenderableType] = [
        session.table_list.render(),
        Text(""),
        render_instructions("Press 'n' to create a new table, 'enter' to view, 'q' to quit."),
    ]
    return Group(*_with_error(session, parts))


@register_view(State.CREATE_TABLE_NAME)
def view_create_table_name(session: Session, height: int) -> RenderableType:
    parts: list[RenderableType] = [
        Text("Create New Table", style="bold"),
        Text(""),
        session.table_name_input.render(),
    ]
    parts = _with_error(session, parts)
    parts.extend([Text(""), render_instructions("Press Enter to continue, Esc to cancel.")])
    return Group(*parts)


@register_view(State.CREATE_TABLE_SCHEMA)
def view_create_table_schema(session: Session, height: int) -> RenderableType:
    parts: list[RenderableType] = [
        Text("Create New Table", style="bold"),
        Text(""),
        Text(f"Table Name: {session.table_name_input.value}"),
        session.table_schema_input.render(),
    ]
    parts = _with_error(session, parts)
    parts.extend([Text(""), render_instructions("Press Enter to create table, Esc to cancel.")])
    return Group(*parts)
