"""Viewing a table's rows and entering a new row."""
from __future__ import annotations

from rich.console import Group, RenderableType
from rich.text import Text

from ...errors import ValidationError
from .. import focus
from ..commands import Op, issue
from ..components import SELECTED_STYLE, DataGrid, render_inline_error, render_instructions
from ..messages import Event, Key, RowInserted, TableColumns, TableData
from ..router import Transition, register_screen
from ..state import Session, State, column_input
from ..view import register_view


def _is_stale(session: Session, event: TableData | TableColumns) -> bool:
    """Results fetched for a table the user has since left."""
    return event.table != session.selected_table


def _fetch_data(session: Session) -> Transition:
    return session, [issue(Op.GET_TABLE_DATA, session.conn, session.selected_table)]


def _apply_rows(session: Session, event: TableData) -> Transition:
    """Rebuild the grid from fetched rows; empty tables need a column list."""
    if event.rows:
        grid = DataGrid.from_records(event.rows)
        return session.remember(
            table_rows=event.rows,
            table_columns=grid.columns,
            data_grid=grid,
        ), []
    session = session.remember(table_rows=(), data_grid=DataGrid())
    return session, [issue(Op.GET_COLUMNS, session.conn, session.selected_table)]


def _start_row_entry(session: Session, columns: tuple[str, ...]) -> Transition:
    if not columns:
        return session.remember(
            pending_add_row=False,
            err=ValidationError(f"Table '{session.selected_table}' has no columns"),
        ), []
    inputs = tuple(column_input(col) for col in columns)
    inputs = (inputs[0].focus(),) + inputs[1:]
    return session.remember(
        table_columns=columns,
        add_row_inputs=inputs,
        current_input_index=0,
        pending_add_row=False,
        err=None,
        state=State.ADD_ROW,
    ), []


@register_screen(State.VIEW_TABLE)
def handle_view_table(session: Session, event: Event) -> Transition:
    if isinstance(event, (TableData, TableColumns)) and _is_stale(session, event):
        return session, []
    if isinstance(event, TableData):
        return _apply_rows(session, event)
    if isinstance(event, TableColumns):
        if session.pending_add_row:
            return _start_row_entry(session, event.columns)
        if session.table_rows:
            return session, []
        return session.remember(
            table_columns=event.columns,
            data_grid=DataGrid.from_columns(event.columns),
        ), []
    if isinstance(event, RowInserted):
        return _fetch_data(session)
    if not isinstance(event, Key):
        return session, []

    session = session.remember(data_grid=session.data_grid.handle_key(event))
    if event.name == "a":
        session = session.remember(pending_add_row=True, err=None)
        # Row entry starts once the column list arrives.
        return session, [issue(Op.GET_COLUMNS, session.conn, session.selected_table)]
    if event.name == "esc":
        return session.remember(pending_add_row=False, err=None, state=State.LIST_TABLES), []
    return session, []


def _move_focus(session: Session, index: int) -> Session:
    inputs = list(session.add_row_inputs)
    inputs[session.current_input_index] = inputs[session.current_input_index].blur()
    inputs[index] = inputs[index].focus()
    return session.remember(add_row_inputs=tuple(inputs), current_input_index=index)


def _submit_row(session: Session) -> Transition:
    values = {
        col: field.value
        for col, field in zip(session.table_columns, session.add_row_inputs)
    }
    insert = issue(Op.INSERT_ROW, session.conn, session.selected_table, values)
    return session.remember(add_row_inputs=(), current_input_index=0), [insert]


@register_screen(State.ADD_ROW)
def handle_add_row(session: Session, event: Event) -> Transition:
    if isinstance(event, (TableData, TableColumns)) and _is_stale(session, event):
        return session, []
    if isinstance(event, RowInserted):
        session = session.remember(add_row_inputs=(), current_input_index=0, state=State.VIEW_TABLE)
        return _fetch_data(session)
    if isinstance(event, TableData):
        # Refresh the grid behind the form; it shows again on return.
        session, _ = _apply_rows(session, event)
        return session, []
    if not isinstance(event, Key):
        return session, []

    if event.name == "esc":
        return session.remember(add_row_inputs=(), current_input_index=0, state=State.VIEW_TABLE), []

    count = len(session.add_row_inputs)
    if count == 0:
        # Row submitted; waiting for the insert to finish.
        return session, []

    index = session.current_input_index
    inputs = list(session.add_row_inputs)
    inputs[index] = inputs[index].handle_key(event)
    session = session.remember(add_row_inputs=tuple(inputs))

    if event.name == "enter":
        if index < count - 1:
            return _move_focus(session, focus.advance(index, count)), []
        return _submit_row(session)
    if event.name == "tab":
        return _move_focus(session, focus.advance(index, count)), []
    if event.name == "shift+tab":
        return _move_focus(session, focus.retreat(index, count)), []
    return session, []


@register_view(State.VIEW_TABLE)
def view_table(session: Session, height: int) -> RenderableType:
    parts: list[RenderableType] = [
        Text.assemble("Viewing Table: ", (session.selected_table, SELECTED_STYLE)),
    ]
    if not session.table_rows:
        parts.extend([Text(""), Text("No data in this table.")])
    if session.err is not None:
        parts.extend([Text(""), render_inline_error(str(session.err))])
    parts.extend([
        Text(""),
        render_instructions("Press 'a' to add a new row, 'esc' to go back."),
        Text(""),
        session.data_grid.render(height=height),
    ])
    return Group(*parts)


@register_view(State.ADD_ROW)
def view_add_row(session: Session, height: int) -> RenderableType:
    parts: list[RenderableType] = [
        Text.assemble("Add New Row to Table: ", (session.selected_table, SELECTED_STYLE)),
        Text(""),
    ]
    if not session.add_row_inputs:
        parts.append(Text("Inserting row..."))
    for i, field in enumerate(session.add_row_inputs):
        line = field.render()
        if i == session.current_input_index:
            line.stylize(SELECTED_STYLE)
        parts.append(line)
    parts.extend([
        Text(""),
        render_instructions("Press Enter to proceed, Tab to navigate, Esc to cancel."),
    ])
    if session.err is not None:
        parts.extend([Text(""), render_inline_error(str(session.err))])
    return Group(*parts)
