"""Unit tests for the list, text input and grid widgets."""
from __future__ import annotations

from pgbrowse.tui.components import DataGrid, SelectList, TextInput, format_cell
from pgbrowse.tui.messages import Key


def test_select_list_navigation_clamps():
    lst = SelectList(title="T").with_items(["a", "b", "c"])
    assert lst.selected() == "a"

    lst = lst.handle_key(Key("up"))
    assert lst.selected() == "a"

    lst = lst.handle_key(Key("down")).handle_key(Key("down")).handle_key(Key("down"))
    assert lst.selected() == "c"

    assert lst.handle_key(Key("home")).selected() == "a"
    assert lst.handle_key(Key("k")).selected() == "b"


def test_select_list_with_fewer_items_keeps_cursor_in_range():
    lst = SelectList(title="T", items=("a", "b", "c"), index=2)
    assert lst.with_items(["x"]).selected() == "x"
    assert lst.with_items([]).selected() is None


def test_text_input_ignores_keys_until_focused():
    field = TextInput()
    assert field.handle_key(Key("a")).value == ""

    field = field.focus().handle_key(Key("a")).handle_key(Key("b"))
    assert field.value == "ab"
    assert field.handle_key(Key("backspace")).value == "a"
    assert field.handle_key(Key("enter")).value == "ab"


def test_text_input_respects_char_limit():
    field = TextInput(char_limit=2).focus()
    for ch in "abc":
        field = field.handle_key(Key(ch))
    assert field.value == "ab"


def test_masked_input_hides_value():
    field = TextInput(prompt="Password: ", value="secret", masked=True)
    assert "secret" not in field.render().plain
    assert "••••••" in field.render().plain


def test_grid_from_records_follows_first_row_columns():
    grid = DataGrid.from_records([{"b": 1, "a": None}, {"a": "x", "b": 2}])
    assert grid.columns == ("b", "a")
    assert grid.rows == (("1", "NULL"), ("2", "x"))


def test_grid_cursor_moves_within_rows():
    grid = DataGrid.from_records([{"id": 1}, {"id": 2}])
    grid = grid.handle_key(Key("down")).handle_key(Key("down"))
    assert grid.cursor == 1
    assert grid.handle_key(Key("up")).cursor == 0


def test_format_cell():
    assert format_cell(None) == "NULL"
    assert format_cell(3) == "3"
