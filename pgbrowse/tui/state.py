"""Session model: the active screen plus everything the screens remember."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from ..errors import PgBrowseError
from .components import DataGrid, SelectList, TextInput


class State(str, Enum):
    LOADING = "loading"
    SELECT_USER = "select_user"
    SELECT_DATABASE = "select_database"
    ENTER_PASSWORD = "enter_password"
    CONNECTING = "connecting"
    LIST_TABLES = "list_tables"
    CREATE_TABLE_NAME = "create_table_name"
    CREATE_TABLE_SCHEMA = "create_table_schema"
    VIEW_TABLE = "view_table"
    ADD_ROW = "add_row"
    ERROR = "error"


# States that show the spinner while a background command runs.
SPINNER_STATES = frozenset({State.LOADING, State.CONNECTING})

# States whose screen has a focused text input; `q` is typed, not a quit key.
TEXT_ENTRY_STATES = frozenset({
    State.ENTER_PASSWORD,
    State.CREATE_TABLE_NAME,
    State.CREATE_TABLE_SCHEMA,
    State.ADD_ROW,
})


def password_input() -> TextInput:
    return TextInput(prompt="Password: ", placeholder="Enter password", masked=True)


def table_name_input() -> TextInput:
    return TextInput(prompt="Table Name: ", placeholder="Enter table name")


def table_schema_input() -> TextInput:
    return TextInput(prompt="Table Schema: ", placeholder="id SERIAL PRIMARY KEY, name TEXT")


def column_input(column: str) -> TextInput:
    return TextInput(prompt=f"{column}: ", placeholder=f"Enter {column}", char_limit=50)


@dataclass(frozen=True)
class Session:
    """Everything the interactive session knows, as one immutable value.

    Each transition returns a new Session (see `remember`), so a handler
    can never alias or half-update another screen's data.
    """

    state: State = State.LOADING

    # Bootstrap login, taken from settings at startup
    bootstrap_user: str = "postgres"
    bootstrap_password: str = field(default="postgres", repr=False)
    bootstrap_database: str = "postgres"

    # Connections (opaque handles owned by the session until exit)
    bootstrap_conn: Any = field(default=None, compare=False, repr=False)
    conn: Any = field(default=None, compare=False, repr=False)
    # Handles that arrived after their screen was left; closed on exit
    stray_conns: tuple = field(default=(), compare=False, repr=False)

    # Login choices
    selected_user: str = ""
    selected_db: str = ""
    user_list: SelectList = field(default_factory=lambda: SelectList(title="Select User"))
    database_list: SelectList = field(default_factory=lambda: SelectList(title="Select Database"))
    password_input: TextInput = field(default_factory=password_input)

    # Tables
    table_list: SelectList = field(default_factory=lambda: SelectList(title="Tables"))
    table_name_input: TextInput = field(default_factory=table_name_input)
    table_schema_input: TextInput = field(default_factory=table_schema_input)

    # Selected table contents
    selected_table: str = ""
    table_columns: tuple[str, ...] = ()
    table_rows: tuple[dict, ...] = ()
    data_grid: DataGrid = field(default_factory=DataGrid)
    pending_add_row: bool = False

    # Row entry
    add_row_inputs: tuple[TextInput, ...] = ()
    current_input_index: int = 0

    err: PgBrowseError | None = None
    service_unavailable: bool = False
    spinner_frame: int = 0

    def remember(self, **kwargs: Any) -> Session:
        """Return a copy with the given fields replaced.

        Example:
            session.remember(state=State.LIST_TABLES, err=None)
        """
        return replace(self, **kwargs)

    @property
    def tables(self) -> tuple[str, ...]:
        return self.table_list.items

    @property
    def focused_input(self) -> TextInput | None:
        if not self.add_row_inputs:
            return None
        return self.add_row_inputs[self.current_input_index]

    def connections(self) -> list[Any]:
        """Open handles owned by this session, each listed once."""
        out: list[Any] = []
        for conn in (self.bootstrap_conn, self.conn, *self.stray_conns):
            if conn is not None and all(conn is not seen for seen in out):
                out.append(conn)
        return out


def new_session(bootstrap: tuple[str, str, str] | None = None) -> Session:
    """Create the startup session, optionally with configured bootstrap credentials."""
    if bootstrap is None:
        return Session()
    user, password, database = bootstrap
    return Session(
        bootstrap_user=user,
        bootstrap_password=password,
        bootstrap_database=database,
    )
