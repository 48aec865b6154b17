"""Inbound events: key presses and the results of background commands.

Every background command produces exactly one of the message types below.
Messages are immutable; the controller consumes each one once.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from ..errors import PgBrowseError


@dataclass(frozen=True)
class Key:
    """A single key press.

    `name` is one of the named keys (``enter``, ``esc``, ``tab``,
    ``shift+tab``, ``up``, ``down``, ``home``, ``end``, ``backspace``,
    ``ctrl+c``) or the printable character that was typed.
    """

    name: str

    @property
    def is_printable(self) -> bool:
        return len(self.name) == 1 and self.name.isprintable()


@dataclass(frozen=True)
class Tick:
    """Spinner animation pulse sent by the runtime while a screen is waiting."""


@dataclass(frozen=True)
class ServiceAvailable:
    pass


@dataclass(frozen=True)
class ServiceUnavailable:
    pass


@dataclass(frozen=True)
class Users:
    users: tuple[str, ...] = ()


@dataclass(frozen=True)
class Databases:
    databases: tuple[str, ...] = ()


@dataclass(frozen=True)
class Connected:
    conn: Any = field(compare=False)


@dataclass(frozen=True)
class Tables:
    tables: tuple[str, ...] = ()


@dataclass(frozen=True)
class TableCreated:
    name: str = ""


@dataclass(frozen=True)
class TableData:
    rows: tuple[dict, ...] = ()
    table: str = ""


@dataclass(frozen=True)
class TableColumns:
    columns: tuple[str, ...] = ()
    table: str = ""


@dataclass(frozen=True)
class RowInserted:
    pass


@dataclass(frozen=True)
class Failed:
    error: PgBrowseError


Message = Union[
    ServiceAvailable,
    ServiceUnavailable,
    Users,
    Databases,
    Connected,
    Tables,
    TableCreated,
    TableData,
    TableColumns,
    RowInserted,
    Failed,
]

Event = Union[Key, Tick, Message]
