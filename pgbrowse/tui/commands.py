"""Background commands against the data access service.

A Command is a deferred request. `run` executes it and converts the
outcome into exactly one Message; the `Dispatcher` does that on a worker
thread and hands the Message to a delivery callback. There is no
cancellation and no timeout: a command that never returns leaves the
session waiting in whatever screen issued it.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from ..errors import PgBrowseError, QueryError
from .messages import (
    Connected,
    Databases,
    Failed,
    Message,
    RowInserted,
    ServiceAvailable,
    ServiceUnavailable,
    TableColumns,
    TableCreated,
    TableData,
    Tables,
    Users,
)

logger = logging.getLogger(__name__)


class Op(str, Enum):
    CHECK_AVAILABLE = "check_available"
    CONNECT = "connect"
    LIST_USERS = "list_users"
    LIST_DATABASES = "list_databases"
    LIST_TABLES = "list_tables"
    CREATE_TABLE = "create_table"
    GET_COLUMNS = "get_table_columns"
    GET_TABLE_DATA = "get_table_data"
    INSERT_ROW = "insert_row"
    QUIT = "quit"


@dataclass(frozen=True)
class Command:
    op: Op
    args: tuple = ()

    def __repr__(self) -> str:
        # Never echo arguments: CONNECT carries a password.
        return f"Command({self.op.value})"


QUIT = Command(Op.QUIT)


def issue(op: Op, *args: Any) -> Command:
    """Build a command for `op`; nothing runs until it is dispatched."""
    return Command(op=op, args=args)


def _execute(command: Command, service) -> Message:
    op, args = command.op, command.args
    if op is Op.CHECK_AVAILABLE:
        return ServiceAvailable() if service.check_available() else ServiceUnavailable()
    if op is Op.CONNECT:
        return Connected(service.connect(*args))
    if op is Op.LIST_USERS:
        return Users(tuple(service.list_users(*args)))
    if op is Op.LIST_DATABASES:
        return Databases(tuple(service.list_databases(*args)))
    if op is Op.LIST_TABLES:
        return Tables(tuple(service.list_tables(*args)))
    if op is Op.CREATE_TABLE:
        service.create_table(*args)
        return TableCreated(args[1])
    if op is Op.GET_COLUMNS:
        return TableColumns(tuple(service.get_table_columns(*args)), table=args[1])
    if op is Op.GET_TABLE_DATA:
        rows = tuple(dict(row) for row in service.get_table_data(*args))
        return TableData(rows, table=args[1])
    if op is Op.INSERT_ROW:
        service.insert_row(*args)
        return RowInserted()
    raise ValueError(f"Command {op.value!r} cannot be run against the service")


def run(command: Command, service) -> Message:
    """Execute one command. Failures always come back as `Failed`."""
    try:
        return _execute(command, service)
    except PgBrowseError as e:
        logger.info("Command %s failed: %s", command.op.value, e)
        return Failed(e)
    except Exception as e:
        logger.exception("Command %s raised unexpectedly", command.op.value)
        return Failed(QueryError(f"{e.__class__.__name__}: {e}"))


class Dispatcher:
    """Runs commands off the controller's thread, one Message per command."""

    def __init__(
        self,
        service,
        deliver: Callable[[Message], None],
        max_workers: int = 4,
    ):
        """Initialize dispatcher with dependencies.

        Args:
            service: Data access service the commands run against
            deliver: Called once with each command's resulting Message
            max_workers: Size of the worker pool
        """
        self.service = service
        self.deliver = deliver
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="pgbrowse-cmd")

    def submit(self, command: Command) -> None:
        if command.op is Op.QUIT:
            raise ValueError("QUIT is handled by the runtime, not dispatched")
        logger.debug("Dispatching %r", command)
        self._executor.submit(self._run_and_deliver, command)

    def _run_and_deliver(self, command: Command) -> None:
        self.deliver(run(command, self.service))

    def shutdown(self) -> None:
        """Stop accepting work. In-flight commands finish but nobody waits."""
        self._executor.shutdown(wait=False, cancel_futures=True)
