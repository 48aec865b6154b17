"""PostgreSQL data access service.

A thin passthrough over psycopg: every method opens no transactions of its
own (connections run in autocommit) and converts driver failures into the
`pgbrowse.errors` taxonomy.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping

import psycopg
from psycopg import sql
from psycopg.rows import dict_row

from .errors import AuthError, ConnectivityError, QueryError
from .settings import Settings

logger = logging.getLogger(__name__)

_AUTH_MARKERS = ("authentication failed", "password", "no pg_hba.conf entry")


def _is_auth_failure(exc: psycopg.Error) -> bool:
    state = getattr(exc, "sqlstate", None) or ""
    if state.startswith("28"):
        return True
    text = str(exc).lower()
    return any(marker in text for marker in _AUTH_MARKERS)


class PostgresService:
    """Fixed set of database operations used by the session controller."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _conninfo(self, user: str, password: str, database: str) -> dict[str, Any]:
        return {
            "host": self.settings.PGBROWSE_HOST,
            "port": self.settings.PGBROWSE_PORT,
            "user": user,
            "password": password,
            "dbname": database,
            "connect_timeout": self.settings.PGBROWSE_CONNECT_TIMEOUT,
        }

    # ── Connections ─────────────────────────────────────────────────────

    def check_available(self) -> bool:
        """Probe the server with the bootstrap login, then hang up."""
        user, password, database = self.settings.bootstrap_credentials()
        try:
            conn = psycopg.connect(**self._conninfo(user, password, database))
        except psycopg.Error as e:
            logger.warning("Failed to connect to postgres: %s", e)
            return False
        conn.close()
        return True

    def connect(self, user: str, password: str, database: str) -> psycopg.Connection:
        try:
            conn = psycopg.connect(
                **self._conninfo(user, password, database),
                autocommit=True,
                row_factory=dict_row,
            )
        except psycopg.Error as e:
            logger.warning("Error while making a connection as %s to %s: %s", user, database, e)
            if _is_auth_failure(e):
                raise AuthError(f"Login as '{user}' on '{database}' was rejected: {e}") from e
            raise ConnectivityError(f"Could not connect to '{database}' as '{user}': {e}") from e
        logger.info("Connected as %s to %s", user, database)
        return conn

    def close(self, conn: psycopg.Connection | None) -> None:
        if conn is None or conn.closed:
            return
        try:
            conn.close()
        except psycopg.Error as e:
            logger.warning("Error closing connection: %s", e)

    # ── Queries ─────────────────────────────────────────────────────────

    def _fetch(self, conn, query, params: tuple = ()) -> list[dict[str, Any]]:
        if conn is None:
            raise QueryError("Not connected to a database")
        try:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, params or None)
                if cur.description is None:
                    return []
                return list(cur.fetchall())
        except psycopg.Error as e:
            logger.warning("Query failed: %s", e)
            raise QueryError(str(e).strip() or e.__class__.__name__) from e

    def _column(self, conn, query, params: tuple = ()) -> list[str]:
        return [str(next(iter(row.values()))) for row in self._fetch(conn, query, params)]

    def list_users(self, conn) -> list[str]:
        return self._column(conn, "SELECT usename FROM pg_catalog.pg_user ORDER BY usename")

    def list_databases(self, conn) -> list[str]:
        return self._column(
            conn,
            "SELECT datname FROM pg_catalog.pg_database WHERE datistemplate = false ORDER BY datname",
        )

    def list_tables(self, conn) -> list[str]:
        return self._column(
            conn,
            "SELECT tablename FROM pg_catalog.pg_tables WHERE schemaname = 'public' ORDER BY tablename",
        )

    def create_table(self, conn, name: str, column_definitions: str) -> None:
        # Column definitions are operator-supplied DDL and go through verbatim.
        query = sql.SQL("CREATE TABLE {} ({})").format(
            sql.Identifier(name),
            sql.SQL(column_definitions),
        )
        self._fetch(conn, query)
        logger.info("Created table %s", name)

    def get_table_columns(self, conn, table: str) -> list[str]:
        return self._column(
            conn,
            "SELECT column_name FROM information_schema.columns "
            "WHERE table_schema = 'public' AND table_name = %s "
            "ORDER BY ordinal_position",
            (table,),
        )

    def get_table_data(self, conn, table: str) -> list[dict[str, Any]]:
        query = sql.SQL("SELECT * FROM {}").format(sql.Identifier(table))
        return self._fetch(conn, query)

    def insert_row(self, conn, table: str, values: Mapping[str, Any]) -> None:
        """Insert one row. Blank values are omitted so column defaults apply."""
        filled = {col: val for col, val in values.items() if val not in (None, "")}
        if filled:
            query = sql.SQL("INSERT INTO {} ({}) VALUES ({})").format(
                sql.Identifier(table),
                sql.SQL(", ").join(sql.Identifier(col) for col in filled),
                sql.SQL(", ").join(sql.Placeholder() for _ in filled),
            )
        else:
            query = sql.SQL("INSERT INTO {} DEFAULT VALUES").format(sql.Identifier(table))
        self._fetch(conn, query, tuple(filled.values()))
        logger.info("Inserted row into %s (%d columns)", table, len(filled))
