"""Error taxonomy shared by the data access service and the TUI."""
from __future__ import annotations


class PgBrowseError(Exception):
    """Base class for every error surfaced to the operator."""

    title = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class UnavailableError(PgBrowseError):
    """The database server could not be reached at startup."""

    title = "Server unavailable"


class AuthError(PgBrowseError):
    """The server rejected the supplied credentials."""

    title = "Authentication failed"


class ConnectivityError(PgBrowseError):
    """A connection attempt failed for a reason other than credentials."""

    title = "Connection failed"


class QueryError(PgBrowseError):
    """A statement failed on an already established connection."""

    title = "Query failed"


class ValidationError(PgBrowseError):
    """A required input was left empty. Raised locally, never by a command."""

    title = "Invalid input"
