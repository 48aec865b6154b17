"""Screen modules for the TUI."""
from __future__ import annotations

# Import all screen modules to register them with the router and the view
from . import error, loading, login, table_view, tables

__all__ = [
    "error",
    "loading",
    "login",
    "table_view",
    "tables",
]
