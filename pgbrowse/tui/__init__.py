"""TUI (Terminal User Interface) module for pgbrowse.

A pure session controller (`advance`) and view renderer (`render`) driven
by a prompt_toolkit event loop in `pgbrowse.tui.app`.
"""
from .router import advance, initial_session
from .state import Session, State
from .view import render

# Import screens to register them
from . import screens  # noqa: E402,F401

__all__ = ["Session", "State", "advance", "initial_session", "render"]
