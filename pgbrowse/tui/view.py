"""View renderer: session in, text frame out. No side effects."""
from __future__ import annotations

import io
from typing import Callable

from rich.console import Console, Group, RenderableType
from rich.text import Text

from .components import render_header
from .state import Session, State

ViewFn = Callable[[Session, int], RenderableType]

# View registry - maps each State to a function building its body.
VIEWS: dict[State, ViewFn] = {}

# Rows of chrome (header, title, instructions) around a data grid.
GRID_CHROME = 10


def register_view(state: State):
    """Decorator to register the body renderer for a screen."""
    def decorator(fn: ViewFn) -> ViewFn:
        VIEWS[state] = fn
        return fn
    return decorator


def header_for(session: Session) -> RenderableType:
    if session.state in (State.LOADING, State.ERROR):
        return Text("")
    if session.state == State.SELECT_USER:
        return Text("Select a User", style="bold")
    if session.state == State.SELECT_DATABASE:
        return render_header(session.selected_user, "")
    return render_header(session.selected_user, session.selected_db)


def render(session: Session, width: int = 100, height: int = 30, color: bool = False) -> str:
    """Render one frame for `session`.

    Args:
        session: Current session
        width: Terminal columns available
        height: Terminal rows available (sizes the data grid)
        color: Emit ANSI styling; plain text otherwise

    Returns:
        The frame as text. Unknown states render a fallback screen.
    """
    view = VIEWS.get(session.state)
    if view is None:
        body: RenderableType = Text("Unknown state")
    else:
        body = view(session, max(height - GRID_CHROME, 1))

    console = Console(
        file=io.StringIO(),
        width=max(width, 20),
        force_terminal=color,
        color_system="256" if color else None,
        highlight=False,
    )
    console.print()
    console.print(Group(header_for(session), Text(""), body))
    return console.file.getvalue()
