"""Error screen. Any key returns to the table list."""
from __future__ import annotations

from rich.console import Group, RenderableType
from rich.text import Text

from ..components import render_error
from ..messages import Event, Key
from ..router import Transition, register_screen
from ..state import Session, State
from ..view import register_view


@register_screen(State.ERROR)
def handle_error(session: Session, event: Event) -> Transition:
    if isinstance(event, Key):
        # Recovery target is fixed: the previous screen is not restored.
        return session.remember(err=None, state=State.LIST_TABLES), []
    return session, []


@register_view(State.ERROR)
def view_error(session: Session, height: int) -> RenderableType:
    err = session.err
    title = getattr(err, "title", "Error")
    return Group(
        render_error(title, str(err)),
        Text("Press any key to continue."),
    )
