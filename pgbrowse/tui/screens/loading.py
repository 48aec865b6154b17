"""Transient screens: probing the server and authenticating."""
from __future__ import annotations

from rich.console import RenderableType
from rich.text import Text

from ...errors import UnavailableError
from ..commands import Op, issue
from ..components import ACCENT, SPINNER_FRAMES
from ..messages import Connected, Event, ServiceAvailable, ServiceUnavailable
from ..router import Transition, keep_stray, register_screen
from ..state import Session, State
from ..view import register_view

SERVICE_UNREACHABLE = "PostgreSQL is not installed or not running!"


@register_screen(State.LOADING)
def handle_loading(session: Session, event: Event) -> Transition:
    if isinstance(event, ServiceAvailable):
        connect = issue(
            Op.CONNECT,
            session.bootstrap_user,
            session.bootstrap_password,
            session.bootstrap_database,
        )
        return session.remember(state=State.SELECT_USER), [connect]
    if isinstance(event, ServiceUnavailable):
        return session.remember(
            state=State.ERROR,
            err=UnavailableError(SERVICE_UNREACHABLE),
            service_unavailable=True,
        ), []
    return session, []


@register_screen(State.CONNECTING)
def handle_connecting(session: Session, event: Event) -> Transition:
    if isinstance(event, Connected):
        if session.conn is not None and session.conn is not event.conn:
            session = keep_stray(session, session.conn)
        return (
            session.remember(state=State.LIST_TABLES, conn=event.conn),
            [issue(Op.LIST_TABLES, event.conn)],
        )
    return session, []


def _spinner(session: Session) -> tuple[str, str]:
    return f"  {SPINNER_FRAMES[session.spinner_frame % len(SPINNER_FRAMES)]} ", ACCENT


@register_view(State.LOADING)
def view_loading(session: Session, height: int) -> RenderableType:
    return Text.assemble(_spinner(session), "Checking PostgreSQL installation...")


@register_view(State.CONNECTING)
def view_connecting(session: Session, height: int) -> RenderableType:
    return Text.assemble(_spinner(session), "Connecting to database...")
