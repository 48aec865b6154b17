"""Login screens: pick a role, pick a database, type the password."""
from __future__ import annotations

from rich.console import Group, RenderableType
from rich.text import Text

from ..commands import Op, issue
from ..components import render_inline_error
from ..messages import Connected, Event, Key, Users
from ..router import Transition, keep_stray, register_screen
from ..state import Session, State, password_input
from ..view import register_view


@register_screen(State.SELECT_USER)
def handle_select_user(session: Session, event: Event) -> Transition:
    if isinstance(event, Connected):
        if session.bootstrap_conn is not None:
            return keep_stray(session, event.conn), []
        return (
            session.remember(bootstrap_conn=event.conn),
            [issue(Op.LIST_USERS, event.conn)],
        )
    if isinstance(event, Users):
        # The user list itself is already cached by the router.
        return session, [issue(Op.LIST_DATABASES, session.bootstrap_conn)]
    if not isinstance(event, Key):
        return session, []

    session = session.remember(user_list=session.user_list.handle_key(event))
    if event.name == "enter":
        user = session.user_list.selected()
        if user is not None:
            return session.remember(selected_user=user, state=State.SELECT_DATABASE), []
    return session, []


@register_screen(State.SELECT_DATABASE)
def handle_select_database(session: Session, event: Event) -> Transition:
    if not isinstance(event, Key):
        return session, []

    session = session.remember(database_list=session.database_list.handle_key(event))
    if event.name == "enter":
        database = session.database_list.selected()
        if database is not None:
            return session.remember(
                selected_db=database,
                password_input=password_input().focus(),
                state=State.ENTER_PASSWORD,
            ), []
    return session, []


@register_screen(State.ENTER_PASSWORD)
def handle_enter_password(session: Session, event: Event) -> Transition:
    if not isinstance(event, Key):
        return session, []

    session = session.remember(password_input=session.password_input.handle_key(event))
    if event.name == "enter":
        password = session.password_input.value
        connect = issue(Op.CONNECT, session.selected_user, password, session.selected_db)
        return session.remember(
            password_input=session.password_input.reset().blur(),
            state=State.CONNECTING,
        ), [connect]
    return session, []


@register_view(State.SELECT_USER)
def view_select_user(session: Session, height: int) -> RenderableType:
    return session.user_list.render()


@register_view(State.SELECT_DATABASE)
def view_select_database(session: Session, height: int) -> RenderableType:
    return session.database_list.render()


@register_view(State.ENTER_PASSWORD)
def view_enter_password(session: Session, height: int) -> RenderableType:
    parts: list[RenderableType] = [
        Text(
            f"Enter password for user '{session.selected_user}' "
            f"on database '{session.selected_db}':"
        ),
        Text(""),
        session.password_input.render(),
    ]
    if session.err is not None:
        parts.extend([Text(""), render_inline_error(str(session.err))])
    return Group(*parts)
