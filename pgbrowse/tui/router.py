"""Session controller: screen registry and the single transition function."""
from __future__ import annotations

import logging
from typing import Callable

from .commands import QUIT, Command, Op, issue
from .components import SPINNER_FRAMES
from .messages import Connected, Databases, Event, Failed, Key, Tables, Tick, Users
from .state import SPINNER_STATES, TEXT_ENTRY_STATES, Session, State, new_session

logger = logging.getLogger(__name__)

Transition = tuple[Session, list[Command]]
ScreenHandler = Callable[[Session, Event], Transition]


# Screen registry - maps each State to its event handler.
# Populated by the modules in `pgbrowse.tui.screens`.
SCREENS: dict[State, ScreenHandler] = {}


def register_screen(state: State):
    """Decorator to register a screen's event handler.

    Usage:
        @register_screen(State.LIST_TABLES)
        def handle_list_tables(session: Session, event: Event) -> Transition:
            ...
    """
    def decorator(fn: ScreenHandler) -> ScreenHandler:
        SCREENS[state] = fn
        return fn
    return decorator


def initial_session(bootstrap: tuple[str, str, str] | None = None) -> Transition:
    """Startup session in `Loading` plus the server availability probe."""
    return new_session(bootstrap), [issue(Op.CHECK_AVAILABLE)]


def is_quit_key(session: Session, key: Key) -> bool:
    if key.name == "ctrl+c":
        return True
    return key.name == "q" and session.state not in TEXT_ENTRY_STATES


def fail(session: Session, error) -> Session:
    """Move to the Error screen, dropping any half-entered row."""
    return session.remember(
        state=State.ERROR,
        err=error,
        add_row_inputs=(),
        current_input_index=0,
        pending_add_row=False,
    )


def keep_stray(session: Session, conn) -> Session:
    """Hold on to a connection nobody asked for so it is still closed on exit."""
    logger.info("Keeping unrequested connection in state %s", session.state.value)
    return session.remember(stray_conns=session.stray_conns + (conn,))


def _spin(session: Session) -> Session:
    if session.state not in SPINNER_STATES:
        return session
    return session.remember(spinner_frame=(session.spinner_frame + 1) % len(SPINNER_FRAMES))


def _update_caches(session: Session, event: Event) -> Session:
    """Apply list results that are valid on every screen."""
    if isinstance(event, Users):
        return session.remember(user_list=session.user_list.with_items(event.users))
    if isinstance(event, Databases):
        return session.remember(database_list=session.database_list.with_items(event.databases))
    if isinstance(event, Tables):
        return session.remember(table_list=session.table_list.with_items(event.tables))
    return session


def advance(session: Session, event: Event) -> Transition:
    """Apply one key press or message to the session.

    Returns the new session and the commands to dispatch. The input
    session is never modified.
    """
    if isinstance(event, Key) and is_quit_key(session, event):
        return session, [QUIT]

    if isinstance(event, Failed):
        logger.info("Entering error screen from %s: %s", session.state.value, event.error)
        return fail(session, event.error), []

    if isinstance(event, Tick):
        return _spin(session), []

    if isinstance(event, Connected) and session.state not in (State.SELECT_USER, State.CONNECTING):
        return keep_stray(session, event.conn), []

    session = _update_caches(session, event)

    handler = SCREENS.get(session.state)
    if handler is None:
        logger.warning("No handler registered for state %s", session.state)
        return session, []
    return handler(session, event)
