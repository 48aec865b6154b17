"""Terminal runtime: one inbound queue, one consumer, one frame per update."""
from __future__ import annotations

import asyncio
import logging

from prompt_toolkit.application import Application
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.key_binding.key_processor import KeyPressEvent
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl

from ..errors import QueryError
from ..settings import Settings
from .commands import Dispatcher, Op
from .messages import Event, Key, Tick
from .router import advance, fail, initial_session
from .state import SPINNER_STATES, Session
from .view import render

logger = logging.getLogger(__name__)

# Seconds between spinner frames.
SPINNER_INTERVAL = 0.1

# prompt_toolkit key names -> controller key names
KEY_NAMES = {
    Keys.ControlM.value: "enter",
    Keys.ControlJ.value: "enter",
    Keys.Escape.value: "esc",
    Keys.ControlI.value: "tab",
    Keys.BackTab.value: "shift+tab",
    Keys.ControlH.value: "backspace",
    Keys.ControlC.value: "ctrl+c",
    Keys.Up.value: "up",
    Keys.Down.value: "down",
    Keys.Left.value: "left",
    Keys.Right.value: "right",
    Keys.Home.value: "home",
    Keys.End.value: "end",
    Keys.PageUp.value: "pageup",
    Keys.PageDown.value: "pagedown",
    Keys.Delete.value: "delete",
}


def translate_key(key: str, data: str = "") -> list[Key]:
    """Convert one prompt_toolkit key press into controller key events."""
    name = getattr(key, "value", key)
    if name == Keys.BracketedPaste.value:
        return [Key(ch) for ch in data if ch.isprintable()]
    if name in KEY_NAMES:
        return [Key(KEY_NAMES[name])]
    return [Key(name)]


def exit_code(session: Session) -> int:
    """Non-zero when the server was never reachable."""
    return 1 if session.service_unavailable else 0


def close_connections(session: Session, service) -> None:
    """Close every connection the session owns, once each."""
    for conn in session.connections():
        service.close(conn)


class BrowserApp:
    """Owns the session and feeds it events from keys and background commands."""

    def __init__(self, settings: Settings, service):
        self.settings = settings
        self.service = service
        self.session, self._startup = initial_session(settings.bootstrap_credentials())
        self._inbox: asyncio.Queue[Event] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self.dispatcher = Dispatcher(
            service,
            deliver=self._deliver_threadsafe,
            max_workers=settings.PGBROWSE_MAX_WORKERS,
        )
        self.application = Application(
            layout=Layout(Window(FormattedTextControl(self._frame), wrap_lines=False)),
            key_bindings=self._key_bindings(),
            full_screen=True,
        )

    def _key_bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add(Keys.Any)
        def _(event: KeyPressEvent) -> None:
            for press in event.key_sequence:
                for key in translate_key(press.key, press.data):
                    self._deliver(key)

        return kb

    def _frame(self) -> ANSI:
        size = self.application.output.get_size()
        return ANSI(render(self.session, width=size.columns, height=size.rows, color=True))

    def _deliver(self, event: Event) -> None:
        if self._inbox is not None:
            self._inbox.put_nowait(event)

    def _deliver_threadsafe(self, event: Event) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.debug("Dropping %s delivered after shutdown", type(event).__name__)
            return
        loop.call_soon_threadsafe(self._deliver, event)

    async def _consume(self) -> None:
        inbox = self._inbox
        if inbox is None:
            raise RuntimeError("BrowserApp inbox is only available inside run_async()")
        while True:
            event = await inbox.get()
            if self._apply(event):
                return
            self.application.invalidate()

    def _apply(self, event: Event) -> bool:
        """Advance the session by one event; True once the app is exiting."""
        try:
            self.session, commands = advance(self.session, event)
            for command in commands:
                if command.op is Op.QUIT:
                    self.application.exit(result=exit_code(self.session))
                    return True
                self.dispatcher.submit(command)
        except Exception as e:
            logger.exception("Failed to handle %s in state %s", type(event).__name__, self.session.state.value)
            self.session = fail(self.session, QueryError(f"{e.__class__.__name__}: {e}"))
        return False

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(SPINNER_INTERVAL)
            if self.session.state in SPINNER_STATES:
                self._deliver(Tick())

    async def run_async(self) -> int:
        self._loop = asyncio.get_running_loop()
        self._inbox = asyncio.Queue()
        consumer = asyncio.ensure_future(self._consume())
        ticker = asyncio.ensure_future(self._tick())
        for command in self._startup:
            self.dispatcher.submit(command)
        try:
            return await self.application.run_async()
        finally:
            consumer.cancel()
            ticker.cancel()
            self.dispatcher.shutdown()
            close_connections(self.session, self.service)
            logger.info("Session closed in state %s", self.session.state.value)

    def run(self) -> int:
        return asyncio.run(self.run_async())
