"""Reusable UI components for the TUI.

Widgets are immutable values: every key press returns a new widget, which
keeps the session controller free of hidden mutable state.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping

from rich.console import Group, RenderableType
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .messages import Key


# ═══════════════════════════════════════════════════════════════════════════════
# BRAND STYLING
# ═══════════════════════════════════════════════════════════════════════════════

ACCENT = "#00b4d8"           # Cyan accent
ACCENT_LIGHT = "#90e0ef"     # Light cyan for values
SELECTED_STYLE = f"bold {ACCENT}"
NORMAL_STYLE = "white"
DIM_STYLE = "dim"
ERROR_STYLE = "bold red"

SPINNER_FRAMES = "⣾⣽⣻⢿⡿⣟⣯⣷"
NULL_DISPLAY = "NULL"
CELL_WIDTH = 20


# ═══════════════════════════════════════════════════════════════════════════════
# SELECTABLE LIST
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SelectList:
    """Vertical list with a single highlighted item."""

    title: str
    items: tuple[str, ...] = ()
    index: int = 0

    def with_items(self, items: Iterable[str]) -> SelectList:
        """Replace the items, keeping the cursor inside the new bounds."""
        new_items = tuple(items)
        index = min(self.index, max(len(new_items) - 1, 0))
        return replace(self, items=new_items, index=index)

    def selected(self) -> str | None:
        if not self.items:
            return None
        return self.items[self.index]

    def handle_key(self, key: Key) -> SelectList:
        if not self.items:
            return self
        last = len(self.items) - 1
        if key.name in ("up", "k"):
            return replace(self, index=max(self.index - 1, 0))
        if key.name in ("down", "j"):
            return replace(self, index=min(self.index + 1, last))
        if key.name == "home":
            return replace(self, index=0)
        if key.name == "end":
            return replace(self, index=last)
        return self

    def render(self) -> RenderableType:
        lines = [Text(f"  {self.title}", style="bold"), Text("")]
        if not self.items:
            lines.append(Text("  No items.", style=DIM_STYLE))
        for i, item in enumerate(self.items):
            if i == self.index:
                lines.append(Text.assemble("> ", (f"  {item}", SELECTED_STYLE)))
            else:
                lines.append(Text.assemble("  ", (f"  {item}", NORMAL_STYLE)))
        return Group(*lines)


# ═══════════════════════════════════════════════════════════════════════════════
# TEXT INPUT
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TextInput:
    """Single-line text field. Only a focused input accepts keystrokes."""

    prompt: str = "> "
    placeholder: str = ""
    value: str = ""
    focused: bool = False
    masked: bool = False
    char_limit: int = 0

    def focus(self) -> TextInput:
        return replace(self, focused=True)

    def blur(self) -> TextInput:
        return replace(self, focused=False)

    def reset(self) -> TextInput:
        return replace(self, value="")

    def handle_key(self, key: Key) -> TextInput:
        if not self.focused:
            return self
        if key.name == "backspace":
            return replace(self, value=self.value[:-1])
        if key.is_printable:
            if self.char_limit and len(self.value) >= self.char_limit:
                return self
            return replace(self, value=self.value + key.name)
        return self

    def render(self) -> RenderableType:
        text = Text(self.prompt)
        if self.value:
            shown = "•" * len(self.value) if self.masked else self.value
            text.append(shown)
        elif self.placeholder:
            text.append(self.placeholder, style=DIM_STYLE)
        if self.focused:
            text.append("█", style=ACCENT)
        return text


# ═══════════════════════════════════════════════════════════════════════════════
# DATA GRID
# ═══════════════════════════════════════════════════════════════════════════════

def format_cell(value: Any) -> str:
    if value is None:
        return NULL_DISPLAY
    return str(value)


@dataclass(frozen=True)
class DataGrid:
    """Scrollable table of rows with a highlighted cursor row."""

    columns: tuple[str, ...] = ()
    rows: tuple[tuple[str, ...], ...] = ()
    cursor: int = 0

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> DataGrid:
        """Build a grid from row mappings; columns follow the first row."""
        records = list(records)
        if not records:
            return cls()
        columns = tuple(str(col) for col in records[0].keys())
        rows = tuple(
            tuple(format_cell(record.get(col)) for col in columns)
            for record in records
        )
        return cls(columns=columns, rows=rows)

    @classmethod
    def from_columns(cls, columns: Iterable[str]) -> DataGrid:
        return cls(columns=tuple(columns))

    def handle_key(self, key: Key) -> DataGrid:
        if not self.rows:
            return self
        if key.name in ("up", "k"):
            return replace(self, cursor=max(self.cursor - 1, 0))
        if key.name in ("down", "j"):
            return replace(self, cursor=min(self.cursor + 1, len(self.rows) - 1))
        return self

    def render(self, height: int = 15) -> RenderableType:
        table = Table(show_lines=False, header_style=SELECTED_STYLE, expand=False)
        for col in self.columns:
            table.add_column(escape(col), max_width=CELL_WIDTH, no_wrap=True, overflow="ellipsis")
        if not self.columns:
            return table

        height = max(height, 1)
        start = max(0, min(self.cursor - height + 1, len(self.rows) - height))
        start = max(start, 0)
        for i, row in enumerate(self.rows[start:start + height], start=start):
            style = SELECTED_STYLE if i == self.cursor else None
            table.add_row(*(escape(cell) for cell in row), style=style)
        return table


# ═══════════════════════════════════════════════════════════════════════════════
# PANELS
# ═══════════════════════════════════════════════════════════════════════════════

def render_header(user: str, database: str) -> RenderableType:
    """Context bar showing the chosen login role and database."""
    parts: list[str] = []
    if user:
        parts.append(f"[bold]Selected User:[/bold] [{SELECTED_STYLE}]{escape(user)}[/]")
    if database:
        parts.append(f"[bold]Selected Database:[/bold] [{SELECTED_STYLE}]{escape(database)}[/]")
    if not parts:
        return Text("")
    return Text.from_markup(" | ".join(parts))


def render_inline_error(message: str) -> RenderableType:
    return Text.from_markup(f"[{ERROR_STYLE}]Error:[/] {escape(message)}")


def render_error(title: str, cause: str, action: str | None = None) -> RenderableType:
    """Render a friendly error panel with 3-part structure.

    Args:
        title: Error title
        cause: What caused the error
        action: Suggested action to resolve
    """
    content = f"[bold red]✗ {escape(title)}[/bold red]\n\n"
    content += f"[yellow]Cause:[/yellow] {escape(cause)}\n"

    if action:
        content += f"\n[dim]→ {escape(action)}[/dim]"

    return Panel.fit(content, border_style="red", title="Error")


def render_instructions(text: str) -> RenderableType:
    return Text(text, style=DIM_STYLE)
