from __future__ import annotations

import logging

import typer
from pydantic import ValidationError as SettingsError
from rich.console import Console

from .db import PostgresService
from .logging import setup_logging
from .settings import load_settings

app = typer.Typer(
    add_completion=False,
    help="pgbrowse: browse a PostgreSQL server from the terminal",
    rich_markup_mode="rich",
)
console = Console()
logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN CALLBACK
# ═══════════════════════════════════════════════════════════════════════════════

@app.callback(invoke_without_command=True)
def _root(ctx: typer.Context):
    """
    [bold]pgbrowse[/bold]: pick a role and a database, then list, create and
    fill tables.

    [dim]Connection and logging settings come from PGBROWSE_* environment
    variables or a .env file.[/dim]

    [bold]Keys:[/bold]
      enter        select / confirm
      n            new table (table list)
      a            add row (table view)
      tab          next field (row entry)
      esc          back
      q, ctrl+c    quit
    """
    if ctx.invoked_subcommand is None:
        raise typer.Exit(code=_interactive_browser())


# ═══════════════════════════════════════════════════════════════════════════════
# INTERACTIVE BROWSER
# ═══════════════════════════════════════════════════════════════════════════════

def _interactive_browser() -> int:
    """Launch the full-screen browser and return the process exit code."""
    from .tui.app import BrowserApp

    try:
        settings = load_settings()
    except SettingsError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        return 1

    log_file = setup_logging(settings)
    service = PostgresService(settings)

    try:
        code = BrowserApp(settings, service).run()
    except KeyboardInterrupt:
        console.print("\n[dim]👋 Interrupted. Goodbye![/]")
        return 0
    except Exception as e:
        logger.exception("Error running program")
        console.print(f"[red]Error running program:[/red] {e}")
        console.print(f"[dim]Details in {log_file}[/dim]")
        return 1

    if code:
        console.print("[red]PostgreSQL server was not reachable.[/red]")
    return code


def main():
    app()
