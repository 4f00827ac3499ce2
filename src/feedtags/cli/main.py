"""
Main CLI entry point for feedtags.
"""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from feedtags import __version__
from feedtags.api.middleware.request_id import RequestIdFilter
from feedtags.cli.commands.api import api_app
from feedtags.cli.db_commands import db_app
from feedtags.cli.tag_commands import tag_app
from feedtags.config.settings import settings

console = Console()

app = typer.Typer(
    name="feedtags",
    help="User tags for feed entries",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(tag_app, name="tags", help="User tag commands")
app.add_typer(db_app, name="db", help="Database commands")
app.add_typer(api_app, name="api", help="API server commands")


def configure_logging(level: str) -> None:
    """Send log records through rich at ``level``."""
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.addFilter(RequestIdFilter())
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    console.print(
        Panel(
            f"[bold blue]feedtags[/bold blue] v{__version__}",
            title="Version",
            border_style="blue",
        )
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Override LOG_LEVEL for this run"
    ),
) -> None:
    """
    feedtags - user tags for feed entries.

    Create, rename and delete your tags, tag entries, and browse entries
    by tag.
    """
    if version:
        console.print(f"feedtags v{__version__}")
        raise typer.Exit(code=0)

    configure_logging((log_level or settings.log_level).upper())

    if ctx.invoked_subcommand is None:
        console.print("[yellow]Use 'feedtags --help' for available commands[/yellow]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
