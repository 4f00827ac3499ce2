"""Database CLI commands for feedtags."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from feedtags.config.database import db_manager

console = Console()

db_app = typer.Typer(
    name="db",
    help="Database management commands",
    no_args_is_help=True,
)


@db_app.command("init")
def init_db() -> None:
    """
    Create any missing tables.

    Meant for development and SQLite databases; use ``alembic upgrade
    head`` for PostgreSQL deployments.
    """

    async def run_init() -> None:
        await db_manager.create_tables()
        await db_manager.close()

    asyncio.run(run_init())
    console.print(f"[green]✓[/green] Tables ready at {db_manager.database_url.split('@')[-1]}")
