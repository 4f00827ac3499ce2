"""
Tag CLI commands for feedtags.

Commands for managing a user's tags and the tags on their entries,
straight against the database. Each command is one unit of work.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import List, Optional, TypeVar

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from sqlalchemy.ext.asyncio import AsyncSession

from feedtags.cli.errors import fail
from feedtags.config.database import db_manager
from feedtags.exceptions import FeedtagsError
from feedtags.models.entry import EntryFilters
from feedtags.models.enums import EntryOrder, EntryStatus, SortDirection
from feedtags.models.user_tag import UserTagCreationRequest, UserTagModificationRequest
from feedtags.services.user_tag_service import UserTagService

logger = logging.getLogger(__name__)

console = Console()

tag_app = typer.Typer(
    name="tags",
    help="🏷️ User tag management",
    no_args_is_help=True,
)

T = TypeVar("T")

USER_OPTION = typer.Option(..., "--user", "-u", help="ID of the acting user")


def _run(operation: Callable[[AsyncSession], Awaitable[T]]) -> T:
    """Run ``operation`` in one session; commit on success, report errors."""

    async def runner() -> Optional[T]:
        result: Optional[T] = None
        try:
            async for session in db_manager.get_session():
                result = await operation(session)
        finally:
            await db_manager.close()
        return result

    try:
        return asyncio.run(runner())  # type: ignore[return-value]
    except FeedtagsError as e:
        fail(e)


@tag_app.command("list")
def list_tags(user_id: int = USER_OPTION) -> None:
    """List a user's tags with entry counts."""
    service = UserTagService()
    tags = _run(lambda session: service.list_tags(session, user_id))

    if not tags:
        console.print(
            Panel(
                "[yellow]No tags yet[/yellow]\n"
                "Use 'feedtags tags create' to add one",
                title="No Tags",
                border_style="yellow",
            )
        )
        return

    table = Table(title=f"Tags of user {user_id}", show_header=True, header_style="bold blue")
    table.add_column("ID", style="dim", width=8)
    table.add_column("Title", style="cyan")
    table.add_column("Entries", style="green", justify="right")
    for tag in tags:
        table.add_row(str(tag.id), tag.title, f"{tag.entry_count or 0:,}")
    console.print(table)


@tag_app.command("create")
def create_tag(
    title: str = typer.Argument(..., help="Tag title"),
    user_id: int = USER_OPTION,
) -> None:
    """Create a tag."""
    service = UserTagService()
    request = UserTagCreationRequest(title=title)
    tag = _run(lambda session: service.create_tag(session, user_id, request))
    console.print(f"[green]✓[/green] Created tag {tag.id}: [cyan]{tag.title}[/cyan]")


@tag_app.command("rename")
def rename_tag(
    tag_id: int = typer.Argument(..., help="Tag ID"),
    title: str = typer.Argument(..., help="New title"),
    user_id: int = USER_OPTION,
) -> None:
    """Rename a tag."""
    service = UserTagService()
    request = UserTagModificationRequest(title=title)
    tag = _run(lambda session: service.rename_tag(session, user_id, tag_id, request))
    console.print(f"[green]✓[/green] Tag {tag.id} is now [cyan]{tag.title}[/cyan]")


@tag_app.command("delete")
def delete_tag(
    tag_id: int = typer.Argument(..., help="Tag ID"),
    user_id: int = USER_OPTION,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a tag and remove it from every entry."""
    if not yes and not typer.confirm(f"Delete tag {tag_id} and untag its entries?"):
        raise typer.Abort()
    service = UserTagService()
    _run(lambda session: service.delete_tag(session, user_id, tag_id))
    console.print(f"[green]✓[/green] Deleted tag {tag_id}")


@tag_app.command("assign")
def assign_tags(
    entry_id: int = typer.Argument(..., help="Entry ID"),
    tag_ids: Optional[List[str]] = typer.Argument(
        None, help="Tag IDs to set; none clears the entry's tags"
    ),
    user_id: int = USER_OPTION,
) -> None:
    """Replace the tags on an entry. Unknown or foreign tag IDs are ignored."""
    service = UserTagService()
    applied = _run(
        lambda session: service.set_entry_tags(session, user_id, entry_id, tag_ids)
    )
    if applied:
        console.print(
            f"[green]✓[/green] Entry {entry_id} tags: "
            + ", ".join(str(tag_id) for tag_id in sorted(applied))
        )
    else:
        console.print(f"[green]✓[/green] Entry {entry_id} has no tags")


@tag_app.command("show-entry")
def show_entry_tags(
    entry_id: int = typer.Argument(..., help="Entry ID"),
    user_id: int = USER_OPTION,
) -> None:
    """Show the tags on an entry."""
    service = UserTagService()

    async def load(session: AsyncSession) -> List[str]:
        tag_ids = await service.get_entry_tag_ids(session, user_id, entry_id)
        tags = await service.list_tags(session, user_id)
        return [tag.title for tag in tags if tag.id in tag_ids]

    titles = _run(load)
    if titles:
        console.print(f"Entry {entry_id}: " + ", ".join(f"[cyan]{t}[/cyan]" for t in titles))
    else:
        console.print(f"[yellow]Entry {entry_id} has no tags[/yellow]")


@tag_app.command("entries")
def tag_entries(
    tag_id: int = typer.Argument(..., help="Tag ID"),
    user_id: int = USER_OPTION,
    status: Optional[List[EntryStatus]] = typer.Option(
        None, "--status", "-s", help="Only entries with this status (repeatable)"
    ),
    order: EntryOrder = typer.Option(EntryOrder.PUBLISHED_AT, "--order", help="Sort column"),
    direction: SortDirection = typer.Option(
        SortDirection.DESC, "--direction", help="Sort direction"
    ),
    limit: int = typer.Option(20, "--limit", "-l", min=0, help="Maximum entries, 0 for all"),
    offset: int = typer.Option(0, "--offset", min=0, help="Entries to skip"),
    search: Optional[str] = typer.Option(None, "--search", help="Title contains"),
) -> None:
    """List entries carrying a tag."""
    service = UserTagService()
    filters = EntryFilters(
        statuses=status or [],
        order=order,
        direction=direction,
        limit=limit,
        offset=offset,
        search=search or None,
    )
    result = _run(
        lambda session: service.list_entries_by_tag(session, user_id, tag_id, filters)
    )

    table = Table(
        title=f"Entries tagged {tag_id} ({len(result.entries)} of {result.total})",
        show_header=True,
        header_style="bold blue",
    )
    table.add_column("ID", style="dim", width=8)
    table.add_column("Title", style="cyan", max_width=60)
    table.add_column("Status", style="green")
    table.add_column("Published", style="dim")
    for entry in result.entries:
        published = entry.published_at.strftime("%Y-%m-%d") if entry.published_at else "-"
        table.add_row(str(entry.id), entry.title, entry.status.value, published)
    console.print(table)
