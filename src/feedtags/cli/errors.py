"""
Error display helpers for CLI commands.

Domain errors are shown in a red panel and mapped to a process exit code;
anything else propagates with its traceback.
"""

from __future__ import annotations

from typing import NoReturn

import typer
from rich.console import Console
from rich.panel import Panel

from feedtags.exceptions import (
    EXIT_CODE_CONFLICT,
    EXIT_CODE_GENERAL_ERROR,
    EXIT_CODE_INVALID_ARGS,
    EXIT_CODE_NOT_FOUND,
    ConflictError,
    FeedtagsError,
    NotFoundError,
    RepositoryError,
    TagValidationError,
)

console = Console()


def exit_code_for(error: FeedtagsError) -> int:
    """Map a feedtags error to the CLI exit code."""
    if isinstance(error, NotFoundError):
        return EXIT_CODE_NOT_FOUND
    if isinstance(error, TagValidationError):
        return EXIT_CODE_INVALID_ARGS
    if isinstance(error, ConflictError):
        return EXIT_CODE_CONFLICT
    return EXIT_CODE_GENERAL_ERROR


def fail(error: FeedtagsError) -> NoReturn:
    """Print ``error`` and exit with its code."""
    if isinstance(error, RepositoryError):
        body = f"[red]{error.message}[/red]\nCheck the database connection and logs."
    elif isinstance(error, TagValidationError):
        body = f"[red]{error.message}[/red] [dim]({error.reason.value})[/dim]"
    else:
        body = f"[red]{error.message}[/red]"
    console.print(Panel(body, title="Error", border_style="red"))
    raise typer.Exit(code=exit_code_for(error))
