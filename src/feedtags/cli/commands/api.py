"""CLI commands for API server management."""

from __future__ import annotations

import typer

from feedtags.config.settings import settings

api_app = typer.Typer(
    name="api",
    help="API server management commands",
    no_args_is_help=True,
)


@api_app.command()
def start(
    host: str = typer.Option(settings.api_host, "--host", help="Interface to bind"),
    port: int = typer.Option(
        settings.api_port, "--port", "-p", help="Port to run the server on"
    ),
    production: bool = typer.Option(
        False, "--production", help="Run in production mode"
    ),
) -> None:
    """
    Start the feedtags API server.

    Development mode (default): auto-reload, info logging.
    Production mode: two workers, warning logging.

    Examples:
        feedtags api start
        feedtags api start --port 3000 --production
    """
    import uvicorn

    if production:
        uvicorn.run(
            "feedtags.api.main:app",
            host=host,
            port=port,
            workers=2,
            log_level="warning",
        )
    else:
        uvicorn.run(
            "feedtags.api.main:app",
            host=host,
            port=port,
            reload=True,
            log_level="info",
        )
