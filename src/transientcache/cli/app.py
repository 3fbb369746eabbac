# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Typer CLI application root."""

from __future__ import annotations

from typing import Annotated

import typer

from transientcache.cli.commands import cache as cache_cmd
from transientcache.cli.commands import db

app = typer.Typer(
    name="transientcache",
    help="Namespaced TTL-aware cache pools stored in an options table",
    no_args_is_help=True,
)

app.add_typer(db.app, name="db", help="Database management")
app.add_typer(cache_cmd.app, name="cache", help="Read and write cache pools")


@app.callback()
def main(
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level (overrides TRANSIENTCACHE_LOG_LEVEL)"),
    ] = None,
    log_format: Annotated[
        str | None,
        typer.Option("--log-format", help="'text' or 'json' (overrides TRANSIENTCACHE_LOG_FORMAT)"),
    ] = None,
) -> None:
    """Configure logging before any command runs."""
    from transientcache.core.config import get_settings
    from transientcache.core.logging import setup_logging

    settings = get_settings()
    setup_logging(level=log_level or settings.log_level, fmt=log_format or settings.log_format)


@app.command()
def version() -> None:
    """Show version information."""
    from transientcache import __version__

    typer.echo(f"transientcache v{__version__}")
