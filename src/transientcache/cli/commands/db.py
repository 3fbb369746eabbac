# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Database management commands."""

from __future__ import annotations

import asyncio

import typer

app = typer.Typer()


@app.command()
def init() -> None:
    """Initialize the SQLite database and create the options table."""
    asyncio.run(_init_db())


async def _init_db() -> None:
    from transientcache.core.config import get_settings
    from transientcache.storage.database import close_db, init_db

    settings = get_settings()
    typer.echo(f"Initializing database at {settings.db_path}...")
    await init_db(settings.db_path, table_prefix=settings.table_prefix)
    await close_db()
    typer.echo(f"Database initialized with table {settings.table_prefix}options.")


@app.command()
def migrate() -> None:
    """Apply pending database migrations.

    Shows the current schema version and any pending migrations,
    then applies them in order.
    """
    asyncio.run(_migrate_db())


async def _migrate_db() -> None:
    from transientcache.core.config import get_settings
    from transientcache.storage.database import close_db, init_db
    from transientcache.storage.migrations import (
        get_current_version,
        get_pending_migrations,
        run_migrations,
    )

    settings = get_settings()
    # Initialize without auto-migrate so we can show status first
    db = await init_db(settings.db_path, auto_migrate=False)

    try:
        current = await get_current_version(db)
        pending = await get_pending_migrations(db)

        typer.echo(f"Database: {settings.db_path}")
        typer.echo(f"Current schema version: {current}")

        if not pending:
            typer.echo("No pending migrations.")
            return

        typer.echo(f"Pending migrations: {len(pending)}")
        for m in pending:
            typer.echo(f"  {m.version:03d}: {m.name}")

        typer.echo()
        applied = await run_migrations(db, table_prefix=settings.table_prefix)

        for m in applied:
            typer.echo(f"Applied migration {m.version:03d}: {m.name}")

        new_version = await get_current_version(db)
        typer.echo(f"\nSchema version is now: {new_version}")
    finally:
        await close_db()


@app.command()
def stats() -> None:
    """Show option and transient counts."""
    asyncio.run(_show_stats())


async def _show_stats() -> None:
    from transientcache.core.config import get_settings
    from transientcache.storage.database import close_db, init_backend

    settings = get_settings()
    backend = await init_backend(
        backend=settings.db_backend,
        db_path=settings.db_path,
        table_prefix=settings.table_prefix,
    )
    table = f"{settings.table_prefix}options"

    try:
        row = await backend.fetch_one(
            f"SELECT COUNT(*) AS total, "  # noqa: S608
            "SUM(CASE WHEN substr(option_name, 1, 19) = '_transient_timeout_' THEN 1 ELSE 0 END) AS timeouts, "
            "SUM(CASE WHEN substr(option_name, 1, 11) = '_transient_' THEN 1 ELSE 0 END) AS transients "
            f"FROM {table}"
        )
        total = row["total"] if row else 0
        timeouts = (row["timeouts"] or 0) if row else 0
        transients = ((row["transients"] or 0) - timeouts) if row else 0

        typer.echo(f"Database: {settings.db_path} ({backend.backend_name})")
        typer.echo()
        typer.echo(f"  {table}: {total} rows")
        typer.echo(f"  transients: {transients}")
        typer.echo(f"  with expiry: {timeouts}")
    finally:
        await close_db()
