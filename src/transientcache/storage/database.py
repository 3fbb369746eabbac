# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Database connection management.

Holds the module-level SQLite connection (via aiosqlite) and the
:class:`DatabaseBackend` wrapping it.
"""

from __future__ import annotations

import os
from pathlib import Path

import aiosqlite

from transientcache.core.exceptions import ConfigurationError, StorageError
from transientcache.storage.backend import DatabaseBackend
from transientcache.storage.migrations import run_migrations

_db: aiosqlite.Connection | None = None
_backend: DatabaseBackend | None = None


async def init_db(
    db_path: Path | str = "transientcache.db",
    *,
    table_prefix: str = "wp_",
    auto_migrate: bool = True,
) -> aiosqlite.Connection:
    """Initialize database connection, optionally run migrations, return connection.

    Enables WAL mode for concurrent read performance.  When *auto_migrate*
    is True (the default), schema migrations are applied on every
    initialization.
    """
    global _db

    if _db is not None:
        return _db

    try:
        _db = await aiosqlite.connect(str(db_path))
        _db.row_factory = aiosqlite.Row

        await _db.execute("PRAGMA journal_mode=WAL")

        if auto_migrate:
            await run_migrations(_db, table_prefix=table_prefix)

        return _db
    except Exception as exc:
        if _db is not None:
            await _db.close()
        _db = None
        msg = f"Failed to initialize database at {db_path}: {exc}"
        raise StorageError(msg) from exc


async def init_backend(
    *,
    backend: str | None = None,
    db_path: Path | str = "transientcache.db",
    table_prefix: str = "wp_",
    auto_migrate: bool = True,
) -> DatabaseBackend:
    """Initialise and return the configured :class:`DatabaseBackend`.

    Args:
        backend: Engine name.  Falls back to the ``TRANSIENTCACHE_DB_BACKEND``
            env var (default ``"sqlite"``).
        db_path: Path for the SQLite database file, or ``":memory:"``.
        table_prefix: Prefix of the options table name.
        auto_migrate: Run schema migrations on startup.

    Returns:
        A ready-to-use :class:`DatabaseBackend`.
    """
    global _backend

    if _backend is not None:
        return _backend

    chosen = (backend or os.environ.get("TRANSIENTCACHE_DB_BACKEND", "sqlite")).lower()

    if chosen == "sqlite":
        conn = await init_db(db_path, table_prefix=table_prefix, auto_migrate=auto_migrate)
        from transientcache.storage.sqlite_backend import SQLiteBackend

        _backend = SQLiteBackend(conn)
        return _backend

    msg = f"Unknown database backend: {chosen!r}. Expected 'sqlite'."
    raise ConfigurationError(msg)


async def get_db() -> aiosqlite.Connection:
    """Get the active database connection.

    Raises StorageError if the database has not been initialized.
    """
    if _db is None:
        raise StorageError("Database not initialized. Call init_db() first.")
    return _db


async def get_backend() -> DatabaseBackend:
    """Get the active :class:`DatabaseBackend`.

    Raises :class:`StorageError` if no backend has been initialised.
    """
    if _backend is None:
        raise StorageError("Database backend not initialized. Call init_backend() first.")
    return _backend


async def close_db() -> None:
    """Close the database connection."""
    global _db, _backend

    # The backend wraps _db, so closing it closes the connection too.
    if _backend is not None:
        await _backend.close()
        _backend = None
        _db = None

    if _db is not None:
        await _db.close()
        _db = None
