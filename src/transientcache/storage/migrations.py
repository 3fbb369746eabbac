# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Versioned database migration system for the options database.

Applied versions are tracked in a ``schema_migrations`` table.  Each
migration is idempotent and receives the configured table prefix so that
the options table can live next to other applications' tables.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import Any

import aiosqlite

from transientcache.core.constants import TABLE_NAME_OPTIONS

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Migration registry infrastructure
# ---------------------------------------------------------------------------

MigrationFunc = Callable[[aiosqlite.Connection, str], Coroutine[Any, Any, None]]


@dataclass(frozen=True, slots=True)
class Migration:
    """A single database migration."""

    version: int
    name: str
    func: MigrationFunc


# Ordered list of all migrations.  New migrations are appended here.
_MIGRATIONS: list[Migration] = []


def _register(version: int, name: str) -> Callable[[MigrationFunc], MigrationFunc]:
    """Decorator that registers a migration function."""

    def decorator(fn: MigrationFunc) -> MigrationFunc:
        _MIGRATIONS.append(Migration(version=version, name=name, func=fn))
        return fn

    return decorator


# ---------------------------------------------------------------------------
# Schema-migrations bookkeeping table
# ---------------------------------------------------------------------------

_CREATE_SCHEMA_MIGRATIONS = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""


async def _ensure_migrations_table(db: aiosqlite.Connection) -> None:
    """Create the ``schema_migrations`` table if it does not exist."""
    await db.execute(_CREATE_SCHEMA_MIGRATIONS)
    await db.commit()


async def get_current_version(db: aiosqlite.Connection) -> int:
    """Return the highest applied migration version, or 0 if none."""
    await _ensure_migrations_table(db)
    cursor = await db.execute(
        "SELECT COALESCE(MAX(version), 0) FROM schema_migrations"
    )
    row = await cursor.fetchone()
    return int(row[0]) if row else 0


async def get_pending_migrations(db: aiosqlite.Connection) -> list[Migration]:
    """Return migrations that have not yet been applied."""
    current = await get_current_version(db)
    return [m for m in _MIGRATIONS if m.version > current]


async def run_migrations(
    db: aiosqlite.Connection, *, table_prefix: str = "wp_"
) -> list[Migration]:
    """Run all pending migrations in order and return those applied."""
    await _ensure_migrations_table(db)

    current = await get_current_version(db)
    applied: list[Migration] = []

    for migration in _MIGRATIONS:
        if migration.version <= current:
            continue

        logger.info(
            "Applying migration %03d: %s", migration.version, migration.name
        )

        await migration.func(db, table_prefix)

        await db.execute(
            "INSERT OR IGNORE INTO schema_migrations (version, name) VALUES (?, ?)",
            (migration.version, migration.name),
        )
        await db.commit()

        applied.append(migration)
        logger.info("Migration %03d applied successfully.", migration.version)

    return applied


# =========================================================================
# Migration 001 -- options table
# =========================================================================

# option_name is capped at 191 characters, the longest name a utf8mb4
# column can index on the platforms this table layout comes from.
_CREATE_OPTIONS = """
CREATE TABLE IF NOT EXISTS {table} (
    option_id INTEGER PRIMARY KEY AUTOINCREMENT,
    option_name VARCHAR(191) NOT NULL UNIQUE,
    option_value TEXT NOT NULL,
    autoload TEXT NOT NULL DEFAULT 'yes'
);
"""

_CREATE_OPTIONS_AUTOLOAD_INDEX = """
CREATE INDEX IF NOT EXISTS idx_{table}_autoload ON {table}(autoload);
"""


@_register(1, "options_table")
async def _migration_001(db: aiosqlite.Connection, table_prefix: str) -> None:
    table = f"{table_prefix}{TABLE_NAME_OPTIONS}"
    await db.execute(_CREATE_OPTIONS.format(table=table))
    await db.execute(_CREATE_OPTIONS_AUTOLOAD_INDEX.format(table=table))
