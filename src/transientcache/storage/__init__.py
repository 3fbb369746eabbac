# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Storage layer -- database backends, migrations, and the transient store."""

from transientcache.storage.backend import DatabaseBackend
from transientcache.storage.database import close_db, get_backend, get_db, init_backend, init_db
from transientcache.storage.migrations import run_migrations
from transientcache.storage.options_store import OptionsTransientStore
from transientcache.storage.transients import TransientStore

__all__ = [
    "DatabaseBackend",
    "OptionsTransientStore",
    "TransientStore",
    "close_db",
    "get_backend",
    "get_db",
    "init_backend",
    "init_db",
    "run_migrations",
]
