# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest

from transientcache.cache.factory import CachePoolFactory
from transientcache.cache.pool import CachePool
from transientcache.storage.backend import DatabaseBackend
from transientcache.storage.options_store import OptionsTransientStore


class FakeClock:
    """Controllable replacement for :func:`time.time`."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _reset_database():
    """Forget the module-level connection so each test opens a fresh one."""
    import transientcache.storage.database as db_mod

    db_mod._db = None
    db_mod._backend = None
    yield
    db_mod._db = None
    db_mod._backend = None


@pytest.fixture
async def backend():
    """An in-memory SQLite backend with the options table migrated."""
    from transientcache.storage.database import close_db, init_backend

    yield await init_backend(db_path=":memory:")
    await close_db()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(backend: DatabaseBackend, clock: FakeClock) -> OptionsTransientStore:
    return OptionsTransientStore(backend, clock=clock)


@pytest.fixture
def factory(store: OptionsTransientStore) -> CachePoolFactory:
    return CachePoolFactory(store)


@pytest.fixture
def pool(factory: CachePoolFactory) -> CachePool:
    return factory.create_cache_pool("p")
