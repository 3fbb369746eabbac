# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for CachePoolFactory and settings-driven construction."""

from __future__ import annotations

import pytest

from transientcache.cache.factory import CachePoolFactory, create_factory_from_settings
from transientcache.cache.pool import CachePool
from transientcache.core.config import Settings
from transientcache.core.exceptions import NamingSchemeError
from transientcache.storage.backend import DatabaseBackend
from transientcache.storage.options_store import OptionsTransientStore


class TestCachePoolFactory:
    def test_creates_named_pool(self, factory: CachePoolFactory) -> None:
        pool = factory.create_cache_pool("plugin")
        assert isinstance(pool, CachePool)
        assert pool.pool_name == "plugin"

    def test_each_pool_gets_its_own_sentinel(self, factory: CachePoolFactory) -> None:
        first = factory.create_cache_pool("p")
        second = factory.create_cache_pool("p")

        assert first._default_value != second._default_value
        assert first._default_value.startswith("default")
        assert len(first._default_value) > len("default") + 16

    def test_reserved_name_propagates(self, factory: CachePoolFactory) -> None:
        with pytest.raises(NamingSchemeError):
            factory.create_cache_pool("timeout_")

    async def test_default_ttl_is_passed_to_pools(
        self, store: OptionsTransientStore, clock
    ) -> None:
        pool = CachePoolFactory(store, default_ttl=45).create_cache_pool("p")
        await pool.set("k", "v")
        assert await store.option_get("_transient_timeout_p/k") == int(clock.now) + 45


class TestCreateFactoryFromSettings:
    async def test_uses_settings(self, backend: DatabaseBackend) -> None:
        settings = Settings(table_prefix="wp_", default_ttl=120)
        factory = create_factory_from_settings(backend, settings)
        pool = factory.create_cache_pool("p")

        await pool.set("k", "v")

        assert await pool.get("k") == "v"
        row = await backend.fetch_one(
            "SELECT option_value FROM wp_options WHERE option_name = ?",
            ("_transient_timeout_p/k",),
        )
        assert row is not None

    async def test_reads_environment(
        self, backend: DatabaseBackend, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TRANSIENTCACHE_DEFAULT_TTL", "0")
        monkeypatch.setenv("TRANSIENTCACHE_TABLE_PREFIX", "wp_")
        pool = create_factory_from_settings(backend).create_cache_pool("env")

        await pool.set("k", [1, 2])
        assert await pool.get("k") == [1, 2]
