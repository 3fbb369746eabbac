# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for the storage layer: database lifecycle, migrations, and the options store."""

from __future__ import annotations

import pytest

from transientcache.core.exceptions import ConfigurationError, StorageError
from transientcache.storage.backend import DatabaseBackend
from transientcache.storage.database import (
    close_db,
    get_backend,
    get_db,
    init_backend,
    init_db,
)
from transientcache.storage.migrations import (
    get_current_version,
    get_pending_migrations,
    run_migrations,
)
from transientcache.storage.options_store import OptionsTransientStore

# ---------------------------------------------------------------------------
# Database lifecycle
# ---------------------------------------------------------------------------


class TestDatabase:
    async def test_get_db_before_init_raises(self) -> None:
        with pytest.raises(StorageError):
            await get_db()

    async def test_get_backend_before_init_raises(self) -> None:
        with pytest.raises(StorageError):
            await get_backend()

    async def test_init_backend_is_cached(self, backend: DatabaseBackend) -> None:
        assert await get_backend() is backend
        assert await init_backend(db_path=":memory:") is backend
        assert backend.backend_name == "sqlite"

    async def test_unknown_backend(self) -> None:
        with pytest.raises(ConfigurationError, match="postgres"):
            await init_backend(backend="postgres", db_path=":memory:")

    async def test_unopenable_path(self, tmp_path) -> None:
        with pytest.raises(StorageError, match="Failed to initialize"):
            await init_db(tmp_path / "missing" / "dir" / "cache.db")

    async def test_file_database_persists(self, tmp_path) -> None:
        path = tmp_path / "cache.db"
        store = OptionsTransientStore(await init_backend(db_path=path))
        await store.transient_set("p/k", "v")
        await close_db()

        store = OptionsTransientStore(await init_backend(db_path=path))
        assert await store.transient_get("p/k") == "v"
        await close_db()


# ---------------------------------------------------------------------------
# Migrations
# ---------------------------------------------------------------------------


class TestMigrations:
    async def test_options_table_created(self, backend: DatabaseBackend) -> None:
        rows = await backend.fetch_all("PRAGMA table_info(wp_options)")
        columns = {r["name"] for r in rows}
        assert columns == {"option_id", "option_name", "option_value", "autoload"}

    async def test_version_recorded(self) -> None:
        db = await init_db(":memory:")
        assert await get_current_version(db) == 1
        assert await get_pending_migrations(db) == []
        await close_db()

    async def test_rerun_is_noop(self) -> None:
        db = await init_db(":memory:")
        assert await run_migrations(db) == []
        await close_db()

    async def test_custom_table_prefix(self) -> None:
        backend = await init_backend(db_path=":memory:", table_prefix="tc_")
        row = await backend.fetch_one(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
            ("tc_options",),
        )
        assert row is not None
        await close_db()

    async def test_without_auto_migrate(self) -> None:
        db = await init_db(":memory:", auto_migrate=False)
        pending = await get_pending_migrations(db)
        assert [m.version for m in pending] == [1]

        applied = await run_migrations(db)
        assert [m.name for m in applied] == ["options_table"]
        await close_db()

    async def test_option_name_is_unique(self, backend: DatabaseBackend) -> None:
        await backend.execute(
            "INSERT INTO wp_options (option_name, option_value) VALUES (?, ?)", ("a", "1")
        )
        with pytest.raises(Exception, match="UNIQUE"):
            await backend.execute(
                "INSERT INTO wp_options (option_name, option_value) VALUES (?, ?)", ("a", "2")
            )


# ---------------------------------------------------------------------------
# OptionsTransientStore
# ---------------------------------------------------------------------------


class TestOptionsTransientStore:
    async def test_missing_transient_is_false(self, store: OptionsTransientStore) -> None:
        assert await store.transient_get("nope") is False

    async def test_set_get(self, store: OptionsTransientStore) -> None:
        assert await store.transient_set("p/k", {"a": [1, 2]}) is True
        assert await store.transient_get("p/k") == {"a": [1, 2]}

    async def test_records_layout(
        self, store: OptionsTransientStore, backend: DatabaseBackend, clock
    ) -> None:
        await store.transient_set("p/k", "v", 30)
        rows = await backend.fetch_all(
            "SELECT option_name, option_value, autoload FROM wp_options ORDER BY option_name"
        )
        assert rows == [
            {"option_name": "_transient_p/k", "option_value": '"v"', "autoload": "no"},
            {
                "option_name": "_transient_timeout_p/k",
                "option_value": str(int(clock.now) + 30),
                "autoload": "no",
            },
        ]

    async def test_non_expiring_transient_autoloads(
        self, store: OptionsTransientStore, backend: DatabaseBackend
    ) -> None:
        await store.transient_set("p/k", "v")
        row = await backend.fetch_one("SELECT autoload FROM wp_options")
        assert row == {"autoload": "yes"}

    async def test_expired_transient_is_removed_on_read(
        self, store: OptionsTransientStore, clock
    ) -> None:
        await store.transient_set("p/k", "v", 10)
        clock.advance(11)

        assert await store.transient_get("p/k") is False
        assert await store.option_get("_transient_p/k") is None
        assert await store.option_get("_transient_timeout_p/k") is None

    async def test_transient_valid_until_timeout(
        self, store: OptionsTransientStore, clock
    ) -> None:
        await store.transient_set("p/k", "v", 10)
        clock.advance(10)
        assert await store.transient_get("p/k") == "v"

    async def test_delete(self, store: OptionsTransientStore) -> None:
        await store.transient_set("p/k", "v", 10)

        assert await store.transient_delete("p/k") is True
        assert await store.transient_delete("p/k") is False
        assert await store.option_get("_transient_timeout_p/k") is None

    async def test_unserialisable_value(self, store: OptionsTransientStore) -> None:
        assert await store.transient_set("p/k", {1, 2}) is False
        assert await store.option_get("_transient_p/k") is None

    async def test_option_get_default(self, store: OptionsTransientStore) -> None:
        assert await store.option_get("missing", "dflt") == "dflt"

    async def test_corrupt_option_value(
        self, store: OptionsTransientStore, backend: DatabaseBackend
    ) -> None:
        await backend.execute(
            "INSERT INTO wp_options (option_name, option_value) VALUES (?, ?)",
            ("_transient_p/bad", "{not json"),
        )
        with pytest.raises(StorageError, match="not valid JSON"):
            await store.transient_get("p/bad")

    async def test_table_name(self, backend: DatabaseBackend) -> None:
        assert OptionsTransientStore(backend).table_name("options") == "wp_options"
        assert OptionsTransientStore(backend, table_prefix="x_").table_name("options") == "x_options"

    async def test_select_column(self, store: OptionsTransientStore) -> None:
        await store.transient_set("p/a", 1)
        await store.transient_set("p/b", 2)

        names = await store.select_column(
            "SELECT option_name FROM wp_options WHERE option_value = ?", "option_name", ("2",)
        )
        assert names == ["_transient_p/b"]

    async def test_delete_expired(self, store: OptionsTransientStore, clock) -> None:
        await store.transient_set("p/short", "v", 10)
        await store.transient_set("p/long", "v", 1000)
        await store.transient_set("q/forever", "v")
        clock.advance(60)

        assert await store.delete_expired() == 1
        assert await store.option_get("_transient_p/short") is None
        assert await store.option_get("_transient_timeout_p/short") is None
        assert await store.transient_get("p/long") == "v"
        assert await store.transient_get("q/forever") == "v"

    @pytest.mark.parametrize("raw", ['"hello"', "true", "[5]", '"12abc"'])
    async def test_malformed_timeout_on_read(
        self, store: OptionsTransientStore, backend: DatabaseBackend, raw: str
    ) -> None:
        await store.transient_set("p/k", "v")
        await backend.execute(
            "INSERT INTO wp_options (option_name, option_value) VALUES (?, ?)",
            ("_transient_timeout_p/k", raw),
        )
        with pytest.raises(StorageError, match="not a timestamp"):
            await store.transient_get("p/k")

    async def test_malformed_timeout_on_purge(
        self, store: OptionsTransientStore, backend: DatabaseBackend, clock
    ) -> None:
        await store.transient_set("p/k", "keep")
        await store.transient_set("q/old", "v", 10)
        await backend.execute(
            "INSERT INTO wp_options (option_name, option_value) VALUES (?, ?)",
            ("_transient_timeout_p/k", '"hello"'),
        )
        clock.advance(60)

        with pytest.raises(StorageError, match="not a timestamp"):
            await store.delete_expired()
        assert await store.option_get("_transient_p/k") == "keep"

    async def test_string_timeout_is_accepted(
        self, store: OptionsTransientStore, backend: DatabaseBackend, clock
    ) -> None:
        await store.transient_set("p/k", "v")
        await backend.execute(
            "INSERT INTO wp_options (option_name, option_value) VALUES (?, ?)",
            ("_transient_timeout_p/k", f'"{int(clock.now) + 10}"'),
        )
        assert await store.transient_get("p/k") == "v"
        clock.advance(11)
        assert await store.delete_expired() == 1

    async def test_delete_expired_nothing_to_do(self, store: OptionsTransientStore) -> None:
        await store.transient_set("p/k", "v")
        assert await store.delete_expired() == 0
