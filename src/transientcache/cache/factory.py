# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Factory producing :class:`CachePool` instances that share one store."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from transientcache.cache.base import Ttl
from transientcache.cache.pool import CachePool
from transientcache.core.constants import TTL_NO_EXPIRATION
from transientcache.storage.options_store import OptionsTransientStore
from transientcache.storage.transients import TransientStore

if TYPE_CHECKING:
    from transientcache.core.config import Settings
    from transientcache.storage.backend import DatabaseBackend


class CachePoolFactory:
    """Creates cache pools over a shared :class:`TransientStore`.

    Pool names are not checked for uniqueness: two pools created with the
    same name read and write the same entries.

    Args:
        store: The transient store every pool will use.
        default_ttl: TTL applied by the pools when ``set`` gets ``ttl=None``.
    """

    def __init__(self, store: TransientStore, default_ttl: Ttl = TTL_NO_EXPIRATION) -> None:
        self._store = store
        self._default_ttl = default_ttl

    def create_cache_pool(self, pool_name: str) -> CachePool:
        """Return a new pool named *pool_name* with its own sentinel value."""
        default = f"default{uuid.uuid4().hex}"
        return CachePool(self._store, pool_name, default, self._default_ttl)


def create_factory_from_settings(
    backend: DatabaseBackend, settings: Settings | None = None
) -> CachePoolFactory:
    """Build a factory over the options table of *backend* using application settings."""
    if settings is None:
        from transientcache.core.config import get_settings

        settings = get_settings()

    store = OptionsTransientStore(backend, table_prefix=settings.table_prefix)
    return CachePoolFactory(store, default_ttl=settings.default_ttl)
