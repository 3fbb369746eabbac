# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Namespaced, TTL-aware cache pools stored as transients."""

from transientcache.cache.base import CacheInterface
from transientcache.cache.factory import CachePoolFactory, create_factory_from_settings
from transientcache.cache.pool import CachePool

__all__ = ["CacheInterface", "CachePool", "CachePoolFactory", "create_factory_from_settings"]
