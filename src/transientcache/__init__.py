# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""transientcache - Namespaced TTL-aware cache pools over an options table."""

__version__ = "0.1.0"

from transientcache.cache import CacheInterface, CachePool, CachePoolFactory
from transientcache.core.exceptions import (
    CacheError,
    InvalidArgumentError,
    NamingSchemeError,
    TransientCacheError,
)
from transientcache.storage import OptionsTransientStore, TransientStore

__all__ = [
    "CacheError",
    "CacheInterface",
    "CachePool",
    "CachePoolFactory",
    "InvalidArgumentError",
    "NamingSchemeError",
    "OptionsTransientStore",
    "TransientCacheError",
    "TransientStore",
    "__version__",
]
