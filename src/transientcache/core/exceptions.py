# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Custom exception hierarchy for transientcache."""


class TransientCacheError(Exception):
    """Base exception for all transientcache errors."""


class ConfigurationError(TransientCacheError):
    """Invalid or missing configuration."""


class StorageError(TransientCacheError):
    """Database or storage operation failed."""


class CacheError(TransientCacheError):
    """A cache operation could not be completed."""


class InvalidArgumentError(CacheError, ValueError):
    """A cache key, TTL, or batch argument is malformed."""


class NamingSchemeError(TransientCacheError, ValueError):
    """A pool name or option name violates the transient naming scheme."""
