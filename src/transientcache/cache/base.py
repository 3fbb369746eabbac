# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Abstract cache interface with TTL support."""

from __future__ import annotations

import abc
from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Any

Ttl = int | timedelta | None


class CacheInterface(abc.ABC):
    """Abstract base class for caches.

    Keys are strings.  A ``ttl`` is a number of seconds, a
    :class:`~datetime.timedelta`, or ``None`` for the cache's default.
    """

    @abc.abstractmethod
    async def get(self, key: str, default: Any = None) -> Any:
        """Retrieve a cached value by key.

        Returns:
            The cached value, or *default* if the key does not exist or
            has expired.
        """

    @abc.abstractmethod
    async def set(self, key: str, value: Any, ttl: Ttl = None) -> None:
        """Store a value in the cache."""

    @abc.abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a key from the cache."""

    @abc.abstractmethod
    async def clear(self) -> None:
        """Delete every key of this cache."""

    @abc.abstractmethod
    async def get_multiple(self, keys: Iterable[str], default: Any = None) -> dict[str, Any]:
        """Retrieve several values, keyed by cache key."""

    @abc.abstractmethod
    async def set_multiple(
        self, values: Mapping[str, Any] | Iterable[tuple[str, Any]], ttl: Ttl = None
    ) -> None:
        """Store several key/value pairs."""

    @abc.abstractmethod
    async def delete_multiple(self, keys: Iterable[str]) -> None:
        """Delete several keys."""

    @abc.abstractmethod
    async def has(self, key: str) -> bool:
        """Check whether a key is present in the cache."""
