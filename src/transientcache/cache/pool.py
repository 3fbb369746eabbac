# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Cache pool stored as transients in an options table.

A :class:`CachePool` namespaces every caller key as ``<pool>/<key>`` and
keeps it as a transient, i.e. as the options ``_transient_<pool>/<key>``
(the value) and ``_transient_timeout_<pool>/<key>`` (the expiry, if any).

The transient API reports a miss as ``False``, so a stored ``False`` looks
like a miss.  When that happens the pool looks up the value option
directly, with a per-pool random sentinel as the default: getting the
sentinel back means the entry is really absent.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from transientcache.cache.base import CacheInterface, Ttl
from transientcache.core.constants import (
    FIELD_NAME_OPTION_NAME,
    NAMESPACE_SEPARATOR,
    OPTION_NAME_MAX_LENGTH,
    OPTION_NAME_PREFIX_TIMEOUT,
    OPTION_NAME_PREFIX_TRANSIENT,
    RESERVED_KEY_SYMBOLS,
    TABLE_NAME_OPTIONS,
    TTL_NO_EXPIRATION,
)
from transientcache.core.exceptions import CacheError, InvalidArgumentError, NamingSchemeError
from transientcache.storage.transients import TransientStore

logger = logging.getLogger("transientcache.cache.pool")


class CachePool(CacheInterface):
    """A named cache namespace on top of a :class:`TransientStore`.

    The pool holds no data of its own; every operation goes straight to the
    store.

    Args:
        store: The transient store holding the entries.
        pool_name: Name of this pool.  Must be unique to this instance.
        default_value: A random value used to detect false negatives.  The
            more chaotic, the better.
        default_ttl: TTL applied when :meth:`set` gets ``ttl=None``.
    """

    def __init__(
        self,
        store: TransientStore,
        pool_name: str,
        default_value: str,
        default_ttl: Ttl = TTL_NO_EXPIRATION,
    ) -> None:
        if not isinstance(pool_name, str):
            raise NamingSchemeError(f"Pool name must be a string, got {type(pool_name).__name__}")
        # "timeout_p/k" would be stored as "_transient_timeout_p/k", the timeout
        # record of key "k" in pool "p".
        if pool_name.startswith(OPTION_NAME_PREFIX_TIMEOUT):
            raise NamingSchemeError(
                f'Pool name "{pool_name}" cannot start with "{OPTION_NAME_PREFIX_TIMEOUT}"'
            )
        if NAMESPACE_SEPARATOR in pool_name:
            raise NamingSchemeError(
                f'Pool name "{pool_name}" must not contain "{NAMESPACE_SEPARATOR}"'
            )

        self._store = store
        self._pool_name = pool_name
        self._default_value = default_value
        self._default_ttl = default_ttl

    @property
    def pool_name(self) -> str:
        return self._pool_name

    # ------------------------------------------------------------------
    # Single-key operations
    # ------------------------------------------------------------------

    async def get(self, key: str, default: Any = None) -> Any:
        self._validate_key(key)
        value = await self._store.transient_get(self._prepare_key(key))

        if value is not False:
            logger.debug("Cache HIT for %s in pool %s", key, self._pool_name)
            return value

        if not await self._has_value_option(key):
            logger.debug("Cache MISS for %s in pool %s", key, self._pool_name)
            return default

        # The entry exists and its value really is False.
        return value

    async def set(self, key: str, value: Any, ttl: Ttl = None) -> None:
        self._validate_key(key)
        ttl = self._normalize_ttl(self._default_ttl if ttl is None else ttl)

        if not await self._store.transient_set(self._prepare_key(key), value, ttl):
            raise CacheError(f'Could not write value for key "{key}" to cache')

    async def delete(self, key: str) -> None:
        self._validate_key(key)

        if not await self._store.transient_delete(self._prepare_key(key)):
            raise CacheError(f'Could not delete cache for key "{key}"')

    async def has(self, key: str) -> bool:
        self._validate_key(key)
        return await self._has_value_option(key)

    async def clear(self) -> None:
        try:
            keys = await self.keys()
            await self.delete_multiple(keys)
        except Exception as exc:
            raise CacheError("Could not clear cache") from exc

        logger.info("Cleared %d entries from cache pool %s", len(keys), self._pool_name)

    async def keys(self) -> list[str]:
        """Return the caller keys of every entry stored in this pool.

        Raises:
            NamingSchemeError: If an option name returned by the store is
                not formed according to this pool.
        """
        prefix = self._option_name_prefix
        table = self._store.table_name(TABLE_NAME_OPTIONS)
        field = FIELD_NAME_OPTION_NAME
        query = f"SELECT {field} FROM {table} WHERE substr({field}, 1, ?) = ?"  # noqa: S608
        names = await self._store.select_column(query, field, (len(prefix), prefix))

        return [self._get_cache_key_from_option_name(name) for name in names]

    # ------------------------------------------------------------------
    # Batch operations
    # ------------------------------------------------------------------

    async def get_multiple(self, keys: Iterable[str], default: Any = None) -> dict[str, Any]:
        self._check_list(keys)

        entries: dict[str, Any] = {}
        for key in keys:
            entries[key] = await self.get(key, default)

        return entries

    async def set_multiple(
        self, values: Mapping[str, Any] | Iterable[tuple[str, Any]], ttl: Ttl = None
    ) -> None:
        self._check_list(values)

        if isinstance(ttl, timedelta):
            ttl = self._normalize_ttl(ttl)

        pairs = values.items() if isinstance(values, Mapping) else values
        for pair in pairs:
            try:
                key, value = pair
            except (TypeError, ValueError) as exc:
                raise InvalidArgumentError(f"Entry {pair!r} is not a key/value pair") from exc
            await self.set(key, value, ttl)

    async def delete_multiple(self, keys: Iterable[str]) -> None:
        self._check_list(keys)

        for key in keys:
            await self.delete(key)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _has_value_option(self, key: str) -> bool:
        """Look the value option up directly, bypassing expiry handling."""
        sentinel = self._default_value
        value = await self._store.option_get(f"{self._option_name_prefix}{key}", sentinel)

        return str(value) != sentinel

    def _validate_key(self, key: str) -> None:
        if not isinstance(key, str):
            raise InvalidArgumentError(f"Cache key must be a string, got {type(key).__name__}")

        prefix = self._timeout_option_name_prefix
        prefix_length = len(prefix.encode())
        if prefix_length + len(key.encode()) > OPTION_NAME_MAX_LENGTH:
            raise InvalidArgumentError(
                f"Given the {len(self._pool_name)} char length of this cache pool's name, "
                f"the key length must not exceed {OPTION_NAME_MAX_LENGTH - prefix_length} chars"
            )

        for symbol in RESERVED_KEY_SYMBOLS:
            if symbol in key:
                raise InvalidArgumentError(f'Cache key "{key}" is invalid')

    def _prepare_key(self, key: str) -> str:
        return f"{self._pool_name}{NAMESPACE_SEPARATOR}{key}"

    def _normalize_ttl(self, ttl: Ttl) -> int:
        if isinstance(ttl, timedelta):
            try:
                ttl = self._get_interval_duration(ttl)
            except Exception as exc:
                raise CacheError("Could not normalize cache TTL") from exc

        if ttl is None:
            ttl = TTL_NO_EXPIRATION

        # bool is an int subclass but never a meaningful TTL.
        if isinstance(ttl, bool) or not isinstance(ttl, int):
            raise InvalidArgumentError("The specified cache TTL is invalid")

        return ttl

    @staticmethod
    def _get_interval_duration(interval: timedelta) -> int:
        """Return the whole seconds between now and now + *interval*."""
        reference = datetime.now(UTC)
        end_time = reference + interval

        return int(end_time.timestamp()) - int(reference.timestamp())

    @staticmethod
    def _check_list(items: Any) -> None:
        if isinstance(items, (str, bytes)) or not isinstance(items, Iterable):
            raise InvalidArgumentError("List of keys is not a list")

    def _get_cache_key_from_option_name(self, name: str) -> str:
        prefix = self._option_name_prefix

        if not name.startswith(prefix):
            raise NamingSchemeError(
                f'Option name "{name}" is not formed according to this cache pool'
            )

        return name[len(prefix):]

    @property
    def _option_name_prefix(self) -> str:
        """Prefix of the value options of this pool, e.g. ``_transient_p/``."""
        return f"{OPTION_NAME_PREFIX_TRANSIENT}{self._pool_name}{NAMESPACE_SEPARATOR}"

    @property
    def _timeout_option_name_prefix(self) -> str:
        """Prefix of the timeout options of this pool, e.g. ``_transient_timeout_p/``."""
        transient_prefix = OPTION_NAME_PREFIX_TRANSIENT + OPTION_NAME_PREFIX_TIMEOUT
        return f"{transient_prefix}{self._pool_name}{NAMESPACE_SEPARATOR}"
