# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Transient store backed by an ``options`` table.

Each transient ``name`` is kept as two options:

* ``_transient_<name>`` holds the JSON-encoded value.
* ``_transient_timeout_<name>`` holds the UNIX timestamp after which the
  value is stale.  It is absent for transients that never expire.

Expiry is enforced lazily on read, and in bulk by :meth:`delete_expired`.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from typing import Any

from transientcache.core.constants import (
    FIELD_NAME_OPTION_NAME,
    FIELD_NAME_OPTION_VALUE,
    OPTION_NAME_PREFIX_TIMEOUT,
    OPTION_NAME_PREFIX_TRANSIENT,
    TABLE_NAME_OPTIONS,
)
from transientcache.core.exceptions import StorageError
from transientcache.storage.backend import DatabaseBackend
from transientcache.storage.transients import TransientStore

logger = logging.getLogger("transientcache.storage.options_store")

_VALUE_PREFIX = OPTION_NAME_PREFIX_TRANSIENT
_TIMEOUT_PREFIX = OPTION_NAME_PREFIX_TRANSIENT + OPTION_NAME_PREFIX_TIMEOUT


class OptionsTransientStore(TransientStore):
    """:class:`TransientStore` over the ``<prefix>options`` table.

    Args:
        backend: The database backend holding the options table.
        table_prefix: Prefix of the options table name.
        clock: Returns the current UNIX time; replaceable in tests.
    """

    def __init__(
        self,
        backend: DatabaseBackend,
        table_prefix: str = "wp_",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._backend = backend
        self._table_prefix = table_prefix
        self._clock = clock

    # ------------------------------------------------------------------
    # Transients
    # ------------------------------------------------------------------

    async def transient_get(self, name: str) -> Any:
        timeout = await self.option_get(f"{_TIMEOUT_PREFIX}{name}")
        if timeout is not None and self._as_timestamp(timeout) < self._clock():
            logger.debug("Transient %s expired at %s", name, timeout)
            await self.transient_delete(name)
            return False

        return await self.option_get(f"{_VALUE_PREFIX}{name}", False)

    async def transient_set(self, name: str, value: Any, ttl: int = 0) -> bool:
        try:
            encoded = json.dumps(value)
        except (TypeError, ValueError):
            logger.warning("Value for transient %s is not JSON-serialisable", name)
            return False

        value_name = f"{_VALUE_PREFIX}{name}"
        timeout_name = f"{_TIMEOUT_PREFIX}{name}"
        try:
            if ttl:
                expires_at = int(self._clock()) + ttl
                await self._upsert_option(timeout_name, json.dumps(expires_at), autoload="no")
                await self._upsert_option(value_name, encoded, autoload="no")
            else:
                await self._delete_option(timeout_name)
                await self._upsert_option(value_name, encoded, autoload="yes")
            await self._backend.commit()
        except Exception:
            logger.exception("Could not write transient %s", name)
            await self._backend.rollback()
            return False
        return True

    async def transient_delete(self, name: str) -> bool:
        try:
            deleted = await self._delete_option(f"{_VALUE_PREFIX}{name}")
            if deleted:
                await self._delete_option(f"{_TIMEOUT_PREFIX}{name}")
            await self._backend.commit()
        except Exception:
            logger.exception("Could not delete transient %s", name)
            await self._backend.rollback()
            return False
        return deleted

    async def delete_expired(self) -> int:
        rows = await self._backend.fetch_all(
            f"SELECT {FIELD_NAME_OPTION_NAME}, {FIELD_NAME_OPTION_VALUE} "  # noqa: S608
            f"FROM {self._options_table} "
            f"WHERE substr({FIELD_NAME_OPTION_NAME}, 1, ?) = ?",
            (len(_TIMEOUT_PREFIX), _TIMEOUT_PREFIX),
        )
        now = self._clock()
        expired = [
            row[FIELD_NAME_OPTION_NAME][len(_TIMEOUT_PREFIX):]
            for row in rows
            if self._as_timestamp(self._decode(row[FIELD_NAME_OPTION_VALUE])) < now
        ]
        if not expired:
            return 0

        params = [(f"{_VALUE_PREFIX}{n}",) for n in expired]
        params += [(f"{_TIMEOUT_PREFIX}{n}",) for n in expired]
        await self._backend.executemany(
            f"DELETE FROM {self._options_table} WHERE {FIELD_NAME_OPTION_NAME} = ?",  # noqa: S608
            params,
        )
        await self._backend.commit()
        logger.info("Deleted %d expired transients", len(expired))
        return len(expired)

    # ------------------------------------------------------------------
    # Options and queries
    # ------------------------------------------------------------------

    async def option_get(self, name: str, default: Any = None) -> Any:
        row = await self._backend.fetch_one(
            f"SELECT {FIELD_NAME_OPTION_VALUE} FROM {self._options_table} "  # noqa: S608
            f"WHERE {FIELD_NAME_OPTION_NAME} = ?",
            (name,),
        )
        if row is None:
            return default
        return self._decode(row[FIELD_NAME_OPTION_VALUE])

    async def select_column(
        self, query: str, column: str, params: tuple[Any, ...] = ()
    ) -> list[Any]:
        rows = await self._backend.fetch_all(query, params)
        return [row[column] for row in rows]

    def table_name(self, identifier: str) -> str:
        return f"{self._table_prefix}{identifier}"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def _options_table(self) -> str:
        return self.table_name(TABLE_NAME_OPTIONS)

    async def _upsert_option(self, name: str, encoded: str, autoload: str) -> None:
        await self._backend.execute(
            f"INSERT INTO {self._options_table} "  # noqa: S608
            f"({FIELD_NAME_OPTION_NAME}, {FIELD_NAME_OPTION_VALUE}, autoload) "
            "VALUES (?, ?, ?) "
            f"ON CONFLICT({FIELD_NAME_OPTION_NAME}) DO UPDATE SET "
            f"{FIELD_NAME_OPTION_VALUE} = excluded.{FIELD_NAME_OPTION_VALUE}, "
            "autoload = excluded.autoload",
            (name, encoded, autoload),
        )

    async def _delete_option(self, name: str) -> bool:
        cursor = await self._backend.execute(
            f"DELETE FROM {self._options_table} WHERE {FIELD_NAME_OPTION_NAME} = ?",  # noqa: S608
            (name,),
        )
        return cursor.rowcount > 0

    @staticmethod
    def _decode(raw: str) -> Any:
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            msg = f"Stored option value is not valid JSON: {exc}"
            raise StorageError(msg) from exc

    @staticmethod
    def _as_timestamp(value: Any) -> int:
        msg = f"Stored transient timeout is not a timestamp: {value!r}"
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise StorageError(msg)
        try:
            return int(value)
        except ValueError as exc:
            raise StorageError(msg) from exc
