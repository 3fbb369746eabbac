# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Abstract transient store: the storage substrate consumed by cache pools.

A transient is a value stored under a name together with an optional
expiry that the store itself enforces.  Transients live in an options
table alongside plain options, which carry no expiry, so the same name can
be inspected through both views.
"""

from __future__ import annotations

import abc
from typing import Any


class TransientStore(abc.ABC):
    """Abstract base class for transient storage substrates.

    Reads follow the host platform convention: a missing transient is
    reported as ``False``, which is indistinguishable from a stored
    ``False``.  Callers that need to tell the two apart consult
    :meth:`option_get` on the value record's option name.
    """

    @abc.abstractmethod
    async def transient_get(self, name: str) -> Any:
        """Return the transient stored under *name*, or ``False``.

        Expired transients are removed and reported as ``False``.
        """

    @abc.abstractmethod
    async def transient_set(self, name: str, value: Any, ttl: int = 0) -> bool:
        """Store *value* under *name*.

        Args:
            name: Transient name (without the option prefix).
            value: JSON-serialisable value.
            ttl: Time-to-live in seconds.  ``0`` means no expiry.

        Returns:
            ``True`` if the value was written.
        """

    @abc.abstractmethod
    async def transient_delete(self, name: str) -> bool:
        """Delete the transient stored under *name*.

        Returns:
            ``True`` if a transient existed and was deleted.
        """

    @abc.abstractmethod
    async def option_get(self, name: str, default: Any = None) -> Any:
        """Return the option stored under the full option *name*, or *default*."""

    @abc.abstractmethod
    async def select_column(
        self, query: str, column: str, params: tuple[Any, ...] = ()
    ) -> list[Any]:
        """Run a read query and return the values of *column* for every row."""

    @abc.abstractmethod
    def table_name(self, identifier: str) -> str:
        """Return the real name of the table identified by *identifier*."""

    @abc.abstractmethod
    async def delete_expired(self) -> int:
        """Delete every expired transient and return how many were removed."""
