# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Abstract database backend interface for pluggable storage engines.

The options store talks to the database only through this interface, so a
different engine can be plugged in without touching the cache pool.
"""

from __future__ import annotations

import abc
from typing import Any


class DatabaseBackend(abc.ABC):
    """Abstract base class for async database backends."""

    # ------------------------------------------------------------------
    # Query execution
    # ------------------------------------------------------------------

    @abc.abstractmethod
    async def execute(self, query: str, params: tuple[Any, ...] | None = None) -> Any:
        """Execute a single SQL statement.

        Args:
            query: SQL query string with ``?`` placeholders.
            params: Optional tuple of bind parameters.

        Returns:
            A backend-specific cursor/result object.
        """

    @abc.abstractmethod
    async def executemany(
        self,
        query: str,
        params_seq: list[tuple[Any, ...]],
    ) -> None:
        """Execute a SQL statement for each parameter set in *params_seq*."""

    @abc.abstractmethod
    async def fetch_one(
        self, query: str, params: tuple[Any, ...] | None = None
    ) -> dict[str, Any] | None:
        """Execute a query and return the first row as a dict, or ``None``."""

    @abc.abstractmethod
    async def fetch_all(
        self, query: str, params: tuple[Any, ...] | None = None
    ) -> list[dict[str, Any]]:
        """Execute a query and return all rows as a list of dicts."""

    # ------------------------------------------------------------------
    # Transaction / connection lifecycle
    # ------------------------------------------------------------------

    @abc.abstractmethod
    async def commit(self) -> None:
        """Commit the current transaction."""

    @abc.abstractmethod
    async def rollback(self) -> None:
        """Roll back the current transaction."""

    @abc.abstractmethod
    async def close(self) -> None:
        """Release the underlying connection."""

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @property
    @abc.abstractmethod
    def backend_name(self) -> str:
        """Return the engine name, e.g. ``'sqlite'``."""
