# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Cache pool CLI commands."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Annotated, Any, TypeVar

import typer

from transientcache.core.exceptions import TransientCacheError

if TYPE_CHECKING:
    from transientcache.cache.pool import CachePool
    from transientcache.storage.transients import TransientStore

app = typer.Typer()

T = TypeVar("T")

_MISSING = object()


@asynccontextmanager
async def _open_store() -> AsyncIterator[TransientStore]:
    from transientcache.core.config import get_settings
    from transientcache.storage.database import close_db, init_backend
    from transientcache.storage.options_store import OptionsTransientStore

    settings = get_settings()
    backend = await init_backend(
        backend=settings.db_backend,
        db_path=settings.db_path,
        table_prefix=settings.table_prefix,
        auto_migrate=settings.auto_migrate,
    )
    try:
        yield OptionsTransientStore(backend, table_prefix=settings.table_prefix)
    finally:
        await close_db()


@asynccontextmanager
async def _open_pool(pool_name: str) -> AsyncIterator[CachePool]:
    from transientcache.cache.factory import CachePoolFactory
    from transientcache.core.config import get_settings

    settings = get_settings()
    async with _open_store() as store:
        factory = CachePoolFactory(store, default_ttl=settings.default_ttl)
        yield factory.create_cache_pool(pool_name)


def _run(coro: Awaitable[T]) -> T:
    """Run *coro*, turning library errors into a message and exit code 1."""
    try:
        return asyncio.run(coro)  # type: ignore[arg-type]
    except TransientCacheError as exc:
        message = str(exc)
        if exc.__cause__ is not None:
            message = f"{message}: {exc.__cause__}"
        typer.echo(f"Error: {message}", err=True)
        raise typer.Exit(1) from exc


def _format_value(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


async def _with_pool(pool_name: str, action: Callable[[CachePool], Awaitable[T]]) -> T:
    async with _open_pool(pool_name) as pool:
        return await action(pool)


@app.command()
def get(
    pool: Annotated[str, typer.Argument(help="Cache pool name")],
    key: Annotated[str, typer.Argument(help="Cache key")],
    default: Annotated[
        str | None, typer.Option("--default", "-d", help="Value to print on a miss")
    ] = None,
) -> None:
    """Print the value cached under KEY."""
    value = _run(_with_pool(pool, lambda p: p.get(key, _MISSING)))

    if value is _MISSING:
        if default is None:
            typer.echo(f"Key {key!r} not found in pool {pool!r}.", err=True)
            raise typer.Exit(1)
        value = default

    typer.echo(_format_value(value))


@app.command(name="set")
def set_(
    pool: Annotated[str, typer.Argument(help="Cache pool name")],
    key: Annotated[str, typer.Argument(help="Cache key")],
    value: Annotated[str, typer.Argument(help="Value to store")],
    ttl: Annotated[
        int | None,
        typer.Option("--ttl", help="Time-to-live in seconds (0 = never expires)"),
    ] = None,
    as_json: Annotated[
        bool, typer.Option("--json", help="Parse VALUE as JSON before storing")
    ] = False,
) -> None:
    """Store VALUE under KEY."""
    parsed: Any = value
    if as_json:
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"VALUE is not valid JSON: {exc}") from exc

    _run(_with_pool(pool, lambda p: p.set(key, parsed, ttl)))
    typer.echo(f"Stored {key!r} in pool {pool!r}.")


@app.command()
def delete(
    pool: Annotated[str, typer.Argument(help="Cache pool name")],
    key: Annotated[str, typer.Argument(help="Cache key")],
) -> None:
    """Delete KEY from the pool."""
    _run(_with_pool(pool, lambda p: p.delete(key)))
    typer.echo(f"Deleted {key!r} from pool {pool!r}.")


@app.command()
def has(
    pool: Annotated[str, typer.Argument(help="Cache pool name")],
    key: Annotated[str, typer.Argument(help="Cache key")],
) -> None:
    """Exit with 0 if KEY is present in the pool, 1 otherwise."""
    present = _run(_with_pool(pool, lambda p: p.has(key)))
    typer.echo("yes" if present else "no")
    if not present:
        raise typer.Exit(1)


@app.command()
def keys(
    pool: Annotated[str, typer.Argument(help="Cache pool name")],
) -> None:
    """List every key stored in the pool."""
    from rich.console import Console
    from rich.table import Table

    pool_keys = _run(_with_pool(pool, lambda p: p.keys()))

    console = Console()
    if not pool_keys:
        console.print(f"[yellow]Pool {pool!r} is empty.[/yellow]")
        return

    table = Table(title=f"Cache pool {pool}")
    table.add_column("Key", style="cyan")
    for key in sorted(pool_keys):
        table.add_row(key)

    console.print(table)
    console.print(f"{len(pool_keys)} key(s)")


@app.command()
def clear(
    pool: Annotated[str, typer.Argument(help="Cache pool name")],
) -> None:
    """Delete every key stored in the pool."""
    _run(_with_pool(pool, lambda p: p.clear()))
    typer.echo(f"Cache pool {pool!r} cleared.")


@app.command()
def purge() -> None:
    """Delete every expired transient, in all pools."""
    count = _run(_async_purge())
    typer.echo(f"Purged {count} expired entries.")


async def _async_purge() -> int:
    async with _open_store() as store:
        return await store.delete_expired()
