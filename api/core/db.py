"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Tables are referenced unqualified; the configured schema is put first on the
connection `search_path` when the pool is created.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

_pool: asyncpg.Pool | None = None


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def redact_database_url(url: str) -> str:
    """
    Hide the password part of a DSN so it can be logged.
    """
    parts = urlsplit(url or "")
    if not parts.password:
        return url or ""
    netloc = parts.netloc.replace(f":{parts.password}@", ":****@", 1)
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def database_url(raw: str) -> str:
    url = (raw or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


async def init_pool(dsn: str, *, schema: str) -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(dsn),
        min_size=1,
        max_size=10,
        command_timeout=30,
        server_settings={"search_path": f"{schema}, public"},
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any, conn: asyncpg.Connection | None = None) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).

    Pass `conn` to run inside an open transaction instead of on the pool.
    """
    row = await (conn or pool()).fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any, conn: asyncpg.Connection | None = None) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await (conn or pool()).fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def execute(sql: str, *args: Any, conn: asyncpg.Connection | None = None) -> str:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL). Returns the command status, e.g. "DELETE 1".
    """
    return await (conn or pool()).execute(sql, *args)


def rows_affected(status: str | None) -> int:
    tail = (status or "").rsplit(" ", 1)[-1]
    return int(tail) if tail.isdigit() else 0


@asynccontextmanager
async def transaction() -> AsyncIterator[asyncpg.Connection]:
    """
    Check out one connection and run the block in a transaction on it.

    Leaving the block normally commits; an exception rolls back and propagates.
    The connection goes back to the pool on every exit path.
    """
    async with pool().acquire() as conn:  # type: asyncpg.Connection
        async with conn.transaction():
            yield conn
