"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the process-wide connection pool. The pool is created
lazily by the first caller that needs it and reused for the life of the
process; FastAPI closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import asyncpg

from . import settings

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id            SERIAL PRIMARY KEY,
    name          TEXT,
    email         TEXT NOT NULL,
    password_hash TEXT NOT NULL,
    created_at    TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at    TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE UNIQUE INDEX IF NOT EXISTS users_email_lower_idx ON users (lower(email));

CREATE TABLE IF NOT EXISTS posts (
    id         SERIAL PRIMARY KEY,
    title      TEXT NOT NULL,
    content    TEXT NOT NULL,
    author_id  INTEGER REFERENCES users (id),
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS posts_created_at_idx ON posts (created_at DESC);
"""

# Upper bound of SERIAL (int4) ids.
MAX_SERIAL_ID = 2**31 - 1

_pool: asyncpg.Pool | None = None
_initialized_by: str | None = None
_init_lock: asyncio.Lock | None = None


def is_initialized() -> bool:
    return _pool is not None


def initialized_by() -> str | None:
    return _initialized_by if _pool is not None else None


def _lock() -> asyncio.Lock:
    global _init_lock
    if _init_lock is None:
        _init_lock = asyncio.Lock()
    return _init_lock


async def ensure_pool(initialized_by: str = "request") -> asyncpg.Pool:
    """
    Return the cached pool, creating it (and the schema) on first use.

    Concurrent first callers wait on one lock, so at most one pool is
    ever created per process.
    """
    global _pool, _initialized_by
    if _pool is not None:
        return _pool

    async with _lock():
        if _pool is not None:
            return _pool

        logger.info("db_init_start chosen_env=%s by=%s", settings.chosen_database_env(), initialized_by)
        dsn = settings.database_url()
        pool = await asyncpg.create_pool(
            dsn=dsn,
            min_size=1,
            max_size=5,
            command_timeout=30,
        )
        try:
            await pool.execute(SCHEMA_SQL)
        except Exception:
            await pool.close()
            raise

        _pool = pool
        _initialized_by = initialized_by
        logger.info("db_init_done by=%s", initialized_by)
        return _pool


async def close_pool() -> None:
    global _pool, _initialized_by, _init_lock
    if _pool is None:
        return None
    await _pool.close()
    _pool = None
    _initialized_by = None
    _init_lock = None
    logger.info("db_pool_closed")


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    pool = await ensure_pool()
    row = await pool.fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    pool = await ensure_pool()
    rows = await pool.fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def fetch_val(sql: str, *args: Any) -> Any:
    pool = await ensure_pool()
    return await pool.fetchval(sql, *args)


async def execute(sql: str, *args: Any) -> None:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL). No result returned.
    """
    pool = await ensure_pool()
    await pool.execute(sql, *args)
