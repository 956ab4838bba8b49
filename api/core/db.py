"""
Async database access helpers (raw SQL) using asyncpg.

`Database` owns the connection pool. One instance is created per process in
the FastAPI lifespan (see `api/main.py`), stored on `app.state.db` and handed
to route handlers through the `get_db` dependency.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Pool-level connectivity loss is treated as fatal outside development: the
error is logged and the process exits so the supervisor can restart it.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from . import settings

logger = logging.getLogger(__name__)

# Errors that mean the server side of the pool is gone, not that a query was wrong.
POOL_FATAL_ERRORS: tuple[type[BaseException], ...] = (
    asyncpg.exceptions.ConnectionDoesNotExistError,
    asyncpg.exceptions.PostgresConnectionError,
    asyncpg.exceptions.AdminShutdownError,
    ConnectionError,
)


class DatabaseTimeoutError(TimeoutError):
    """
    No pooled connection became available within the acquire timeout.
    """


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def _exit_process() -> None:
    logging.shutdown()
    os._exit(1)


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Database:
    def __init__(
        self,
        dsn: str,
        *,
        connect_timeout: float = 10.0,
        acquire_timeout: float = 10.0,
        min_size: int = 1,
        max_size: int = 10,
        on_fatal: Callable[[], None] | None = None,
    ) -> None:
        self.dsn = _sanitize_database_url(dsn)
        self.connect_timeout = connect_timeout
        self.acquire_timeout = acquire_timeout
        self.min_size = min_size
        self.max_size = max_size
        self._on_fatal = on_fatal or _exit_process
        self._pool: asyncpg.Pool | None = None

    @classmethod
    def from_env(cls, **kwargs: Any) -> "Database":
        return cls(
            settings.database_url(),
            connect_timeout=settings.db_connect_timeout_s(),
            acquire_timeout=settings.db_acquire_timeout_s(),
            min_size=settings.db_pool_min_size(),
            max_size=settings.db_pool_max_size(),
            **kwargs,
        )

    async def connect(self) -> None:
        if self._pool is not None:
            return None
        self._pool = await asyncpg.create_pool(
            dsn=self.dsn,
            min_size=self.min_size,
            max_size=self.max_size,
            timeout=self.connect_timeout,
            ssl=False,
            init=self._on_connect,
        )

    async def close(self) -> None:
        if self._pool is None:
            return None
        pool, self._pool = self._pool, None
        await pool.close()

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("DB pool is not initialized. Call connect() on startup.")
        return self._pool

    async def _on_connect(self, conn: asyncpg.Connection) -> None:
        logger.info("Connected to PostgreSQL database")

    def handle_pool_error(self, exc: BaseException) -> None:
        logger.error("Unexpected database error: %s", exc, exc_info=exc)
        if not settings.is_development():
            self._on_fatal()

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """
        Borrow a pooled connection, failing fast once the acquire timeout passes.
        """
        pool = self.pool
        try:
            conn = await pool.acquire(timeout=self.acquire_timeout)
        except asyncio.TimeoutError as exc:
            raise DatabaseTimeoutError(
                f"Timed out after {self.acquire_timeout:g}s waiting for a database connection."
            ) from exc
        except POOL_FATAL_ERRORS as exc:
            self.handle_pool_error(exc)
            raise

        try:
            yield conn
        except POOL_FATAL_ERRORS as exc:
            self.handle_pool_error(exc)
            raise
        finally:
            await pool.release(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[asyncpg.Connection]:
        async with self.acquire() as conn:
            async with conn.transaction():
                yield conn

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        async with self.acquire() as conn:
            row = await conn.fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        async with self.acquire() as conn:
            rows = await conn.fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> str:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL) and return its status tag.
        """
        async with self.acquire() as conn:
            return await conn.execute(sql, *args)


def get_db(request: Request) -> Database:
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise RuntimeError("Database is not configured on the application.")
    return db
