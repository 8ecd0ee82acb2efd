"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI opens it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
- values are always bound, never formatted into the statement text

Every helper raises `DatabaseError` on failure so callers have one type to
catch regardless of whether the driver, the socket or a timeout gave up.
"""

from __future__ import annotations

import asyncio
import logging
import ssl
from collections.abc import Awaitable, Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_after_attempt, wait_fixed

from .config import Settings

logger = logging.getLogger(__name__)

_pool: asyncpg.Pool | None = None

_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


# Datastore failures are explicit and separable from programming errors.
class DatabaseError(RuntimeError):
    pass


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def ssl_context(settings: Settings) -> ssl.SSLContext | bool:
    """
    TLS policy for the pool. With TLS on, the server certificate and host name
    are always verified.
    """
    if settings.database_ssl == "disable":
        return False
    return ssl.create_default_context(cafile=settings.database_ca_file)


def _compact(sql: str) -> str:
    return " ".join(sql.split())


@contextmanager
def _driver_errors(sql: str) -> Iterator[None]:
    try:
        yield
    except _DRIVER_ERRORS as e:
        raise DatabaseError(f"{type(e).__name__} while running: {_compact(sql)[:200]}") from e


async def init_pool(settings: Settings) -> None:
    global _pool
    if _pool is not None:
        return None
    try:
        _pool = await asyncpg.create_pool(
            dsn=_sanitize_database_url(settings.database_url),
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            command_timeout=settings.command_timeout_s,
            ssl=ssl_context(settings),
        )
    except _DRIVER_ERRORS as e:
        raise DatabaseError(f"Could not open DB pool: {type(e).__name__}: {e}") from e
    logger.info(
        "pool_ready min_size=%s max_size=%s ssl=%s",
        settings.pool_min_size,
        settings.pool_max_size,
        settings.database_ssl,
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None
    logger.info("pool_closed")


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise DatabaseError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    logger.debug("sql %s args=%d", _compact(sql), len(args))
    with _driver_errors(sql):
        row = await pool().fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    logger.debug("sql %s args=%d", _compact(sql), len(args))
    with _driver_errors(sql):
        rows = await pool().fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def fetch_val(sql: str, *args: Any) -> Any:
    """
    Run a query and return the first column of the first row (or None).
    """
    logger.debug("sql %s args=%d", _compact(sql), len(args))
    with _driver_errors(sql):
        return await pool().fetchval(sql, *args)


async def execute(sql: str, *args: Any) -> None:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL). No result returned.
    """
    logger.debug("sql %s args=%d", _compact(sql), len(args))
    with _driver_errors(sql):
        await pool().execute(sql, *args)


async def _apply_schema(statements: Sequence[str]) -> None:
    # All tables are created in one transaction: either every one exists
    # afterwards or the attempt left nothing behind.
    with _driver_errors("; ".join(statements)):
        async with pool().acquire() as conn:
            async with conn.transaction():
                for sql in statements:
                    logger.debug("ddl %s", _compact(sql))
                    await conn.execute(sql)


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "schema_init_failed attempt=%s next_try_in=%.1fs error=%s",
        retry_state.attempt_number,
        retry_state.next_action.sleep if retry_state.next_action else 0.0,
        exc,
    )


async def init_schema(
    settings: Settings,
    statements: Sequence[str],
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> None:
    """
    Open the pool (if needed) and run every DDL statement, retrying the whole
    unit up to `settings.init_max_attempts` times with a constant
    `settings.init_retry_delay_s` pause in between.

    The last failure is re-raised as `DatabaseError`; the caller must not
    start serving in that case.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(settings.init_max_attempts),
        wait=wait_fixed(settings.init_retry_delay_s),
        retry=retry_if_exception_type(DatabaseError),
        before_sleep=_log_retry,
        sleep=sleep,
        reraise=True,
    )
    try:
        async for attempt in retrying:
            with attempt:
                await init_pool(settings)
                await _apply_schema(statements)
    except DatabaseError:
        logger.error("schema_init_gave_up attempts=%s", settings.init_max_attempts)
        raise
    logger.info("schema_ready statements=%d", len(statements))
