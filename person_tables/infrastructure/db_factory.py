"""
Database connection factory utilities for person-tables.

Provides centralized management of the synchronous PostgreSQL connection pool
with proper lifecycle management. The PoolManager singleton ensures the pool is
cleaned up on application exit.

Includes retry logic for transient connection failures using tenacity. Only
opening the pool is retried; statements that fail are surfaced to the caller
as-is.
"""

from __future__ import annotations

import atexit
import threading
from typing import Optional

import psycopg
from psycopg import Connection
from psycopg_pool import ConnectionPool, PoolTimeout
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from person_tables.config import get_settings
from person_tables.utils.logging import get_logger

log = get_logger(__name__)

POOL_OPEN_TIMEOUT_SECONDS = 10.0


def build_dsn() -> str:
    """Compose a DSN string from settings."""
    return get_settings().dsn


def apply_statement_timeout(cur: psycopg.Cursor, timeout_ms: int) -> None:
    """Bound the runtime of statements issued on this cursor's session."""
    if timeout_ms > 0:
        cur.execute(f"SET statement_timeout = {int(timeout_ms)}")


def _configure_connection(conn: Connection) -> None:
    """Pool `configure` hook: autocommit plus the configured statement timeout."""
    conn.autocommit = True
    with conn.cursor() as cur:
        apply_statement_timeout(cur, get_settings().db_statement_timeout_ms)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((PoolTimeout, psycopg.OperationalError)),
    reraise=True,
)
def open_pool(conninfo: str, min_size: int = 1, max_size: int = 10) -> ConnectionPool:
    """
    Open a connection pool and wait until its minimum connections are up.

    Retries up to 3 times with exponential backoff for transient connection errors.

    Raises
    ------
    psycopg_pool.PoolTimeout
        If the pool cannot fill after all retry attempts.
    """
    pool = ConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        configure=_configure_connection,
        open=True,
    )
    try:
        pool.wait(timeout=POOL_OPEN_TIMEOUT_SECONDS)
    except PoolTimeout:
        pool.close()
        log.warning("Connection pool did not fill in time", extra={"pool_min_size": min_size})
        raise
    log.info(
        "Connection pool opened",
        extra={"pool_min_size": min_size, "pool_max_size": max_size},
    )
    return pool


class PoolManager:
    """
    Thread-safe singleton for managing the shared database connection pool.

    Handles lifecycle management with automatic cleanup via atexit hook.
    """

    _instance: Optional["PoolManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "PoolManager":
        """Create or return the singleton instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._sync_pool = None
                atexit.register(cls._instance.close_all)
            return cls._instance

    def get_sync_pool(self, min_size: int = 1, max_size: int = 10) -> ConnectionPool:
        """
        Get or create the synchronous connection pool.

        Parameters
        ----------
        min_size : int
            Minimum number of idle connections to keep.
        max_size : int
            Maximum total connections in the pool.

        Returns
        -------
        ConnectionPool
            The managed sync pool instance.
        """
        with self._lock:
            if self._sync_pool is None:
                self._sync_pool = open_pool(build_dsn(), min_size=min_size, max_size=max_size)
            return self._sync_pool

    def close_all(self) -> None:
        """
        Close the managed pool and release resources.

        This is called automatically on exit via atexit hook.
        """
        with self._lock:
            if self._sync_pool is not None:
                try:
                    self._sync_pool.close()
                except psycopg.Error:
                    log.warning("Connection pool did not close cleanly", exc_info=True)
                finally:
                    self._sync_pool = None


def get_sync_pool(min_size: int = 1, max_size: int = 10) -> ConnectionPool:
    """
    Get or create the shared synchronous connection pool via PoolManager.
    """
    return PoolManager().get_sync_pool(min_size=min_size, max_size=max_size)


__all__ = [
    "PoolManager",
    "apply_statement_timeout",
    "build_dsn",
    "get_sync_pool",
    "open_pool",
]
