"""
PostgreSQL record store for person-tables.

Each public method borrows one pooled connection and runs exactly one
statement in autocommit mode, so every read sees a committed snapshot and no
partially inserted row. Results are always ordered by `id`.

Name search uses `strpos(name, token) > 0`: a case-sensitive substring match
in which `%`, `_` and backslashes in the token are plain characters.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import date
from typing import Any, Generator, List, Optional, Sequence

import psycopg
from psycopg_pool import ConnectionPool

from person_tables.config import get_settings
from person_tables.domain.errors import InvalidArgument, StoreUnavailable
from person_tables.domain.models import EyeColor, Person
from person_tables.infrastructure.db_factory import get_sync_pool, open_pool
from person_tables.store.abstract import (
    QUERYABLE_ATTRIBUTES,
    PersonStore,
    ResultHandle,
    normalize_lookup,
    page_bounds,
)
from person_tables.utils.logging import get_logger

log = get_logger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS public.person (
    id    BIGINT GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY,
    name  TEXT NOT NULL,
    birth DATE NOT NULL,
    eyes  VARCHAR(5) NOT NULL CHECK (eyes IN ('BLUE', 'GREEN', 'HAZEL', 'BROWN'))
);
"""

_COLUMNS = "id, name, birth, eyes"
_SEARCH_CLAUSE = "strpos(name, %s) > 0"

INSERT_SQL = "INSERT INTO public.person (name, birth, eyes) VALUES (%s, %s, %s) RETURNING id;"
SCAN_SQL = f"SELECT {_COLUMNS} FROM public.person ORDER BY id;"
BORN_BEFORE_SQL = f"SELECT {_COLUMNS} FROM public.person WHERE birth <= %s ORDER BY id;"
# Column names come from a fixed whitelist, never from the caller.
LOOKUP_SQL = {
    attribute: f"SELECT {_COLUMNS} FROM public.person WHERE {attribute} = %s ORDER BY id;"
    for attribute in QUERYABLE_ATTRIBUTES
}


def _where(search: Optional[str]) -> tuple[str, tuple[Any, ...]]:
    if search:
        return f" WHERE {_SEARCH_CLAUSE}", (search,)
    return "", ()


def _encode(value: object) -> object:
    return value.value if isinstance(value, EyeColor) else value


def _to_person(row: Sequence[Any]) -> Person:
    person_id, name, birth, eyes = row
    return Person(id=person_id, name=name, birth=birth, eyes=eyes)


class PostgresResultHandle(ResultHandle):
    """Name-substring filter over the `public.person` table."""

    def __init__(self, store: "PostgresPersonStore", search: Optional[str]) -> None:
        self._store = store
        self.search = search or None

    def count(self) -> int:
        where, params = _where(self.search)
        row = self._store._fetchone(f"SELECT count(*) FROM public.person{where};", params)
        return int(row[0]) if row else 0

    def page(self, page_index: int, page_size: int) -> List[Person]:
        offset, limit = page_bounds(page_index, page_size)
        where, params = _where(self.search)
        rows = self._store._fetchall(
            f"SELECT {_COLUMNS} FROM public.person{where} ORDER BY id LIMIT %s OFFSET %s;",
            params + (limit, offset),
        )
        return [_to_person(row) for row in rows]


class PostgresPersonStore(PersonStore):
    """
    Record store backed by a psycopg ConnectionPool.

    The pool is injected, built from `dsn_override`, or taken from the shared
    PoolManager, in that order of preference.
    """

    name: str = "postgres"

    def __init__(
        self,
        pool: Optional[ConnectionPool] = None,
        dsn_override: Optional[str] = None,
        pool_min_size: Optional[int] = None,
        pool_max_size: Optional[int] = None,
    ) -> None:
        settings = get_settings()
        self.pool_min_size = pool_min_size or settings.db_pool_min_size
        self.pool_max_size = pool_max_size or settings.db_pool_max_size
        self._dsn_override = dsn_override
        self._pool_instance: ConnectionPool | None = pool
        self._owns_pool = False
        self._pool_lock = threading.Lock()

    def _get_pool(self) -> ConnectionPool:
        if self._pool_instance is not None:
            return self._pool_instance
        with self._pool_lock:
            if self._pool_instance is not None:
                return self._pool_instance
            try:
                if self._dsn_override:
                    self._pool_instance = open_pool(
                        self._dsn_override,
                        min_size=self.pool_min_size,
                        max_size=self.pool_max_size,
                    )
                    self._owns_pool = True
                else:
                    self._pool_instance = get_sync_pool(
                        min_size=self.pool_min_size, max_size=self.pool_max_size
                    )
            except psycopg.Error as exc:
                raise StoreUnavailable(f"Cannot open connection pool: {exc}") from exc
            return self._pool_instance

    @contextmanager
    def _cursor(self) -> Generator[psycopg.Cursor, None, None]:
        pool = self._get_pool()
        try:
            with pool.connection() as conn:
                with conn.cursor() as cur:
                    yield cur
        except psycopg.DataError as exc:
            log.warning("Store rejected parameter", extra={"store": self.name, "error": str(exc)})
            raise InvalidArgument(f"Invalid query parameter: {exc}") from exc
        except psycopg.Error as exc:
            log.error("Store call failed", extra={"store": self.name, "error": str(exc)})
            raise StoreUnavailable(f"Record store call failed: {exc}") from exc

    def _fetchall(self, sql: str, params: Sequence[Any] = ()) -> List[Sequence[Any]]:
        with self._cursor() as cur:
            cur.execute(sql, params)
            return cur.fetchall()

    def _fetchone(self, sql: str, params: Sequence[Any] = ()) -> Optional[Sequence[Any]]:
        with self._cursor() as cur:
            cur.execute(sql, params)
            return cur.fetchone()

    def ensure_schema(self) -> None:
        """Create the `person` table if it does not exist yet."""
        with self._cursor() as cur:
            cur.execute(SCHEMA_SQL)

    def insert(self, person: Person) -> Person:
        row = self._fetchone(INSERT_SQL, (person.name, person.birth, person.eyes.value))
        if row is None:
            raise StoreUnavailable("Insert returned no identity")
        return person.with_id(int(row[0]))

    def find_by_attribute(self, attribute: str, value: object) -> List[Person]:
        expected = normalize_lookup(attribute, value)
        rows = self._fetchall(LOOKUP_SQL[attribute], (_encode(expected),))
        return [_to_person(row) for row in rows]

    def scan_all(self) -> List[Person]:
        return [_to_person(row) for row in self._fetchall(SCAN_SQL)]

    def search_by_name(self, token: Optional[str]) -> PostgresResultHandle:
        return PostgresResultHandle(self, token)

    def count(self, search: Optional[str] = None) -> int:
        return self.search_by_name(search).count()

    def find_born_on_or_before(self, cutoff: date) -> List[Person]:
        return [_to_person(row) for row in self._fetchall(BORN_BEFORE_SQL, (cutoff,))]

    def close(self) -> None:
        """Close the pool if this store created it; shared pools are closed at exit."""
        with self._pool_lock:
            if self._owns_pool and self._pool_instance is not None:
                self._pool_instance.close()
                self._pool_instance = None
                self._owns_pool = False


__all__ = ["PostgresPersonStore", "PostgresResultHandle", "SCHEMA_SQL"]
