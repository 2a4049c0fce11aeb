"""
Pytest configuration for person-tables.

Provides fixtures for:
- Settings override for integration tests
- Database connection management and table cleanup
- In-process stores seeded with the three reference people
"""

from __future__ import annotations

import os
from datetime import date
from typing import Generator, List

import psycopg
import pytest

from person_tables.config import Settings
from person_tables.domain.models import EyeColor, Person
from person_tables.query.engine import QueryEngine
from person_tables.store.memory import MemoryPersonStore
from person_tables.store.postgres import PostgresPersonStore


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "person_tables"),
        log_level="DEBUG",
        seed_enabled=False,
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return test_settings.dsn


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn, autocommit=True)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def postgres_store(
    db_connection: psycopg.Connection, test_dsn: str
) -> Generator[PostgresPersonStore, None, None]:
    """
    A PostgresPersonStore on an empty `person` table with identities restarted.
    """
    store = PostgresPersonStore(dsn_override=test_dsn, pool_min_size=1, pool_max_size=4)
    store.ensure_schema()
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.person RESTART IDENTITY;")
    try:
        yield store
    finally:
        with db_connection.cursor() as cur:
            cur.execute("TRUNCATE TABLE public.person RESTART IDENTITY;")
        store.close()


@pytest.fixture
def reference_people() -> List[Person]:
    """The three people every scenario test starts from."""
    return [
        Person(name="Farid Ulyanov", birth=date(1974, 8, 15), eyes=EyeColor.BLUE),
        Person(name="Salvador L. Witcher", birth=date(1984, 5, 24), eyes=EyeColor.BROWN),
        Person(name="Kim Hu", birth=date(1999, 4, 25), eyes=EyeColor.HAZEL),
    ]


@pytest.fixture
def memory_store() -> MemoryPersonStore:
    return MemoryPersonStore()


@pytest.fixture
def seeded_store(memory_store: MemoryPersonStore, reference_people: List[Person]) -> MemoryPersonStore:
    """A memory store holding the three reference people (ids 1, 2, 3)."""
    for person in reference_people:
        memory_store.insert(person)
    return memory_store


@pytest.fixture
def engine(seeded_store: MemoryPersonStore) -> QueryEngine:
    return QueryEngine(seeded_store)
