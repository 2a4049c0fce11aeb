"""
Process bootstrap for person-tables.

Builds the record store, prepares its schema, seeds sample data and returns the
wired query engine. Called exactly once, before the HTTP server starts; any
failure here aborts startup.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from person_tables.config import Settings, get_settings
from person_tables.query.engine import QueryEngine
from person_tables.seeding.generator import SampleDataGenerator, SeedReport
from person_tables.store import build_store
from person_tables.store.abstract import PersonStore
from person_tables.utils.logging import get_logger

log = get_logger(__name__)


@dataclass
class AppContext:
    settings: Settings
    store: PersonStore
    engine: QueryEngine
    seed_report: Optional[SeedReport] = None

    def close(self) -> None:
        self.store.close()


def bootstrap(
    settings: Optional[Settings] = None,
    store: Optional[PersonStore] = None,
) -> AppContext:
    """
    Wire store and engine, then run startup seeding when enabled.

    Raises
    ------
    StoreUnavailable
        If the schema cannot be created.
    SeedingError
        If seeding fails part way.
    """
    settings = settings or get_settings()
    store = store or build_store(settings)

    ensure_schema = getattr(store, "ensure_schema", None)
    if callable(ensure_schema):
        ensure_schema()

    context = AppContext(settings=settings, store=store, engine=QueryEngine(store))
    if settings.seed_enabled and settings.seed_rows > 0:
        context.seed_report = SampleDataGenerator(
            store,
            rows=settings.seed_rows,
            years=settings.seed_years,
            seed=settings.seed_random_seed,
        ).generate()

    log.info(
        "Bootstrap complete",
        extra={"store": store.name, "records": store.count(), "env": settings.app_env},
    )
    return context


__all__ = ["AppContext", "bootstrap"]
