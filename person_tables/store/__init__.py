"""
Record store package for person-tables.

Re-exports the store interfaces and concrete stores, and provides the
settings-driven factory the bootstrap uses to pick a backend.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from person_tables.config import Settings, get_settings
from person_tables.store.abstract import (
    QUERYABLE_ATTRIBUTES,
    PersonStore,
    ResultHandle,
)
from person_tables.store.memory import MemoryPersonStore
from person_tables.store.postgres import PostgresPersonStore


def _store_factories(settings: Settings) -> Dict[str, Callable[[], PersonStore]]:
    """Registry of available store backends."""
    return {
        "memory": lambda: MemoryPersonStore(),
        "postgres": lambda: PostgresPersonStore(
            pool_min_size=settings.db_pool_min_size,
            pool_max_size=settings.db_pool_max_size,
        ),
    }


def available_backends() -> List[str]:
    """List available store backend names."""
    return sorted(_store_factories(get_settings()).keys())


def build_store(settings: Optional[Settings] = None) -> PersonStore:
    """Instantiate the store backend named by `settings.store_backend`."""
    settings = settings or get_settings()
    factories = _store_factories(settings)
    if settings.store_backend not in factories:
        raise ValueError(
            f"Unknown store backend '{settings.store_backend}'. Available: {', '.join(factories)}"
        )
    return factories[settings.store_backend]()


__all__ = [
    "QUERYABLE_ATTRIBUTES",
    "PersonStore",
    "ResultHandle",
    "MemoryPersonStore",
    "PostgresPersonStore",
    "available_backends",
    "build_store",
]
