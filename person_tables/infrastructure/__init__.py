"""
Infrastructure package for person-tables.

Centralizes database connectivity concerns (pool factory, lifecycle).
Keep this layer focused on I/O and resource management, decoupled from
query and transport logic.
"""

from person_tables.infrastructure.db_factory import (
    PoolManager,
    get_sync_pool,
    open_pool,
)

__all__ = [
    "PoolManager",
    "get_sync_pool",
    "open_pool",
]
