"""
person-tables - person records behind a DataTables-compatible query API.

This package stores person records in PostgreSQL (or an in-process store for
development) and serves them through:

- Plain read queries (all records, by eye color, by birth year)
- A server-side DataTables endpoint with search, paging and total/filtered counts
- A one-shot sample data generator run at startup
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from person_tables.bootstrap import AppContext, bootstrap
from person_tables.config import Settings, get_settings
from person_tables.domain.errors import (
    InvalidArgument,
    PersonTablesError,
    SeedingError,
    StoreUnavailable,
)
from person_tables.domain.models import EyeColor, Person
from person_tables.query.criteria import DataTableCriteria, TablePage
from person_tables.query.engine import QueryEngine
from person_tables.response.assembler import TableResponse, assemble, assemble_error, respond
from person_tables.seeding.generator import SampleDataGenerator, SeedReport
from person_tables.store import (
    MemoryPersonStore,
    PersonStore,
    PostgresPersonStore,
    ResultHandle,
    build_store,
)
from person_tables.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "EyeColor",
    "Person",
    # Errors
    "PersonTablesError",
    "InvalidArgument",
    "StoreUnavailable",
    "SeedingError",
    # Stores
    "PersonStore",
    "ResultHandle",
    "MemoryPersonStore",
    "PostgresPersonStore",
    "build_store",
    # Query
    "DataTableCriteria",
    "TablePage",
    "QueryEngine",
    # Responses
    "TableResponse",
    "assemble",
    "assemble_error",
    "respond",
    # Seeding
    "SampleDataGenerator",
    "SeedReport",
    # Bootstrap
    "AppContext",
    "bootstrap",
    # Logging
    "configure_logging",
    "get_logger",
]
