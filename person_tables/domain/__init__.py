"""
Domain package for person-tables.

Exports the person record, the eye-color enumeration and the error taxonomy.
Keep this package focused on data definitions and validation concerns.
"""

from person_tables.domain.errors import (
    InvalidArgument,
    PersonTablesError,
    SeedingError,
    StoreUnavailable,
)
from person_tables.domain.models import EyeColor, Person

__all__ = [
    "EyeColor",
    "Person",
    "PersonTablesError",
    "InvalidArgument",
    "StoreUnavailable",
    "SeedingError",
]
