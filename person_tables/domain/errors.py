"""
Error taxonomy for person-tables.

Every failure the core raises is one of these; the HTTP transport maps
InvalidArgument to a 4xx and StoreUnavailable to a 5xx, and the bootstrap
treats SeedingError as fatal.
"""

from __future__ import annotations


class PersonTablesError(Exception):
    """Base class for all person-tables failures."""


class InvalidArgument(PersonTablesError, ValueError):
    """A caller supplied a malformed parameter (bad eye color, zero page size, ...)."""


class StoreUnavailable(PersonTablesError):
    """The backing record store is unreachable or a store call failed."""


class SeedingError(PersonTablesError):
    """Startup seeding could not complete."""


__all__ = ["PersonTablesError", "InvalidArgument", "StoreUnavailable", "SeedingError"]
