"""
Record store interfaces for person-tables.

Concrete stores (PostgreSQL, in-process memory) implement the PersonStore
protocol. Filtered reads return a ResultHandle so callers can count the full
match set and fetch one page of it as two independent store calls.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Protocol, runtime_checkable

from person_tables.domain.errors import InvalidArgument
from person_tables.domain.models import EyeColor, Person

# Columns that support equality lookup.
QUERYABLE_ATTRIBUTES = ("id", "name", "birth", "eyes")


def normalize_lookup(attribute: str, value: object) -> object:
    """
    Validate an equality lookup and coerce its value to the column's type.

    Raises
    ------
    InvalidArgument
        For an unknown attribute or a value that cannot be coerced.
    """
    if attribute not in QUERYABLE_ATTRIBUTES:
        raise InvalidArgument(
            f"Unknown attribute '{attribute}'. Available: {', '.join(QUERYABLE_ATTRIBUTES)}"
        )
    if attribute == "eyes":
        return EyeColor.parse(value)
    if attribute == "id":
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidArgument(f"id must be an integer, got {value!r}")
        return value
    if attribute == "birth":
        if not isinstance(value, date):
            raise InvalidArgument(f"birth must be a date, got {value!r}")
        return value
    if not isinstance(value, str):
        raise InvalidArgument(f"name must be a string, got {value!r}")
    return value


# LIMIT and OFFSET are BIGINT in Postgres.
MAX_ROW_OFFSET = 2**63 - 1


def page_bounds(page_index: int, page_size: int) -> tuple[int, int]:
    """Return the (offset, limit) pair addressing one page."""
    if page_index < 0:
        raise InvalidArgument(f"page index must be >= 0, got {page_index}")
    if page_size <= 0:
        raise InvalidArgument(f"page size must be > 0, got {page_size}")
    offset = page_index * page_size
    if offset > MAX_ROW_OFFSET or page_size > MAX_ROW_OFFSET:
        raise InvalidArgument(f"page {page_index} of size {page_size} is out of range")
    return offset, page_size


@runtime_checkable
class ResultHandle(Protocol):
    """
    A filtered, pageable view over the store.

    The handle holds the filter, not the rows: every call re-reads the store.
    """

    search: Optional[str]

    def count(self) -> int:
        """Number of records matching the filter, ignoring paging."""
        ...

    def page(self, page_index: int, page_size: int) -> List[Person]:
        """
        Records `[page_index*page_size, page_index*page_size + page_size)` of the match set.

        A page past the end is an empty list, not an error.
        """
        ...


@runtime_checkable
class PersonStore(Protocol):
    """
    Common interface all record stores must implement.

    Every method is a single consistent read or write against the backing
    store; results are ordered by identity.
    """

    name: str

    def insert(self, person: Person) -> Person:
        """Assign a fresh identity, persist the record and return the stored copy."""
        ...

    def find_by_attribute(self, attribute: str, value: object) -> List[Person]:
        """Exact-match lookup on one of QUERYABLE_ATTRIBUTES."""
        ...

    def scan_all(self) -> List[Person]:
        """Every stored record."""
        ...

    def search_by_name(self, token: Optional[str]) -> ResultHandle:
        """Records whose name contains `token`; no token means all records."""
        ...

    def count(self, search: Optional[str] = None) -> int:
        """Number of records matching `search` (all records when empty)."""
        ...

    def find_born_on_or_before(self, cutoff: date) -> List[Person]:
        """Records with a birth date on or before `cutoff`."""
        ...

    def close(self) -> None:
        """Release any resources held by the store."""
        ...


__all__ = [
    "MAX_ROW_OFFSET",
    "QUERYABLE_ATTRIBUTES",
    "PersonStore",
    "ResultHandle",
    "normalize_lookup",
    "page_bounds",
]
