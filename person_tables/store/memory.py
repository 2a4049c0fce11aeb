"""
In-process record store: a list of Person objects behind one lock.

Used for local development (`STORE_BACKEND=memory`) and for tests that must run
without PostgreSQL. Every query is a linear scan taken under the lock, so each
call sees a complete, consistent list; identities come from a counter that is
never rewound.
"""

from __future__ import annotations

import itertools
import threading
from datetime import date
from typing import Callable, List, Optional

from person_tables.domain.models import Person
from person_tables.store.abstract import PersonStore, ResultHandle, normalize_lookup, page_bounds


class MemoryResultHandle(ResultHandle):
    """Name-substring filter over a MemoryPersonStore."""

    def __init__(self, store: "MemoryPersonStore", search: Optional[str]) -> None:
        self._store = store
        self.search = search or None

    def _matches(self, person: Person) -> bool:
        return self.search is None or self.search in person.name

    def count(self) -> int:
        return self._store._count_where(self._matches)

    def page(self, page_index: int, page_size: int) -> List[Person]:
        offset, limit = page_bounds(page_index, page_size)
        return self._store._select(self._matches)[offset : offset + limit]


class MemoryPersonStore(PersonStore):
    """
    Store records in a plain list guarded by a threading.Lock.

    Records are appended in identity order, so list order is identity order.
    """

    name: str = "memory"

    def __init__(self) -> None:
        self._rows: List[Person] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def insert(self, person: Person) -> Person:
        with self._lock:
            stored = person.with_id(next(self._ids))
            self._rows.append(stored)
        return stored

    def _select(self, predicate: Callable[[Person], bool]) -> List[Person]:
        with self._lock:
            return [row for row in self._rows if predicate(row)]

    def _count_where(self, predicate: Callable[[Person], bool]) -> int:
        with self._lock:
            return sum(1 for row in self._rows if predicate(row))

    def find_by_attribute(self, attribute: str, value: object) -> List[Person]:
        expected = normalize_lookup(attribute, value)
        return self._select(lambda row: getattr(row, attribute) == expected)

    def scan_all(self) -> List[Person]:
        with self._lock:
            return list(self._rows)

    def search_by_name(self, token: Optional[str]) -> MemoryResultHandle:
        return MemoryResultHandle(self, token)

    def count(self, search: Optional[str] = None) -> int:
        if not search:
            with self._lock:
                return len(self._rows)
        return self.search_by_name(search).count()

    def find_born_on_or_before(self, cutoff: date) -> List[Person]:
        return self._select(lambda row: row.birth <= cutoff)

    def close(self) -> None:
        return None


__all__ = ["MemoryPersonStore", "MemoryResultHandle"]
