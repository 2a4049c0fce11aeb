"""
Query engine for person-tables.

Translates request parameters into store calls. The engine keeps no state
besides the injected store and takes no locks: each count and each page is its
own store call, so inserts that land between them can make `records_total` and
`records_filtered` disagree with `data` by the number of rows inserted in that
window.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import ValidationError

from person_tables.domain.errors import InvalidArgument
from person_tables.domain.models import EyeColor, Person
from person_tables.query.criteria import DataTableCriteria, TablePage
from person_tables.store.abstract import MAX_ROW_OFFSET, PersonStore
from person_tables.utils.logging import get_logger

log = get_logger(__name__)

MIN_YEAR = date.min.year
MAX_YEAR = date.max.year


def page_index_for(start: int, length: int) -> int:
    """
    Convert a DataTables row offset into a page index.

    `start` is expected to be page-aligned; a misaligned offset is truncated
    down to the page that contains it.
    """
    if length == 0:
        raise InvalidArgument("length must be greater than zero")
    if length < 0:
        raise InvalidArgument(f"length must be greater than zero, got {length}")
    if start < 0:
        raise InvalidArgument(f"start must be >= 0, got {start}")
    if start > MAX_ROW_OFFSET or length > MAX_ROW_OFFSET:
        raise InvalidArgument(f"start and length must not exceed {MAX_ROW_OFFSET}")
    if start % length:
        log.debug(
            "Unaligned start truncated to page boundary",
            extra={"start": start, "length": length},
        )
    return start // length


class QueryEngine:
    """
    Read and insert operations over a PersonStore.

    Parameters
    ----------
    store : PersonStore
        The record store every operation runs against.
    """

    def __init__(self, store: PersonStore) -> None:
        self.store = store

    def datatable(self, criteria: DataTableCriteria) -> TablePage:
        """
        Compute the filtered count, the total count and one page of records.

        Raises
        ------
        InvalidArgument
            For a zero or negative `length` or a negative `start`.
        StoreUnavailable
            If any store call fails.
        """
        page_index = page_index_for(criteria.start, criteria.length)
        handle = self.store.search_by_name(criteria.search)

        records_filtered = handle.count()
        records_total = self.store.count()
        data = handle.page(page_index, criteria.length)

        log.debug(
            "Datatable query served",
            extra={
                "draw": criteria.draw,
                "page_index": page_index,
                "search": criteria.search,
                "records_total": records_total,
                "records_filtered": records_filtered,
                "rows": len(data),
            },
        )
        return TablePage(
            records_total=records_total,
            records_filtered=records_filtered,
            data=data,
        )

    def list_all(self) -> List[Person]:
        return self.store.scan_all()

    def find_by_eyes(self, color: object) -> List[Person]:
        return self.store.find_by_attribute("eyes", EyeColor.parse(color))

    def find_born_before(self, year: int) -> List[Person]:
        """Records born in `year` or earlier."""
        if not MIN_YEAR <= year <= MAX_YEAR:
            raise InvalidArgument(f"year must be between {MIN_YEAR} and {MAX_YEAR}, got {year}")
        return self.store.find_born_on_or_before(date(year, 12, 31))

    def get(self, person_id: int) -> Optional[Person]:
        matches = self.store.find_by_attribute("id", person_id)
        return matches[0] if matches else None

    def create(self, name: str, birth: date, eyes: object) -> Person:
        """Validate and insert a new record, returning it with its identity."""
        if not name or not name.strip():
            raise InvalidArgument("name must not be blank")
        if "\x00" in name:
            raise InvalidArgument("name must not contain NUL bytes")
        try:
            person = Person(name=name, birth=birth, eyes=EyeColor.parse(eyes))
        except ValidationError as exc:
            raise InvalidArgument(str(exc)) from exc
        stored = self.store.insert(person)
        log.info("Person inserted", extra={"person_id": stored.id})
        return stored


__all__ = ["QueryEngine", "page_index_for"]
