"""
DataTables request criteria and page results.

`DataTableCriteria.from_params` turns the raw query-string mapping a DataTables
widget sends (`draw`, `start`, `length`, `search[value]`) into typed criteria.
Range checks (zero or negative sizes) belong to the query engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from person_tables.domain.errors import InvalidArgument
from person_tables.domain.models import Person
from person_tables.store.abstract import MAX_ROW_OFFSET

SEARCH_PARAM = "search[value]"


def _parse_int(params: Mapping[str, str], key: str, default: int) -> int:
    raw = params.get(key)
    if raw is None or raw.strip() == "":
        return default
    text = raw.strip()
    digits = text[1:] if text.startswith("-") else text
    if not (digits.isascii() and digits.isdigit()):
        raise InvalidArgument(f"Query parameter '{key}' must be an integer, got {raw!r}")
    value = int(text)
    if abs(value) > MAX_ROW_OFFSET:
        raise InvalidArgument(f"Query parameter '{key}' is out of range, got {raw!r}")
    return value


def _parse_search(params: Mapping[str, str]) -> Optional[str]:
    token = params.get(SEARCH_PARAM) or None
    if token is not None and "\x00" in token:
        raise InvalidArgument(f"Query parameter '{SEARCH_PARAM}' must not contain NUL bytes")
    return token


@dataclass(frozen=True)
class DataTableCriteria:
    """
    One DataTables server-side request.

    Attributes
    ----------
    draw : int
        Opaque counter echoed back so the widget can discard stale responses.
    start : int
        Offset of the first row; expected to be a multiple of `length`.
    length : int
        Page size.
    search : str | None
        Case-sensitive name substring; None or "" means no filter.
    """

    draw: int = 0
    start: int = 0
    length: int = 10
    search: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping[str, str], default_length: int = 10) -> "DataTableCriteria":
        return cls(
            draw=_parse_int(params, "draw", 0),
            start=_parse_int(params, "start", 0),
            length=_parse_int(params, "length", default_length),
            search=_parse_search(params),
        )


@dataclass(frozen=True)
class TablePage:
    """Counts plus one page of records, as computed by the query engine."""

    records_total: int
    records_filtered: int
    data: List[Person] = field(default_factory=list)


__all__ = ["DataTableCriteria", "TablePage", "SEARCH_PARAM"]
