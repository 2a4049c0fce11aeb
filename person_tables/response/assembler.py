"""
DataTables response envelope for person-tables.

`respond` is the single entry point the transport uses: it runs the query
engine and always hands back a well-formed envelope. Failures the core knows
about become an envelope with `error` set, zero counts and no data, so the
widget never receives a truncated or non-JSON payload.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from person_tables.domain.errors import InvalidArgument, PersonTablesError, StoreUnavailable
from person_tables.domain.models import Person
from person_tables.query.criteria import DataTableCriteria, TablePage
from person_tables.query.engine import QueryEngine
from person_tables.utils.logging import get_logger

log = get_logger(__name__)


class TableResponse(BaseModel):
    """The JSON body a DataTables widget expects from a server-side source."""

    draw: int = Field(0, description="Request counter, echoed verbatim.")
    records_total: int = Field(0, alias="recordsTotal")
    records_filtered: int = Field(0, alias="recordsFiltered")
    data: List[Person] = Field(default_factory=list)
    error: Optional[str] = None

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    def to_wire(self) -> dict:
        """JSON-ready dict using the DataTables key names."""
        return self.model_dump(mode="json", by_alias=True)


def assemble(draw: int, page: TablePage) -> TableResponse:
    return TableResponse(
        draw=draw,
        records_total=page.records_total,
        records_filtered=page.records_filtered,
        data=page.data,
        error=None,
    )


def assemble_error(draw: int, message: str) -> TableResponse:
    return TableResponse(draw=draw, records_total=0, records_filtered=0, data=[], error=message)


def respond(engine: QueryEngine, criteria: DataTableCriteria) -> Tuple[TableResponse, Optional[PersonTablesError]]:
    """
    Run a datatable query and wrap the outcome in an envelope.

    Returns
    -------
    tuple
        The envelope and the handled failure (None on success), so the
        transport can pick a status code without re-running the query.
    """
    try:
        page = engine.datatable(criteria)
    except InvalidArgument as exc:
        log.info("Rejected datatable request", extra={"draw": criteria.draw, "error": str(exc)})
        return assemble_error(criteria.draw, str(exc)), exc
    except StoreUnavailable as exc:
        log.error("Datatable query failed", extra={"draw": criteria.draw, "error": str(exc)})
        return assemble_error(criteria.draw, str(exc)), exc
    return assemble(criteria.draw, page), None


__all__ = ["TableResponse", "assemble", "assemble_error", "respond"]
