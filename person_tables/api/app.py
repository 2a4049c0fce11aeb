"""
HTTP transport for person-tables.

A thin FastAPI layer: parse path/query parameters, call the query engine,
serialize the result. Core failures map to status codes here and nowhere else:
InvalidArgument -> 400, StoreUnavailable -> 503.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from person_tables.domain.errors import InvalidArgument, StoreUnavailable
from person_tables.domain.models import Person
from person_tables.query.criteria import DataTableCriteria
from person_tables.query.engine import QueryEngine
from person_tables.response.assembler import TableResponse, respond
from person_tables.utils.logging import get_logger

log = get_logger(__name__)


class PersonIn(BaseModel):
    name: str
    birth: date
    eyes: str


def _status_for(exc: Exception) -> int:
    return 400 if isinstance(exc, InvalidArgument) else 503


def create_app(engine: QueryEngine, default_length: int = 10) -> FastAPI:
    """
    Build the FastAPI application around an already bootstrapped engine.

    Parameters
    ----------
    engine : QueryEngine
        Engine bound to the record store.
    default_length : int
        Page size used when a datatable request omits `length`.
    """
    app = FastAPI(title="person-tables")
    app.state.engine = engine

    @app.exception_handler(InvalidArgument)
    async def _invalid_argument(request: Request, exc: InvalidArgument) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(StoreUnavailable)
    async def _store_unavailable(request: Request, exc: StoreUnavailable) -> JSONResponse:
        log.error("Store unavailable", extra={"path": request.url.path, "error": str(exc)})
        return JSONResponse(status_code=503, content={"error": str(exc)})

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "records": engine.store.count()}

    @app.get("/person", response_model=List[Person])
    def list_people() -> List[Person]:
        return engine.list_all()

    @app.post("/person", response_model=Person, status_code=201)
    def create_person(body: PersonIn) -> Person:
        return engine.create(body.name, body.birth, body.eyes)

    @app.get("/person/datatable", response_model=TableResponse)
    def datatable(request: Request) -> JSONResponse:
        try:
            criteria = DataTableCriteria.from_params(
                request.query_params, default_length=default_length
            )
        except InvalidArgument as exc:
            # draw itself may be the bad parameter
            draw = _draw_or_zero(request.query_params.get("draw"))
            return JSONResponse(
                status_code=400,
                content=TableResponse(draw=draw, error=str(exc)).to_wire(),
            )
        envelope, failure = respond(engine, criteria)
        status = 200 if failure is None else _status_for(failure)
        return JSONResponse(status_code=status, content=envelope.to_wire())

    @app.get("/person/eyes/{color}", response_model=List[Person])
    def by_eyes(color: str) -> List[Person]:
        return engine.find_by_eyes(color)

    @app.get("/person/birth/before/{year}", response_model=List[Person])
    def born_before(year: str) -> List[Person]:
        try:
            parsed = int(year)
        except ValueError as exc:
            raise InvalidArgument(f"year must be an integer, got {year!r}") from exc
        return engine.find_born_before(parsed)

    @app.get("/person/{person_id}", response_model=Person)
    def get_person(person_id: int) -> Person:
        person = engine.get(person_id)
        if person is None:
            raise HTTPException(status_code=404, detail=f"Person {person_id} not found")
        return person

    return app


def _draw_or_zero(raw: Optional[str]) -> int:
    try:
        return int(raw) if raw is not None else 0
    except ValueError:
        return 0


__all__ = ["create_app"]
