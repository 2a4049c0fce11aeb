"""
Domain models for person-tables.

Defines the person record schema aligned with the `public.person` table and the
closed eye-color enumeration. These models are used for validation,
serialization, and type hints across the store, query engine and transport.
"""
from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from person_tables.domain.errors import InvalidArgument


class EyeColor(str, Enum):
    """The fixed set of eye colors a person record may carry."""

    BLUE = "BLUE"
    GREEN = "GREEN"
    HAZEL = "HAZEL"
    BROWN = "BROWN"

    @classmethod
    def parse(cls, value: object) -> "EyeColor":
        """
        Parse an external value (request path, CLI option, DB column) into an EyeColor.

        Only the exact upper-case names are accepted.

        Raises
        ------
        InvalidArgument
            If the value does not name one of the enumerated colors.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value in cls.__members__:
            return cls(value)
        allowed = ", ".join(member.value for member in cls)
        raise InvalidArgument(f"Invalid eye color {value!r}; expected one of: {allowed}")


class Person(BaseModel):
    """
    Representation of a single row in the `person` table.

    `id` is None until the record store assigns one on insert.
    """

    id: Optional[int] = Field(None, description="Server-assigned identity.")
    name: str = Field(..., description="Free-text display name.")
    birth: date = Field(..., description="Birth date (no time component).")
    eyes: EyeColor = Field(..., description="Eye color.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }

    @field_validator("eyes", mode="before")
    @classmethod
    def _parse_eyes(cls, value: object) -> EyeColor:
        return EyeColor.parse(value)

    def with_id(self, person_id: int) -> "Person":
        """Return a copy of this record carrying the given identity."""
        return self.model_copy(update={"id": person_id})


__all__ = ["EyeColor", "Person"]
