"""HTTP transport (FastAPI) for person-tables."""

from person_tables.api.app import create_app

__all__ = ["create_app"]
