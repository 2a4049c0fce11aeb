"""Query engine package: DataTables criteria, page results and the engine itself."""

from person_tables.query.criteria import DataTableCriteria, TablePage
from person_tables.query.engine import QueryEngine, page_index_for

__all__ = ["DataTableCriteria", "TablePage", "QueryEngine", "page_index_for"]
