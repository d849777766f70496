"""Table-like catalog objects (tables, views, materialized views)."""

from snowrefresh.models.table.base import TableLike, TableType
from snowrefresh.models.table.table import Table
from snowrefresh.models.table.view import View
from snowrefresh.models.table.materialized_view import MaterializedView, EnvInfo

__all__ = [
    "TableLike",
    "TableType",
    "Table",
    "View",
    "MaterializedView",
    "EnvInfo",
]
