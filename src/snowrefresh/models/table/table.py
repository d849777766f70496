"""Table class - stored base table"""

from typing import ClassVar

from snowrefresh.models.table.base import TableLike, TableType


class Table(TableLike):
    """A base table holding stored rows"""

    TABLE_TYPE: ClassVar[TableType] = TableType.TABLE
