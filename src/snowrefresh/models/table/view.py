"""View class - read-only query-defined object"""

from typing import ClassVar

from snowrefresh.models.table.base import TableLike, TableType


class View(TableLike):
    """A logical view whose rows are computed from its definition on read"""

    TABLE_TYPE: ClassVar[TableType] = TableType.VIEW

    def __init__(self, object_id: int, name: str, definition: str):
        super().__init__(object_id, name)
        self._definition = definition

    @property
    def definition(self) -> str:
        """The view's SELECT definition"""
        return self._definition
