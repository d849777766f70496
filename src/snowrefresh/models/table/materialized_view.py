"""MaterializedView class - stored result of a defining query"""

from dataclasses import dataclass
from typing import ClassVar

from snowrefresh.models.table.base import TableType
from snowrefresh.models.table.view import View


@dataclass(frozen=True)
class EnvInfo:
    """Catalog and database ids the defining query executes against"""

    catalog_id: int
    db_id: int


class MaterializedView(View):
    """A view whose rows are persisted and refreshed by re-running its query

    Refreshing overwrites the stored rows with the current result of
    ``query_sql``; see ``snowrefresh.task.MaterializedViewRefreshTask``.
    """

    TABLE_TYPE: ClassVar[TableType] = TableType.MATERIALIZED_VIEW

    def __init__(self, object_id: int, name: str, query_sql: str, env_info: EnvInfo):
        super().__init__(object_id, name, query_sql)
        self._env_info = env_info

    @property
    def query_sql(self) -> str:
        """The defining query text"""
        return self.definition

    @property
    def env_info(self) -> EnvInfo:
        return self._env_info
