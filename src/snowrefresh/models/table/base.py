"""Base class for table-like catalog objects"""

from enum import Enum
from typing import ClassVar, Optional, TYPE_CHECKING

from snowrefresh.models.base import CatalogObject, FQN, get_name_from_full_name

if TYPE_CHECKING:
    from ..database import Database


class TableType(str, Enum):
    TABLE = "TABLE"
    VIEW = "VIEW"
    MATERIALIZED_VIEW = "MATERIALIZED_VIEW"


class TableLike(CatalogObject):
    """Base class for all queryable objects that live inside a database"""

    TABLE_TYPE: ClassVar[TableType]

    def __init__(self, object_id: int, name: str):
        super().__init__(object_id, name)
        self._database: Optional['Database'] = None

    @property
    def table_type(self) -> TableType:
        return self.TABLE_TYPE

    @property
    def database(self) -> 'Database':
        """Owning database; set when the object is registered"""
        if self._database is None:
            raise RuntimeError(f"{self!r} is not registered in a database")
        return self._database

    def _attach(self, database: 'Database') -> None:
        self._database = database

    @property
    def qualified_db_name(self) -> str:
        """Internal database name, including any cluster namespace prefix"""
        return self.database.full_name

    @property
    def fqn(self) -> FQN:
        """catalog.database.name with the cluster namespace stripped"""
        return FQN.from_parts(
            self.database.catalog.name,
            get_name_from_full_name(self.qualified_db_name),
            self.name,
        )
