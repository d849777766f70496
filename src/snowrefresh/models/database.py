"""Database object class"""

import threading
from typing import TYPE_CHECKING, Optional

from snowrefresh.errors import DoesNotExist, TypeMismatch
from .base import CatalogObject, get_name_from_full_name
from .table import TableLike, TableType, Table, View, MaterializedView, EnvInfo

if TYPE_CHECKING:
    from .catalog import Catalog


class Database(CatalogObject):
    """A database inside a catalog, holding tables, views and materialized views

    ``full_name`` is the internal name and may carry a cluster namespace
    prefix (``ns:db``); ``name`` is the user-facing part.
    """

    def __init__(self, object_id: int, full_name: str, catalog: 'Catalog'):
        super().__init__(object_id, full_name)
        self._catalog = catalog
        self._tables: dict[int, TableLike] = {}
        self._lock = threading.Lock()

    @property
    def full_name(self) -> str:
        return self._name

    @property
    def name(self) -> str:
        return get_name_from_full_name(self._name)

    @property
    def catalog(self) -> 'Catalog':
        return self._catalog

    @property
    def tables(self) -> list[TableLike]:
        """Snapshot of every object currently in this database"""
        with self._lock:
            return list(self._tables.values())

    def get_table(self, name: str) -> Optional[TableLike]:
        """Find an object by name (case-insensitive), or None"""
        name_upper = name.upper()
        for table in self.tables:
            if table.name.upper() == name_upper:
                return table
        return None

    def get_table_or_raise(
        self,
        table_id: int,
        expected_type: Optional[TableType] = None,
    ) -> TableLike:
        """Resolve an object by id, optionally checking its type

        Raises:
            DoesNotExist: If no object has this id (e.g. it was dropped)
            TypeMismatch: If the object is not of ``expected_type``
        """
        with self._lock:
            table = self._tables.get(table_id)
        if table is None:
            raise DoesNotExist(f"Unknown table id {table_id} in database '{self.full_name}'")
        if expected_type is not None and table.table_type != expected_type:
            raise TypeMismatch(
                f"Table '{table.name}' is a {table.table_type.value}, "
                f"expected {expected_type.value}"
            )
        return table

    def register(self, table: TableLike) -> TableLike:
        """Add an object; names are unique per database (case-insensitive)"""
        with self._lock:
            name_upper = table.name.upper()
            if any(t.name.upper() == name_upper for t in self._tables.values()):
                raise ValueError(f"Table '{table.name}' already exists in '{self.full_name}'")
            table._attach(self)
            self._tables[table.id] = table
        return table

    def drop_table(self, name: str) -> TableLike:
        """Remove an object by name and return it

        Raises:
            DoesNotExist: If no object has this name
        """
        table = self.get_table(name)
        if table is None:
            raise DoesNotExist(f"Unknown table '{name}' in database '{self.full_name}'")
        with self._lock:
            self._tables.pop(table.id, None)
        return table

    def create_table(self, name: str) -> Table:
        table = Table(self._catalog.next_id(), name)
        self.register(table)
        return table

    def create_view(self, name: str, definition: str) -> View:
        view = View(self._catalog.next_id(), name, definition)
        self.register(view)
        return view

    def create_materialized_view(
        self,
        name: str,
        query_sql: str,
        env_info: Optional[EnvInfo] = None,
    ) -> MaterializedView:
        """Create a materialized view; its query runs against this database unless env_info says otherwise"""
        if env_info is None:
            env_info = EnvInfo(catalog_id=self._catalog.id, db_id=self.id)
        mv = MaterializedView(self._catalog.next_id(), name, query_sql, env_info)
        self.register(mv)
        return mv
