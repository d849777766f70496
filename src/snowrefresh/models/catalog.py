"""In-memory catalog store: catalogs, their databases, and id allocation"""

import itertools
import threading
from typing import Callable, Optional, Protocol

from snowrefresh.errors import DoesNotExist
from .base import CatalogObject, get_name_from_full_name
from .database import Database

INTERNAL_CATALOG_ID = 0
INTERNAL_CATALOG_NAME = "internal"


class Catalog(CatalogObject):
    """A named collection of databases"""

    def __init__(self, object_id: int, name: str, id_source: Callable[[], int]):
        super().__init__(object_id, name)
        self._next_id = id_source
        self._databases: dict[int, Database] = {}
        self._lock = threading.Lock()

    def next_id(self) -> int:
        return self._next_id()

    @property
    def databases(self) -> list[Database]:
        with self._lock:
            return list(self._databases.values())

    def create_database(self, full_name: str) -> Database:
        """Create a database; names are unique per catalog ignoring namespace and case"""
        short = get_name_from_full_name(full_name).upper()
        with self._lock:
            if any(db.name.upper() == short for db in self._databases.values()):
                raise ValueError(f"Database '{full_name}' already exists in catalog '{self.name}'")
            db = Database(self.next_id(), full_name, self)
            self._databases[db.id] = db
        return db

    def drop_database(self, db_id: int) -> None:
        with self._lock:
            if self._databases.pop(db_id, None) is None:
                raise DoesNotExist(f"Unknown database id {db_id} in catalog '{self.name}'")

    def get_db_or_raise(self, db_id: int) -> Database:
        with self._lock:
            db = self._databases.get(db_id)
        if db is None:
            raise DoesNotExist(f"Unknown database id {db_id} in catalog '{self.name}'")
        return db

    def get_db_by_name(self, name: str) -> Optional[Database]:
        """Find a database by user-facing or internal name (case-insensitive)"""
        short = get_name_from_full_name(name).upper()
        for db in self.databases:
            if db.name.upper() == short:
                return db
        return None


class CatalogStore(Protocol):
    """Catalog lookups a refresh task depends on"""

    def get_catalog_or_raise(self, catalog_id: int) -> Catalog:
        ...

    def get_catalog_by_name(self, name: str) -> Optional[Catalog]:
        ...

    def get_db_or_raise(self, db_id: int) -> Database:
        ...


class CatalogManager:
    """Registry of catalogs; the internal catalog always exists with id 0

    Materialized views are resolved in the internal catalog. When mirroring
    Snowflake, name it after the Snowflake database the views live in.

    Example:
        >>> catalogs = CatalogManager()
        >>> db = catalogs.internal_catalog.create_database("default_cluster:sales")
        >>> orders = db.create_table("orders")
        >>> mv = db.create_materialized_view("orders_mv", "SELECT * FROM orders")
    """

    def __init__(self, internal_catalog_name: str = INTERNAL_CATALOG_NAME) -> None:
        self._ids = itertools.count(1)
        self._id_lock = threading.Lock()
        self._catalogs: dict[int, Catalog] = {}
        self._catalogs[INTERNAL_CATALOG_ID] = Catalog(
            INTERNAL_CATALOG_ID, internal_catalog_name, self.next_id
        )

    def next_id(self) -> int:
        with self._id_lock:
            return next(self._ids)

    @property
    def internal_catalog(self) -> Catalog:
        return self._catalogs[INTERNAL_CATALOG_ID]

    def create_catalog(self, name: str) -> Catalog:
        if self.get_catalog_by_name(name) is not None:
            raise ValueError(f"Catalog '{name}' already exists")
        catalog = Catalog(self.next_id(), name, self.next_id)
        self._catalogs[catalog.id] = catalog
        return catalog

    def get_catalog_or_raise(self, catalog_id: int) -> Catalog:
        catalog = self._catalogs.get(catalog_id)
        if catalog is None:
            raise DoesNotExist(f"Unknown catalog id {catalog_id}")
        return catalog

    def get_catalog_by_name(self, name: str) -> Optional[Catalog]:
        name_upper = name.upper()
        for catalog in list(self._catalogs.values()):
            if catalog.name.upper() == name_upper:
                return catalog
        return None

    def get_db_or_raise(self, db_id: int) -> Database:
        """Resolve a database of the internal catalog by id"""
        return self.internal_catalog.get_db_or_raise(db_id)
