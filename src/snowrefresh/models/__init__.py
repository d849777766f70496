"""Catalog object model: catalogs, databases, tables, views and materialized views"""

from .catalog import Catalog, CatalogManager, CatalogStore, INTERNAL_CATALOG_NAME
from .database import Database
from .table import Table, View, MaterializedView, EnvInfo, TableLike, TableType
from .base import FQN, get_name_from_full_name

__all__ = [
    "Catalog",
    "CatalogManager",
    "CatalogStore",
    "INTERNAL_CATALOG_NAME",
    "Database",
    "Table",
    "View",
    "MaterializedView",
    "EnvInfo",
    "TableLike",
    "TableType",
    "FQN",
    "get_name_from_full_name",
]
