"""Dependency relation of a materialized view's defining query"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from snowrefresh.errors import AnalysisError
from snowrefresh.models import CatalogStore, FQN, TableLike, TableType, View

from .context import ExecutionContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BaseTableInfo:
    """One object a defining query reads, pinned to its catalog id and type"""

    table_id: int
    catalog: str
    database: str
    name: str
    table_type: TableType

    @classmethod
    def of(cls, table: TableLike) -> 'BaseTableInfo':
        fqn = table.fqn
        return cls(table.id, fqn.parts[0], fqn.parts[1], fqn.name, table.table_type)

    def __str__(self) -> str:
        return f"{self.catalog}.{self.database}.{self.name}"


@dataclass(frozen=True)
class MaterializedViewRelation:
    """Base tables and base views a materialized view currently depends on"""

    base_tables: frozenset[BaseTableInfo] = field(default_factory=frozenset)
    base_views: frozenset[BaseTableInfo] = field(default_factory=frozenset)


def referenced_tables(sql: str, dialect: str) -> list[FQN]:
    """Table references in a query, excluding CTE names, in order of appearance

    Raises:
        AnalysisError: If the query cannot be parsed
    """
    try:
        tree = sqlglot.parse_one(sql, read=dialect)
    except SqlglotError as e:
        raise AnalysisError(f"Cannot parse query: {e}") from e
    if tree is None:
        raise AnalysisError("Empty query")

    cte_names = {cte.alias_or_name.upper() for cte in tree.find_all(exp.CTE)}
    names: list[FQN] = []
    for table in tree.find_all(exp.Table):
        if not table.name:
            continue
        parts = tuple(part for part in (table.catalog, table.db, table.name) if part)
        if len(parts) == 1 and parts[0].upper() in cte_names:
            continue
        fqn = FQN(parts=parts)
        if fqn not in names:
            names.append(fqn)
    return names


class RelationResolver:
    """Recomputes a materialized view's relation against current catalog state"""

    def __init__(self, catalogs: CatalogStore, dialect: str = "snowflake"):
        self._catalogs = catalogs
        self._dialect = dialect

    def generate(self, view: View, context: ExecutionContext) -> MaterializedViewRelation:
        """Analyze the view's definition; plain views are expanded to their own base tables

        Raises:
            AnalysisError: If the definition cannot be parsed or a reference cannot be resolved
        """
        tables: set[BaseTableInfo] = set()
        views: set[BaseTableInfo] = set()
        self._collect(view.definition, context.catalog, context.database, tables, views, set())
        relation = MaterializedViewRelation(frozenset(tables), frozenset(views))
        logger.debug(
            "Relation of %s: %d base tables, %d base views",
            view.name, len(relation.base_tables), len(relation.base_views),
        )
        return relation

    def _collect(
        self,
        sql: str,
        catalog: str,
        database: str,
        tables: set[BaseTableInfo],
        views: set[BaseTableInfo],
        expanding: set[int],
    ) -> None:
        for name in referenced_tables(sql, self._dialect):
            table = self._resolve(name.qualify(catalog, database))
            info = BaseTableInfo.of(table)
            if table.table_type != TableType.VIEW:
                tables.add(info)
                continue

            views.add(info)
            if table.id in expanding:
                raise AnalysisError(f"View {info} references itself")
            assert isinstance(table, View)
            expanding.add(table.id)
            self._collect(table.definition, info.catalog, info.database, tables, views, expanding)
            expanding.discard(table.id)

    def _resolve(self, name: FQN) -> TableLike:
        table: Optional[TableLike] = None
        catalog = self._catalogs.get_catalog_by_name(name.parts[0])
        if catalog is not None:
            database = catalog.get_db_by_name(name.parts[1])
            if database is not None:
                table = database.get_table(name.name)
        if table is None:
            raise AnalysisError(f"Table or view {name} does not exist")
        return table
