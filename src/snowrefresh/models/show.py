"""Fill the in-memory catalog from Snowflake SHOW output.

Snowflake's database.schema.object hierarchy maps onto
catalog.database.object: load one Snowflake schema into one catalog
Database.
"""

import logging
import warnings
from typing import Any, Optional

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from snowrefresh.context import SnowflakeContext
from snowrefresh.errors import AnalysisError
from snowrefresh.primitives import Executor
from snowrefresh.utils.identifiers import is_valid_identifier
from snowrefresh.utils.query import SafeQuery

from .database import Database
from .table import TableLike

logger = logging.getLogger(__name__)


class Show:
    """Execute SHOW commands to query Snowflake object metadata."""

    def __init__(self, context: SnowflakeContext):
        self._context = context

    def execute(
        self,
        object_plural: str,
        schema_fqn: Optional[str] = None,
        like: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Execute a SHOW command and return results as list of dicts."""
        query = SafeQuery(f"SHOW {object_plural}")
        query.when(like, "LIKE %s", like)
        query.when(schema_fqn, "IN SCHEMA IDENTIFIER(%s)", schema_fqn)
        sql, bindings = query.as_tuple()

        df = Executor(self._context).run_with_result_scan(sql, bindings=bindings).to_df()
        if df.empty:
            return []

        records: list[dict[str, Any]] = df.to_dict("records")  # type: ignore[assignment]
        return records


def extract_defining_query(text: str, dialect: str = "snowflake") -> str:
    """Return the SELECT part of a CREATE [MATERIALIZED] VIEW statement

    Raises:
        AnalysisError: If the text cannot be parsed
    """
    try:
        statement = sqlglot.parse_one(text, read=dialect)
    except SqlglotError as e:
        raise AnalysisError(f"Cannot parse view text: {e}") from e

    if isinstance(statement, exp.Create) and statement.expression is not None:
        return statement.expression.sql(dialect=dialect)
    return statement.sql(dialect=dialect)


def _is_loadable(name: str, database: Database) -> bool:
    if not is_valid_identifier(name):
        msg = (
            f"Skipping object with quoted identifier: {name!r}. "
            "Only unquoted identifiers are loaded into the catalog."
        )
        warnings.warn(msg, UserWarning, stacklevel=3)
        return False
    if database.get_table(name) is not None:
        logger.debug("Object %s already in database %s, keeping it", name, database.full_name)
        return False
    return True


def load_schema_objects(
    database: Database,
    context: SnowflakeContext,
    schema_fqn: str,
    dialect: str = "snowflake",
) -> list[TableLike]:
    """Register the tables, views and materialized views of a Snowflake schema

    Objects already present in ``database`` are left untouched.

    Args:
        database: Catalog database to fill
        context: Connection used for the SHOW commands
        schema_fqn: Snowflake schema as DATABASE.SCHEMA
        dialect: sqlglot dialect of the view texts

    Returns:
        The newly registered objects
    """
    show = Show(context)
    loaded: list[TableLike] = []

    for row in show.execute("TABLES", schema_fqn):
        if _is_loadable(row["name"], database):
            loaded.append(database.create_table(row["name"]))

    for row in show.execute("VIEWS", schema_fqn):
        name = row["name"]
        if not _is_loadable(name, database):
            continue
        query = extract_defining_query(row["text"], dialect)
        if str(row.get("is_materialized", "false")).lower() == "true":
            loaded.append(database.create_materialized_view(name, query))
        else:
            loaded.append(database.create_view(name, query))

    logger.info("Loaded %d objects from %s into %s", len(loaded), schema_fqn, database.full_name)
    return loaded
