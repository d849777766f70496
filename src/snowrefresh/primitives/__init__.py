"""Primitive operations to wrap direct Snowflake connector calls"""

from snowrefresh.primitives.result import QueryResult
from snowrefresh.primitives.job import QueryJob
from snowrefresh.primitives.execute import Executor, execute_sql
from snowrefresh.primitives.statement import SnowflakeQueryEngine, SnowflakeStatementExecutor

__all__ = [
    "QueryResult",
    "QueryJob",
    "Executor",
    "execute_sql",
    "SnowflakeQueryEngine",
    "SnowflakeStatementExecutor",
]
