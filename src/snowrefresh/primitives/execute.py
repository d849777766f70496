"""Execute SQL queries with safe parameter binding"""

from typing import Any, Dict, Optional, Union, Sequence

from snowrefresh.context import SnowflakeContext

from .job import QueryJob
from .result import QueryResult


class Executor:
    """Execute SQL queries with various strategies"""

    def __init__(self, context: Union[str, SnowflakeContext], **overrides: Any):
        """Initialize with a context profile name or SnowflakeContext instance"""
        if isinstance(context, str):
            self.context = SnowflakeContext(profile=context, **overrides)
        else:
            self.context = context

    def run(
        self,
        sql: str,
        bindings: Optional[Sequence[Any]] = None
    ) -> QueryResult:
        """Execute SQL and return a QueryResult"""
        if bindings is None:
            cursor = self.context.cursor.execute(sql)
        else:
            cursor = self.context.cursor.execute(sql, bindings)
        return QueryResult(_cursor=cursor)

    def run_async(
        self,
        sql: str,
        bindings: Optional[Sequence[Any]] = None,
        statement_params: Optional[Dict[str, Any]] = None,
    ) -> QueryJob:
        """Submit SQL without waiting and return a QueryJob"""
        kwargs: Dict[str, Any] = {}
        if statement_params:
            kwargs["_statement_params"] = statement_params

        cursor = self.context.cursor
        if bindings is None:
            response_data = cursor.execute_async(sql, **kwargs)
        else:
            response_data = cursor.execute_async(sql, bindings, **kwargs)

        query_id = response_data.get("queryId")
        if not query_id:
            raise RuntimeError(
                f"Failed to get queryId from async execution response. Response: {response_data}"
            )
        return QueryJob(query_id=query_id, sql=sql, _conn=self.context.connection)

    def run_with_result_scan(
        self,
        sql: str,
        bindings: Optional[Sequence[Any]] = None
    ) -> QueryResult:
        """Execute SQL and fetch results via RESULT_SCAN"""
        result = self.run(sql, bindings=bindings)
        return self.run("SELECT * FROM TABLE(RESULT_SCAN(%s))", bindings=[result.query_id])


def execute_sql(
    sql: str, context: Union[str, SnowflakeContext], **overrides: Any
) -> QueryResult:
    """Execute SQL and return a QueryResult"""
    return Executor(context, **overrides).run(sql)
