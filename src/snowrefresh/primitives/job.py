"""Handle for a statement executing asynchronously on Snowflake.

Refresh statements are submitted with ``execute_async`` so that another
thread can abort them by query id while the submitting thread polls for
completion.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from snowflake.connector import SnowflakeConnection

    from .result import QueryResult


@dataclass(frozen=True)
class QueryJob:
    """Represents a query executing asynchronously on Snowflake.

    Attributes:
        query_id: The Snowflake query ID (sfqid) for this async query.
        sql: The SQL statement that was submitted.
        _conn: The SnowflakeConnection used to submit the query.

    Example:
        >>> job = Executor(ctx).run_async("INSERT OVERWRITE TABLE ...")
        >>> while job.is_running():
        ...     time.sleep(1)
        >>> result = job.get_result()
    """

    query_id: str
    sql: str
    _conn: SnowflakeConnection

    def get_result(self) -> QueryResult:
        """Block until the query completes and return its result.

        Raises:
            ProgrammingError: If the query failed or was aborted.
            DatabaseError: If there was a problem retrieving the results.
        """
        from .result import QueryResult

        cursor = self._conn.cursor()
        try:
            cursor.get_results_from_sfqid(self.query_id)
            # QueryResult takes ownership of the cursor
            return QueryResult(_cursor=cursor)
        except Exception:
            cursor.close()
            raise

    @property
    def status(self) -> str:
        """Name of the connector's QueryStatus for this query ('RUNNING', 'SUCCESS', 'ABORTED', ...)"""
        return self._conn.get_query_status(self.query_id).name

    def is_running(self) -> bool:
        """True while the query is queued, resuming or running"""
        status_enum = self._conn.get_query_status(self.query_id)
        return self._conn.is_still_running(status_enum)

    def abort(self) -> bool:
        """Ask Snowflake to cancel the query; True if the request was acknowledged.

        The call returns as soon as the cancel request is accepted. The query
        may still be unwinding afterwards.
        """
        cursor = self._conn.cursor()
        try:
            cursor.execute("SELECT SYSTEM$CANCEL_QUERY(%s)", (self.query_id,))
            result = cursor.fetchone()
            return result is not None and "cancelled" in result[0]
        finally:
            cursor.close()
