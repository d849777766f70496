"""Snowflake-backed statement execution with cooperative cancellation.

Each execution opens its own connection with the run's default database,
schema and role, submits the statement asynchronously and polls until it
finishes. ``cancel()`` may be called from any thread: it flags the execution
and asks Snowflake to cancel the query by id.
"""

import logging
import threading
import time
from typing import TYPE_CHECKING, Any, Dict, Optional

import sqlglot
from snowflake.connector.errors import Error as SnowflakeError
from sqlglot.errors import SqlglotError

from snowrefresh.context import SnowflakeContext
from snowrefresh.errors import ExecutionError

from .execute import Executor
from .job import QueryJob
from .result import QueryResult

if TYPE_CHECKING:
    from snowrefresh.task.context import ExecutionContext

logger = logging.getLogger(__name__)


class SnowflakeStatementExecutor:
    """Runs one statement; ``execute`` blocks the calling thread, ``cancel`` never blocks"""

    def __init__(
        self,
        sql: str,
        profile: str,
        database: str,
        schema: str,
        role: Optional[str] = None,
        session_parameters: Optional[Dict[str, Any]] = None,
        poll_interval: float = 1.0,
        **overrides: Any,
    ):
        self.sql = sql
        self._profile = profile
        self._database = database
        self._schema = schema
        self._role = role
        self._session_parameters = session_parameters
        self._overrides = overrides
        self._poll_interval = poll_interval
        self._canceled = threading.Event()
        self._lock = threading.Lock()
        self._job: Optional[QueryJob] = None

    @property
    def job(self) -> Optional[QueryJob]:
        with self._lock:
            return self._job

    def execute(self, execution_id: str) -> QueryResult:
        """Submit, poll until done, and return the result

        Raises:
            ExecutionError: On any connector failure; ``canceled`` is set when
                the failure follows a cancel request
        """
        if self._canceled.is_set():
            raise ExecutionError(f"Execution {execution_id} canceled before submit",
                                 execution_id, canceled=True)

        context = SnowflakeContext.for_namespace(
            self._profile, self._database, self._schema,
            role=self._role, session_parameters=self._session_parameters, **self._overrides
        )
        try:
            job = Executor(context).run_async(
                self.sql, statement_params={"QUERY_TAG": execution_id}
            )
            with self._lock:
                self._job = job
            logger.info("Execution %s submitted as query %s in %s",
                        execution_id, job.query_id, context.namespace)

            if self._canceled.is_set():
                job.abort()
            while job.is_running():
                logger.debug("Query %s still running", job.query_id)
                time.sleep(self._poll_interval)
            return job.get_result()
        except SnowflakeError as e:
            raise ExecutionError(
                f"Execution {execution_id} failed: {e}",
                execution_id,
                canceled=self._canceled.is_set(),
            ) from e
        finally:
            with self._lock:
                self._job = None
            context.close()

    def cancel(self) -> None:
        self._canceled.set()
        job = self.job
        if job is None:
            return
        try:
            if not job.abort():
                logger.warning("Snowflake did not acknowledge cancel of query %s", job.query_id)
        except SnowflakeError:
            logger.warning("Cancel of query %s failed", job.query_id, exc_info=True)


def to_snowflake_sql(sql: str, dialect: str = "snowflake") -> str:
    """Render a refresh statement in Snowflake syntax

    INSERT OVERWRITE TABLE t ... becomes INSERT OVERWRITE INTO t ...; the
    defining query is read in ``dialect``.

    Raises:
        ExecutionError: If the statement cannot be parsed
    """
    try:
        return sqlglot.transpile(sql, read=dialect, write="snowflake")[0]
    except SqlglotError as e:
        raise ExecutionError(f"Cannot translate statement for Snowflake: {e}") from e


class SnowflakeQueryEngine:
    """Creates Snowflake statement executors for refresh runs

    Args:
        profile: Connection profile from connections.toml
        poll_interval: Seconds between status polls
        dialect: sqlglot dialect the defining queries are written in
        **overrides: Connection parameter overrides applied to every execution
    """

    def __init__(
        self,
        profile: str,
        poll_interval: float = 1.0,
        dialect: str = "snowflake",
        **overrides: Any,
    ):
        self._profile = profile
        self._poll_interval = poll_interval
        self._dialect = dialect
        self._overrides = overrides

    def create_executor(self, context: "ExecutionContext", sql: str) -> SnowflakeStatementExecutor:
        """Executor running ``sql`` with the context's catalog as database and its database as schema"""
        return SnowflakeStatementExecutor(
            to_snowflake_sql(sql, self._dialect),
            self._profile,
            context.catalog,
            context.database,
            role=context.identity.role,
            session_parameters=dict(context.session_variables) or None,
            poll_interval=self._poll_interval,
            **self._overrides,
        )
