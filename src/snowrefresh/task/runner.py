"""Overwrite statement generation and cancellable execution"""

import logging
import threading
import uuid
from typing import Any, Callable, Optional, Protocol

from snowrefresh.errors import ExecutionError
from snowrefresh.models import MaterializedView

from .context import ExecutionContext

logger = logging.getLogger(__name__)


class StatementExecutor(Protocol):
    """One statement execution, cancellable from another thread"""

    def execute(self, execution_id: str) -> Any:
        """Run synchronously until completion, cancellation or error"""
        ...

    def cancel(self) -> None:
        """Request termination and return without waiting for it"""
        ...


class QueryEngine(Protocol):
    def create_executor(self, context: ExecutionContext, sql: str) -> StatementExecutor:
        ...


def generate_sql(view: MaterializedView) -> str:
    """INSERT OVERWRITE TABLE <catalog>.<database>.<view> <query>

    The database part has its cluster namespace prefix stripped.
    """
    return f"INSERT OVERWRITE TABLE {view.fqn} {view.query_sql}"


def generate_execution_id() -> str:
    return str(uuid.uuid4())


class StatementRunner:
    """Drives at most one statement execution at a time and forwards cancel requests to it"""

    def __init__(self, engine: QueryEngine):
        self._engine = engine
        self._lock = threading.Lock()
        self._executor: Optional[StatementExecutor] = None

    @property
    def running(self) -> bool:
        with self._lock:
            return self._executor is not None

    def execute(
        self,
        context: ExecutionContext,
        sql: str,
        execution_id: str,
        on_start: Optional[Callable[[StatementExecutor], None]] = None,
    ) -> Any:
        """Execute ``sql`` under ``context`` and return the engine's result

        ``on_start`` receives the execution handle before the statement is
        submitted; raising from it aborts the execution.

        Raises:
            ExecutionError: If the engine fails or the execution was canceled
        """
        executor = self._engine.create_executor(context, sql)
        with self._lock:
            if self._executor is not None:
                raise ExecutionError("A statement is already running", execution_id)
            self._executor = executor

        logger.info("Executing %s as %s (execution %s)", sql, context.identity, execution_id)
        try:
            if on_start is not None:
                on_start(executor)
            return executor.execute(execution_id)
        except ExecutionError:
            raise
        except Exception as e:
            raise ExecutionError(f"Execution {execution_id} failed: {e}", execution_id) from e
        finally:
            with self._lock:
                self._executor = None

    def cancel(self) -> None:
        """Signal the in-flight execution, if any; returns immediately"""
        with self._lock:
            executor = self._executor
        if executor is None:
            logger.debug("Cancel requested with no statement in flight")
            return
        executor.cancel()
