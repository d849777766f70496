"""Materialized view refresh task"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from snowrefresh.config import RefreshSettings
from snowrefresh.errors import ExecutionError, JobException, ResolutionError
from snowrefresh.models import CatalogStore, MaterializedView, TableType

from .audit import NULL_STRING, long_to_time_string
from .base import AbstractTask, TaskStatus
from .context import build_context
from .history import JobHistorySink
from .relation import MaterializedViewRelation, RelationResolver
from .runner import (
    QueryEngine,
    StatementExecutor,
    StatementRunner,
    generate_execution_id,
    generate_sql,
)

logger = logging.getLogger(__name__)


@dataclass
class RefreshEnv:
    """Collaborators a refresh task resolves, executes and publishes through"""

    catalogs: CatalogStore
    engine: QueryEngine
    history: JobHistorySink
    settings: RefreshSettings = field(default_factory=RefreshSettings)
    resolver: Optional[RelationResolver] = None

    def __post_init__(self) -> None:
        if self.resolver is None:
            self.resolver = RelationResolver(self.catalogs, self.settings.dialect)


@dataclass
class _RunState:
    view: MaterializedView
    relation: Optional[MaterializedViewRelation] = None
    executor: Optional[StatementExecutor] = None


class MaterializedViewRefreshTask(AbstractTask):
    """Refreshes one materialized view by overwriting it with its defining query

    ``before()`` resolves the view and generates the statement, ``run()``
    recomputes the dependency relation and executes the statement, and
    exactly one of ``on_success``/``on_fail``/``cancel`` publishes the task
    with its relation to the job history. After publication the task keeps
    only its audit attributes.

    Example:
        >>> task = MaterializedViewRefreshTask(db.id, mv.id, env, job_id=7, job_name="orders_mv")
        >>> task.run_task()
        <TaskStatus.SUCCEEDED: 'SUCCEEDED'>
    """

    def __init__(
        self,
        db_id: int,
        view_id: int,
        env: RefreshEnv,
        job_id: int = 0,
        job_name: str = "",
        task_id: Optional[int] = None,
    ):
        super().__init__(job_id, job_name, task_id)
        self.db_id = db_id
        self.view_id = view_id
        self.sql: Optional[str] = None
        self._env = env
        self._runner = StatementRunner(env.engine)
        self._state: Optional[_RunState] = None

    @property
    def relation(self) -> Optional[MaterializedViewRelation]:
        """Relation computed by the active run, if any"""
        with self._lock:
            return self._state.relation if self._state else None

    @property
    def has_active_run(self) -> bool:
        with self._lock:
            return self._state is not None

    def before(self) -> None:
        super().before()
        try:
            db = self._env.catalogs.get_db_or_raise(self.db_id)
            view = db.get_table_or_raise(self.view_id, TableType.MATERIALIZED_VIEW)
            assert isinstance(view, MaterializedView)
            sql = generate_sql(view)
        except ResolutionError as e:
            logger.warning("Cannot resolve materialized view %s in database %s",
                           self.view_id, self.db_id, exc_info=True)
            raise JobException(f"Task {self.task_id}: {e}") from e

        with self._lock:
            if self.status.is_terminal:
                raise JobException(f"Task {self.task_id} already {self.status.value}")
            self.sql = sql
            self._state = _RunState(view)
            self.status = TaskStatus.BEFORE_DONE

    def run(self) -> None:
        with self._lock:
            state = self._state
            if state is None or self.status != TaskStatus.BEFORE_DONE:
                raise JobException(f"Task {self.task_id} cannot run while {self.status.value}")
            self.status = TaskStatus.RUNNING
            sql = self.sql

        try:
            context = build_context(state.view, self._env.catalogs, self._env.settings)
            # Recomputed on every run: base tables may have been dropped or replaced since the last one
            assert self._env.resolver is not None
            relation = self._env.resolver.generate(state.view, context)
            with self._lock:
                state.relation = relation
            execution_id = generate_execution_id()
            result = self._runner.execute(
                context, sql, execution_id,
                on_start=lambda executor: self._install_executor(state, executor, execution_id),
            )
            logger.info("Refreshed %s: %s", state.view.fqn, result)
        except Exception as e:
            logger.warning("Refresh task %s of %s failed", self.task_id, state.view.fqn, exc_info=True)
            raise JobException(f"Task {self.task_id}: {e}") from e
        finally:
            with self._lock:
                state.executor = None

    def _install_executor(self, state: _RunState, executor: StatementExecutor, execution_id: str) -> None:
        with self._lock:
            if self._state is not state or self.status.is_terminal:
                raise ExecutionError(f"Task {self.task_id} was {self.status.value} before execution",
                                     execution_id, canceled=self.status == TaskStatus.CANCELED)
            state.executor = executor

    def on_success(self) -> bool:
        with self._lock:
            finished = super().on_success()
            if finished:
                self._after()
            return finished

    def on_fail(self, error: Optional[BaseException] = None) -> bool:
        with self._lock:
            finished = super().on_fail(error)
            if finished:
                self._after()
            return finished

    def cancel(self) -> bool:
        """Mark CANCELED and publish immediately; the in-flight statement may still be unwinding"""
        with self._lock:
            finished = super().cancel()
            if finished:
                if self._state is not None and self._state.executor is not None:
                    self._runner.cancel()
                self._after()
            return finished

    def _after(self) -> None:
        """Publish the run to the job history and drop the run state; caller holds _lock"""
        state = self._state
        if state is None:
            logger.info("Task %s has no active run, nothing to publish", self.task_id)
            return
        try:
            self._env.history.add_task_result(state.view.fqn, self, state.relation)
        finally:
            self._state = None

    def get_tvf_info(self) -> list[str]:
        with self._lock:
            start, finish = self.start_time_ms, self.finish_time_ms
            duration = str(finish - start) if start is not None and finish is not None else NULL_STRING
            return [
                str(self.task_id),
                str(self.job_id),
                self.job_name,
                self.status.value,
                long_to_time_string(self.create_time_ms),
                long_to_time_string(start),
                long_to_time_string(finish),
                duration,
                self.sql if self.sql is not None else NULL_STRING,
            ]
