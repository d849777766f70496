"""Shared fixtures: an in-memory catalog and a controllable query engine."""

import threading
from typing import Any, Optional

import pytest

from snowrefresh.errors import ExecutionError
from snowrefresh.models import CatalogManager
from snowrefresh.task import MaterializedViewRefreshTask, RefreshEnv, TaskHistory


class FakeExecutor:
    """Statement execution that can block until released or canceled."""

    def __init__(self, engine: "FakeEngine", context: Any, sql: str):
        self.engine = engine
        self.context = context
        self.sql = sql
        self.execution_id: Optional[str] = None
        self.canceled = False
        self.cancel_calls = 0
        self.started = threading.Event()
        self._wake = threading.Event()

    def execute(self, execution_id: str) -> str:
        self.execution_id = execution_id
        self.started.set()
        if self.engine.block:
            self._wake.wait(timeout=5)
        if self.canceled:
            raise ExecutionError("canceled", execution_id, canceled=True)
        if self.engine.error is not None:
            raise self.engine.error
        return "ok"

    def cancel(self) -> None:
        self.cancel_calls += 1
        self.canceled = True
        self._wake.set()

    def release(self) -> None:
        self._wake.set()


class FakeEngine:
    """QueryEngine recording every executor it creates."""

    def __init__(self) -> None:
        self.block = False
        self.error: Optional[BaseException] = None
        self.executors: list[FakeExecutor] = []
        self.created = threading.Event()

    def create_executor(self, context: Any, sql: str) -> FakeExecutor:
        executor = FakeExecutor(self, context, sql)
        self.executors.append(executor)
        self.created.set()
        return executor


@pytest.fixture
def catalogs() -> CatalogManager:
    return CatalogManager()


@pytest.fixture
def sales_db(catalogs):
    """Internal database carrying a cluster namespace prefix."""
    return catalogs.internal_catalog.create_database("default_cluster:sales")


@pytest.fixture
def orders(sales_db):
    return sales_db.create_table("orders")


@pytest.fixture
def orders_mv(sales_db, orders):
    return sales_db.create_materialized_view("orders_mv", "SELECT id, amount FROM orders")


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def history() -> TaskHistory:
    return TaskHistory()


@pytest.fixture
def env(catalogs, engine, history) -> RefreshEnv:
    return RefreshEnv(catalogs=catalogs, engine=engine, history=history)


@pytest.fixture
def make_task(env, sales_db, orders_mv):
    """Factory for refresh tasks targeting orders_mv."""
    def _make(**kwargs: Any) -> MaterializedViewRefreshTask:
        kwargs.setdefault("job_id", 1)
        kwargs.setdefault("job_name", "orders_mv_refresh")
        return MaterializedViewRefreshTask(sales_db.id, orders_mv.id, env, **kwargs)
    return _make
