"""Tests for refresh statement generation and execution"""

import threading
import uuid

import pytest

from snowrefresh.errors import ExecutionError
from snowrefresh.models import CatalogManager
from snowrefresh.task.context import ExecutionContext, UserIdentity
from snowrefresh.task.runner import StatementRunner, generate_execution_id, generate_sql


@pytest.fixture
def context():
    return ExecutionContext(identity=UserIdentity("admin"), catalog="internal", database="sales")


class TestGenerateSql:
    """Tests for the overwrite statement text."""

    def test_namespace_stripped(self):
        catalogs = CatalogManager(internal_catalog_name="c")
        db = catalogs.internal_catalog.create_database("ns:db")
        view = db.create_materialized_view("v", "SELECT 1")

        assert generate_sql(view) == "INSERT OVERWRITE TABLE c.db.v SELECT 1"

    def test_query_kept_verbatim(self, orders_mv):
        assert generate_sql(orders_mv) == (
            "INSERT OVERWRITE TABLE internal.sales.orders_mv SELECT id, amount FROM orders"
        )

    def test_execution_ids_unique(self):
        first, second = generate_execution_id(), generate_execution_id()
        assert first != second
        uuid.UUID(first)


class TestStatementRunner:
    """Tests for single-flight execution and cancellation."""

    def test_execute_returns_result(self, engine, context):
        runner = StatementRunner(engine)

        result = runner.execute(context, "INSERT OVERWRITE TABLE a.b.c SELECT 1", "exec-1")

        assert result == "ok"
        executor = engine.executors[0]
        assert executor.context is context
        assert executor.sql == "INSERT OVERWRITE TABLE a.b.c SELECT 1"
        assert executor.execution_id == "exec-1"
        assert runner.running is False

    def test_on_start_receives_executor(self, engine, context):
        runner = StatementRunner(engine)
        seen = []

        runner.execute(context, "SELECT 1", "exec-1", on_start=seen.append)

        assert seen == engine.executors

    def test_on_start_can_abort(self, engine, context):
        runner = StatementRunner(engine)

        def refuse(executor):
            raise ExecutionError("not now", "exec-1", canceled=True)

        with pytest.raises(ExecutionError, match="not now"):
            runner.execute(context, "SELECT 1", "exec-1", on_start=refuse)

        assert engine.executors[0].execution_id is None
        assert runner.running is False

    def test_engine_error_passes_through(self, engine, context):
        engine.error = ExecutionError("syntax error", "exec-1")
        runner = StatementRunner(engine)

        with pytest.raises(ExecutionError, match="syntax error"):
            runner.execute(context, "SELECT 1", "exec-1")

    def test_unexpected_error_wrapped(self, engine, context):
        engine.error = RuntimeError("socket closed")
        runner = StatementRunner(engine)

        with pytest.raises(ExecutionError) as exc_info:
            runner.execute(context, "SELECT 1", "exec-1")

        assert exc_info.value.execution_id == "exec-1"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_cancel_without_execution_is_noop(self, engine):
        StatementRunner(engine).cancel()

        assert engine.executors == []

    def test_cancel_and_single_flight(self, engine, context):
        engine.block = True
        runner = StatementRunner(engine)
        errors = []

        def run():
            try:
                runner.execute(context, "SELECT 1", "exec-1")
            except ExecutionError as e:
                errors.append(e)

        worker = threading.Thread(target=run)
        worker.start()
        assert engine.created.wait(timeout=5)
        assert engine.executors[0].started.wait(timeout=5)
        assert runner.running is True

        with pytest.raises(ExecutionError, match="already running"):
            runner.execute(context, "SELECT 2", "exec-2")

        runner.cancel()
        worker.join(timeout=5)

        assert not worker.is_alive()
        assert engine.executors[0].cancel_calls == 1
        assert len(errors) == 1 and errors[0].canceled is True
        assert runner.running is False
