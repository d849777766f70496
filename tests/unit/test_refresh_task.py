"""Lifecycle tests for MaterializedViewRefreshTask"""

import threading

import pytest

from snowrefresh.errors import ExecutionError, JobException, ResolutionError
from snowrefresh.task import MaterializedViewRefreshTask, TaskStatus

EXPECTED_SQL = "INSERT OVERWRITE TABLE internal.sales.orders_mv SELECT id, amount FROM orders"


def run_in_thread(task):
    result = {}
    worker = threading.Thread(target=lambda: result.setdefault("status", task.run_task()))
    worker.start()
    return worker, result


class TestLifecycle:
    """Tests for before/run/terminal hooks driven step by step."""

    def test_before_generates_sql(self, make_task):
        task = make_task()

        task.before()

        assert task.status is TaskStatus.BEFORE_DONE
        assert task.sql == EXPECTED_SQL
        assert task.start_time_ms is not None
        assert task.has_active_run

    def test_run_executes_under_view_environment(self, make_task, engine, orders):
        task = make_task()
        task.before()

        task.run()

        assert task.status is TaskStatus.RUNNING
        executor = engine.executors[0]
        assert executor.sql == EXPECTED_SQL
        assert executor.context.catalog == "internal"
        assert executor.context.database == "sales"
        assert executor.context.identity.user == "admin"
        assert executor.execution_id
        assert {t.name for t in task.relation.base_tables} == {"orders"}

    def test_success_publishes_and_clears_state(self, make_task, history):
        task = make_task()
        task.before()
        task.run()

        assert task.on_success() is True

        assert task.status is TaskStatus.SUCCEEDED
        assert task.finish_time_ms is not None
        assert not task.has_active_run
        assert task.relation is None
        assert len(history) == 1
        assert history.latest(1).relation is not None
        assert task.sql == EXPECTED_SQL

    def test_run_without_before(self, make_task):
        with pytest.raises(JobException, match="cannot run"):
            make_task().run()

    def test_terminal_hooks_fire_once(self, make_task, history):
        task = make_task()
        task.before()
        task.run()

        assert task.on_success() is True
        assert task.on_fail(RuntimeError("late")) is False
        assert task.cancel() is False

        assert task.status is TaskStatus.SUCCEEDED
        assert task.error_message is None
        assert len(history) == 1

    def test_each_run_gets_new_execution_id(self, make_task, engine):
        make_task().run_task()
        make_task().run_task()

        assert engine.executors[0].execution_id != engine.executors[1].execution_id


class TestRunTask:
    """Tests for the scheduler entry point."""

    def test_success(self, make_task, history):
        task = make_task()

        assert task.run_task() is TaskStatus.SUCCEEDED
        assert history.latest(1).status is TaskStatus.SUCCEEDED

    def test_missing_view_fails_without_publishing(self, make_task, sales_db, history):
        sales_db.drop_table("orders_mv")
        task = make_task()

        assert task.run_task() is TaskStatus.FAILED

        assert isinstance(task.error_message, str)
        assert task.sql is None
        assert len(history) == 0

    def test_missing_database_chains_cause(self, make_task, catalogs, sales_db):
        catalogs.internal_catalog.drop_database(sales_db.id)
        task = make_task()

        with pytest.raises(JobException) as exc_info:
            task.before()

        assert isinstance(exc_info.value.__cause__, ResolutionError)

    def test_wrong_type_fails(self, env, sales_db, orders):
        task = MaterializedViewRefreshTask(sales_db.id, orders.id, env, job_id=1)

        assert task.run_task() is TaskStatus.FAILED
        assert "expected MATERIALIZED_VIEW" in task.error_message

    def test_relation_failure_publishes_without_relation(self, make_task, sales_db, history, engine):
        sales_db.drop_table("orders")
        task = make_task()

        assert task.run_task() is TaskStatus.FAILED

        record = history.latest(1)
        assert record.status is TaskStatus.FAILED
        assert record.relation is None
        assert "does not exist" in record.error_message
        assert engine.executors == []

    def test_execution_failure_publishes_relation(self, make_task, engine, history):
        engine.error = ExecutionError("Numeric value 'abc' is not recognized", "x")
        task = make_task()

        assert task.run_task() is TaskStatus.FAILED

        record = history.latest(1)
        assert record.relation is not None
        assert "not recognized" in record.error_message

    def test_canceled_task_does_not_start(self, make_task, history, engine):
        task = make_task()
        assert task.cancel() is True

        assert task.run_task() is TaskStatus.CANCELED
        assert engine.executors == []
        assert len(history) == 0


    def test_unlexable_definition_fails_with_analysis_error(self, env, sales_db):
        from snowrefresh.errors import AnalysisError

        mv = sales_db.create_materialized_view("bad_mv", "SELECT 'unterminated FROM orders")
        task = MaterializedViewRefreshTask(sales_db.id, mv.id, env, job_id=5)
        task.before()

        with pytest.raises(JobException) as exc_info:
            task.run()

        assert isinstance(exc_info.value.__cause__, AnalysisError)


class TestCancel:
    """Tests for cancellation from another thread."""

    def test_cancel_during_execution(self, make_task, engine, history):
        engine.block = True
        task = make_task()
        worker, result = run_in_thread(task)
        assert engine.created.wait(timeout=5)
        assert engine.executors[0].started.wait(timeout=5)

        assert task.cancel() is True
        worker.join(timeout=5)

        assert not worker.is_alive()
        assert result["status"] is TaskStatus.CANCELED
        assert engine.executors[0].cancel_calls == 1
        assert [r.status for r in history.records()] == [TaskStatus.CANCELED]
        assert history.latest(1).relation is not None

    def test_cancel_before_execution_starts(self, make_task, engine, history):
        task = make_task()
        task.before()
        assert task.cancel() is True

        with pytest.raises(JobException, match="cannot run"):
            task.run()

        assert engine.executors == []
        assert history.latest(1).status is TaskStatus.CANCELED

    def test_cancel_between_submit_and_install(self, make_task, engine, history):
        """A cancel that lands before the executor is installed still stops the run"""
        task = make_task()
        task.before()

        original = engine.create_executor

        def create_then_cancel(context, sql):
            executor = original(context, sql)
            task.cancel()
            return executor

        engine.create_executor = create_then_cancel

        with pytest.raises(JobException) as exc_info:
            task.run()

        assert exc_info.value.__cause__.canceled is True
        assert engine.executors[0].execution_id is None
        assert task.status is TaskStatus.CANCELED
        assert len(history) == 1

    def test_cancel_after_finish_is_noop(self, make_task, engine):
        task = make_task()
        task.run_task()

        assert task.cancel() is False
        assert task.status is TaskStatus.SUCCEEDED
        assert engine.executors[0].cancel_calls == 0

    def test_racing_cancel_and_fail_publish_once(self, make_task, history):
        task = make_task()
        task.before()
        barrier = threading.Barrier(2)
        outcomes = []

        def fail():
            barrier.wait()
            outcomes.append(task.on_fail(RuntimeError("boom")))

        def cancel():
            barrier.wait()
            outcomes.append(task.cancel())

        threads = [threading.Thread(target=fail), threading.Thread(target=cancel)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert sorted(outcomes) == [False, True]
        assert task.status in (TaskStatus.FAILED, TaskStatus.CANCELED)
        assert len(history) == 1
        assert history.latest(1).status is task.status

    def test_publication_failure_still_clears_state(self, make_task, history, monkeypatch):
        task = make_task()
        task.before()

        def broken(*args, **kwargs):
            raise RuntimeError("history unavailable")

        monkeypatch.setattr(history, "add_task_result", broken)

        with pytest.raises(RuntimeError, match="history unavailable"):
            task.on_success()

        assert task.status is TaskStatus.SUCCEEDED
        assert not task.has_active_run
