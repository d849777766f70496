"""Materialized view refresh task and the collaborator contracts it runs against"""

from .audit import SCHEMA, COLUMN_TO_INDEX, NULL_STRING
from .base import AbstractTask, TaskStatus
from .context import ExecutionContext, UserIdentity, build_context
from .history import JobHistorySink, TaskHistory, TaskRecord, MAX_HISTORY_TASKS_NUM
from .refresh import MaterializedViewRefreshTask, RefreshEnv
from .relation import BaseTableInfo, MaterializedViewRelation, RelationResolver
from .runner import (
    QueryEngine,
    StatementExecutor,
    StatementRunner,
    generate_execution_id,
    generate_sql,
)

__all__ = [
    "SCHEMA",
    "COLUMN_TO_INDEX",
    "NULL_STRING",
    "AbstractTask",
    "TaskStatus",
    "ExecutionContext",
    "UserIdentity",
    "build_context",
    "JobHistorySink",
    "TaskHistory",
    "TaskRecord",
    "MAX_HISTORY_TASKS_NUM",
    "MaterializedViewRefreshTask",
    "RefreshEnv",
    "BaseTableInfo",
    "MaterializedViewRelation",
    "RelationResolver",
    "QueryEngine",
    "StatementExecutor",
    "StatementRunner",
    "generate_execution_id",
    "generate_sql",
]
