"""Job history: where finished refresh tasks publish their records"""

import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Optional, Protocol

import pandas as pd

from snowrefresh.models import FQN

from .audit import SCHEMA
from .base import AbstractTask, TaskStatus
from .relation import MaterializedViewRelation

logger = logging.getLogger(__name__)

MAX_HISTORY_TASKS_NUM = 100


class JobHistorySink(Protocol):
    def add_task_result(
        self,
        view_name: FQN,
        task: AbstractTask,
        relation: Optional[MaterializedViewRelation],
    ) -> None:
        ...


@dataclass(frozen=True)
class TaskRecord:
    """Snapshot of a task taken when it was published

    ``relation`` is None when the run failed before its relation was
    computed.
    """

    view_name: str
    task_id: int
    job_id: int
    status: TaskStatus
    row: tuple[str, ...]
    relation: Optional[MaterializedViewRelation]
    error_message: Optional[str] = None


class TaskHistory:
    """In-memory history keeping the most recent ``limit`` records per job"""

    def __init__(self, limit: int = MAX_HISTORY_TASKS_NUM):
        if limit < 1:
            raise ValueError(f"History limit must be positive, got {limit}")
        self._limit = limit
        self._records: dict[int, deque[TaskRecord]] = {}
        self._lock = threading.Lock()

    def add_task_result(
        self,
        view_name: FQN,
        task: AbstractTask,
        relation: Optional[MaterializedViewRelation],
    ) -> None:
        record = TaskRecord(
            view_name=str(view_name),
            task_id=task.task_id,
            job_id=task.job_id,
            status=task.status,
            row=tuple(task.get_tvf_info()),
            relation=relation,
            error_message=task.error_message,
        )
        with self._lock:
            records = self._records.setdefault(task.job_id, deque(maxlen=self._limit))
            records.append(record)
        logger.info("Recorded task %s of %s as %s", task.task_id, view_name, task.status.value)

    def records(self, job_id: Optional[int] = None) -> list[TaskRecord]:
        """Records oldest first, for one job or all jobs"""
        with self._lock:
            if job_id is not None:
                return list(self._records.get(job_id, ()))
            return [record for records in self._records.values() for record in records]

    def latest(self, job_id: int) -> Optional[TaskRecord]:
        with self._lock:
            records = self._records.get(job_id)
            return records[-1] if records else None

    def to_df(self, job_id: Optional[int] = None) -> pd.DataFrame:
        """Audit rows as a DataFrame with the audit schema's column names"""
        columns = [column.name for column in SCHEMA]
        return pd.DataFrame([list(r.row) for r in self.records(job_id)], columns=columns)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(records) for records in self._records.values())
