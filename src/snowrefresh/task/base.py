"""Task lifecycle shared by scheduled job tasks"""

import itertools
import logging
import threading
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from snowrefresh.errors import JobException

logger = logging.getLogger(__name__)

_task_ids = itertools.count(1)
_task_ids_lock = threading.Lock()


def current_time_ms() -> int:
    return int(time.time() * 1000)


def next_task_id() -> int:
    with _task_ids_lock:
        return next(_task_ids)


class TaskStatus(str, Enum):
    CREATED = "CREATED"
    BEFORE_DONE = "BEFORE_DONE"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELED = "CANCELED"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.SUCCEEDED, TaskStatus.FAILED, TaskStatus.CANCELED)


class AbstractTask(ABC):
    """One execution attempt of a scheduled job

    The scheduler calls ``run_task()`` on a worker thread, or drives
    ``before``/``run`` and a terminal hook itself. ``cancel()`` may arrive
    from any thread. Terminal hooks are serialized on ``_lock`` and the first
    one wins; terminal states are absorbing.
    """

    def __init__(self, job_id: int, job_name: str, task_id: Optional[int] = None):
        self.task_id = task_id if task_id is not None else next_task_id()
        self.job_id = job_id
        self.job_name = job_name
        self.status = TaskStatus.CREATED
        self.create_time_ms: int = current_time_ms()
        self.start_time_ms: Optional[int] = None
        self.finish_time_ms: Optional[int] = None
        self.error_message: Optional[str] = None
        self._lock = threading.RLock()

    def before(self) -> None:
        """Record the start time

        Raises:
            JobException: If the task already reached a terminal state
        """
        with self._lock:
            if self.status.is_terminal:
                raise JobException(f"Task {self.task_id} already {self.status.value}")
            self.start_time_ms = current_time_ms()

    @abstractmethod
    def run(self) -> None:
        ...

    def on_success(self) -> bool:
        """Mark the task succeeded; False if it had already finished"""
        return self._finish(TaskStatus.SUCCEEDED)

    def on_fail(self, error: Optional[BaseException] = None) -> bool:
        """Mark the task failed; False if it had already finished"""
        with self._lock:
            finished = self._finish(TaskStatus.FAILED)
            if finished and error is not None:
                self.error_message = str(error)
            return finished

    def cancel(self) -> bool:
        """Mark the task canceled; False if it had already finished"""
        return self._finish(TaskStatus.CANCELED)

    def _finish(self, status: TaskStatus) -> bool:
        with self._lock:
            if self.status.is_terminal:
                logger.debug("Task %s already %s, ignoring %s", self.task_id, self.status.value, status.value)
                return False
            self.status = status
            self.finish_time_ms = current_time_ms()
            logger.info("Task %s of job %s %s", self.task_id, self.job_id, status.value)
            return True

    def run_task(self) -> TaskStatus:
        """Run before, run and the matching terminal hook; returns the final status"""
        try:
            self.before()
            self.run()
        except JobException as e:
            logger.warning("Task %s of job %s failed: %s", self.task_id, self.job_id, e)
            self.on_fail(e)
        else:
            self.on_success()
        return self.status

    @abstractmethod
    def get_tvf_info(self) -> list[str]:
        """Audit row describing this task"""
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(task_id={self.task_id}, job_id={self.job_id}, status={self.status.value})"
