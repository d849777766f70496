"""Exception hierarchy for materialized view refresh tasks"""

from typing import Optional


class RefreshError(Exception):
    """Base class for all snowrefresh errors"""


class ResolutionError(RefreshError):
    """A catalog, database or view could not be resolved"""


class DoesNotExist(ResolutionError):
    """The requested catalog object does not exist (or was dropped)"""


class TypeMismatch(ResolutionError):
    """The catalog object exists but has an unexpected type"""


class AnalysisError(RefreshError):
    """A defining query could not be analyzed against current catalog state"""


class ExecutionError(RefreshError):
    """The query engine reported a failure or the execution was canceled"""

    def __init__(
        self,
        message: str,
        execution_id: Optional[str] = None,
        canceled: bool = False,
    ):
        super().__init__(message)
        self.execution_id = execution_id
        self.canceled = canceled


class JobException(RefreshError):
    """Job-level error raised by task hooks; the original error is chained as __cause__"""
