"""Audit row schema shared by refresh tasks and their history"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional

NULL_STRING = "\\N"


@dataclass(frozen=True)
class ColumnDef:
    name: str
    type: str = "STRING"


SCHEMA: tuple[ColumnDef, ...] = (
    ColumnDef("TaskId"),
    ColumnDef("JobId"),
    ColumnDef("JobName"),
    ColumnDef("Status"),
    ColumnDef("CreateTime"),
    ColumnDef("StartTime"),
    ColumnDef("FinishTime"),
    ColumnDef("DurationMs"),
    ColumnDef("ExecuteSql"),
)


class ColumnIndex(Mapping):
    """Read-only column name to position mapping with case-insensitive keys"""

    def __init__(self, columns: tuple[ColumnDef, ...]):
        self._index = {column.name.lower(): i for i, column in enumerate(columns)}

    def __getitem__(self, name: str) -> int:
        return self._index[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)


COLUMN_TO_INDEX = ColumnIndex(SCHEMA)


def long_to_time_string(timestamp_ms: Optional[int]) -> str:
    """Render epoch milliseconds as local 'YYYY-MM-DD HH:MM:SS'; unset renders as NULL_STRING"""
    if timestamp_ms is None or timestamp_ms <= 0:
        return NULL_STRING
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M:%S")
