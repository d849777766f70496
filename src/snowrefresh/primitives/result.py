"""A unified, simplified interface for Snowflake query results"""
from typing import Any, Optional
from dataclasses import dataclass

import pandas as pd


@dataclass
class QueryResult:
    """A unified, simplified interface for Snowflake query results"""
    _cursor: Any

    @property
    def query_id(self) -> str:
        """The Snowflake query ID (sfqid)"""
        return self._cursor.sfqid

    @property
    def rowcount(self) -> int:
        """The number of rows affected or returned"""
        return self._cursor.rowcount if self._cursor.rowcount is not None else -1

    @property
    def description(self) -> Optional[list[tuple]]:
        """A description of the result columns"""
        return self._cursor.description

    def fetch_one(self) -> Optional[tuple[Any, ...]]:
        """Fetch the next row of a query result set"""
        return self._cursor.fetchone()

    def fetch_all(self) -> list[tuple[Any, ...]]:
        """Fetch all remaining rows of a query result set"""
        result = self._cursor.fetchall()
        return result if result else []

    def to_df(self, lowercase_columns: bool = True) -> pd.DataFrame:
        """Fetch all remaining rows as a DataFrame with optional column casing"""
        if not self.description:
            return pd.DataFrame()

        columns = [desc[0] for desc in self.description]
        df = pd.DataFrame(self.fetch_all(), columns=columns)
        if lowercase_columns:
            df.columns = df.columns.str.lower()
        return df

    def __repr__(self) -> str:
        return (
            f"QueryResult(query_id='{self.query_id}', "
            f"rowcount={self.rowcount})"
        )
