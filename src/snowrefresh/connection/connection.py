"""Snowflake connection management with profile support."""

from typing import Optional, Tuple, Any, Literal

import snowflake.connector
from snowflake.connector import SnowflakeConnection
from snowflake.connector.cursor import SnowflakeCursor

from .base import BaseConnector


class SnowflakeConnector(BaseConnector):
    """
    Snowflake connection manager with TOML profile support.

    Each connector owns at most one connection. Refresh runs open their own
    connector so session state (database, schema, role) never leaks between
    runs.

    Example:
        >>> with SnowflakeConnector(profile="dev", database="SALES") as (conn, cur):
        ...     cur.execute("SELECT CURRENT_DATABASE()")
    """

    def __init__(self, profile: str, **overrides: Any) -> None:
        super().__init__(profile, **overrides)
        self._connection: Optional[SnowflakeConnection] = None
        self._cursor: Optional[SnowflakeCursor] = None

    def connect(self) -> Tuple[SnowflakeConnection, SnowflakeCursor]:
        """Establish the connection if needed and return (connection, cursor)"""
        if self._connection is None:
            self._connection = snowflake.connector.connect(**self.params)  # type: ignore[misc]
            self._cursor = self._connection.cursor()

        assert self._connection is not None
        assert self._cursor is not None
        return self._connection, self._cursor

    def close(self) -> None:
        """Close the cursor and connection, releasing resources."""
        if self._cursor:
            self._cursor.close()
            self._cursor = None
        if self._connection:
            self._connection.close()
            self._connection = None

    def __enter__(self) -> Tuple[SnowflakeConnection, SnowflakeCursor]:
        return self.connect()

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> Literal[False]:
        self.close()
        return False

    def __repr__(self) -> str:
        status = "connected" if self._connection else "not connected"
        return f"SnowflakeConnector(profile='{self._profile}', {status})"
