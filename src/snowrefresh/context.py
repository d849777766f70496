"""Snowflake connection context for catalog loading and refresh runs"""

from typing import TYPE_CHECKING, Any, Mapping, Optional

if TYPE_CHECKING:
    from snowrefresh.connection import SnowflakeConnector


class SnowflakeContext:
    """Lazily opened Snowflake connection and cursor

    Built from a profile name, the context owns its connector and closes it.
    Built from an existing connection, the caller keeps ownership and
    ``close()`` leaves it open. Keyword overrides are applied on top of the
    profile.

    Example:
        >>> with SnowflakeContext.for_namespace("dev", "SALESDB", "PUBLIC") as ctx:
        ...     ctx.cursor.execute("SELECT CURRENT_SCHEMA()")
    """

    def __init__(
        self,
        profile: Optional[str] = None,
        connection: Optional[Any] = None,
        cursor: Optional[Any] = None,
        **overrides: Any,
    ):
        if profile is None and connection is None:
            raise ValueError(
                "SnowflakeContext requires either 'profile' or 'connection'"
            )
        if profile is not None and connection is not None:
            raise ValueError(
                "SnowflakeContext: provide either 'profile' or 'connection', not both"
            )

        self._profile = profile
        self._connection = connection
        self._cursor = cursor
        self._overrides = overrides
        self._connector: Optional["SnowflakeConnector"] = None
        self._owns_connector = False

    @classmethod
    def for_namespace(
        cls,
        profile: str,
        database: str,
        schema: str,
        role: Optional[str] = None,
        session_parameters: Optional[Mapping[str, Any]] = None,
        **overrides: Any,
    ) -> "SnowflakeContext":
        """Context whose session defaults to ``database.schema``

        Unqualified names in statements run through this context resolve
        there, the way a refresh run resolves names against its view's
        environment.
        """
        overrides["database"] = database
        overrides["schema"] = schema
        if role:
            overrides["role"] = role
        if session_parameters:
            overrides["session_parameters"] = dict(session_parameters)
        return cls(profile=profile, **overrides)

    @property
    def namespace(self) -> Optional[str]:
        """DATABASE.SCHEMA the session was opened with, when both were given"""
        database = self._overrides.get("database")
        schema = self._overrides.get("schema")
        if database and schema:
            return f"{database}.{schema}"
        return None

    @property
    def connection(self) -> Any:
        """Snowflake connection, opened on first use"""
        if self._connection is None:
            from snowrefresh.connection import SnowflakeConnector

            assert self._profile is not None
            self._connector = SnowflakeConnector(
                profile=self._profile, **self._overrides
            )
            self._connection, self._cursor = self._connector.connect()
            self._owns_connector = True

        return self._connection

    @property
    def cursor(self) -> Any:
        connection = self.connection
        if self._cursor is None:
            self._cursor = connection.cursor()

        return self._cursor

    def close(self) -> None:
        """Close the connection if this context opened it"""
        if not self._owns_connector or self._connector is None:
            return
        self._connector.close()
        self._connector = None
        self._connection = None
        self._cursor = None

    def __enter__(self) -> "SnowflakeContext":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        if self._connection is not None:
            return "SnowflakeContext(connection=<active>)"
        if self.namespace:
            return f"SnowflakeContext(profile='{self._profile}', namespace='{self.namespace}')"
        return f"SnowflakeContext(profile='{self._profile}')"
