"""
snowrefresh - materialized view refresh tasks for Snowflake

Code is organized in layers
- config/ and connection/ as the interface for Snowflake packages
- primitives/ wraps these in low-level query execution
- models/ is the in-memory catalog the refresh task resolves views against
- task/ holds the refresh task and the contracts of its collaborators
"""

# Layer 1: Core connectivity
from snowrefresh.config import load_profile, list_profiles, load_settings, RefreshSettings
from snowrefresh.connection import SnowflakeConnector
from snowrefresh.context import SnowflakeContext

# Layer 2: Primitives
from snowrefresh.primitives import (
    QueryResult,
    QueryJob,
    Executor,
    execute_sql,
    SnowflakeQueryEngine,
)

# Layer 3: Catalog models
from snowrefresh.models import (
    CatalogManager,
    Catalog,
    Database,
    Table,
    View,
    MaterializedView,
    EnvInfo,
    FQN,
)

# Layer 4: Refresh task
from snowrefresh.task import (
    MaterializedViewRefreshTask,
    RefreshEnv,
    TaskHistory,
    TaskStatus,
    SCHEMA,
    COLUMN_TO_INDEX,
)
from snowrefresh.errors import (
    RefreshError,
    ResolutionError,
    DoesNotExist,
    TypeMismatch,
    AnalysisError,
    ExecutionError,
    JobException,
)

__version__ = "0.1.0"
__all__ = [
    # Layer 1: Configuration & Connection
    "load_profile",
    "list_profiles",
    "load_settings",
    "RefreshSettings",
    "SnowflakeConnector",
    "SnowflakeContext",
    # Layer 2: Primitives
    "QueryResult",
    "QueryJob",
    "Executor",
    "execute_sql",
    "SnowflakeQueryEngine",
    # Layer 3: Catalog models
    "CatalogManager",
    "Catalog",
    "Database",
    "Table",
    "View",
    "MaterializedView",
    "EnvInfo",
    "FQN",
    # Layer 4: Refresh task
    "MaterializedViewRefreshTask",
    "RefreshEnv",
    "TaskHistory",
    "TaskStatus",
    "SCHEMA",
    "COLUMN_TO_INDEX",
    # Errors
    "RefreshError",
    "ResolutionError",
    "DoesNotExist",
    "TypeMismatch",
    "AnalysisError",
    "ExecutionError",
    "JobException",
]
