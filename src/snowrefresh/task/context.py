"""Isolated execution context for one refresh run"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from snowrefresh.config import RefreshSettings
from snowrefresh.errors import ResolutionError
from snowrefresh.models import CatalogStore, MaterializedView, get_name_from_full_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserIdentity:
    user: str
    role: Optional[str] = None

    def __str__(self) -> str:
        return self.user if self.role is None else f"{self.user} ({self.role})"


@dataclass(frozen=True)
class ExecutionContext:
    """Identity, default namespace and session flags a refresh statement runs under

    The context is passed explicitly to relation analysis and statement
    execution; nothing is stored in thread-local or global state.
    """

    identity: UserIdentity
    catalog: str
    database: str
    enable_fallback_planner: bool = False
    session_variables: Mapping[str, Any] = field(default_factory=dict)


def build_context(
    view: MaterializedView,
    catalogs: CatalogStore,
    settings: RefreshSettings,
) -> ExecutionContext:
    """Build a fresh context from the view's execution environment

    Raises:
        ResolutionError: If the environment's catalog or database no longer exists
    """
    env = view.env_info
    try:
        catalog = catalogs.get_catalog_or_raise(env.catalog_id)
        database = catalog.get_db_or_raise(env.db_id)
    except ResolutionError:
        logger.warning("Cannot resolve environment %s of %s", env, view.name)
        raise

    return ExecutionContext(
        identity=UserIdentity(settings.admin_user, settings.admin_role),
        catalog=catalog.name,
        database=get_name_from_full_name(database.full_name),
        enable_fallback_planner=False,
        session_variables=dict(settings.session_variables),
    )
