"""Configuration loading for connection profiles and refresh settings."""

import sys
from pathlib import Path
from typing import Dict, Union, Optional, Any

from pydantic import BaseModel, Field

# Use tomllib for Python 3.11+, fallback to tomli for older versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        raise ImportError(
            "Python < 3.11 requires 'tomli' package. " +
            "Install it with: pip install tomli"
        )

from .paths import resolve_config_path, get_settings_path


class RefreshSettings(BaseModel):
    """Settings shared by every refresh task run.

    Attributes:
        admin_user: Identity that refresh statements run as.
        admin_role: Optional role to activate for refresh statements.
        dialect: sqlglot dialect used to analyze defining queries.
        poll_interval: Seconds between status polls of a running statement.
        history_limit: Completed task records retained per job.
        session_variables: Extra session variables attached to each run.
    """

    admin_user: str = "admin"
    admin_role: Optional[str] = None
    dialect: str = "snowflake"
    poll_interval: float = Field(default=1.0, gt=0)
    history_limit: int = Field(default=100, ge=1)
    session_variables: Dict[str, Any] = Field(default_factory=dict)


def _read_toml(config_file: Path) -> Dict[str, Any]:
    with open(config_file, "rb") as f:
        return tomllib.load(f)


def load_profile(
    profile: str,
    path: Optional[Union[str, Path]] = None
) -> Dict[str, Any]:
    """
    Load a Snowflake connection profile from connections.toml file.

    Args:
        profile: Name of the profile to load
        path: Optional explicit path to connections.toml file.
              If None, uses the configuration directory.

    Returns:
        Dictionary containing connection parameters for the profile

    Raises:
        FileNotFoundError: If connections.toml file is not found
        KeyError: If the specified profile doesn't exist in the file
    """
    config_file = resolve_config_path(path)

    if not config_file.exists():
        raise FileNotFoundError(
            f"Snowflake configuration file not found at {config_file}. " +
            "Create a connections.toml file with one table per profile."
        )

    all_profiles = _read_toml(config_file)

    if profile not in all_profiles:
        available = ", ".join(all_profiles.keys())
        raise KeyError(
            f"Profile '{profile}' not found in {config_file}. " +
            f"Available profiles: {available}"
        )

    return dict(all_profiles[profile])


def list_profiles(path: Optional[Union[str, Path]] = None) -> list[str]:
    """List all available profile names in connections.toml file"""
    config_file = resolve_config_path(path)

    if not config_file.exists():
        return []

    return list(_read_toml(config_file).keys())


def load_settings(path: Optional[Union[str, Path]] = None) -> RefreshSettings:
    """
    Load refresh settings from the [refresh] table of refresh.toml.

    A missing file or missing table yields the defaults.

    Raises:
        pydantic.ValidationError: If the table holds invalid values
    """
    settings_file = Path(path) if path is not None else get_settings_path()

    if not settings_file.exists():
        return RefreshSettings()

    section = _read_toml(settings_file).get("refresh", {})
    return RefreshSettings(**section)
