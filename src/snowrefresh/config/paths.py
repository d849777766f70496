"""Path resolution for snowrefresh configuration files."""

import os
from pathlib import Path
from typing import Optional, Union

CONNECTIONS_FILE = "connections.toml"
SETTINGS_FILE = "refresh.toml"


def _get_config_directory() -> Path:
    """
    Get the configuration directory for snowrefresh.

    Priority order:
    1. SNOWREFRESH_CONFIG_DIR environment variable (override)
    2. ~/.snowrefresh/ (dotfile directory in user home)

    Returns:
        Path: Configuration directory path
    """
    env_config_dir = os.getenv("SNOWREFRESH_CONFIG_DIR")
    if env_config_dir:
        return Path(env_config_dir)

    return Path.home() / ".snowrefresh"


# Configuration directory (dynamically resolved)
CONF_DIR = _get_config_directory()


def get_default_config_path() -> Path:
    """Get the path to connections.toml, raising if it does not exist yet"""
    config_path = CONF_DIR / CONNECTIONS_FILE

    if not config_path.exists():
        error_msg = (
            f"Configuration file '{CONNECTIONS_FILE}' not found at: {config_path}\n\n"
            f"Create it with one [profile] table per Snowflake connection.\n\n"
            f"Configuration directory priority:\n"
            f"  1. SNOWREFRESH_CONFIG_DIR environment variable (if set)\n"
            f"  2. ~/.snowrefresh/ (dotfile directory)\n"
        )
        raise FileNotFoundError(error_msg)

    return config_path


def get_settings_path() -> Path:
    """Get the path to refresh.toml (may not exist; settings then use defaults)"""
    return CONF_DIR / SETTINGS_FILE


def resolve_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Resolve the path to connections.toml using an explicit path or the default location"""
    if path is None:
        return get_default_config_path()

    return Path(path)
