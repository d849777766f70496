"""Configuration module exports."""

from .config import load_profile, list_profiles, load_settings, RefreshSettings
from .paths import resolve_config_path, get_default_config_path, CONF_DIR

__all__ = [
    "load_profile",
    "list_profiles",
    "load_settings",
    "RefreshSettings",
    "resolve_config_path",
    "get_default_config_path",
    "CONF_DIR",
]
