"""Fixtures for integration tests against a live Snowflake account."""

import sys
from typing import Dict, Any

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

import pytest
from snowrefresh.config import CONF_DIR


def _load_test_config() -> Dict[str, Any]:
    """Load the [test] table of test_config.toml, or {} when the file is absent."""
    test_config_path = CONF_DIR / "test_config.toml"
    if not test_config_path.exists():
        return {}

    with open(test_config_path, "rb") as f:
        config = tomllib.load(f)

    return config.get("test", {})


_TEST_CONFIG = _load_test_config()


@pytest.fixture(scope="session")
def test_profile() -> str:
    """Snowflake profile to use for integration tests."""
    profile = _TEST_CONFIG.get("profile")
    if not profile:
        pytest.skip(f"No [test] profile configured in {CONF_DIR / 'test_config.toml'}")
    return profile


@pytest.fixture(scope="session")
def test_database() -> str:
    """Snowflake database used as the internal catalog."""
    return _TEST_CONFIG.get("database", "SNOWREFRESH_TEST")


@pytest.fixture(scope="session")
def test_schema() -> str:
    """Snowflake schema used as the catalog database."""
    return _TEST_CONFIG.get("schema", "PUBLIC")
