"""Utilities for validating Snowflake identifiers"""

import re

_UNQUOTED_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_$]*$')


def is_valid_identifier(name: str) -> bool:
    """Check if a string is a valid Snowflake unquoted identifier"""
    if not name:
        return False
    return bool(_UNQUOTED_IDENTIFIER.match(name))
