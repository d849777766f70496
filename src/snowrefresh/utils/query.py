"""Utilities for building SQL queries with safe parameter binding"""

from typing import Any


class SafeQuery:
    """Build SQL queries with safe parameter binding"""

    def __init__(self, base: str):
        self._parts: list[str] = [base]
        self._bindings: list[Any] = []

    def when(self, condition: Any, template: str, *values: Any) -> 'SafeQuery':
        """Add a clause and maybe bind values when condition is truthy"""
        if condition:
            self._parts.append(template)
            self._bindings.extend(values)
        return self

    def as_tuple(self) -> tuple[str, tuple[Any, ...]]:
        """SQL string with placeholders and its bindings"""
        return " ".join(self._parts), tuple(self._bindings)
