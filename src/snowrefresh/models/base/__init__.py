"""Base classes for catalog object models"""

from .core import CatalogObject
from .fqn import FQN, get_name_from_full_name

__all__ = [
    "CatalogObject",
    "FQN",
    "get_name_from_full_name",
]
