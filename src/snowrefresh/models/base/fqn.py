"""Qualified names for catalog objects"""

from dataclasses import dataclass
from typing import Optional

CLUSTER_NAMESPACE_SEPARATOR = ":"


def get_name_from_full_name(full_name: str) -> str:
    """Strip the cluster namespace prefix from an internal database name

    Example:
        >>> get_name_from_full_name("default_cluster:sales")
        'sales'
        >>> get_name_from_full_name("sales")
        'sales'
    """
    if CLUSTER_NAMESPACE_SEPARATOR not in full_name:
        return full_name
    return full_name.split(CLUSTER_NAMESPACE_SEPARATOR, 1)[1]


@dataclass(frozen=True)
class FQN:
    """Name of a catalog object as up to three parts: catalog.database.name

    Parts keep their original case; compare with ``key`` for the
    case-insensitive identity used by catalog lookups.
    """

    parts: tuple[str, ...]

    def __post_init__(self):
        if not 1 <= len(self.parts) <= 3:
            raise ValueError(
                f"FQN must have between one and three parts, got {len(self.parts)}"
            )
        for i, part in enumerate(self.parts):
            if not part:
                raise ValueError(f"Empty identifier at position {i} in {self.parts!r}")

    @property
    def catalog(self) -> Optional[str]:
        """Catalog name when fully qualified"""
        return self.parts[-3] if len(self.parts) == 3 else None

    @property
    def database(self) -> Optional[str]:
        """Database name when at least database-qualified"""
        return self.parts[-2] if len(self.parts) >= 2 else None

    @property
    def name(self) -> str:
        """Object name (last part)"""
        return self.parts[-1]

    @property
    def key(self) -> tuple[str, ...]:
        """Case-insensitive identity of the name"""
        return tuple(part.upper() for part in self.parts)

    def qualify(self, catalog: Optional[str], database: Optional[str]) -> 'FQN':
        """Fill missing leading parts from defaults

        Raises:
            ValueError: If a needed default is missing
        """
        if len(self.parts) == 3:
            return self
        if len(self.parts) == 1:
            if not database:
                raise ValueError(f"Cannot qualify '{self}': no default database")
            return FQN.from_parts(*self._with_catalog(catalog, database), self.name)
        return FQN.from_parts(*self._with_catalog(catalog, self.parts[0]), self.name)

    @staticmethod
    def _with_catalog(catalog: Optional[str], database: str) -> tuple[str, ...]:
        if not catalog:
            raise ValueError(f"Cannot qualify database '{database}': no default catalog")
        return (catalog, database)

    def __str__(self) -> str:
        return ".".join(self.parts)

    def __len__(self) -> int:
        return len(self.parts)

    @classmethod
    def from_parts(cls, *parts: str) -> 'FQN':
        """Create FQN from individual parts

        Example:
            >>> str(FQN.from_parts("internal", "sales", "orders_mv"))
            'internal.sales.orders_mv'
        """
        return cls(parts=parts)

    @classmethod
    def parse(cls, qualified_name: str) -> 'FQN':
        """Parse a dot-separated string into FQN"""
        if not qualified_name:
            raise ValueError("Cannot parse empty string")
        return cls(parts=tuple(qualified_name.split(".")))
