"""Core base class for catalog objects"""

from abc import ABC


class CatalogObject(ABC):
    """Base class for catalog objects identified by a numeric id

    Ids are stable for the lifetime of an object; a dropped and re-created
    object with the same name gets a new id.
    """

    def __init__(self, object_id: int, name: str):
        self._id = object_id
        self._name = name

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        """Object name (unqualified)"""
        return self._name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id}, name={self._name!r})"

    def __eq__(self, other: object) -> bool:
        """Objects are equal if they have the same type and id"""
        if not isinstance(other, CatalogObject):
            return False
        return type(self) == type(other) and self._id == other._id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._id))
