"""
Deterministic ordering of objects for applying or deleting them. The order is derived from each object's kind alone,
objects of equal weight are ordered by namespace and then by name.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from loguru import logger

from templateprocessor.options import DEFAULT_CREATE_UPDATE_KINDS_ORDER, DEFAULT_DELETE_KINDS_ORDER, SortType
from templateprocessor.unstructured import Unstructured


@dataclass(frozen=True)
class OrderingPolicy:
    """
    A list of kinds that defines their relative precedence, plus the weight given to kinds that are not listed.

    The kinds list must not contain duplicates, only the first occurrence of a kind is considered.
    """

    sort_type: SortType
    kinds_order: tuple[str, ...]

    @property
    def default_weight(self) -> int:
        """
        The weight of unlisted kinds. They are created after all listed kinds, but deleted before them.
        """

        match self.sort_type:
            case SortType.CREATE_UPDATE:
                return len(self.kinds_order)
            case SortType.DELETE:
                return -1
        raise ValueError(f"Unsupported sort type: {self.sort_type!r}")

    @staticmethod
    def create_update(kinds_order: Sequence[str] = DEFAULT_CREATE_UPDATE_KINDS_ORDER) -> "OrderingPolicy":
        return OrderingPolicy(SortType.CREATE_UPDATE, tuple(kinds_order))

    @staticmethod
    def delete(kinds_order: Sequence[str] = DEFAULT_DELETE_KINDS_ORDER) -> "OrderingPolicy":
        return OrderingPolicy(SortType.DELETE, tuple(kinds_order))

    def weight(self, obj: Unstructured) -> int:
        """
        Return the position of the object's kind in the kinds list, or the default weight if it is not listed.
        """

        kind = obj.kind
        for index, candidate in enumerate(self.kinds_order):
            if candidate == kind:
                return index
        return self.default_weight

    def sort_key(self, obj: Unstructured) -> tuple[int, str, str]:
        return (self.weight(obj), obj.namespace, obj.name)

    def sort(self, objects: Iterable[Unstructured]) -> list[Unstructured]:
        """
        Return a new list with the objects in apply (or delete) order.
        """

        result = sorted(objects, key=self.sort_key)
        for obj in result:
            logger.trace("Sorted ({}) {}", self.sort_type.value, obj)
        return result
