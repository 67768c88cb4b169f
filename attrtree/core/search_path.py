"""
Collection Search Paths

A CollectionSearchPath stands for "the same sub-path inside every element of a
collection". It is resolved against a concrete root on every call: the current
length of the collection decides which element paths exist, and nothing is
cached between calls.
"""

import logging
from typing import Any, Iterator, Optional

from .path import ReadOnlyPath

logger = logging.getLogger(__name__)


class CollectionSearchPath:
    """
    Search path over the elements of a collection

    Args:
        collection_path: Path from the root to the collection (any sequence)
        element_path: Path from one element to the value of interest;
            defaults to the element itself

    Example:
        >>> search = CollectionSearchPath(ReadOnlyPath().attr("collection_value"))
        >>> [str(p) for p in search.paths(Attribute.collection_of_integers([1, 2]))]
        ['$.collection_value[0]', '$.collection_value[1]']
    """

    def __init__(self, collection_path: ReadOnlyPath, element_path: Optional[ReadOnlyPath] = None):
        self.collection_path = collection_path
        self.element_path = element_path if element_path is not None else ReadOnlyPath()

    def paths(self, root: Any) -> Iterator[ReadOnlyPath]:
        """
        Lazily yield one concrete path per element currently in ``root``

        Raises:
            PathError: The collection cannot be reached
            VariantMismatch: A variant accessor on the route does not match
        """
        collection = self.collection_path.get(root)
        count = len(collection)
        logger.debug(f"Expanding {self} over {count} elements")
        for index in range(count):
            yield self.collection_path[index].append(self.element_path)

    def append(self, path: ReadOnlyPath) -> "CollectionSearchPath":
        """Extend the element path"""
        return CollectionSearchPath(self.collection_path, self.element_path.append(path))

    def to_new_root(self, prefix: ReadOnlyPath) -> "CollectionSearchPath":
        """Rebase the collection path so it starts at ``prefix``'s root"""
        return CollectionSearchPath(prefix.append(self.collection_path), self.element_path)

    def intersects(self, path: ReadOnlyPath, root: Any) -> bool:
        """
        Whether ``path`` overlaps any element path in ``root``

        Paths at or above the collection always overlap it.
        """
        if len(path) <= len(self.collection_path):
            return path.intersects(self.collection_path)
        return any(element.intersects(path) for element in self.paths(root))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CollectionSearchPath):
            return NotImplemented
        return (
            self.collection_path == other.collection_path
            and self.element_path == other.element_path
        )

    def __hash__(self) -> int:
        return hash((self.collection_path, self.element_path))

    def __str__(self) -> str:
        element = str(self.element_path)[1:]
        return f"{self.collection_path}[*]{element}"

    def __repr__(self) -> str:
        return f"CollectionSearchPath({str(self)!r})"
