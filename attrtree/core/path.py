"""
Attribute Paths

Explicit path descriptors from a root value to a nested value:

- Root is $
- .name accesses an attribute (or property) of an object
- [n] accesses a sequence index
- ['label'] accesses a mapping key

A path is a tuple of segments. Every proper prefix of that tuple is an
ancestor, outermost first, so a path carries its whole traversal route as
data. ReadOnlyPath only reads; Path can also write, returning a new root in
which only the containers on the route are copied.
"""

import dataclasses
import re
from typing import Any, Callable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel

from ..exceptions.errors import PathError, VariantMismatch

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], Any]


class PathSegment:
    """
    Path segment

    One step of a route. Equality and hashing only consider ``kind`` and
    ``key``; the getter/setter functions are carried along but never compared.
    """

    ATTRIBUTE = "attribute"
    INDEX = "index"
    KEY = "key"

    def __init__(
        self,
        kind: str,
        key: Union[str, int],
        getter: Optional[Getter] = None,
        setter: Optional[Setter] = None,
        writable: bool = True,
    ):
        if kind not in (self.ATTRIBUTE, self.INDEX, self.KEY):
            raise PathError(f"Unknown path segment kind: {kind}")
        self.kind = kind
        self.key = key
        self._getter = getter
        self._setter = setter
        # A custom getter without a setter cannot be written through.
        self.writable = writable and (getter is None or setter is not None)

    @classmethod
    def attribute(
        cls, name: str, getter: Optional[Getter] = None, setter: Optional[Setter] = None
    ) -> "PathSegment":
        return cls(cls.ATTRIBUTE, name, getter, setter)

    @classmethod
    def index(cls, index: int) -> "PathSegment":
        return cls(cls.INDEX, index)

    @classmethod
    def mapping_key(cls, key: str) -> "PathSegment":
        return cls(cls.KEY, key)

    def is_array_index(self) -> bool:
        return self.kind == self.INDEX

    def get(self, obj: Any) -> Any:
        """
        Read this segment from ``obj``

        Raises:
            PathError: The segment cannot be followed
            VariantMismatch: A variant-checked accessor does not match
        """
        if obj is None:
            raise PathError(f"Cannot read {self} of None")

        if self._getter is not None:
            return self._getter(obj)

        if self.kind == self.ATTRIBUTE:
            try:
                return getattr(obj, self.key)
            except AttributeError:
                raise PathError(
                    f"{type(obj).__name__} has no attribute '{self.key}'",
                    {"segment": str(self)},
                )

        if self.kind == self.INDEX:
            if isinstance(obj, (str, bytes, Mapping)) or not isinstance(obj, Sequence):
                raise PathError(
                    f"Expected sequence at path segment {self}, found {type(obj).__name__}",
                    {"segment": str(self)},
                )
            if self.key < 0 or self.key >= len(obj):
                raise PathError(
                    f"Index {self.key} out of range (length {len(obj)})",
                    {"segment": str(self), "length": len(obj)},
                )
            return obj[self.key]

        if not isinstance(obj, Mapping):
            raise PathError(
                f"Expected mapping at path segment {self}, found {type(obj).__name__}",
                {"segment": str(self)},
            )
        if self.key not in obj:
            raise PathError(f"Missing key '{self.key}'", {"segment": str(self)})
        return obj[self.key]

    def set(self, obj: Any, value: Any) -> Any:
        """
        Return a copy of ``obj`` with this segment replaced by ``value``

        ``obj`` itself is never modified.
        """
        if not self.writable:
            raise PathError(f"Path segment {self} is read-only", {"segment": str(self)})
        if obj is None:
            raise PathError(f"Cannot write {self} of None")

        if self._setter is not None:
            return self._setter(obj, value)

        if self.kind == self.ATTRIBUTE:
            if hasattr(obj, "_replace"):
                return obj._replace(**{self.key: value})
            if isinstance(obj, BaseModel):
                return obj.model_copy(update={self.key: value})
            if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
                return dataclasses.replace(obj, **{self.key: value})
            raise PathError(
                f"Cannot write attribute '{self.key}' of {type(obj).__name__}",
                {"segment": str(self)},
            )

        if self.kind == self.INDEX:
            if not isinstance(obj, (list, tuple)):
                raise PathError(
                    f"Expected list or tuple at path segment {self}, found {type(obj).__name__}",
                    {"segment": str(self)},
                )
            if self.key < 0 or self.key >= len(obj):
                raise PathError(
                    f"Index {self.key} out of range (length {len(obj)})",
                    {"segment": str(self), "length": len(obj)},
                )
            items = list(obj)
            items[self.key] = value
            return items if isinstance(obj, list) else tuple(items)

        if not isinstance(obj, Mapping):
            raise PathError(
                f"Expected mapping at path segment {self}, found {type(obj).__name__}",
                {"segment": str(self)},
            )
        updated = dict(obj)
        updated[self.key] = value
        return updated

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathSegment):
            return NotImplemented
        return self.kind == other.kind and self.key == other.key

    def __hash__(self) -> int:
        return hash((self.kind, self.key))

    def __str__(self) -> str:
        if self.kind == self.INDEX:
            return f"[{self.key}]"
        if self.kind == self.KEY:
            return f"['{self.key}']"
        return f".{self.key}"

    def __repr__(self) -> str:
        return str(self)


class ReadOnlyPath:
    """
    Read-only path

    Supported syntax:
    - $.a.b         -> attribute access
    - $.items[0]    -> sequence index access
    - $.data['x']   -> mapping key access

    Example:
        >>> path = ReadOnlyPath().attr("complex_value")["name"].attr("line_value")
        >>> str(path)
        "$.complex_value['name'].line_value"
    """

    SEGMENT_PATTERN = re.compile(
        r"\.(?P<field>[a-zA-Z_]\w*)"  # .field
        r"|\[(?P<index>\d+)\]"  # [index]
        r"|\['(?P<key>[^']*)'\]"  # ['key']
    )

    def __init__(self, segments: Sequence[PathSegment] = ()):
        self.segments: Tuple[PathSegment, ...] = tuple(segments)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> "ReadOnlyPath":
        """
        Parse a path string into a path

        Args:
            text: Path string, e.g. "$.collection_value[0].integer_value"

        Raises:
            PathError: Invalid path syntax
        """
        if not text.startswith("$"):
            raise PathError(f"Path must start with $: {text}")

        segments = []
        rest = text[1:]  # Skip $

        while rest:
            match = cls.SEGMENT_PATTERN.match(rest)
            if not match:
                raise PathError(f"Invalid path syntax at: {rest}", {"path": text})

            if match.group("field"):
                segments.append(PathSegment.attribute(match.group("field")))
            elif match.group("index") is not None:
                segments.append(PathSegment.index(int(match.group("index"))))
            else:
                segments.append(PathSegment.mapping_key(match.group("key")))

            rest = rest[match.end() :]

        return cls(segments)

    def _extend(self, segment: PathSegment) -> "ReadOnlyPath":
        return type(self)(self.segments + (segment,))

    def attr(self, name: str, getter: Optional[Getter] = None) -> "ReadOnlyPath":
        """Extend the path with an attribute access"""
        return self._extend(PathSegment.attribute(name, getter))

    def __getitem__(self, key: Union[int, str]) -> "ReadOnlyPath":
        if isinstance(key, bool):
            raise PathError(f"Invalid path subscript: {key!r}")
        if isinstance(key, int):
            return self._extend(PathSegment.index(key))
        if isinstance(key, str):
            return self._extend(PathSegment.mapping_key(key))
        raise PathError(f"Invalid path subscript: {key!r}")

    def append(self, sub_path: "ReadOnlyPath") -> "ReadOnlyPath":
        """
        Compose this path with a path starting at this path's value

        The result reads sub_path's value from this path's root. Its ancestors
        are this path's ancestors, this path, then sub_path's ancestors rebased
        onto this path. Appending anything read-only yields a read-only path.
        """
        segments = self.segments + sub_path.segments
        if isinstance(self, Path) and isinstance(sub_path, Path):
            return Path(segments)
        return ReadOnlyPath(segments)

    @property
    def read_only(self) -> "ReadOnlyPath":
        return ReadOnlyPath(self.segments)

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def get(self, root: Any) -> Any:
        """
        Read the value this path points at

        Raises:
            PathError: Missing key, index out of range or None intermediate
            VariantMismatch: The route passes a variant accessor whose kind
                does not match
        """
        current = root
        for segment in self.segments:
            current = segment.get(current)
        return current

    def is_nil(self, root: Any) -> bool:
        """Whether the route cannot be followed in ``root`` or ends at None"""
        try:
            return self.get(root) is None
        except (PathError, VariantMismatch):
            return True

    def paths(self, root: Any) -> List["ReadOnlyPath"]:
        """A concrete path is its own search result"""
        return [self]

    # ------------------------------------------------------------------
    # Route relationships
    # ------------------------------------------------------------------

    @property
    def ancestors(self) -> List["ReadOnlyPath"]:
        """Every intermediate container's path, outermost ($) first"""
        return [ReadOnlyPath(self.segments[:i]) for i in range(len(self.segments))]

    @property
    def full_path(self) -> List["ReadOnlyPath"]:
        return self.ancestors + [self.read_only]

    @property
    def parent(self) -> "ReadOnlyPath":
        if not self.segments:
            raise PathError("Root path has no parent")
        return type(self)(self.segments[:-1])

    @property
    def last_segment(self) -> Optional[PathSegment]:
        return self.segments[-1] if self.segments else None

    def is_same(self, as_: "ReadOnlyPath") -> bool:
        return self.segments == as_.segments

    def is_child(self, of: "ReadOnlyPath") -> bool:
        """Whether ``of`` is one of this path's ancestors"""
        return any(ancestor.is_same(of) for ancestor in self.ancestors)

    def is_parent(self, of: "ReadOnlyPath") -> bool:
        return of.is_child(self)

    def is_ancestor_or_same(self, of: "ReadOnlyPath") -> bool:
        return self.is_same(of) or self.is_parent(of)

    def intersects(self, other: "ReadOnlyPath") -> bool:
        """
        Check if two routes overlap

        - One path is a prefix of the other ($.a vs $.a.b)
        - Two paths are identical
        - $.a[0] vs $.a[1] do not intersect
        """
        return all(a == b for a, b in zip(self.segments, other.segments))

    def relative_to(self, prefix: "ReadOnlyPath") -> "ReadOnlyPath":
        """The part of this route below ``prefix``"""
        if not prefix.is_ancestor_or_same(self):
            raise PathError(f"{prefix} is not a prefix of {self}")
        return type(self)(self.segments[len(prefix.segments):])

    # ------------------------------------------------------------------
    # Protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[PathSegment]:
        return iter(self.segments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReadOnlyPath):
            return NotImplemented
        return self.segments == other.segments

    def __hash__(self) -> int:
        return hash(self.segments)

    def __str__(self) -> str:
        return "$" + "".join(str(s) for s in self.segments)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


class Path(ReadOnlyPath):
    """
    Writable path

    ``set`` copies only the containers on the route; every sibling is shared
    with the original root. Supported containers are objects exposing
    ``_replace`` (Attribute, named tuples), pydantic models, dataclasses,
    mappings, lists and tuples.
    """

    def attr(
        self, name: str, getter: Optional[Getter] = None, setter: Optional[Setter] = None
    ) -> "ReadOnlyPath":
        segment = PathSegment.attribute(name, getter, setter)
        if not segment.writable:
            return ReadOnlyPath(self.segments + (segment,))
        return Path(self.segments + (segment,))

    def set(self, root: Any, value: Any) -> Any:
        """
        Return a new root with the value at this path replaced

        Raises:
            PathError: The route cannot be followed or is not writable
            VariantMismatch: A variant accessor on the route does not match
        """
        return self._set(root, self.segments, value)

    def _set(self, obj: Any, segments: Tuple[PathSegment, ...], value: Any) -> Any:
        if not segments:
            return value
        head, rest = segments[0], segments[1:]
        if not rest:
            return head.set(obj, value)
        return head.set(obj, self._set(head.get(obj), rest, value))
