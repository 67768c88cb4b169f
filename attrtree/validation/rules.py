"""
Path Rules

Fluent rule declarations attached to a path:

    ValidationPath(path).required().greater_than(0).less_than(10)

Every call returns a new PathValidator; declared validators are never
modified. When the validator runs it reads the value at its path once and
applies every rule in declaration order, collecting all failures. A value
that cannot be read produces a single failure and the rules are skipped.
"""

import logging
from typing import Any, Callable, Collection, Iterable, Iterator, Optional, Tuple

from ..core.path import ReadOnlyPath
from ..core.search_path import CollectionSearchPath
from ..exceptions.errors import PathError, VariantMismatch
from .failures import ValidationFailure
from .validator import Validator

logger = logging.getLogger(__name__)

# (root, value, path) -> failures
Rule = Callable[[Any, Any, ReadOnlyPath], Iterable[ValidationFailure]]
ValidatorBuilder = Callable[[ReadOnlyPath], Validator]


def describe_value(value: Any) -> str:
    """Render a value the way failure messages show it"""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def describe_values(values: Iterable[Any]) -> str:
    return ", ".join(sorted(describe_value(v) for v in values))


def is_empty(value: Any) -> bool:
    try:
        return len(value) == 0
    except TypeError:
        return False


class PathValidator(Validator):
    """
    Rules bound to one path

    Modes:
    - default: an unreadable value is one "Does not exist" failure
    - required: None, empty or unreadable values are one "Required" failure
    - optional: None or unreadable values skip every rule
    """

    DEFAULT = "default"
    REQUIRED = "required"
    OPTIONAL = "optional"

    def __init__(
        self, path: ReadOnlyPath, rules: Tuple[Rule, ...] = (), mode: str = DEFAULT
    ) -> None:
        self.path = path
        self.rules = tuple(rules)
        self.mode = mode
        self.logger = logging.getLogger(self.__class__.__name__)

    def _derive(self, rule: Optional[Rule] = None, mode: Optional[str] = None) -> "PathValidator":
        rules = self.rules + (rule,) if rule is not None else self.rules
        return PathValidator(self.path, rules, mode or self.mode)

    def _check(
        self,
        fails: Callable[[Any], bool],
        message: Callable[[Any], str],
        code: str,
        details: Optional[dict] = None,
    ) -> "PathValidator":
        def rule(root: Any, value: Any, path: ReadOnlyPath) -> Iterator[ValidationFailure]:
            if fails(value):
                yield ValidationFailure(path, message(value), code, dict(details or {}))

        return self._derive(rule)

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    def failures(self, root: Any) -> Iterator[ValidationFailure]:
        try:
            value = self.path.get(root)
        except VariantMismatch as e:
            yield ValidationFailure(self.path, e.message, "variant_mismatch", dict(e.details), e)
            return
        except PathError as e:
            if self.mode == self.OPTIONAL:
                return
            if self.mode == self.REQUIRED:
                yield ValidationFailure(self.path, "Required", "required", cause=e)
            else:
                yield ValidationFailure(self.path, "Does not exist", "missing", cause=e)
            return

        if value is None and self.mode == self.OPTIONAL:
            return
        if self.mode == self.REQUIRED and (value is None or is_empty(value)):
            yield ValidationFailure(self.path, "Required", "required")
            return

        self.logger.debug("Validating %s with %d rules", self.path, len(self.rules))
        for rule in self.rules:
            try:
                failures = list(rule(root, value, self.path))
            except VariantMismatch as e:
                failures = [
                    ValidationFailure(self.path, e.message, "variant_mismatch", dict(e.details), e)
                ]
            except PathError as e:
                failures = [ValidationFailure(self.path, e.message, "missing", dict(e.details), e)]
            except TypeError as e:
                # Rule applied to a value of the wrong shape
                failures = [
                    ValidationFailure(
                        self.path, f"Cannot validate value: {e}", "variant_mismatch", cause=e
                    )
                ]
            yield from failures

    # ------------------------------------------------------------------
    # Presence
    # ------------------------------------------------------------------

    def required(self) -> "PathValidator":
        return self._derive(mode=self.REQUIRED)

    def optional(self) -> "PathValidator":
        return self._derive(mode=self.OPTIONAL)

    # ------------------------------------------------------------------
    # Equality and membership
    # ------------------------------------------------------------------

    def equals(self, target: Any) -> "PathValidator":
        return self._check(
            lambda v: v != target,
            lambda v: f"Must equal {describe_value(target)}.",
            "equals",
            {"expected": target},
        )

    def not_equals(self, target: Any) -> "PathValidator":
        return self._check(
            lambda v: v == target,
            lambda v: f"Must not equal {describe_value(target)}.",
            "not_equals",
        )

    def equals_true(self) -> "PathValidator":
        return self.equals(True)

    def equals_false(self) -> "PathValidator":
        return self.equals(False)

    def is_in(self, values: Collection[Any]) -> "PathValidator":
        allowed = frozenset(values)
        return self._check(
            lambda v: v not in allowed,
            lambda v: f"Must equal one of the following: '{describe_values(allowed)}'.",
            "membership",
        )

    def is_in_path(
        self,
        other: ReadOnlyPath,
        transform: Optional[Callable[[Any], Iterable[Any]]] = None,
    ) -> "PathValidator":
        """Membership in a collection read from another path of the same root"""

        def rule(root: Any, value: Any, path: ReadOnlyPath) -> Iterator[ValidationFailure]:
            collection = other.get(root)
            if transform is not None:
                collection = transform(collection)
            collection = list(collection)
            if value not in collection:
                yield ValidationFailure(
                    path,
                    f"Must equal one of the following: '{describe_values(collection)}'.",
                    "membership",
                    {"source": str(other)},
                )

        return self._derive(rule)

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def between(self, minimum: Any, maximum: Any) -> "PathValidator":
        return self._check(
            lambda v: v < minimum or v > maximum,
            lambda v: f"Must be between {describe_value(minimum)} and {describe_value(maximum)}.",
            "range",
            {"min": minimum, "max": maximum},
        )

    def less_than(self, bound: Any) -> "PathValidator":
        return self._check(
            lambda v: v >= bound,
            lambda v: f"Must be less than {describe_value(bound)}.",
            "range",
            {"max": bound},
        )

    def less_than_equal(self, bound: Any) -> "PathValidator":
        return self._check(
            lambda v: v > bound,
            lambda v: f"Must be less than or equal to {describe_value(bound)}.",
            "range",
            {"max": bound},
        )

    def greater_than(self, bound: Any) -> "PathValidator":
        return self._check(
            lambda v: v <= bound,
            lambda v: f"Must be greater than {describe_value(bound)}.",
            "range",
            {"min": bound},
        )

    def greater_than_equal(self, bound: Any) -> "PathValidator":
        return self._check(
            lambda v: v < bound,
            lambda v: f"Must be greater than or equal to {describe_value(bound)}.",
            "range",
            {"min": bound},
        )

    # ------------------------------------------------------------------
    # Size
    # ------------------------------------------------------------------

    def empty(self) -> "PathValidator":
        return self._check(lambda v: len(v) != 0, lambda v: "Must be empty.", "empty")

    def not_empty(self) -> "PathValidator":
        return self._check(lambda v: len(v) == 0, lambda v: "Cannot be empty.", "not_empty")

    def length(self, size: int) -> "PathValidator":
        if size == 0:
            return self.empty()
        return self._check(
            lambda v: len(v) != size,
            lambda v: f"Must have exactly {size} elements.",
            "length",
            {"length": size},
        )

    def min_length(self, size: int) -> "PathValidator":
        if size == 1:
            return self.not_empty()
        return self._check(
            lambda v: len(v) < size,
            lambda v: f"Must provide at least {size} values.",
            "length",
            {"min": size},
        )

    def max_length(self, size: int) -> "PathValidator":
        if size == 0:
            return self.empty()
        return self._check(
            lambda v: len(v) > size,
            lambda v: f"Must provide no more than {size} values.",
            "length",
            {"max": size},
        )

    def unique(self, transform: Optional[Callable[[Any], Any]] = None) -> "PathValidator":
        def has_duplicates(value: Any) -> bool:
            seen = []
            for item in value:
                key = transform(item) if transform is not None else item
                if key in seen:
                    return True
                seen.append(key)
            return False

        return self._check(has_duplicates, lambda v: "Must be unique", "unique")

    # ------------------------------------------------------------------
    # Strings
    # ------------------------------------------------------------------

    def alpha(self) -> "PathValidator":
        return self._check(
            lambda v: any(not c.isalpha() for c in v),
            lambda v: "Must be alphabetic.",
            "format",
        )

    def alphadash(self) -> "PathValidator":
        return self._check(
            lambda v: any(not (c.isalpha() or c.isdigit() or c in "_-") for c in v),
            lambda v: "Must be alphabetic with underscores and dashes allowed.",
            "format",
        )

    def alphafirst(self) -> "PathValidator":
        return self._check(
            lambda v: bool(v) and not v[0].isalpha(),
            lambda v: "First Character must be alphabetic.",
            "format",
        )

    def alphanumeric(self) -> "PathValidator":
        return self._check(
            lambda v: any(not (c.isalpha() or c.isdigit()) for c in v),
            lambda v: "Must be alphanumeric.",
            "format",
        )

    def alphaunderscore(self) -> "PathValidator":
        return self._check(
            lambda v: any(not (c.isalpha() or c.isdigit() or c == "_") for c in v),
            lambda v: "Must be alphabetic with underscores allowed.",
            "format",
        )

    def alphaunderscorefirst(self) -> "PathValidator":
        return self._check(
            lambda v: bool(v) and not (v[0].isalpha() or v[0] == "_"),
            lambda v: "First Character must be alphabetic or an underscore.",
            "format",
        )

    def numeric(self) -> "PathValidator":
        return self._check(
            lambda v: any(not c.isnumeric() for c in v),
            lambda v: "Must be numeric.",
            "format",
        )

    def blacklist(self, words: Collection[str]) -> "PathValidator":
        banned = frozenset(words)
        return self._check(
            lambda v: v in banned, lambda v: f"{v} is a banned word.", "blacklist"
        )

    def whitelist(self, words: Collection[str]) -> "PathValidator":
        allowed = frozenset(words)
        return self._check(
            lambda v: v not in allowed,
            lambda v: (
                f"{v} is not valid, you must use pre-existing words. "
                f"Candidates: {describe_values(allowed)}"
            ),
            "whitelist",
        )

    def greylist(self, words: Collection[str]) -> "PathValidator":
        fragments = frozenset(words)
        return self._check(
            lambda v: not any(word in v for word in fragments),
            lambda v: (
                f"{v} is not valid, it must contain pre-existing words. "
                f"Candidates: {describe_values(fragments)}"
            ),
            "greylist",
        )

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def push(self, check: Callable[[Any, Any], Optional[str]]) -> "PathValidator":
        """
        Add a custom rule

        Args:
            check: Called with (root, value); returns a failure message, or
                None when the value is valid
        """

        def rule(root: Any, value: Any, path: ReadOnlyPath) -> Iterator[ValidationFailure]:
            message = check(root, value)
            if message is not None:
                yield ValidationFailure(path, message, "custom")

        return self._derive(rule)

    def if_(
        self,
        condition: Callable[[Any], bool],
        then: Validator,
        else_: Optional[Validator] = None,
    ) -> "PathValidator":
        """Run ``then`` (or ``else_``) against the root depending on the value"""

        def rule(root: Any, value: Any, path: ReadOnlyPath) -> Iterator[ValidationFailure]:
            if condition(value):
                yield from then.failures(root)
            elif else_ is not None:
                yield from else_.failures(root)

        return self._derive(rule)

    def each(self, builder: ValidatorBuilder) -> "PathValidator":
        """
        Validate every element of the collection at this path

        ``builder`` receives one concrete element path per element present
        and returns the validator for it.
        """

        def rule(root: Any, value: Any, path: ReadOnlyPath) -> Iterator[ValidationFailure]:
            yield from EachValidator(CollectionSearchPath(path), builder).failures(root)

        return self._derive(rule)

    def __repr__(self) -> str:
        return f"PathValidator({str(self.path)!r}, rules={len(self.rules)}, mode={self.mode!r})"


class ValidationPath(PathValidator):
    """
    Entry point for declaring rules on a path

    Example:
        >>> flag = ValidationPath(ReadOnlyPath().attr("bool_value")).equals_true()
        >>> flag.validate(Attribute.bool_(False)).valid
        False
    """

    def __init__(self, path: ReadOnlyPath) -> None:
        super().__init__(path)


class EachValidator(Validator):
    """
    One validator per element of a collection

    The element paths are derived from the root on every run; failures keep
    their element index in the path.
    """

    def __init__(self, search_path: CollectionSearchPath, builder: ValidatorBuilder):
        self.search_path = search_path
        self.builder = builder

    def failures(self, root: Any) -> Iterator[ValidationFailure]:
        collection_path = self.search_path.collection_path
        try:
            element_paths = list(self.search_path.paths(root))
        except VariantMismatch as e:
            yield ValidationFailure(collection_path, e.message, "variant_mismatch", dict(e.details), e)
            return
        except PathError as e:
            yield ValidationFailure(collection_path, "Does not exist", "missing", cause=e)
            return
        except TypeError as e:
            yield ValidationFailure(
                collection_path, f"Not a collection: {e}", "variant_mismatch", cause=e
            )
            return

        for element_path in element_paths:
            yield from self.builder(element_path).failures(root)


def each(search_path: Any, builder: ValidatorBuilder) -> EachValidator:
    """
    Lift an element rule over a collection

    Args:
        search_path: A CollectionSearchPath, or the path of the collection
        builder: Element path -> validator
    """
    if not isinstance(search_path, CollectionSearchPath):
        search_path = CollectionSearchPath(search_path)
    return EachValidator(search_path, builder)
