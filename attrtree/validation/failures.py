"""
Validation Failures

Failure records produced by validators, and the ValidationResult that
collects them in declaration order. Failures are values, not exceptions:
``ValidationResult.raise_if_invalid`` is the only place they turn into one.
"""

from typing import Any, Dict, Iterator, List, Optional

from ..core.path import PathSegment, ReadOnlyPath
from ..exceptions.errors import ValidationError


class ValidationFailure:
    """A path-tagged validation failure"""

    def __init__(
        self,
        path: ReadOnlyPath,
        message: str,
        code: str = "invalid",
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        self.path = path.read_only
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def with_prefix(self, prefix: ReadOnlyPath) -> "ValidationFailure":
        """The same failure, seen from ``prefix``'s root"""
        return ValidationFailure(
            prefix.append(self.path), self.message, self.code, dict(self.details), self.cause
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {"path": str(self.path), "code": self.code, "message": self.message}
        if self.details:
            data["details"] = dict(self.details)
        return data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationFailure):
            return NotImplemented
        return (
            self.path == other.path
            and self.message == other.message
            and self.code == other.code
            and self.details == other.details
        )

    def __hash__(self) -> int:
        return hash((self.path, self.message, self.code))

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"path={str(self.path)!r}, "
            f"code={self.code!r}, "
            f"message={self.message!r}"
            f")"
        )


class RowLengthMismatch(ValidationFailure):
    """A table row whose cell count differs from the column count"""

    def __init__(self, path: ReadOnlyPath, row: int, expected: int, actual: int):
        super().__init__(
            path,
            f"Row {row} must have exactly {expected} cells, found {actual}.",
            code="row_length_mismatch",
            details={"row": row, "expected": expected, "actual": actual},
        )
        self.row = row
        self.expected = expected
        self.actual = actual

    def with_prefix(self, prefix: ReadOnlyPath) -> "RowLengthMismatch":
        return RowLengthMismatch(prefix.append(self.path), self.row, self.expected, self.actual)


class ValidationResult:
    """
    Validation result

    Attributes:
        failures: Failures in the order their rules were declared
    """

    def __init__(self, failures: Optional[List[ValidationFailure]] = None):
        self.failures = list(failures or [])

    @property
    def valid(self) -> bool:
        return not self.failures

    def add_failure(self, failure: ValidationFailure) -> None:
        self.failures.append(failure)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Append another result's failures to this one"""
        self.failures.extend(other.failures)
        return self

    def failures_for(self, path: ReadOnlyPath) -> List[ValidationFailure]:
        """
        Failures reported for the value at ``path``

        Includes failures reported through accessors of that value
        ($.flag.bool_value counts for $.flag) but not failures of nested
        elements or record fields.
        """
        matched = []
        for failure in self.failures:
            if not path.is_ancestor_or_same(failure.path):
                continue
            rest = failure.path.segments[len(path.segments):]
            if all(segment.kind == PathSegment.ATTRIBUTE for segment in rest):
                matched.append(failure)
        return matched

    def failures_including_descendants(self, path: ReadOnlyPath) -> List[ValidationFailure]:
        return [f for f in self.failures if path.is_ancestor_or_same(f.path)]

    def without(self, path: ReadOnlyPath) -> "ValidationResult":
        """A copy without the failures at or below ``path``"""
        return ValidationResult(
            [f for f in self.failures if not path.is_ancestor_or_same(f.path)]
        )

    def raise_if_invalid(self, label: str = "$") -> None:
        """Raise ValidationError if any failure was recorded"""
        if not self.valid:
            error_details = {
                "label": label,
                "failures": [f.to_dict() for f in self.failures],
            }
            raise ValidationError(
                f"Validation failed for {label} ({len(self.failures)} failures)",
                error_details,
            )

    def __len__(self) -> int:
        return len(self.failures)

    def __iter__(self) -> Iterator[ValidationFailure]:
        return iter(self.failures)

    def __repr__(self) -> str:
        return f"ValidationResult(valid={self.valid}, failures={self.failures!r})"
