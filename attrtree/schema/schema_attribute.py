"""
Schema Attributes

A SchemaAttribute binds a label, an AttributeType and a validator. Its
validator has two halves:

- the structural half, derived from the type (kind check, enumerated
  membership, table row lengths, nested records and collections)
- the user half, supplied when the attribute is declared

Changing the type re-derives the structural half and keeps the user half.
"""

import logging
from typing import Any, Iterable, Iterator, List, Optional

from ..core.attribute import Attribute
from ..core.path import ReadOnlyPath
from ..core.types import AttributeKind, AttributeType
from ..exceptions.errors import VariantMismatch
from ..validation.failures import ValidationFailure, ValidationResult
from ..validation.rules import ValidationPath, describe_values, each
from ..validation.table import ColumnRule, TableRowValidator
from ..validation.validator import AllOf, AnyValidator, Validator, chain

logger = logging.getLogger(__name__)

ROOT = ReadOnlyPath()


class KindValidator(Validator):
    """Fails when the root is not an Attribute of the declared kind"""

    def __init__(self, attribute_type: AttributeType):
        self.attribute_type = attribute_type

    def failures(self, root: Any) -> Iterator[ValidationFailure]:
        if not isinstance(root, Attribute):
            yield ValidationFailure(
                ROOT,
                f"Expected {self.attribute_type.describe()}, found {type(root).__name__}",
                "variant_mismatch",
            )
        elif root.kind != self.attribute_type.attribute_kind:
            yield ValidationFailure(
                ROOT,
                f"Expected {self.attribute_type.describe()}, found {root.type.describe()}",
                "variant_mismatch",
                {"expected": self.attribute_type.kind, "actual": root.kind.value},
            )


class ValidValuesValidator(Validator):
    """Every member of an enumerable collection must be a valid value"""

    def __init__(self, valid_values: Iterable[str]):
        self.valid_values = frozenset(valid_values)

    def failures(self, root: Any) -> Iterator[ValidationFailure]:
        path = ROOT.attr("enumerable_collection_value")
        for value in sorted(path.get(root) - self.valid_values):
            yield ValidationFailure(
                path,
                f"{value} is not valid. Must equal one of the following: "
                f"'{describe_values(self.valid_values)}'.",
                "membership",
                {"value": value},
            )


class _KindGuarded(Validator):
    """Runs the detail checks only when the kind check passed"""

    def __init__(self, kind_check: KindValidator, details: List[Validator]):
        self.kind_check = kind_check
        self.details = details

    def failures(self, root: Any) -> Iterator[ValidationFailure]:
        mismatches = list(self.kind_check.failures(root))
        if mismatches:
            yield from mismatches
            return
        for validator in self.details:
            yield from validator.failures(root)


def structural_validator(attribute_type: AttributeType) -> Validator:
    """
    Derive the validator every value of ``attribute_type`` must satisfy

    Args:
        attribute_type: The declared type

    Returns:
        Validator over an Attribute root
    """
    kind = attribute_type.attribute_kind
    details: List[Validator] = []

    if kind == AttributeKind.ENUMERATED:
        details.append(
            ValidationPath(ROOT.attr("enumerated_value")).is_in(attribute_type.valid_values)
        )
    elif kind == AttributeKind.ENUMERABLE_COLLECTION:
        details.append(ValidValuesValidator(attribute_type.valid_values))
    elif kind == AttributeKind.COLLECTION:
        element_validator = structural_validator(attribute_type.element_type)
        details.append(
            each(ROOT.attr("collection_value"), lambda path: chain(path, element_validator))
        )
    elif kind == AttributeKind.COMPLEX:
        for field in attribute_type.layout:
            details.append(
                chain(ROOT.attr("complex_value")[field.name], structural_validator(field.type))
            )
    elif kind == AttributeKind.TABLE:
        details.append(
            TableRowValidator(
                ROOT.attr("table_value"),
                [
                    ColumnRule(column.name, structural_validator(column.type))
                    for column in attribute_type.columns
                ],
            )
        )

    return _KindGuarded(KindValidator(attribute_type), details)


class SchemaAttribute:
    """
    Schema attribute

    Immutable; ``with_type`` and ``with_valid_values`` return new instances.

    Example:
        >>> flag = SchemaAttribute(
        ...     "Flag", BoolType(), ValidationPath(ReadOnlyPath().attr("bool_value")).equals_true()
        ... )
        >>> len(flag.validate(Attribute.bool_(False)).failures)
        1
    """

    __slots__ = ("_label", "_type", "_user_validator", "_structural_validator")

    def __init__(self, label: str, type: AttributeType, validator: Optional[Validator] = None):
        object.__setattr__(self, "_label", label)
        object.__setattr__(self, "_type", type)
        object.__setattr__(
            self, "_user_validator", validator if validator is not None else AnyValidator()
        )
        object.__setattr__(self, "_structural_validator", structural_validator(type))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("SchemaAttribute is immutable")

    @property
    def label(self) -> str:
        return self._label

    @property
    def type(self) -> AttributeType:
        return self._type

    @property
    def user_validator(self) -> Validator:
        return self._user_validator

    @property
    def structural_validator(self) -> Validator:
        return self._structural_validator

    @property
    def validator(self) -> Validator:
        """Structural half followed by the user half"""
        return AllOf([self._structural_validator, self._user_validator])

    def validate(self, attribute: Attribute) -> ValidationResult:
        logger.debug(f"Validating schema attribute '{self._label}'")
        return self.validator.validate(attribute)

    def with_type(self, new_type: AttributeType) -> "SchemaAttribute":
        return SchemaAttribute(self._label, new_type, self._user_validator)

    def with_valid_values(self, values: Iterable[str]) -> "SchemaAttribute":
        """
        Replace the valid values of an enumerated or enumerable collection type

        Raises:
            VariantMismatch: The type has no valid-value set
        """
        kind = self._type.attribute_kind
        if kind not in (AttributeKind.ENUMERATED, AttributeKind.ENUMERABLE_COLLECTION):
            raise VariantMismatch(
                f"Schema attribute '{self._label}' of type {self._type.describe()} "
                "has no valid values",
                expected="enumerated or enumerable_collection",
                actual=self._type.kind,
            )
        new_type = self._type.model_copy(update={"valid_values": frozenset(values)})
        return self.with_type(new_type)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SchemaAttribute):
            return NotImplemented
        return (
            self._label == other._label
            and self._type == other._type
            and self._user_validator is other._user_validator
        )

    def __hash__(self) -> int:
        return hash((self._label, self._type))

    def __repr__(self) -> str:
        return f"SchemaAttribute(label={self._label!r}, type={self._type.describe()!r})"
