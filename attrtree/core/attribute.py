"""
Attribute Value Model

An Attribute is a value paired with its AttributeType. Construction checks the
value against the type, and every variant accessor checks the active kind
before answering, raising VariantMismatch on divergence instead of returning a
meaningless default.

Attributes are immutable. Setting goes through ``_replace`` which re-checks
the new value and returns a new Attribute.
"""

import logging
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from ..exceptions.errors import VariantMismatch
from .types import (
    AttributeKind,
    AttributeType,
    AttributeTypeUnion,
    BoolType,
    CodeType,
    CollectionType,
    ComplexType,
    EnumerableCollectionType,
    EnumeratedType,
    ExpressionType,
    Field,
    FloatType,
    IntegerType,
    Language,
    LineAttributeType,
    LineType,
    TableColumn,
    TableType,
    TextType,
)

logger = logging.getLogger(__name__)


ATTRIBUTE_TAG_NAMES = {
    AttributeKind.BOOL: "BoolAttribute",
    AttributeKind.INTEGER: "IntegerAttribute",
    AttributeKind.FLOAT: "FloatAttribute",
    AttributeKind.EXPRESSION: "ExpressionAttribute",
    AttributeKind.ENUMERATED: "EnumeratedAttribute",
    AttributeKind.LINE: "LineAttribute",
    AttributeKind.CODE: "CodeAttribute",
    AttributeKind.TEXT: "TextAttribute",
    AttributeKind.COLLECTION: "CollectionAttribute",
    AttributeKind.COMPLEX: "ComplexAttribute",
    AttributeKind.ENUMERABLE_COLLECTION: "EnumerableCollectionAttribute",
    AttributeKind.TABLE: "TableAttribute",
}

# Accessor name -> kind whose payload it reads and writes
VALUE_ACCESSORS = {
    "bool_value": AttributeKind.BOOL,
    "integer_value": AttributeKind.INTEGER,
    "float_value": AttributeKind.FLOAT,
    "expression_value": AttributeKind.EXPRESSION,
    "enumerated_value": AttributeKind.ENUMERATED,
    "line_value": AttributeKind.LINE,
    "code_value": AttributeKind.CODE,
    "text_value": AttributeKind.TEXT,
    "collection_value": AttributeKind.COLLECTION,
    "complex_value": AttributeKind.COMPLEX,
    "enumerable_collection_value": AttributeKind.ENUMERABLE_COLLECTION,
    "table_value": AttributeKind.TABLE,
}

# Typed collection accessor name -> element kind
COLLECTION_ACCESSORS = {
    "collection_bools": AttributeKind.BOOL,
    "collection_integers": AttributeKind.INTEGER,
    "collection_floats": AttributeKind.FLOAT,
    "collection_expressions": AttributeKind.EXPRESSION,
    "collection_enumerated": AttributeKind.ENUMERATED,
    "collection_lines": AttributeKind.LINE,
    "collection_code": AttributeKind.CODE,
    "collection_text": AttributeKind.TEXT,
    "collection_complex": AttributeKind.COMPLEX,
    "collection_enumerable_collection": AttributeKind.ENUMERABLE_COLLECTION,
    "collection_table": AttributeKind.TABLE,
}

_STRING_KINDS = (
    AttributeKind.EXPRESSION,
    AttributeKind.ENUMERATED,
    AttributeKind.LINE,
    AttributeKind.CODE,
    AttributeKind.TEXT,
)


def _mismatch(what: str, expected: str, actual: str) -> VariantMismatch:
    return VariantMismatch(
        f"Cannot use {what}: expected {expected}, found {actual}",
        expected=expected,
        actual=actual,
    )


def _check_value(attribute_type: AttributeType, value: Any, location: str = "$") -> Any:
    """
    Check a raw payload against its type

    Returns:
        The normalized payload (tuples for sequences, ordered dict for records,
        frozenset for enumerable collections, float for float values)
    """
    kind = attribute_type.attribute_kind
    actual = type(value).__name__

    if kind == AttributeKind.BOOL:
        if not isinstance(value, bool):
            raise _mismatch(f"value at {location}", "bool", actual)
        return value

    if kind == AttributeKind.INTEGER:
        if isinstance(value, bool) or not isinstance(value, int):
            raise _mismatch(f"value at {location}", "integer", actual)
        return value

    if kind == AttributeKind.FLOAT:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise _mismatch(f"value at {location}", "float", actual)
        return float(value)

    if kind in _STRING_KINDS:
        if not isinstance(value, str):
            raise _mismatch(f"value at {location}", "str", actual)
        return value

    if kind == AttributeKind.COLLECTION:
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
            raise _mismatch(f"value at {location}", "sequence of attributes", actual)
        elements = tuple(value)
        for index, element in enumerate(elements):
            _check_element(attribute_type.element_type, element, f"{location}[{index}]")
        return elements

    if kind == AttributeKind.COMPLEX:
        if not isinstance(value, Mapping):
            raise _mismatch(f"value at {location}", "mapping of attributes", actual)
        labels = attribute_type.labels
        if set(value.keys()) != set(labels):
            raise VariantMismatch(
                f"Record at {location} has fields {sorted(value.keys())}, "
                f"expected {sorted(labels)}",
                expected=", ".join(labels),
                actual=", ".join(str(key) for key in value.keys()),
            )
        ordered = {}
        for field in attribute_type.layout:
            _check_element(field.type, value[field.name], f"{location}['{field.name}']")
            ordered[field.name] = value[field.name]
        return ordered

    if kind == AttributeKind.ENUMERABLE_COLLECTION:
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
            raise _mismatch(f"value at {location}", "set of str", actual)
        values = frozenset(value)
        for item in values:
            if not isinstance(item, str):
                raise _mismatch(f"element at {location}", "str", type(item).__name__)
        return values

    if kind == AttributeKind.TABLE:
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
            raise _mismatch(f"value at {location}", "sequence of rows", actual)
        rows = []
        for row_index, row in enumerate(value):
            if isinstance(row, (str, bytes, Mapping)) or not isinstance(row, Iterable):
                raise _mismatch(
                    f"row at {location}[{row_index}]", "sequence of cells", type(row).__name__
                )
            cells = tuple(row)
            # Row length is a validation concern; only present cells are checked.
            for column, cell in zip(attribute_type.columns, cells):
                _check_element(
                    column.type, cell, f"{location}[{row_index}]['{column.name}']"
                )
            for cell in cells[len(attribute_type.columns):]:
                if not isinstance(cell, Attribute) or not cell.is_line:
                    raise _mismatch(
                        f"cell at {location}[{row_index}]", "line attribute", type(cell).__name__
                    )
            rows.append(cells)
        return tuple(rows)

    raise VariantMismatch(f"Unknown attribute kind: {kind}")


def _check_element(expected_type: AttributeType, element: Any, location: str) -> None:
    if not isinstance(element, Attribute):
        raise _mismatch(f"element at {location}", "Attribute", type(element).__name__)
    if element.type != expected_type:
        raise _mismatch(
            f"element at {location}", expected_type.describe(), element.type.describe()
        )


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return tuple(value.items())
    return value


class Attribute(BaseModel):
    """
    Attribute value

    Holds a payload and the AttributeType it was checked against.

    Example:
        >>> flag = Attribute.bool_(True)
        >>> flag.bool_value
        True
        >>> flag.integer_value
        Traceback (most recent call last):
        ...
        attrtree.exceptions.errors.VariantMismatch: ...
    """

    model_config = ConfigDict(frozen=True)

    type: AttributeTypeUnion
    value: Any

    @field_validator("value", mode="after")
    @classmethod
    def validate_value(cls, v: Any, info: ValidationInfo) -> Any:
        attribute_type = info.data.get("type")
        if attribute_type is None:
            # The type itself failed validation; pydantic reports that.
            return v
        return _check_value(attribute_type, v)

    def __hash__(self) -> int:
        return hash((self.type, _freeze(self.value)))

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def bool_(cls, value: bool) -> "Attribute":
        return cls(type=BoolType(), value=value)

    @classmethod
    def integer(cls, value: int) -> "Attribute":
        return cls(type=IntegerType(), value=value)

    @classmethod
    def float_(cls, value: float) -> "Attribute":
        return cls(type=FloatType(), value=value)

    @classmethod
    def expression(cls, value: str, language: Language) -> "Attribute":
        return cls(type=ExpressionType(language=language), value=value)

    @classmethod
    def enumerated(cls, value: str, valid_values: Iterable[str]) -> "Attribute":
        return cls(type=EnumeratedType(valid_values=frozenset(valid_values)), value=value)

    @classmethod
    def line(cls, value: str) -> "Attribute":
        return cls(type=LineType(), value=value)

    @classmethod
    def code(cls, value: str, language: Language) -> "Attribute":
        return cls(type=CodeType(language=language), value=value)

    @classmethod
    def text(cls, value: str) -> "Attribute":
        return cls(type=TextType(), value=value)

    @classmethod
    def collection(
        cls, values: Sequence["Attribute"], element_type: AttributeType
    ) -> "Attribute":
        return cls(type=CollectionType(element_type=element_type), value=tuple(values))

    @classmethod
    def complex_(
        cls, values: Mapping[str, "Attribute"], layout: Sequence[Field]
    ) -> "Attribute":
        return cls(type=ComplexType(layout=tuple(layout)), value=dict(values))

    @classmethod
    def enumerable_collection(
        cls, values: Iterable[str], valid_values: Iterable[str]
    ) -> "Attribute":
        return cls(
            type=EnumerableCollectionType(valid_values=frozenset(valid_values)),
            value=frozenset(values),
        )

    @classmethod
    def table(
        cls, rows: Sequence[Sequence["Attribute"]], columns: Sequence[TableColumn]
    ) -> "Attribute":
        return cls(
            type=TableType(columns=tuple(columns)), value=tuple(tuple(row) for row in rows)
        )

    @classmethod
    def collection_of_bools(cls, values: Iterable[bool]) -> "Attribute":
        return cls.collection([cls.bool_(v) for v in values], BoolType())

    @classmethod
    def collection_of_integers(cls, values: Iterable[int]) -> "Attribute":
        return cls.collection([cls.integer(v) for v in values], IntegerType())

    @classmethod
    def collection_of_floats(cls, values: Iterable[float]) -> "Attribute":
        return cls.collection([cls.float_(v) for v in values], FloatType())

    @classmethod
    def collection_of_lines(cls, values: Iterable[str]) -> "Attribute":
        return cls.collection([cls.line(v) for v in values], LineType())

    @classmethod
    def parse_line(cls, line_type: LineAttributeType, text: str) -> Optional["Attribute"]:
        """
        Build a line attribute from its textual form

        Returns:
            The attribute, or None if ``text`` is not a valid value of
            ``line_type`` (not a number, not a known enumerated value, ...)
        """
        if not line_type.is_line:
            raise _mismatch("parse_line", "line type", line_type.describe())
        return line_type.parse(text)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    @property
    def kind(self) -> AttributeKind:
        return self.type.attribute_kind

    @property
    def is_line(self) -> bool:
        return self.type.is_line

    @property
    def is_block(self) -> bool:
        return self.type.is_block

    @property
    def tag_name(self) -> str:
        return ATTRIBUTE_TAG_NAMES[self.kind]

    @property
    def str_value(self) -> Optional[str]:
        """Best effort display string, None when nothing string-like is held"""
        kind = self.kind
        if kind == AttributeKind.BOOL:
            return "true" if self.value else "false"
        if kind in (AttributeKind.INTEGER, AttributeKind.FLOAT):
            return str(self.value)
        if kind in _STRING_KINDS:
            return self.value
        if kind == AttributeKind.COLLECTION:
            return next(
                (s for s in (e.str_value for e in self.value) if s is not None), None
            )
        if kind == AttributeKind.COMPLEX:
            ordered = (self.value[label] for label in sorted(self.value))
            return next((s for s in (a.str_value for a in ordered) if s is not None), None)
        if kind == AttributeKind.ENUMERABLE_COLLECTION:
            return min(self.value) if self.value else None
        if kind == AttributeKind.TABLE:
            if self.value and self.value[0]:
                return self.value[0][0].str_value
            return None
        return None

    # ------------------------------------------------------------------
    # Variant-checked accessors
    # ------------------------------------------------------------------

    def _expect(self, kind: AttributeKind, accessor: str) -> None:
        if self.kind != kind:
            raise _mismatch(accessor, kind.value, self.kind.value)

    @property
    def bool_value(self) -> bool:
        self._expect(AttributeKind.BOOL, "bool_value")
        return self.value

    @property
    def integer_value(self) -> int:
        self._expect(AttributeKind.INTEGER, "integer_value")
        return self.value

    @property
    def float_value(self) -> float:
        self._expect(AttributeKind.FLOAT, "float_value")
        return self.value

    @property
    def expression_value(self) -> str:
        self._expect(AttributeKind.EXPRESSION, "expression_value")
        return self.value

    @property
    def expression_language(self) -> Language:
        self._expect(AttributeKind.EXPRESSION, "expression_language")
        return self.type.language

    @property
    def enumerated_value(self) -> str:
        self._expect(AttributeKind.ENUMERATED, "enumerated_value")
        return self.value

    @property
    def enumerated_valid_values(self) -> FrozenSet[str]:
        self._expect(AttributeKind.ENUMERATED, "enumerated_valid_values")
        return self.type.valid_values

    @property
    def line_value(self) -> str:
        self._expect(AttributeKind.LINE, "line_value")
        return self.value

    @property
    def code_value(self) -> str:
        self._expect(AttributeKind.CODE, "code_value")
        return self.value

    @property
    def code_language(self) -> Language:
        self._expect(AttributeKind.CODE, "code_language")
        return self.type.language

    @property
    def text_value(self) -> str:
        self._expect(AttributeKind.TEXT, "text_value")
        return self.value

    @property
    def collection_value(self) -> Tuple["Attribute", ...]:
        self._expect(AttributeKind.COLLECTION, "collection_value")
        return self.value

    @property
    def collection_element_type(self) -> AttributeType:
        self._expect(AttributeKind.COLLECTION, "collection_element_type")
        return self.type.element_type

    @property
    def complex_value(self) -> Dict[str, "Attribute"]:
        self._expect(AttributeKind.COMPLEX, "complex_value")
        return self.value

    @property
    def complex_fields(self) -> Tuple[Field, ...]:
        self._expect(AttributeKind.COMPLEX, "complex_fields")
        return self.type.layout

    @property
    def enumerable_collection_value(self) -> FrozenSet[str]:
        self._expect(AttributeKind.ENUMERABLE_COLLECTION, "enumerable_collection_value")
        return self.value

    @property
    def enumerable_collection_valid_values(self) -> FrozenSet[str]:
        self._expect(
            AttributeKind.ENUMERABLE_COLLECTION, "enumerable_collection_valid_values"
        )
        return self.type.valid_values

    @property
    def table_value(self) -> Tuple[Tuple["Attribute", ...], ...]:
        self._expect(AttributeKind.TABLE, "table_value")
        return self.value

    @property
    def table_columns(self) -> Tuple[TableColumn, ...]:
        self._expect(AttributeKind.TABLE, "table_columns")
        return self.type.columns

    def _collection_of(self, element_kind: AttributeKind, accessor: str) -> Tuple[Any, ...]:
        self._expect(AttributeKind.COLLECTION, accessor)
        actual = self.type.element_type.attribute_kind
        if actual != element_kind:
            raise _mismatch(
                accessor, f"collection({element_kind.value})", f"collection({actual.value})"
            )
        return tuple(element.value for element in self.value)

    @property
    def collection_bools(self) -> Tuple[bool, ...]:
        return self._collection_of(AttributeKind.BOOL, "collection_bools")

    @property
    def collection_integers(self) -> Tuple[int, ...]:
        return self._collection_of(AttributeKind.INTEGER, "collection_integers")

    @property
    def collection_floats(self) -> Tuple[float, ...]:
        return self._collection_of(AttributeKind.FLOAT, "collection_floats")

    @property
    def collection_expressions(self) -> Tuple[str, ...]:
        return self._collection_of(AttributeKind.EXPRESSION, "collection_expressions")

    @property
    def collection_enumerated(self) -> Tuple[str, ...]:
        return self._collection_of(AttributeKind.ENUMERATED, "collection_enumerated")

    @property
    def collection_lines(self) -> Tuple[str, ...]:
        return self._collection_of(AttributeKind.LINE, "collection_lines")

    @property
    def collection_code(self) -> Tuple[str, ...]:
        return self._collection_of(AttributeKind.CODE, "collection_code")

    @property
    def collection_text(self) -> Tuple[str, ...]:
        return self._collection_of(AttributeKind.TEXT, "collection_text")

    @property
    def collection_complex(self) -> Tuple[Dict[str, "Attribute"], ...]:
        return self._collection_of(AttributeKind.COMPLEX, "collection_complex")

    @property
    def collection_enumerable_collection(self) -> Tuple[FrozenSet[str], ...]:
        return self._collection_of(
            AttributeKind.ENUMERABLE_COLLECTION, "collection_enumerable_collection"
        )

    @property
    def collection_table(self) -> Tuple[Tuple[Tuple["Attribute", ...], ...], ...]:
        return self._collection_of(AttributeKind.TABLE, "collection_table")

    # ------------------------------------------------------------------
    # Setting
    # ------------------------------------------------------------------

    def _replace(self, **changes: Any) -> "Attribute":
        """
        Return a new Attribute with the given accessors replaced

        Accepts ``value``, ``type`` and any variant accessor name
        (``bool_value``, ``collection_integers``, ...). Accessors are checked
        against the active kind exactly like reads.

        Raises:
            VariantMismatch: An accessor does not match the active kind, or
                the new payload does not fit the type
        """
        attribute_type = changes.pop("type", self.type)
        value = changes.pop("value", self.value)

        for name, new_value in changes.items():
            if name in VALUE_ACCESSORS:
                kind = VALUE_ACCESSORS[name]
                if attribute_type.attribute_kind != kind:
                    raise _mismatch(name, kind.value, attribute_type.kind)
                value = new_value
            elif name in COLLECTION_ACCESSORS:
                element_kind = COLLECTION_ACCESSORS[name]
                if attribute_type.attribute_kind != AttributeKind.COLLECTION:
                    raise _mismatch(name, "collection", attribute_type.kind)
                element_type = attribute_type.element_type
                if element_type.attribute_kind != element_kind:
                    raise _mismatch(
                        name,
                        f"collection({element_kind.value})",
                        f"collection({element_type.kind})",
                    )
                value = tuple(Attribute(type=element_type, value=v) for v in new_value)
            else:
                raise AttributeError(f"Attribute has no settable accessor '{name}'")

        logger.debug(f"Replacing {self.tag_name} value")
        return Attribute(type=attribute_type, value=value)

    def __str__(self) -> str:
        text = self.str_value
        return f"{self.tag_name}({text!r})"
