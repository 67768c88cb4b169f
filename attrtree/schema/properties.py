"""
Property Builders

Plain builder functions returning SchemaAttributes (and table columns).
Rules are given as ValidatorFactory recipes, which are bound to the path of
the attribute's payload, or as ready-made Validators over the Attribute.

    count = integer_property("Count", ValidatorFactory.required().greater_than(0))
"""

from typing import Iterable, NamedTuple, Optional, Sequence, Union

from ..core.attribute import VALUE_ACCESSORS
from ..core.path import ReadOnlyPath
from ..core.types import (
    AttributeType,
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
from ..validation.factory import ValidatorFactory
from ..validation.rules import each
from ..validation.table import ColumnRule, TableRowValidator
from ..validation.validator import Validator, all_of, chain
from .schema_attribute import SchemaAttribute

Rule = Union[ValidatorFactory, Validator]

ROOT = ReadOnlyPath()

# Kind -> payload accessor, e.g. "integer" -> "integer_value"
ACCESSOR_FOR_KIND = {kind: name for name, kind in VALUE_ACCESSORS.items()}


def payload_path(attribute_type: AttributeType, base: ReadOnlyPath = ROOT) -> ReadOnlyPath:
    """Path from ``base`` to the payload of an attribute of ``attribute_type``"""
    return base.attr(ACCESSOR_FOR_KIND[attribute_type.attribute_kind])


def bind_rules(path: ReadOnlyPath, rules: Iterable[Rule]) -> Validator:
    """Bind factories to ``path``; validators are used as given"""
    return all_of(
        [rule.make(path) if isinstance(rule, ValidatorFactory) else rule for rule in rules]
    )


def _property(label: str, attribute_type: AttributeType, rules: Sequence[Rule]) -> SchemaAttribute:
    return SchemaAttribute(label, attribute_type, bind_rules(payload_path(attribute_type), rules))


def bool_property(label: str, *rules: Rule) -> SchemaAttribute:
    return _property(label, BoolType(), rules)


def integer_property(label: str, *rules: Rule) -> SchemaAttribute:
    return _property(label, IntegerType(), rules)


def float_property(label: str, *rules: Rule) -> SchemaAttribute:
    return _property(label, FloatType(), rules)


def expression_property(label: str, language: Language, *rules: Rule) -> SchemaAttribute:
    return _property(label, ExpressionType(language=language), rules)


def enumerated_property(label: str, valid_values: Iterable[str], *rules: Rule) -> SchemaAttribute:
    """Membership in ``valid_values`` is checked by the structural validator"""
    return _property(label, EnumeratedType(valid_values=frozenset(valid_values)), rules)


def line_property(label: str, *rules: Rule) -> SchemaAttribute:
    return _property(label, LineType(), rules)


def code_property(label: str, language: Language, *rules: Rule) -> SchemaAttribute:
    return _property(label, CodeType(language=language), rules)


def text_property(label: str, *rules: Rule) -> SchemaAttribute:
    return _property(label, TextType(), rules)


def collection_property(
    label: str,
    element_type: AttributeType,
    *rules: Rule,
    validator: Optional[Validator] = None,
) -> SchemaAttribute:
    """
    A homogeneous collection

    Args:
        label: Attribute label
        element_type: Type of every element
        rules: Applied to the payload of each element
        validator: Applied to the whole collection attribute
    """
    collection_path = ROOT.attr("collection_value")
    element_rules = each(
        collection_path, lambda path: bind_rules(payload_path(element_type, path), rules)
    )
    validators = [element_rules] + ([validator] if validator is not None else [])
    return SchemaAttribute(label, CollectionType(element_type=element_type), all_of(validators))


def complex_property(
    label: str,
    properties: Sequence[SchemaAttribute],
    validator: Optional[Validator] = None,
) -> SchemaAttribute:
    """
    A record whose layout is given by nested schema attributes

    Each nested attribute's user validator runs on its field. ``validator``
    runs on the whole record.
    """
    layout = tuple(Field(name=p.label, type=p.type) for p in properties)
    field_rules = [
        chain(ROOT.attr("complex_value")[p.label], p.user_validator) for p in properties
    ]
    validators = field_rules + ([validator] if validator is not None else [])
    return SchemaAttribute(label, ComplexType(layout=layout), all_of(validators))


def enumerable_collection_property(
    label: str, valid_values: Iterable[str], validator: Optional[Validator] = None
) -> SchemaAttribute:
    """Each selected value must be valid; checked by the structural validator"""
    return SchemaAttribute(
        label, EnumerableCollectionType(valid_values=frozenset(valid_values)), validator
    )


class SchemaColumn(NamedTuple):
    """A table column declaration; ``validator`` runs on each cell Attribute"""

    name: str
    type: LineAttributeType
    validator: Validator

    @property
    def table_column(self) -> TableColumn:
        return TableColumn(name=self.name, type=self.type)


def table_property(
    label: str,
    columns: Sequence[SchemaColumn],
    validator: Optional[Validator] = None,
) -> SchemaAttribute:
    """
    A table

    Row lengths are checked by the structural validator; the column
    validators run on every row of the right length.
    """
    table_type = TableType(columns=tuple(column.table_column for column in columns))
    rows = TableRowValidator(
        ROOT.attr("table_value"),
        [ColumnRule(column.name, column.validator) for column in columns],
        report_length=False,
    )
    validators = [rows] + ([validator] if validator is not None else [])
    return SchemaAttribute(label, table_type, all_of(validators))


def _column(name: str, column_type: LineAttributeType, rules: Sequence[Rule]) -> SchemaColumn:
    return SchemaColumn(name, column_type, bind_rules(payload_path(column_type), rules))


def bool_column(name: str, *rules: Rule) -> SchemaColumn:
    return _column(name, BoolType(), rules)


def integer_column(name: str, *rules: Rule) -> SchemaColumn:
    return _column(name, IntegerType(), rules)


def float_column(name: str, *rules: Rule) -> SchemaColumn:
    return _column(name, FloatType(), rules)


def expression_column(name: str, language: Language, *rules: Rule) -> SchemaColumn:
    return _column(name, ExpressionType(language=language), rules)


def enumerated_column(name: str, valid_values: Iterable[str], *rules: Rule) -> SchemaColumn:
    return _column(name, EnumeratedType(valid_values=frozenset(valid_values)), rules)


def line_column(name: str, *rules: Rule) -> SchemaColumn:
    return _column(name, LineType(), rules)
