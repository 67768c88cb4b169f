"""attrtree schema bridge

Provides:
- SchemaAttribute (label, type, validator) and type-derived structural validation
- Property and table column builder functions
"""

from .schema_attribute import SchemaAttribute, structural_validator
from .properties import (
    SchemaColumn,
    bool_property,
    integer_property,
    float_property,
    expression_property,
    enumerated_property,
    line_property,
    code_property,
    text_property,
    collection_property,
    complex_property,
    enumerable_collection_property,
    table_property,
    bool_column,
    integer_column,
    float_column,
    expression_column,
    enumerated_column,
    line_column,
)

__all__ = [
    "SchemaAttribute",
    "structural_validator",
    "SchemaColumn",
    "bool_property",
    "integer_property",
    "float_property",
    "expression_property",
    "enumerated_property",
    "line_property",
    "code_property",
    "text_property",
    "collection_property",
    "complex_property",
    "enumerable_collection_property",
    "table_property",
    "bool_column",
    "integer_column",
    "float_column",
    "expression_column",
    "enumerated_column",
    "line_column",
]
