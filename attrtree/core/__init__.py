"""attrtree core components

Provides:
- Attribute value model and attribute type descriptors
- Read-only and writable paths
- Collection search paths
"""

from .types import (
    Language,
    AttributeKind,
    AttributeType,
    LineAttributeType,
    BlockAttributeType,
    BoolType,
    IntegerType,
    FloatType,
    ExpressionType,
    EnumeratedType,
    LineType,
    CodeType,
    TextType,
    CollectionType,
    ComplexType,
    EnumerableCollectionType,
    TableType,
    Field,
    TableColumn,
    columns,
    layout,
)
from .attribute import Attribute
from .path import PathSegment, ReadOnlyPath, Path
from .search_path import CollectionSearchPath

__all__ = [
    "Language",
    "AttributeKind",
    "AttributeType",
    "LineAttributeType",
    "BlockAttributeType",
    "BoolType",
    "IntegerType",
    "FloatType",
    "ExpressionType",
    "EnumeratedType",
    "LineType",
    "CodeType",
    "TextType",
    "CollectionType",
    "ComplexType",
    "EnumerableCollectionType",
    "TableType",
    "Field",
    "TableColumn",
    "columns",
    "layout",
    "Attribute",
    "PathSegment",
    "ReadOnlyPath",
    "Path",
    "CollectionSearchPath",
]
