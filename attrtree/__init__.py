"""
attrtree - attribute trees, paths and validation

Supports:
- Typed attribute values (line, block, collection, record and table kinds)
- Reading and functionally updating nested values through paths
- Collecting every path-tagged validation failure of a tree
"""

__version__ = "0.1.0"

from .exceptions import (
    # Errors
    AttrTreeError,
    VariantMismatch,
    PathError,
    DecodingFailure,
    ValidationError,
    ConfigurationError,
)
from .core import (
    # Types and values
    Language,
    AttributeKind,
    AttributeType,
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
    Attribute,
    # Paths
    PathSegment,
    ReadOnlyPath,
    Path,
    CollectionSearchPath,
)
from .validation import (
    ValidationFailure,
    RowLengthMismatch,
    ValidationResult,
    Validator,
    AnyValidator,
    AllOf,
    ValidationPath,
    ValidatorFactory,
    TableRowValidator,
    all_of,
    chain,
    each,
)
from .schema import SchemaAttribute, structural_validator
from .codec import decode_document, encode_document, load_document

__all__ = [
    "__version__",
    # Errors
    "AttrTreeError",
    "VariantMismatch",
    "PathError",
    "DecodingFailure",
    "ValidationError",
    "ConfigurationError",
    # Core
    "Language",
    "AttributeKind",
    "AttributeType",
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
    "Attribute",
    "PathSegment",
    "ReadOnlyPath",
    "Path",
    "CollectionSearchPath",
    # Validation
    "ValidationFailure",
    "RowLengthMismatch",
    "ValidationResult",
    "Validator",
    "AnyValidator",
    "AllOf",
    "ValidationPath",
    "ValidatorFactory",
    "TableRowValidator",
    "all_of",
    "chain",
    "each",
    # Schema
    "SchemaAttribute",
    "structural_validator",
    # Codec
    "decode_document",
    "encode_document",
    "load_document",
]
