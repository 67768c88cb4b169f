"""attrtree validation engine

Provides:
- Path-tagged failures and validation results
- Path rules, collection lifting and validator combinators
- Table row validation and path-less validator factories
"""

from .failures import ValidationFailure, RowLengthMismatch, ValidationResult
from .validator import Validator, AnyValidator, AllOf, ChainValidator, all_of, chain
from .rules import PathValidator, ValidationPath, EachValidator, each
from .factory import ValidatorFactory, FactoryValidator
from .table import TableRowValidator, ColumnRule

__all__ = [
    "ValidationFailure",
    "RowLengthMismatch",
    "ValidationResult",
    "Validator",
    "AnyValidator",
    "AllOf",
    "ChainValidator",
    "all_of",
    "chain",
    "PathValidator",
    "ValidationPath",
    "EachValidator",
    "each",
    "ValidatorFactory",
    "FactoryValidator",
    "TableRowValidator",
    "ColumnRule",
]
