"""attrtree exception module

Provides all exception classes
"""

from .errors import (
    AttrTreeError,
    VariantMismatch,
    PathError,
    DecodingFailure,
    ValidationError,
    ConfigurationError,
)

__all__ = [
    "AttrTreeError",
    "VariantMismatch",
    "PathError",
    "DecodingFailure",
    "ValidationError",
    "ConfigurationError",
]
