"""
attrtree Exception Definitions

Define the error types raised by the attribute model, the path layer, the
codec and the validation engine.
"""

from typing import Any, Dict, Optional


class AttrTreeError(Exception):
    """attrtree base exception"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class VariantMismatch(AttrTreeError):
    """
    Variant mismatch error

    Occurs when a variant accessor is applied to an attribute (or attribute
    type) whose active kind is different, e.g. reading the bool value of an
    integer attribute, or when a value does not fit its declared type.
    """

    def __init__(
        self,
        message: str,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        merged = dict(details or {})
        if expected is not None:
            merged.setdefault("expected", expected)
        if actual is not None:
            merged.setdefault("actual", actual)
        super().__init__(message, merged)
        self.expected = expected
        self.actual = actual


class PathError(AttrTreeError):
    """
    Path navigation error

    Occurs when a route cannot be followed (missing key, index out of range,
    None intermediate), when a read-only segment is written, or when a path
    string has invalid syntax.
    """

    pass


class DecodingFailure(AttrTreeError):
    """
    Decoding error

    Occurs at the serialization boundary when an external representation is
    malformed. ``details["location"]`` names the offending position.
    """

    pass


class ValidationError(AttrTreeError):
    """
    Validation error

    Raised by ValidationResult.raise_if_invalid when a validation run produced
    failures. ``details["failures"]`` lists them.
    """

    pass


class ConfigurationError(AttrTreeError):
    """
    Configuration error

    Occurs when a configuration file cannot be read or holds invalid values.
    """

    pass
