"""
Attribute Codec

Converts types and attributes to and from plain JSON/YAML-compatible data:

- types encode through their pydantic models ({"kind": "integer"}, ...)
- attribute values encode as plain payloads (scalars, lists, mappings)
- a document is {"type": <encoded type>, "value": <encoded value>}

Malformed input raises DecodingFailure naming the offending location.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import pydantic
import yaml
from pydantic import TypeAdapter

from .core.attribute import Attribute
from .core.types import AttributeKind, AttributeType, AttributeTypeUnion
from .exceptions.errors import DecodingFailure, VariantMismatch

logger = logging.getLogger(__name__)

_TYPE_ADAPTER = TypeAdapter(AttributeTypeUnion)


def _failure(message: str, location: str) -> DecodingFailure:
    return DecodingFailure(f"{message} at {location}", {"location": location})


def encode_type(attribute_type: AttributeType) -> Dict[str, Any]:
    return attribute_type.model_dump(mode="json")


def decode_type(data: Any, location: str = "type") -> AttributeType:
    """
    Decode an attribute type

    Raises:
        DecodingFailure: Unknown kind or missing/invalid type parameters
    """
    try:
        return _TYPE_ADAPTER.validate_python(data)
    except pydantic.ValidationError as e:
        error = e.errors()[0]
        where = location + "".join(
            f"[{part}]" if isinstance(part, int) else f".{part}" for part in error["loc"]
        )
        raise _failure(f"Invalid attribute type: {error['msg']}", where) from e


def encode_attribute(attribute: Attribute) -> Any:
    """Encode an attribute's payload as plain data"""
    kind = attribute.kind
    if kind == AttributeKind.COLLECTION:
        return [encode_attribute(element) for element in attribute.value]
    if kind == AttributeKind.COMPLEX:
        return {label: encode_attribute(value) for label, value in attribute.value.items()}
    if kind == AttributeKind.ENUMERABLE_COLLECTION:
        return sorted(attribute.value)
    if kind == AttributeKind.TABLE:
        return [[encode_attribute(cell) for cell in row] for row in attribute.value]
    return attribute.value


def decode_attribute(data: Any, attribute_type: AttributeType, location: str = "$") -> Attribute:
    """
    Decode a payload of ``attribute_type``

    Raises:
        DecodingFailure: The payload does not have the shape of the type
    """
    kind = attribute_type.attribute_kind

    if kind == AttributeKind.COLLECTION:
        if not isinstance(data, list):
            raise _failure("Expected a list", location)
        value: Any = [
            decode_attribute(item, attribute_type.element_type, f"{location}[{index}]")
            for index, item in enumerate(data)
        ]
    elif kind == AttributeKind.COMPLEX:
        if not isinstance(data, Mapping):
            raise _failure("Expected a mapping", location)
        missing = [label for label in attribute_type.labels if label not in data]
        if missing:
            raise _failure(f"Missing fields {', '.join(missing)}", location)
        unknown = sorted(set(data) - set(attribute_type.labels))
        if unknown:
            raise _failure(f"Unknown fields {', '.join(map(str, unknown))}", location)
        value = {
            field.name: decode_attribute(data[field.name], field.type, f"{location}['{field.name}']")
            for field in attribute_type.layout
        }
    elif kind == AttributeKind.ENUMERABLE_COLLECTION:
        if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
            raise _failure("Expected a list of strings", location)
        value = data
    elif kind == AttributeKind.TABLE:
        if not isinstance(data, list):
            raise _failure("Expected a list of rows", location)
        columns = attribute_type.columns
        rows = []
        for row_index, row in enumerate(data):
            row_location = f"{location}[{row_index}]"
            if not isinstance(row, list):
                raise _failure("Expected a list of cells", row_location)
            if len(row) > len(columns):
                raise _failure(
                    f"Row has {len(row)} cells but only {len(columns)} columns", row_location
                )
            rows.append(
                [
                    decode_attribute(cell, column.type, f"{row_location}[{column_index}]")
                    for column_index, (column, cell) in enumerate(zip(columns, row))
                ]
            )
        value = rows
    else:
        value = data

    try:
        return Attribute(type=attribute_type, value=value)
    except VariantMismatch as e:
        raise _failure(f"Expected {attribute_type.describe()} ({e.message})", location) from e


def encode_document(attribute: Attribute) -> Dict[str, Any]:
    return {"type": encode_type(attribute.type), "value": encode_attribute(attribute)}


def decode_document(data: Any) -> Attribute:
    """Decode {"type": ..., "value": ...}"""
    if not isinstance(data, Mapping):
        raise _failure("Expected a mapping with 'type' and 'value'", "document")
    for key in ("type", "value"):
        if key not in data:
            raise _failure(f"Missing '{key}'", "document")
    attribute_type = decode_type(data["type"])
    return decode_attribute(data["value"], attribute_type)


def load_data(path: Union[str, Path]) -> Any:
    """
    Read a JSON (.json) or YAML (anything else) file

    Raises:
        DecodingFailure: The file is not well-formed or not UTF-8
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
            raise _failure(f"Malformed file: {e}", str(path)) from e


def load_document(path: Union[str, Path]) -> Attribute:
    """Load an attribute document from a file"""
    logger.debug(f"Loading document from {path}")
    return decode_document(load_data(path))


def dumps_document(attribute: Attribute, fmt: str = "yaml", indent: int = 2) -> str:
    data = encode_document(attribute)
    if fmt == "json":
        return json.dumps(data, indent=indent, ensure_ascii=False)
    return yaml.dump(data, allow_unicode=True, sort_keys=False, indent=indent)


def dump_document(attribute: Attribute, path: Union[str, Path]) -> None:
    """Write an attribute document; the format follows the file suffix"""
    path = Path(path)
    fmt = "json" if path.suffix.lower() == ".json" else "yaml"
    with open(path, "w", encoding="utf-8") as f:
        f.write(dumps_document(attribute, fmt))
