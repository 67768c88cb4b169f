"""
Codec Unit Tests

Tests the encode/decode boundary and document files
"""

import json

import pytest

from attrtree.codec import (
    decode_attribute,
    decode_document,
    decode_type,
    dump_document,
    dumps_document,
    encode_attribute,
    encode_document,
    encode_type,
    load_data,
    load_document,
)
from attrtree.core.attribute import Attribute
from attrtree.core.types import (
    BoolType,
    CollectionType,
    ComplexType,
    EnumerableCollectionType,
    EnumeratedType,
    ExpressionType,
    FloatType,
    IntegerType,
    Language,
    LineType,
    TableType,
    columns,
    layout,
)
from attrtree.exceptions.errors import DecodingFailure


@pytest.fixture
def record_type():
    return ComplexType(
        layout=layout(
            ("name", LineType()),
            ("ratio", FloatType()),
            ("values", CollectionType(element_type=IntegerType())),
            ("tags", EnumerableCollectionType(valid_values=frozenset({"a", "b"}))),
            (
                "rows",
                TableType(
                    columns=columns(
                        ("On", BoolType()), ("Mode", EnumeratedType(valid_values=frozenset({"x"})))
                    )
                ),
            ),
        )
    )


@pytest.fixture
def record(record_type):
    rows_type = record_type.field_type("rows")
    return Attribute.complex_(
        {
            "name": Attribute.line("sample"),
            "ratio": Attribute.float_(0.5),
            "values": Attribute.collection_of_integers([1, 2]),
            "tags": Attribute.enumerable_collection(["b", "a"], ["a", "b"]),
            "rows": Attribute.table(
                [[Attribute.bool_(True), Attribute.enumerated("x", ["x"])]], rows_type.columns
            ),
        },
        record_type.layout,
    )


class TestTypes:
    """Test type encoding"""

    def test_encode_type(self):
        assert encode_type(EnumeratedType(valid_values=frozenset({"b", "a"}))) == {
            "kind": "enumerated",
            "valid_values": ["a", "b"],
        }

    def test_decode_type(self):
        decoded = decode_type({"kind": "expression", "language": "python"})
        assert decoded == ExpressionType(language=Language.PYTHON)

    def test_decode_nested_type(self, record_type):
        assert decode_type(encode_type(record_type)) == record_type

    def test_unknown_kind(self):
        with pytest.raises(DecodingFailure) as exc_info:
            decode_type({"kind": "bogus"})
        assert exc_info.value.details["location"].startswith("type")

    def test_missing_parameter(self):
        with pytest.raises(DecodingFailure):
            decode_type({"kind": "expression"})


class TestAttributes:
    """Test payload encoding"""

    def test_encode_payload(self, record):
        assert encode_attribute(record) == {
            "name": "sample",
            "ratio": 0.5,
            "values": [1, 2],
            "tags": ["a", "b"],
            "rows": [[True, "x"]],
        }

    def test_document_round_trip(self, record):
        """Decode-then-encode reproduces an equal attribute"""
        assert decode_document(encode_document(record)) == record

    def test_decode_scalar_mismatch(self):
        with pytest.raises(DecodingFailure) as exc_info:
            decode_attribute("three", IntegerType())
        assert exc_info.value.details["location"] == "$"

    def test_decode_nested_location(self, record_type):
        with pytest.raises(DecodingFailure) as exc_info:
            decode_attribute(
                {"name": "n", "ratio": 1.0, "values": [1, "x"], "tags": [], "rows": []},
                record_type,
            )
        assert exc_info.value.details["location"] == "$['values'][1]"

    def test_decode_missing_field(self, record_type):
        with pytest.raises(DecodingFailure) as exc_info:
            decode_attribute({"name": "n"}, record_type)
        assert "Missing fields" in exc_info.value.message

    def test_decode_unknown_field(self):
        record_type = ComplexType(layout=layout(("a", IntegerType())))
        with pytest.raises(DecodingFailure) as exc_info:
            decode_attribute({"a": 1, "b": 2}, record_type)
        assert "Unknown fields b" in exc_info.value.message

    def test_decode_collection_shape(self):
        with pytest.raises(DecodingFailure):
            decode_attribute({"a": 1}, CollectionType(element_type=IntegerType()))

    def test_decode_enumerable_collection_shape(self):
        with pytest.raises(DecodingFailure):
            decode_attribute([1], EnumerableCollectionType(valid_values=frozenset({"a"})))

    def test_decode_short_table_row(self):
        """Short rows decode; validation reports their length"""
        table_type = TableType(columns=columns(("A", BoolType()), ("B", LineType())))
        decoded = decode_attribute([[True]], table_type)
        assert len(decoded.table_value[0]) == 1

    def test_decode_long_table_row(self):
        table_type = TableType(columns=columns(("A", BoolType())))
        with pytest.raises(DecodingFailure) as exc_info:
            decode_attribute([[True, False]], table_type)
        assert exc_info.value.details["location"] == "$[0]"

    def test_decode_document_shape(self):
        with pytest.raises(DecodingFailure):
            decode_document({"type": {"kind": "bool"}})
        with pytest.raises(DecodingFailure):
            decode_document([1, 2])


class TestFiles:
    """Test document files"""

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "doc.yaml"
        path.write_text("type:\n  kind: integer\nvalue: 3\n", encoding="utf-8")
        assert load_document(path) == Attribute.integer(3)

    def test_load_json(self, tmp_path):
        path = tmp_path / "doc.json"
        path.write_text(json.dumps({"type": {"kind": "bool"}, "value": True}), encoding="utf-8")
        assert load_document(path) == Attribute.bool_(True)

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "doc.yaml"
        path.write_text("type: [unclosed\n", encoding="utf-8")
        with pytest.raises(DecodingFailure):
            load_data(path)

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "doc.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DecodingFailure):
            load_data(path)

    @pytest.mark.parametrize("name", ["doc.yaml", "doc.json"])
    def test_not_utf8(self, tmp_path, name):
        path = tmp_path / name
        path.write_bytes(b"type: {kind: line}\nvalue: \xff\xfe\n")
        with pytest.raises(DecodingFailure):
            load_document(path)

    @pytest.mark.parametrize("name", ["doc.yaml", "doc.json"])
    def test_dump_then_load(self, tmp_path, record, name):
        path = tmp_path / name
        dump_document(record, path)
        assert load_document(path) == record

    def test_dumps_json(self):
        text = dumps_document(Attribute.integer(1), "json")
        assert json.loads(text) == {"type": {"kind": "integer"}, "value": 1}
