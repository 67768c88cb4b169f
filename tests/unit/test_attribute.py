"""
Attribute Unit Tests

Tests construction checks, variant-checked accessors and functional updates
"""

import pytest

from attrtree.core.attribute import Attribute
from attrtree.core.types import (
    BoolType,
    CodeType,
    IntegerType,
    Language,
    LineType,
    columns,
    layout,
)
from attrtree.exceptions.errors import VariantMismatch


@pytest.fixture
def record_layout():
    return layout(("name", LineType()), ("count", IntegerType()))


@pytest.fixture
def table_columns():
    return columns(("A", BoolType()), ("B", LineType()))


class TestConstruction:
    """Test value checks at construction"""

    def test_scalars(self):
        assert Attribute.bool_(True).bool_value is True
        assert Attribute.integer(3).integer_value == 3
        assert Attribute.line("hi").line_value == "hi"
        assert Attribute.text("body").text_value == "body"

    def test_float_accepts_int(self):
        """Integral floats are normalized to float"""
        value = Attribute.float_(1).float_value
        assert value == 1.0
        assert isinstance(value, float)

    def test_bool_is_not_integer(self):
        with pytest.raises(VariantMismatch):
            Attribute.integer(True)

    def test_wrong_scalar(self):
        with pytest.raises(VariantMismatch):
            Attribute.line(3)

    def test_collection_is_homogeneous(self):
        """Every element must have the element type"""
        with pytest.raises(VariantMismatch):
            Attribute.collection([Attribute.integer(1), Attribute.line("x")], IntegerType())

    def test_collection_rejects_raw_values(self):
        with pytest.raises(VariantMismatch):
            Attribute.collection([1, 2], IntegerType())

    def test_complex_in_layout_order(self, record_layout):
        record = Attribute.complex_(
            {"count": Attribute.integer(1), "name": Attribute.line("a")}, record_layout
        )
        assert list(record.complex_value) == ["name", "count"]

    def test_complex_missing_field(self, record_layout):
        with pytest.raises(VariantMismatch):
            Attribute.complex_({"name": Attribute.line("a")}, record_layout)

    def test_complex_wrong_field_type(self, record_layout):
        with pytest.raises(VariantMismatch):
            Attribute.complex_(
                {"name": Attribute.line("a"), "count": Attribute.line("1")}, record_layout
            )

    def test_enumerable_collection(self):
        selected = Attribute.enumerable_collection(["a", "b", "a"], ["a", "b", "c"])
        assert selected.enumerable_collection_value == frozenset({"a", "b"})
        assert selected.enumerable_collection_valid_values == frozenset({"a", "b", "c"})

    def test_enumerated_membership_not_checked(self):
        """Membership is a validation rule, not a construction check"""
        assert Attribute.enumerated("z", ["x", "y"]).enumerated_value == "z"

    def test_table_rows(self, table_columns):
        table = Attribute.table(
            [[Attribute.bool_(True), Attribute.line("")]], table_columns
        )
        assert len(table.table_value) == 1
        assert table.table_value[0][1].line_value == ""

    def test_table_allows_short_rows(self, table_columns):
        """Row length is reported by validation"""
        table = Attribute.table([[Attribute.bool_(True)]], table_columns)
        assert len(table.table_value[0]) == 1

    def test_table_cell_must_match_column(self, table_columns):
        with pytest.raises(VariantMismatch):
            Attribute.table([[Attribute.line("x"), Attribute.line("y")]], table_columns)


class TestAccessors:
    """Test variant-checked accessors"""

    def test_mismatch_raises(self):
        with pytest.raises(VariantMismatch) as exc_info:
            Attribute.bool_(True).integer_value
        assert exc_info.value.expected == "integer"
        assert exc_info.value.actual == "bool"

    def test_language_accessors(self):
        expression = Attribute.expression("a + 1", Language.PYTHON)
        assert expression.expression_language is Language.PYTHON
        code = Attribute.code("int main();", Language.C)
        assert code.code_value == "int main();"
        assert code.code_language is Language.C
        with pytest.raises(VariantMismatch):
            code.expression_language

    def test_collection_metadata(self):
        values = Attribute.collection_of_lines(["a", "b"])
        assert values.collection_element_type == LineType()
        assert [v.line_value for v in values.collection_value] == ["a", "b"]

    def test_typed_collection_accessors(self):
        assert Attribute.collection_of_integers([1, 2]).collection_integers == (1, 2)
        assert Attribute.collection_of_bools([True]).collection_bools == (True,)
        assert Attribute.collection_of_floats([0.5]).collection_floats == (0.5,)

    def test_typed_collection_checks_element_type(self):
        with pytest.raises(VariantMismatch):
            Attribute.collection_of_integers([1]).collection_lines

    def test_typed_collection_on_scalar(self):
        with pytest.raises(VariantMismatch):
            Attribute.integer(1).collection_integers

    def test_complex_fields(self, record_layout):
        record = Attribute.complex_(
            {"name": Attribute.line("a"), "count": Attribute.integer(1)}, record_layout
        )
        assert record.complex_fields == record_layout

    def test_table_columns(self, table_columns):
        assert Attribute.table([], table_columns).table_columns == table_columns


class TestDisplay:
    """Test tag names and str_value"""

    def test_tag_names(self):
        assert Attribute.bool_(True).tag_name == "BoolAttribute"
        assert (
            Attribute.enumerable_collection([], ["a"]).tag_name
            == "EnumerableCollectionAttribute"
        )

    def test_str_value_scalars(self):
        assert Attribute.bool_(False).str_value == "false"
        assert Attribute.integer(7).str_value == "7"
        assert Attribute.line("x").str_value == "x"

    def test_str_value_first_element(self):
        assert Attribute.collection_of_integers([4, 5]).str_value == "4"
        assert Attribute.collection_of_integers([]).str_value is None

    def test_str_value_enumerable(self):
        assert Attribute.enumerable_collection(["b", "a"], ["a", "b"]).str_value == "a"
        assert Attribute.enumerable_collection([], ["a"]).str_value is None

    def test_str(self):
        assert str(Attribute.integer(7)) == "IntegerAttribute('7')"


class TestParseLine:
    """Test building line attributes from text"""

    def test_parse_line(self):
        assert Attribute.parse_line(IntegerType(), "42") == Attribute.integer(42)
        assert Attribute.parse_line(IntegerType(), "forty") is None

    def test_parse_line_rejects_blocks(self):
        with pytest.raises(VariantMismatch):
            Attribute.parse_line(CodeType(language=Language.C), "x")


class TestReplace:
    """Test functional updates"""

    def test_replace_value(self):
        original = Attribute.integer(1)
        updated = original._replace(integer_value=2)
        assert updated.integer_value == 2
        assert original.integer_value == 1

    def test_replace_wrong_variant(self):
        """A mismatched setter never changes the variant"""
        original = Attribute.integer(1)
        with pytest.raises(VariantMismatch):
            original._replace(bool_value=True)
        assert original.integer_value == 1

    def test_replace_checks_payload(self):
        with pytest.raises(VariantMismatch):
            Attribute.integer(1)._replace(integer_value="two")

    def test_replace_typed_collection(self):
        updated = Attribute.collection_of_integers([1])._replace(collection_integers=[3, 4])
        assert updated.collection_integers == (3, 4)
        assert updated.collection_value[0] == Attribute.integer(3)

    def test_replace_typed_collection_wrong_element(self):
        with pytest.raises(VariantMismatch):
            Attribute.collection_of_integers([1])._replace(collection_lines=["a"])

    def test_replace_unknown_accessor(self):
        with pytest.raises(AttributeError):
            Attribute.integer(1)._replace(nope=1)


class TestEqualityAndHashing:
    """Test structural equality"""

    def test_equal_values(self, record_layout):
        make = lambda: Attribute.complex_(
            {"name": Attribute.line("a"), "count": Attribute.integer(1)}, record_layout
        )
        assert make() == make()
        assert hash(make()) == hash(make())

    def test_different_values(self):
        assert Attribute.integer(1) != Attribute.integer(2)
        assert Attribute.integer(1) != Attribute.float_(1.0)

    def test_usable_in_sets(self, table_columns):
        table = Attribute.table([[Attribute.bool_(True), Attribute.line("")]], table_columns)
        assert len({table, table, Attribute.integer(1)}) == 2
