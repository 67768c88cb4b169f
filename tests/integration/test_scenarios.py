"""
End-to-end validation scenarios

Each scenario declares a schema attribute, validates a value against it and
checks exactly which path-tagged failures come back.
"""

import pytest

from attrtree import (
    Attribute,
    BoolType,
    EnumeratedType,
    IntegerType,
    ReadOnlyPath,
    SchemaAttribute,
    ValidationPath,
    ValidatorFactory,
)
from attrtree.exceptions.errors import ValidationError
from attrtree.schema.properties import (
    bool_column,
    collection_property,
    line_column,
    table_property,
)

ROOT = ReadOnlyPath()


class TestFlagScenario:
    """A boolean flag that must be true"""

    @pytest.fixture
    def flag(self):
        return SchemaAttribute(
            "Flag", BoolType(), ValidationPath(ROOT.attr("bool_value")).equals(True)
        )

    def test_false_fails_at_root(self, flag):
        result = flag.validate(Attribute.bool_(False))
        assert len(result) == 1
        assert len(result.failures_for(ROOT)) == 1
        assert str(result.failures[0].path) == "$.bool_value"

    def test_true_passes(self, flag):
        assert flag.validate(Attribute.bool_(True)).failures == []

    def test_raise_if_invalid(self, flag):
        with pytest.raises(ValidationError) as exc_info:
            flag.validate(Attribute.bool_(False)).raise_if_invalid(flag.label)
        assert exc_info.value.details["label"] == "Flag"


class TestCollectionScenario:
    """Every element of an integer collection must be positive"""

    @pytest.fixture
    def values(self):
        return collection_property(
            "Values", IntegerType(), ValidatorFactory.required().greater_than(0)
        )

    def test_all_positive(self, values):
        assert values.validate(Attribute.collection_of_integers([1, 2, 3])).valid

    def test_one_negative(self, values):
        result = values.validate(Attribute.collection_of_integers([1, -2, 3]))
        assert len(result) == 1
        path = result.failures[0].path
        assert path.is_child(of=ReadOnlyPath.parse("$.collection_value[1]"))
        first = ReadOnlyPath.parse("$.collection_value[0]")
        assert result.failures_including_descendants(first) == []


class TestTableScenario:
    """Column B of every row must be non-empty"""

    @pytest.fixture
    def table(self):
        return table_property(
            "Table",
            [bool_column("A"), line_column("B", ValidatorFactory.required().not_empty())],
        )

    def test_empty_cell(self, table):
        value = Attribute.table([[Attribute.bool_(True), Attribute.line("")]], table.type.columns)
        result = table.validate(value)
        assert len(result) == 1
        failure = result.failures[0]
        assert failure.details["row"] == 0
        assert failure.details["column"] == "B"
        assert failure.path.is_child(of=ReadOnlyPath.parse("$.table_value[0][1]"))

    def test_row_length_independent_of_cells(self, table):
        """A short row fails on its length whatever its cells hold"""
        for cells in ([Attribute.bool_(True)], [Attribute.bool_(False)], []):
            value = Attribute.table([cells], table.type.columns)
            result = table.validate(value)
            assert [f.code for f in result] == ["row_length_mismatch"]
            assert str(result.failures[0].path) == "$.table_value[0]"


class TestEnumeratedScenario:
    """An enumerated value outside its valid set"""

    def test_schema_attribute(self):
        mode = SchemaAttribute("Mode", EnumeratedType(valid_values=frozenset({"x", "y"})))
        result = mode.validate(Attribute.enumerated("z", ["x", "y"]))
        assert [f.code for f in result] == ["membership"]

    def test_path_rule(self):
        rule = ValidationPath(ROOT.attr("enumerated_value")).is_in({"x", "y"})
        result = rule.validate(Attribute.enumerated("z", ["x", "y"]))
        assert len(result) == 1
        assert result.failures[0].message == "Must equal one of the following: 'x, y'."
