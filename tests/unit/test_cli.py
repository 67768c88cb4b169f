"""
CLI Unit Tests
"""

import json

import pytest
from click.testing import CliRunner

from attrtree.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def record_doc(tmp_path):
    path = tmp_path / "record.yaml"
    path.write_text(
        """\
type:
  kind: complex
  layout:
    - name: n
      type: {kind: integer}
    - name: mode
      type: {kind: enumerated, valid_values: [x, y]}
value:
  n: 3
  mode: x
""",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def invalid_doc(tmp_path):
    path = tmp_path / "invalid.yaml"
    path.write_text(
        "type: {kind: enumerated, valid_values: [x, y]}\nvalue: z\n", encoding="utf-8"
    )
    return path


class TestShow:
    """show command tests"""

    def test_show_text(self, runner, record_doc):
        result = runner.invoke(cli, ["show", str(record_doc)])
        assert result.exit_code == 0
        assert "ComplexAttributeType" in result.output
        assert "n: integer = '3'" in result.output

    def test_show_json(self, runner, record_doc):
        result = runner.invoke(
            cli, ["show", str(record_doc)], env={"ATTRTREE_OUTPUT_FORMAT": "json"}
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["value"] == {"n": 3, "mode": "x"}

    def test_show_malformed(self, runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("type: {kind: integer}\nvalue: nope\n", encoding="utf-8")
        result = runner.invoke(cli, ["show", str(path)])
        assert result.exit_code == 1
        assert "Cannot load" in result.output

    def test_show_not_utf8(self, runner, tmp_path):
        path = tmp_path / "binary.yaml"
        path.write_bytes(b"type: {kind: line}\nvalue: \xff\xfe\n")
        result = runner.invoke(cli, ["show", str(path)])
        assert result.exit_code == 1
        assert "Cannot load" in result.output


class TestGet:
    """get command tests"""

    def test_get_scalar(self, runner, record_doc):
        result = runner.invoke(cli, ["get", str(record_doc), "$.complex_value['n'].integer_value"])
        assert result.exit_code == 0
        assert result.output.strip() == "3"

    def test_get_attribute_json(self, runner, record_doc):
        result = runner.invoke(
            cli,
            ["get", str(record_doc), "$.complex_value['mode']"],
            env={"ATTRTREE_OUTPUT_FORMAT": "json"},
        )
        assert result.exit_code == 0
        assert json.loads(result.output) == "x"

    def test_get_wrong_variant(self, runner, record_doc):
        result = runner.invoke(cli, ["get", str(record_doc), "$.bool_value"])
        assert result.exit_code == 1
        assert "Cannot read" in result.output

    def test_get_bad_syntax(self, runner, record_doc):
        result = runner.invoke(cli, ["get", str(record_doc), "complex_value"])
        assert result.exit_code == 1


class TestCheck:
    """check command tests"""

    def test_valid_document(self, runner, record_doc):
        result = runner.invoke(cli, ["check", str(record_doc)])
        assert result.exit_code == 0
        assert "Document is valid" in result.output

    def test_invalid_document(self, runner, invalid_doc):
        result = runner.invoke(cli, ["check", str(invalid_doc)])
        assert result.exit_code == 1
        assert "Validation failed: 1 failures" in result.output
        assert "$.enumerated_value: Must equal one of the following: 'x, y'." in result.output

    def test_invalid_document_json(self, runner, invalid_doc):
        result = runner.invoke(
            cli, ["check", str(invalid_doc)], env={"ATTRTREE_OUTPUT_FORMAT": "json"}
        )
        assert result.exit_code == 1
        failures = json.loads(result.output)
        assert failures == [
            {
                "path": "$.enumerated_value",
                "code": "membership",
                "message": "Must equal one of the following: 'x, y'.",
            }
        ]

    def test_max_failures(self, runner, tmp_path):
        path = tmp_path / "many.yaml"
        path.write_text(
            "type: {kind: enumerable_collection, valid_values: [a]}\nvalue: [b, c, d]\n",
            encoding="utf-8",
        )
        result = runner.invoke(cli, ["check", str(path)], env={"ATTRTREE_MAX_FAILURES": "1"})
        assert result.exit_code == 1
        assert "... 2 more" in result.output


class TestDefault:
    """default command tests"""

    def test_default_document(self, runner, tmp_path):
        path = tmp_path / "type.yaml"
        path.write_text("kind: integer\n", encoding="utf-8")
        result = runner.invoke(cli, ["default", str(path)])
        assert result.exit_code == 0
        assert "value: 0" in result.output

    def test_invalid_type(self, runner, tmp_path):
        path = tmp_path / "type.yaml"
        path.write_text("kind: bogus\n", encoding="utf-8")
        result = runner.invoke(cli, ["default", str(path)])
        assert result.exit_code == 1


class TestOptions:
    """Global option tests"""

    def test_config_file(self, runner, tmp_path, record_doc):
        config = tmp_path / "attrtree.yaml"
        config.write_text("output_format: json\n", encoding="utf-8")
        result = runner.invoke(cli, ["--config", str(config), "show", str(record_doc)])
        assert result.exit_code == 0
        assert json.loads(result.output)["type"]["kind"] == "complex"

    def test_invalid_config(self, runner, tmp_path, record_doc):
        config = tmp_path / "attrtree.yaml"
        config.write_text("output_format: xml\n", encoding="utf-8")
        result = runner.invoke(cli, ["--config", str(config), "show", str(record_doc)])
        assert result.exit_code == 1
        assert "Invalid output_format" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output
