"""
Configuration Unit Tests
"""

import json

import pytest

from attrtree.config import (
    AttrTreeConfig,
    get_default_config,
    load_config_from_env,
    load_config_from_file,
    merge_configs,
    validate_config,
)
from attrtree.exceptions.errors import ConfigurationError


class TestDefaults:
    """Default configuration tests"""

    def test_default_values(self):
        config = get_default_config()
        assert config.log_level == "WARNING"
        assert config.output_format == "text"
        assert config.max_failures == 50
        assert validate_config(config) == []


class TestFiles:
    """Configuration file tests"""

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "attrtree.yaml"
        path.write_text("log_level: DEBUG\noutput_format: json\n", encoding="utf-8")
        config = load_config_from_file(path)
        assert config.log_level == "DEBUG"
        assert config.output_format == "json"
        assert config.indent == 2

    def test_load_json(self, tmp_path):
        path = tmp_path / "attrtree.json"
        path.write_text(json.dumps({"max_failures": 5}), encoding="utf-8")
        assert load_config_from_file(path).max_failures == 5

    def test_empty_file(self, tmp_path):
        path = tmp_path / "attrtree.yml"
        path.write_text("", encoding="utf-8")
        assert load_config_from_file(path) == AttrTreeConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config_from_file(tmp_path / "missing.yaml")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "attrtree.ini"
        path.write_text("[attrtree]\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config_from_file(path)

    def test_unknown_keys(self, tmp_path):
        path = tmp_path / "attrtree.yaml"
        path.write_text("colour: blue\n", encoding="utf-8")
        with pytest.raises(ConfigurationError) as exc_info:
            load_config_from_file(path)
        assert "colour" in exc_info.value.message

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "attrtree.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config_from_file(path)

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "attrtree.yaml"
        path.write_bytes(b"log_level: \xff\xfe\n")
        with pytest.raises(ConfigurationError):
            load_config_from_file(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "attrtree.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config_from_file(path)


class TestEnvironment:
    """Environment variable tests"""

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("ATTRTREE_OUTPUT_FORMAT", "yaml")
        monkeypatch.setenv("ATTRTREE_MAX_FAILURES", "3")
        config = load_config_from_env()
        assert config.output_format == "yaml"
        assert config.max_failures == 3

    def test_overrides_base(self, monkeypatch):
        monkeypatch.setenv("ATTRTREE_INDENT", "4")
        base = AttrTreeConfig(log_level="INFO")
        config = load_config_from_env(base)
        assert config.log_level == "INFO"
        assert config.indent == 4

    def test_invalid_number(self, monkeypatch):
        monkeypatch.setenv("ATTRTREE_MAX_FAILURES", "many")
        with pytest.raises(ConfigurationError):
            load_config_from_env()


class TestValidation:
    """validate_config and merge_configs tests"""

    def test_issues(self):
        config = AttrTreeConfig(
            log_level="LOUD", output_format="xml", max_failures=-1, indent=0
        )
        issues = validate_config(config)
        assert len(issues) == 4

    def test_merge(self):
        merged = merge_configs(AttrTreeConfig(), {"indent": 8})
        assert merged.indent == 8
        assert merged.log_level == "WARNING"

    def test_merge_unknown_key(self):
        with pytest.raises(ConfigurationError):
            merge_configs(AttrTreeConfig(), {"nope": 1})
