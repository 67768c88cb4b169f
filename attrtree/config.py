"""
attrtree Configuration

Settings for the command line tool: logging and how reports are printed.
The library itself reads no configuration.
"""

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .exceptions.errors import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_OUTPUT_FORMATS = ["text", "json", "yaml"]


@dataclass
class AttrTreeConfig:
    """Main configuration class for the attrtree CLI"""

    # Logging
    log_level: str = "WARNING"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Output
    output_format: str = "text"  # "text", "json", "yaml"
    max_failures: int = 50  # 0 shows every failure
    indent: int = 2


def get_default_config() -> AttrTreeConfig:
    """Get default attrtree configuration"""
    return AttrTreeConfig()


def load_config_from_file(config_path: Union[str, Path]) -> AttrTreeConfig:
    """
    Load configuration from a JSON or YAML file

    Args:
        config_path: Path to configuration file

    Returns:
        AttrTreeConfig instance

    Raises:
        ConfigurationError: Missing file, unsupported format or unknown keys
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            if config_path.suffix.lower() in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            elif config_path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                raise ConfigurationError(
                    f"Unsupported config file format: {config_path.suffix}"
                )
        except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Malformed configuration file {config_path}: {e}")

    return _config_from_dict(data or {})


def load_config_from_env(base: Optional[AttrTreeConfig] = None) -> AttrTreeConfig:
    """
    Load configuration from environment variables

    Environment variables are prefixed with ATTRTREE_
    For example: ATTRTREE_LOG_LEVEL=DEBUG, ATTRTREE_OUTPUT_FORMAT=json

    Args:
        base: Configuration the variables override (defaults otherwise)

    Returns:
        AttrTreeConfig instance
    """
    config = base if base is not None else AttrTreeConfig()

    # Environment variable mappings
    env_mappings = {
        "ATTRTREE_LOG_LEVEL": ("log_level", str),
        "ATTRTREE_LOG_FORMAT": ("log_format", str),
        "ATTRTREE_OUTPUT_FORMAT": ("output_format", str),
        "ATTRTREE_MAX_FAILURES": ("max_failures", int),
        "ATTRTREE_INDENT": ("indent", int),
    }

    overrides = {}
    for env_var, (attr_name, converter) in env_mappings.items():
        value = os.getenv(env_var)
        if value is not None:
            try:
                overrides[attr_name] = converter(value)
            except (ValueError, TypeError) as e:
                raise ConfigurationError(f"Invalid value for {env_var}: {value}. Error: {e}")

    return merge_configs(config, overrides)


def merge_configs(base_config: AttrTreeConfig, override_config: Dict[str, Any]) -> AttrTreeConfig:
    """
    Merge override values into a configuration

    Args:
        base_config: Base configuration
        override_config: Override values as dictionary

    Returns:
        New AttrTreeConfig instance
    """
    config_dict = _config_to_dict(base_config)
    config_dict.update(override_config)
    return _config_from_dict(config_dict)


def validate_config(config: AttrTreeConfig) -> List[str]:
    """
    Validate configuration and return list of issues

    Args:
        config: Configuration to validate

    Returns:
        List of validation error messages (empty if valid)
    """
    issues = []

    if config.log_level.upper() not in VALID_LOG_LEVELS:
        issues.append(
            f"Invalid log_level: {config.log_level}. Must be one of {VALID_LOG_LEVELS}"
        )

    if config.output_format not in VALID_OUTPUT_FORMATS:
        issues.append(
            f"Invalid output_format: {config.output_format}. "
            f"Must be one of {VALID_OUTPUT_FORMATS}"
        )

    if config.max_failures < 0:
        issues.append("max_failures cannot be negative")

    if config.indent <= 0:
        issues.append("indent must be positive")

    return issues


def _config_to_dict(config: AttrTreeConfig) -> Dict[str, Any]:
    """Convert AttrTreeConfig to dictionary"""
    return {f.name: getattr(config, f.name) for f in fields(config)}


def _config_from_dict(data: Dict[str, Any]) -> AttrTreeConfig:
    """Create AttrTreeConfig from dictionary"""
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a mapping")

    known = {f.name for f in fields(AttrTreeConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

    return AttrTreeConfig(**data)
