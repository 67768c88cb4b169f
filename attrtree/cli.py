"""
attrtree CLI

Command line tool for inspecting and checking attribute documents
"""

import json
import sys
from typing import Any, List

import click
import yaml

from . import __version__
from .codec import decode_type, dumps_document, encode_attribute, load_data, load_document
from .config import AttrTreeConfig, load_config_from_env, load_config_from_file, validate_config
from .core.attribute import Attribute
from .core.path import Path
from .core.types import AttributeKind
from .exceptions.errors import AttrTreeError
from .schema.schema_attribute import SchemaAttribute
from .utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _render(attribute: Attribute, label: str, depth: int = 0) -> List[str]:
    """Indented text tree of an attribute"""
    pad = "  " * depth
    kind = attribute.kind
    if attribute.is_line or kind in (AttributeKind.CODE, AttributeKind.TEXT):
        return [f"{pad}{label}: {attribute.type.describe()} = {attribute.str_value!r}"]

    lines = [f"{pad}{label}: {attribute.type.describe()}"]
    if kind == AttributeKind.COLLECTION:
        for index, element in enumerate(attribute.value):
            lines.extend(_render(element, f"[{index}]", depth + 1))
    elif kind == AttributeKind.COMPLEX:
        for name, value in attribute.value.items():
            lines.extend(_render(value, name, depth + 1))
    elif kind == AttributeKind.ENUMERABLE_COLLECTION:
        for value in sorted(attribute.value):
            lines.append(f"{pad}  - {value}")
    elif kind == AttributeKind.TABLE:
        names = attribute.type.column_names
        for index, row in enumerate(attribute.value):
            cells = ", ".join(
                f"{names[i] if i < len(names) else '?'}={cell.str_value!r}"
                for i, cell in enumerate(row)
            )
            lines.append(f"{pad}  [{index}] {cells}")
    return lines


def _dump(data: Any, config: AttrTreeConfig) -> str:
    if config.output_format == "json":
        return json.dumps(data, indent=config.indent, ensure_ascii=False)
    return yaml.dump(data, allow_unicode=True, sort_keys=False, indent=config.indent)


def _load(document: str) -> Attribute:
    try:
        return load_document(document)
    except AttrTreeError as e:
        click.echo(f"Cannot load {document}: {e.message}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config", "-c",
    "config_path",
    type=click.Path(exists=True),
    help="Configuration file (YAML or JSON)"
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Override the configured log level"
)
@click.pass_context
def cli(ctx, config_path, log_level):
    """attrtree - inspect and validate attribute documents"""
    try:
        config = load_config_from_file(config_path) if config_path else AttrTreeConfig()
        config = load_config_from_env(config)
    except AttrTreeError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    if log_level:
        config.log_level = log_level.upper()

    issues = validate_config(config)
    if issues:
        click.echo("Configuration error:", err=True)
        for issue in issues:
            click.echo(f"  - {issue}", err=True)
        sys.exit(1)

    configure_logging(config.log_level, config.log_format)
    ctx.obj = config


@cli.command()
@click.argument("document", type=click.Path(exists=True))
@click.pass_obj
def show(config, document):
    """Show an attribute document"""
    attribute = _load(document)

    if config.output_format == "text":
        click.echo(f"Document: {document}")
        click.echo(f"Type: {attribute.type.tag_name}")
        for line in _render(attribute, "$"):
            click.echo(line)
    else:
        click.echo(dumps_document(attribute, config.output_format, config.indent))


@cli.command()
@click.argument("document", type=click.Path(exists=True))
@click.argument("path")
@click.pass_obj
def get(config, document, path):
    """Read the value at PATH, e.g. '$.complex_value['name']'"""
    attribute = _load(document)

    try:
        value = Path.parse(path).get(attribute)
    except AttrTreeError as e:
        click.echo(f"Cannot read {path}: {e.message}", err=True)
        sys.exit(1)

    logger.debug(f"Read {path} from {document}")
    if isinstance(value, Attribute):
        if config.output_format == "text":
            for line in _render(value, path):
                click.echo(line)
        else:
            click.echo(_dump(encode_attribute(value), config))
    elif config.output_format == "text":
        click.echo(str(value))
    else:
        click.echo(_dump(_plain(value), config))


def _plain(value: Any) -> Any:
    if isinstance(value, Attribute):
        return encode_attribute(value)
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, frozenset):
        return sorted(value)
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


@cli.command()
@click.argument("document", type=click.Path(exists=True))
@click.pass_obj
def check(config, document):
    """Check a document against its declared type"""
    attribute = _load(document)
    result = SchemaAttribute(document, attribute.type).validate(attribute)

    if result.valid:
        click.echo(f"Document is valid: {document}")
        return

    failures = result.failures
    shown = failures if config.max_failures == 0 else failures[: config.max_failures]
    if config.output_format == "text":
        click.echo(f"Validation failed: {len(failures)} failures", err=True)
        for failure in shown:
            click.echo(f"  - {failure}", err=True)
        if len(shown) < len(failures):
            click.echo(f"  ... {len(failures) - len(shown)} more", err=True)
    else:
        click.echo(_dump([failure.to_dict() for failure in shown], config))
    sys.exit(1)


@cli.command()
@click.argument("typefile", type=click.Path(exists=True))
@click.pass_obj
def default(config, typefile):
    """Print a document holding the default value of a type"""
    try:
        attribute_type = decode_type(load_data(typefile))
    except AttrTreeError as e:
        click.echo(f"Cannot load {typefile}: {e.message}", err=True)
        sys.exit(1)

    fmt = "yaml" if config.output_format == "text" else config.output_format
    click.echo(dumps_document(attribute_type.default_value(), fmt, config.indent))


def main():
    """CLI entry point"""
    cli()


if __name__ == "__main__":
    main()
