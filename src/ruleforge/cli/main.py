"""RuleForge CLI entry point."""

import asyncio
import inspect
import json
import logging
from pathlib import Path

import click
import yaml

from ruleforge.config import EngineConfig
from ruleforge.engine import ValidationEngine
from ruleforge.exceptions import ConfigurationError
from ruleforge.messages import MessageDictionary
from ruleforge.parser import parse_rules
from ruleforge.registry import ValidatorRegistry


def _load_mapping(path: Path) -> dict:
    """Load a JSON or YAML file that must contain a mapping."""
    with path.open(encoding="utf-8") as fh:
        if path.suffix == ".json":
            data = json.load(fh)
        else:
            data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise click.BadParameter(f"{path} must contain a mapping", param_hint=str(path))
    return data


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool):
    """RuleForge: rule-expression field validation."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


@cli.command()
@click.argument("rules_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("data_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--locale", default=None, help="Locale for error messages.")
@click.option(
    "--messages",
    "messages_dir",
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory of YAML locale files to load.",
)
def check(rules_file: Path, data_file: Path, locale: str | None, messages_dir: Path | None):
    """Validate DATA_FILE against the field rules in RULES_FILE."""
    config = EngineConfig.from_env()
    try:
        for directory in (config.locale_dir, messages_dir):
            if directory is not None:
                MessageDictionary.load_directory(directory)
    except ConfigurationError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(2)

    rules = {str(k): "" if v is None else str(v) for k, v in _load_mapping(rules_file).items()}
    values = _load_mapping(data_file)

    engine = ValidationEngine(rules, locale=locale or config.locale)
    result = engine.validate_all(values)
    if inspect.isawaitable(result):
        result = asyncio.run(result)

    if result:
        click.echo(click.style(f"All fields are valid ({len(rules)} checked).", fg="green"))
        return

    for entry in engine.error_bag:
        click.echo(click.style(f"{entry.field}: {entry.message}", fg="red"))
    click.echo(
        click.style(f"\n{len(engine.error_bag)} error(s) found", fg="red", bold=True)
    )
    raise SystemExit(1)


@cli.command()
@click.argument("expression")
def parse(expression: str):
    """Show how EXPRESSION is split into rules."""
    rules = parse_rules(expression)
    if not rules:
        click.echo("No rules.")
        return
    for rule in rules:
        unknown = "" if ValidatorRegistry.is_registered(rule.name) else " (unknown)"
        params = ", ".join(repr(p) for p in rule.params)
        click.echo(f"{rule.name}({params}){unknown}")


@cli.command()
def validators():
    """List globally registered validators."""
    for name in ValidatorRegistry.list_registered():
        click.echo(name)
