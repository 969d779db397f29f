"""CLI entry point for swagger-mock-validator."""

import json
import logging
from pathlib import Path

import click
import yaml

from swagger_mock_validator.config import ValidatorOptions
from swagger_mock_validator.errors import MalformedDocumentError, MockIncompatibleError
from swagger_mock_validator.validator import validate


def _load_document(file_path: Path):
    """Load a JSON or YAML document (JSON is valid YAML)."""
    try:
        return yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise click.ClickException(f"Unable to parse {file_path}: {e}")


def _echo_results(results: list[dict]) -> None:
    for result in results:
        click.echo(f"[{result['type']}] {result['code']}: {result['message']}")
        click.echo(f"    mock: {result['mockDetails']['location']}")
        click.echo(f"    spec: {result['specDetails']['location']}")


@click.group()
def main():
    """Swagger Mock Validator: check Pact mocks against a Swagger/OpenAPI spec."""
    pass


@main.command("validate")
@click.argument("spec_path", type=click.Path(exists=True, path_type=Path))
@click.argument("mock_path", type=click.Path(exists=True, path_type=Path))
@click.option("--workers", default=1, type=click.IntRange(min=1), help="Validate interactions concurrently.")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def validate_cmd(spec_path: Path, mock_path: Path, workers: int, as_json: bool, verbose: bool):
    """Validate the mock at MOCK_PATH against the spec at SPEC_PATH."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    spec_json = _load_document(spec_path)
    mock_json = _load_document(mock_path)

    try:
        outcome = validate(spec_json, str(spec_path), mock_json, str(mock_path), ValidatorOptions(max_workers=workers))
    except MalformedDocumentError as e:
        raise click.ClickException(str(e))
    except MockIncompatibleError as e:
        if as_json:
            click.echo(json.dumps({"message": str(e), **e.details}, indent=2))
        else:
            click.echo(str(e))
            _echo_results(e.details["errors"] + e.details["warnings"])
        raise SystemExit(1)

    if as_json:
        click.echo(json.dumps({"warnings": outcome.as_dict()["warnings"]}, indent=2))
    else:
        click.echo(f'"{mock_path}" is compatible with "{spec_path}"')
        _echo_results(outcome.as_dict()["warnings"])
