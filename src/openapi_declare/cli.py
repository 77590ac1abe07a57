"""CLI entry point for openapi-declare."""

import json
import logging
from pathlib import Path

import click

from openapi_declare.compiler.checks import validate_declarations
from openapi_declare.compiler.openapi import OpenApiCompiler, render_document
from openapi_declare.config import ApiInfo
from openapi_declare.errors import OpenApiDeclareError
from openapi_declare.loader import load_registry
from openapi_declare.registry import Registry


def _load(target: str) -> Registry:
    try:
        return load_registry(target)
    except OpenApiDeclareError as e:
        raise click.ClickException(e.to_message()) from e


def _api_info(title: str | None, description: str | None, version: str | None) -> ApiInfo:
    """Environment settings, overridden by any option given on the command line."""
    info = ApiInfo.from_env()
    overrides = {"title": title, "description": description, "version": version}
    return info.model_copy(update={k: v for k, v in overrides.items() if v is not None})


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """openapi-declare — compile declared endpoints into OpenAPI 3.0 documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("target")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write the document here instead of stdout.")
@click.option("--format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="Output format.")
@click.option("--title", default=None, help="API title (overrides OPENAPI_TITLE).")
@click.option("--description", default=None, help="API description (overrides OPENAPI_DESCRIPTION).")
@click.option("--api-version", default=None, help="API version (overrides OPENAPI_VERSION).")
@click.option("--strict", is_flag=True, help="Fail on malformed declarations instead of warning.")
def generate(target: str, output: Path | None, fmt: str, title: str | None, description: str | None, api_version: str | None, strict: bool):
    """Generate the OpenAPI document for the registry TARGET (module[:attr] or file.py[:attr])."""
    registry = _load(target)
    compiler = OpenApiCompiler(registry, info=_api_info(title, description, api_version), strict=strict)
    try:
        document = compiler.compile()
    except OpenApiDeclareError as e:
        raise click.ClickException(e.to_message()) from e

    text = render_document(document, fmt)
    if output is None:
        click.echo(text, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Wrote {len(document['paths'])} paths and {len(document['components']['schemas'])} schemas to {output}", err=True)


@main.command()
@click.argument("target")
def check(target: str):
    """Report malformed declarations in the registry TARGET."""
    registry = _load(target)
    problems = validate_declarations(registry)
    if not problems:
        click.echo(f"OK: {len(registry.components)} components, {len(registry.endpoints)} endpoints.")
        return

    for location, message in problems.items():
        click.echo(f"{location}: {message}")
    raise click.ClickException(f"{len(problems)} problem(s) found.")


@main.command()
@click.argument("target")
@click.option("--path", "path", required=True, help="Endpoint path, e.g. /users/{id}.")
@click.option("--method", default="get", help="HTTP method.")
@click.option("--data", default="{}", help="JSON object of raw parameter and body values.")
def validate(target: str, path: str, method: str, data: str):
    """Validate a JSON payload against an endpoint's request declarations."""
    registry = _load(target)
    endpoint = registry.find_endpoint(path, method)
    if endpoint is None:
        raise click.ClickException(f"No endpoint declares {method.upper()} {path}")

    try:
        values = json.loads(data)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e.msg}", param_hint="--data") from e
    if not isinstance(values, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--data")

    validator = endpoint.request_validator()
    if validator is None:
        click.echo(json.dumps(values, indent=2))
        return

    result = validator(values)
    if result.success:
        click.echo(json.dumps(result.data, indent=2))
        return

    click.echo(json.dumps(result.errors, indent=2))
    raise click.ClickException("Validation failed.")
