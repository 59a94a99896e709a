"""Validate command for checking configuration files.

Loads a configuration, resolves its driver and runs the design without
writing anything, then reports schema errors or design advisories.
"""

from pathlib import Path
from typing import Annotated

import typer

from enclosures.application import DesignEnclosureCommand
from enclosures.application.config import ConfigError, load_config


def validate_command(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON configuration file to validate"),
    ],
) -> None:
    """Validate an enclosure configuration file.

    Exit codes:
        0 - Configuration is valid and the design has no advisories
        1 - Configuration has errors (cannot be designed)
        2 - Configuration is valid but the design has advisories

    Example:
        enclosures validate my-enclosure.json
    """
    typer.echo(f"Validating {config_file}...")

    try:
        config = load_config(config_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)

    output = DesignEnclosureCommand().execute_configuration(config)
    if not output.is_valid:
        typer.echo("Errors:", err=True)
        for error in output.errors:
            typer.echo(f"  {error}", err=True)
        raise typer.Exit(code=1)

    warnings = output.warnings
    if warnings:
        typer.echo("Warnings:")
        for warning in warnings:
            typer.echo(f"  {warning}")
        for advisory in output.advisories:
            for remedy in advisory.remedies:
                typer.echo(f"    Suggestion: {remedy.message}")
        typer.echo(f"Validation passed with {len(warnings)} warning(s)")
        raise typer.Exit(code=2)

    typer.echo("Validation passed. Configuration is valid.")


def display_load_error(error: ConfigError) -> None:
    """Print a configuration loading error to stderr."""
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            message = detail.get("message", "Unknown error")
            typer.echo(f"    Line {line}, Column {column}: {message}", err=True)
    elif error.error_type == "validation":
        for detail in error.details:
            path = detail.get("path") or "<root>"
            typer.echo(f"  {path}: {detail.get('message', 'Unknown error')}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)
