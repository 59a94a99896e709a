"""Typer CLI for enclosure design."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from enclosures.application import BatchDesignRunner, DesignEnclosureCommand, DesignOutput
from enclosures.application.config import ConfigError, load_config
from enclosures.cli.commands import display_load_error, drivers_app, validate_command
from enclosures.domain.value_objects import to_cubic_feet
from enclosures.infrastructure import (
    CutListFormatter,
    DesignReportFormatter,
    DesignSummaryFormatter,
    DriverRepository,
    ExporterRegistry,
    ExportManager,
    NestingFormatter,
)
from enclosures.infrastructure.exporters import JsonDesignExporter

app = typer.Typer(
    name="enclosures",
    help="Design subwoofer enclosures and nest their panels onto sheet stock.",
)

app.command(name="validate")(validate_command)
app.add_typer(drivers_app, name="drivers")


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _open_repository(path: Path | None) -> DriverRepository | None:
    return DriverRepository(path).load() if path is not None else None


def _parse_formats(formats_str: str | None) -> list[str]:
    if not formats_str:
        return []
    if formats_str.lower() == "all":
        return ExporterRegistry.available_formats()
    formats = [f.strip().lower() for f in formats_str.split(",") if f.strip()]
    available = ExporterRegistry.available_formats()
    invalid = [f for f in formats if f not in available]
    if invalid:
        typer.echo(f"Unknown formats: {', '.join(invalid)}", err=True)
        typer.echo(f"Available formats: {', '.join(available)}", err=True)
        raise typer.Exit(code=1)
    return formats


def _render(output: DesignOutput, output_format: str) -> str:
    if output_format == "json":
        return JsonDesignExporter().export_string(output)
    if output_format == "summary":
        return DesignSummaryFormatter().format(output.design)
    if output_format == "cutlist":
        return CutListFormatter().format(output.cut_list)
    if output_format == "nesting":
        if output.nesting is None:
            return "Nesting disabled."
        return NestingFormatter().format(output.nesting)
    return DesignReportFormatter().format(output)


def _export(
    output: DesignOutput, formats: list[str], output_dir: Path, project_name: str | None
) -> None:
    manager = ExportManager(output_dir)
    try:
        files = manager.export_all(formats, output, project_name)
    except OSError as e:
        typer.echo(f"Export error: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo("\nExported files:")
    for fmt, path in files.items():
        typer.echo(f"  {fmt.upper()}: {path}")


def _echo_warnings(output: DesignOutput) -> None:
    for warning in output.warnings:
        typer.echo(f"Warning: {warning}", err=True)


DriversFileOption = Annotated[
    Path | None,
    typer.Option(
        "--drivers-file",
        help="Custom driver JSON file; unknown drivers are recorded here",
    ),
]


@app.command()
def design(
    config_file: Annotated[
        Path, typer.Argument(help="Path to the JSON configuration file")
    ],
    output_format: Annotated[
        str | None,
        typer.Option(
            "--format", "-f", help="Report format: all, summary, cutlist, nesting, json"
        ),
    ] = None,
    output_formats: Annotated[
        str | None,
        typer.Option(
            "--output-formats", help="Comma-separated export formats: json,dxf (or 'all')"
        ),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", help="Output directory for exported files"),
    ] = None,
    drivers_file: DriversFileOption = None,
) -> None:
    """Design one enclosure from a configuration file.

    Examples:
        enclosures design sub-box.json
        enclosures design sub-box.json --format cutlist
        enclosures design sub-box.json --output-formats json,dxf --output-dir ./out
    """
    try:
        config = load_config(config_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)

    output = DesignEnclosureCommand().execute_configuration(
        config, _open_repository(drivers_file)
    )
    if not output.is_valid:
        for error in output.errors:
            typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=1)

    typer.echo(_render(output, output_format or config.output.format))
    _echo_warnings(output)

    formats = _parse_formats(output_formats) or list(config.output.formats)
    if formats:
        out_dir = output_dir or Path(config.output.output_dir or ".")
        _export(output, formats, out_dir, config.output.project_name)


@app.command()
def batch(
    config_files: Annotated[
        list[Path], typer.Argument(help="Configuration files to design")
    ],
    output_formats: Annotated[
        str | None,
        typer.Option(
            "--output-formats", help="Comma-separated export formats: json,dxf (or 'all')"
        ),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", help="Output directory for exported files"),
    ] = None,
    workers: Annotated[
        int | None, typer.Option("--workers", help="Worker threads (default: auto)")
    ] = None,
    drivers_file: DriversFileOption = None,
) -> None:
    """Design several enclosures concurrently.

    Each file is designed independently; a failure in one does not stop the
    others. Exits 1 if any design failed.
    """
    formats = _parse_formats(output_formats)
    configs = []
    load_failures = 0
    for path in config_files:
        try:
            configs.append(load_config(path))
        except ConfigError as e:
            load_failures += 1
            typer.echo(f"{path}: {e}", err=True)

    runner = BatchDesignRunner(
        repository=_open_repository(drivers_file), max_workers=workers
    )
    result = runner.run(configs)

    for output in result.outputs:
        if not output.is_valid:
            typer.echo(f"FAILED {output.name}: {'; '.join(output.errors)}", err=True)
            continue
        design_result = output.design
        sheets = output.nesting.sheet_count if output.nesting else 0
        typer.echo(
            f"OK     {output.name}: {design_result.topology.value}, "
            f"net {to_cubic_feet(design_result.net_volume):.2f} ft^3, {sheets} sheet(s)"
        )
        _echo_warnings(output)
        if formats:
            _export(output, formats, output_dir or Path("."), None)

    failed = len(result.failed) + load_failures
    typer.echo(f"\n{len(result.succeeded)} succeeded, {failed} failed")
    if failed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
