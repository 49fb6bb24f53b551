"""Command-line interface for cronsight."""

import json
import logging
from datetime import datetime
from typing import Annotated, Optional

import typer

from cronsight.converter import ConversionError, CronConverter
from cronsight.formatting import parse_datetime
from cronsight.infrastructure.config import ConfigError, get_config
from cronsight.infrastructure.logging import configure_logging
from cronsight.report import ScheduleReport, print_presets
from cronsight.scheduling import PRESETS, describe_frequency, validate_expression

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="cronsight",
    help="Find the next run of a cron expression and describe its schedule",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Log level (debug, info, warning, error)"),
    ] = None,
    log_format: Annotated[
        Optional[str],
        typer.Option("--log-format", help="Log format (console, json)"),
    ] = None,
) -> None:
    """Cron expression next-run finder and describer."""
    try:
        config = get_config()
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    configure_logging(
        level=log_level or config.log_level,
        format=(log_format or config.log_format).lower(),
    )


@app.command(name="next")
def next_cmd(
    expression: Annotated[
        str,
        typer.Argument(help="Cron expression, quoted (e.g. '*/15 * * * *')"),
    ],
    now: Annotated[
        Optional[str],
        typer.Option("--now", help="Reference time in ISO 8601 (default: current time)"),
    ] = None,
    tz: Annotated[
        Optional[str],
        typer.Option("--tz", help="IANA timezone for evaluation and display"),
    ] = None,
    count: Annotated[
        int,
        typer.Option("--count", "-n", min=1, help="Number of upcoming runs to list"),
    ] = 1,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (console, json)"),
    ] = "console",
) -> None:
    """Show the next run of a cron expression and what it means."""
    converter = CronConverter()

    try:
        zone = converter.resolve_zone(tz)
        reference = parse_datetime(now, zone) if now else datetime.now(zone)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    try:
        result = converter.convert(expression, now=reference, tz=zone)
        upcoming = (
            converter.upcoming(expression, count, now=reference, tz=zone)
            if count > 1
            else [result.next_run]
        )
    except ConversionError as e:
        logger.debug("Conversion failed: kind=%s", e.kind)
        typer.echo(e.message, err=True)
        raise typer.Exit(1)

    report = ScheduleReport(result=result, upcoming=upcoming)
    if format == "json":
        typer.echo(report.to_json())
    else:
        report.print()


@app.command(name="describe")
def describe_cmd(
    expression: Annotated[str, typer.Argument(help="Cron expression, quoted")],
) -> None:
    """Describe a cron expression in plain English."""
    typer.echo(describe_frequency(expression.strip()))


@app.command(name="validate")
def validate_cmd(
    expression: Annotated[str, typer.Argument(help="Cron expression, quoted")],
) -> None:
    """Check a cron expression's syntax and field values."""
    errors = validate_expression(expression)
    if errors:
        for error in errors:
            typer.echo(f"Invalid: {error}", err=True)
        raise typer.Exit(1)

    typer.echo(f"'{expression.strip()}' is valid")


@app.command(name="examples")
def examples_cmd(
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (console, json)"),
    ] = "console",
) -> None:
    """List example cron expressions."""
    if format == "json":
        data = [
            {
                "name": preset.name,
                "expression": preset.expression.expression,
                "label": preset.label,
                "description": describe_frequency(preset.expression.expression),
            }
            for preset in PRESETS.values()
        ]
        typer.echo(json.dumps(data, indent=2))
        return

    print_presets()


def main() -> None:
    app()


if __name__ == "__main__":
    main()
