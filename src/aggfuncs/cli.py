# src/aggfuncs/cli.py
"""aggfuncs Command Line Interface.

Entry point for the aggfuncs CLI tool.
"""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import TYPE_CHECKING, Any

import typer
from pydantic import ValidationError

from aggfuncs import __version__
from aggfuncs.contracts import AggfuncsError, DataChunk, InvalidInputError, LogicalType
from aggfuncs.core.config import AggfuncsSettings, dump_settings, load_settings

if TYPE_CHECKING:
    from aggfuncs.functions.manager import FunctionManager

__all__ = [
    "app",
]

# Module-level singleton for the function manager
_function_manager_cache: FunctionManager | None = None


def _get_function_manager() -> FunctionManager:
    """Get initialized function manager (singleton)."""
    global _function_manager_cache

    from aggfuncs.functions.manager import FunctionManager

    if _function_manager_cache is None:
        manager = FunctionManager()
        manager.register_builtin_functions()
        _function_manager_cache = manager
    return _function_manager_cache


app = typer.Typer(
    name="aggfuncs",
    help="aggfuncs: interval-overlap aggregate and calendar functions.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"aggfuncs version {__version__}")
        raise typer.Exit()


def _fail(message: str) -> typer.Exit:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    return typer.Exit(1)


@dataclass(frozen=True, slots=True)
class _LogFlags:
    """Global logging flags, stored on the typer context by the callback."""

    verbose: bool = False
    json_logs: bool = False


def _load_settings_or_exit(ctx: typer.Context, settings_path: Path | None) -> AggfuncsSettings:
    """Load settings (or defaults), converting load errors to exit code 1.

    The settings file's logging section replaces the callback's defaults,
    but --verbose and --json-logs still win over it.
    """
    if settings_path is None:
        return AggfuncsSettings()

    from aggfuncs.core.logging import configure_logging

    try:
        settings = load_settings(settings_path.expanduser())
    except FileNotFoundError:
        raise _fail(f"Settings file not found: {settings_path}") from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(part) for part in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None

    flags = ctx.obj if isinstance(ctx.obj, _LogFlags) else _LogFlags()
    configure_logging(
        json_output=flags.json_logs or settings.logging.json_output,
        level="DEBUG" if flags.verbose else settings.logging.level,
    )
    return settings


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """aggfuncs: interval-overlap aggregate and calendar functions."""
    from aggfuncs.core.logging import configure_logging

    ctx.obj = _LogFlags(verbose=verbose, json_logs=json_logs)
    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "INFO")


@app.command("functions")
def functions_list() -> None:
    """List registered functions and their overloads."""
    manager = _get_function_manager()
    specs = manager.get_function_specs()

    for kind in ("aggregate", "scalar"):
        typer.echo(f"\n{kind.upper()}S:")
        matching = [spec for spec in specs if spec.kind == kind]
        if not matching:
            typer.echo("  (none available)")
        for spec in matching:
            typer.echo(f"  {spec.describe()}")

    typer.echo()


# Overflow cells of rows longer than the header; ignored
_EXTRA_FIELDS = "__extra__"


def _missing_cell(column: str, line: int) -> InvalidInputError:
    return InvalidInputError(f"Line {line}: missing column '{column}' (row has fewer fields than the header)")


def _parse_bigint(raw: str | None, column: str, line: int) -> int | None:
    """Parse one CSV cell; an empty cell is NULL, a missing cell is an error."""
    if raw is None:
        raise _missing_cell(column, line)
    text = raw.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        raise InvalidInputError(f"Line {line}: column '{column}' is not an integer: {raw!r}") from None


def _read_interval_csv(path: Path, start: str, end: str, group_by: str | None) -> tuple[DataChunk, list[Any] | None]:
    starts: list[int | None] = []
    ends: list[int | None] = []
    groups: list[Any] = []

    with path.open(newline="", encoding="utf-8") as f:
        # Short rows fill with restval=None, reported per cell below
        reader = csv.DictReader(f, restval=None, restkey=_EXTRA_FIELDS)
        header = reader.fieldnames or []
        required = [start, end] + ([group_by] if group_by else [])
        missing = [column for column in required if column not in header]
        if missing:
            raise InvalidInputError(f"Columns not found in {path}: {', '.join(missing)}. Available: {', '.join(header)}")

        # Line 1 is the header
        for line, row in enumerate(reader, start=2):
            starts.append(_parse_bigint(row[start], start, line))
            ends.append(_parse_bigint(row[end], end, line))
            if group_by:
                group = row[group_by]
                if group is None:
                    raise _missing_cell(group_by, line)
                groups.append(group or None)

    return DataChunk.from_columns(starts, ends), (groups if group_by else None)


@app.command("max-intersections")
def max_intersections(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="CSV file with interval columns."),
    start: str = typer.Option("start", "--start", help="Column holding interval starts."),
    end: str = typer.Option("end", "--end", help="Column holding interval ends (inclusive)."),
    group_by: str | None = typer.Option(None, "--group-by", "-g", help="Column to group by."),
    settings: Path | None = typer.Option(None, "--settings", "-s", help="Path to settings YAML file."),
    output_json: bool = typer.Option(False, "--json", help="Print results as JSON."),
) -> None:
    """Maximum number of simultaneously overlapping intervals in a CSV file."""
    from aggfuncs.engine.executors import AggregateExecutor

    resolved = _load_settings_or_exit(ctx, settings)
    path = path.expanduser()
    if not path.exists():
        raise _fail(f"Input file not found: {path}")

    manager = _get_function_manager()
    aggregate_cls = manager.get_aggregate("max_intersections", [LogicalType.BIGINT, LogicalType.BIGINT])
    executor = AggregateExecutor(aggregate_cls(), resolved.execution)

    try:
        chunk, groups = _read_interval_csv(path, start, end, group_by)
        results = executor.execute(chunk, groups) if groups is not None else executor.execute(chunk)
    except AggfuncsError as e:
        raise _fail(str(e)) from None

    if output_json:
        payload = [{"group": group, "max_intersections": value} for group, value in results.items()]
        typer.echo(json.dumps(payload if group_by else payload[0]["max_intersections"]))
        return

    if not group_by:
        typer.echo(str(results[None]))
        return
    for group, value in results.items():
        typer.echo(f"{'NULL' if group is None else group}\t{value}")


def _parse_temporal(value: str) -> tuple[LogicalType, date | datetime | time]:
    """Parse an ISO date, timestamp, or time string.

    Times must use the extended ``HH:MM[:SS]`` form. The basic ``HHMM`` form
    would swallow a bare year such as ``2024``.
    """
    parsers: list[tuple[LogicalType, Any]] = [
        (LogicalType.DATE, date.fromisoformat),
        (LogicalType.TIMESTAMP, datetime.fromisoformat),
    ]
    if ":" in value:
        parsers.append((LogicalType.TIME, time.fromisoformat))
    for logical_type, parser in parsers:
        try:
            return logical_type, parser(value)
        except ValueError:
            continue
    if value.lstrip("+-").isdigit():
        raise InvalidInputError(f"MONTH is required when VALUE is a year, got {value!r} alone")
    raise InvalidInputError(f"Cannot parse {value!r} as an ISO date, timestamp, or time")


@app.command("days-in-month")
def days_in_month(
    value: str = typer.Argument(..., help="Year (with MONTH), or an ISO date, timestamp, or time."),
    month: int | None = typer.Argument(None, help="Month number 1-12 when VALUE is a year."),
) -> None:
    """Number of days in a calendar month."""
    from aggfuncs.engine.executors import ScalarExecutor

    manager = _get_function_manager()
    try:
        if month is not None:
            try:
                year = int(value)
            except ValueError:
                raise InvalidInputError(f"Year must be an integer, got {value!r}") from None
            arg_types = [LogicalType.INTEGER, LogicalType.INTEGER]
            chunk = DataChunk.from_columns([year], [month])
        else:
            logical_type, parsed = _parse_temporal(value)
            arg_types = [logical_type]
            chunk = DataChunk.from_columns([parsed])

        overload = manager.get_scalar("days_in_month", arg_types)
        (result,) = ScalarExecutor(overload()).execute(chunk)
    except AggfuncsError as e:
        raise _fail(str(e)) from None

    typer.echo(str(result))


@app.command("show-settings")
def show_settings(
    ctx: typer.Context,
    settings: Path | None = typer.Option(None, "--settings", "-s", help="Path to settings YAML file."),
) -> None:
    """Print resolved settings (file + AGGFUNCS_* environment) as YAML."""
    resolved = _load_settings_or_exit(ctx, settings)
    typer.echo(dump_settings(resolved), nl=False)


if __name__ == "__main__":
    app()
