"""CLI interface for tsviz — click-based commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import IO, Any

import click

from tsviz.config import TsvizConfig, generate_config_toml
from tsviz.config.models import DEFAULT_CONFIG_PATH
from tsviz.errors import TransformError
from tsviz.exporters.stdout import StdoutExporter
from tsviz.logging import configure_logging
from tsviz.transformer import Transformer


def read_json_arg(stream: IO[str], what: str) -> Any:
    """Parse a JSON input file, reporting the file name on failure."""
    try:
        return json.load(stream)
    except json.JSONDecodeError as e:
        msg = f"{what} is not valid JSON: {e}"
        raise click.BadParameter(msg) from None


def read_json_list_arg(stream: IO[str], what: str) -> list[Any]:
    """Parse a JSON file that must hold an array."""
    value = read_json_arg(stream, what)
    if not isinstance(value, list):
        msg = f"{what} must hold a JSON array, got {type(value).__name__}"
        raise click.BadParameter(msg)
    return value


@click.group()
@click.version_option(package_name="tsviz")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Config file (default: {DEFAULT_CONFIG_PATH})",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """tsviz — turn time-series query results into chart-ready JSON.

    Each command reads service-shaped JSON and prints the transformed
    structure to stdout.

    Run 'tsviz init' to write a default configuration.
    """
    configure_logging("DEBUG" if verbose else "WARNING")
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create default configuration at ~/.tsviz/config.toml (or --config)."""
    config_path = ctx.obj.get("config_path") or DEFAULT_CONFIG_PATH
    if config_path.exists() and not click.confirm(
        f"Config already exists at {config_path}. Overwrite?"
    ):
        return

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(generate_config_toml(TsvizConfig()))

    click.echo(f"✓ Config created at: {config_path}")
    click.echo("Edit to set the timezone offset, roll-up and output options.")


@cli.command()
@click.argument("source", type=click.File("r"))
@click.option("--roll-up", "roll_up_multiplier", type=click.IntRange(min=1), default=None,
              help="Merge this many raw buckets into one")
@click.option("--offset", "first_bucket_offset", type=int, default=None,
              help="Shift roll-up group boundaries by this many buckets")
@click.pass_context
def availability(
    ctx: click.Context,
    source: IO[str],
    roll_up_multiplier: int | None,
    first_bucket_offset: int | None,
) -> None:
    """Bucket an availability result into a dense, aligned grid.

    SOURCE is a JSON file with 'range', 'intervalSize' and 'distribution'.
    """
    config = _load_config(ctx)
    data = read_json_arg(source, "SOURCE")
    result = _run(
        lambda: Transformer(config).availability(
            data,
            roll_up_multiplier=roll_up_multiplier,
            first_bucket_offset=first_bucket_offset,
        )
    )
    StdoutExporter().export(result, config)


@cli.command()
@click.argument("source", type=click.File("r"))
@click.option("--timezone-offset", type=int, default=None,
              help="Milliseconds subtracted from each event timestamp")
@click.pass_context
def events(ctx: click.Context, source: IO[str], timezone_offset: int | None) -> None:
    """Flatten a batch of raw events into grid rows.

    SOURCE is a JSON array of events carrying 'schema' or 'schemaRid'.
    """
    config = _load_config(ctx)
    batch = read_json_list_arg(source, "SOURCE")
    rows = _run(lambda: Transformer(config).events(batch, timezone_offset=timezone_offset))
    StdoutExporter().export(rows, config)


@cli.command()
@click.argument("source", type=click.File("r"))
@click.argument("options", type=click.File("r"))
@click.pass_context
def aggregates(ctx: click.Context, source: IO[str], options: IO[str]) -> None:
    """Pivot aggregate results into per-series maps.

    SOURCE is a JSON array of aggregate results, OPTIONS a JSON array of
    {"alias", "measureTypes"} objects, one per result.
    """
    config = _load_config(ctx)
    results = read_json_list_arg(source, "SOURCE")
    series_options = read_json_list_arg(options, "OPTIONS")
    pivoted = _run(lambda: Transformer(config).aggregates(results, series_options))
    StdoutExporter().export(pivoted, config)


@cli.command()
@click.argument("source", type=click.File("r"))
@click.argument("options", type=click.File("r"))
@click.pass_context
def query(ctx: click.Context, source: IO[str], options: IO[str]) -> None:
    """Pivot time-series query results into per-series maps.

    SOURCE is a JSON array of {"timestamps", "variables"} results, OPTIONS a
    JSON array of {"alias"} objects, one per result.
    """
    config = _load_config(ctx)
    results = read_json_list_arg(source, "SOURCE")
    series_options = read_json_list_arg(options, "OPTIONS")
    pivoted = _run(lambda: Transformer(config).query_results(results, series_options))
    StdoutExporter().export(pivoted, config)


def _run(transformation: Any) -> Any:
    """Invoke a transformation, surfacing pipeline faults as CLI errors."""
    try:
        return transformation()
    except TransformError as e:
        raise click.ClickException(f"{type(e).__name__}: {e}") from None


def _load_config(ctx: click.Context) -> TsvizConfig:
    """Load config; an explicit --config must exist, the default may be absent."""
    from tsviz.config import load_config

    config_path = ctx.obj.get("config_path") if ctx.obj else None
    try:
        if config_path is not None:
            return load_config(config_path)
        if DEFAULT_CONFIG_PATH.exists():
            return load_config(DEFAULT_CONFIG_PATH)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from None
    return TsvizConfig()
