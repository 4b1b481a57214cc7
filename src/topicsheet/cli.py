"""CLI interface for Topicsheet.

Runs the sheet server and works with sheet JSON files, locally or against
a running server.
"""

import asyncio
import json
import sys
from collections.abc import Coroutine
from pathlib import Path
from typing import Any

import click
import httpx

from topicsheet.client import SheetApiError, SheetClient
from topicsheet.config import Config
from topicsheet.core.errors import InvalidInputError
from topicsheet.core.model import Sheet
from topicsheet.core.stats import compute_stats
from topicsheet.core.validation import validate_sheet
from topicsheet.logging_config import setup_logging
from topicsheet.seed import parse_seed

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover topicsheet.toml)",
)
url_option = click.option(
    "--url",
    default=None,
    help="Server base URL (overrides config)",
)


@click.group()
def cli() -> None:
    """Topicsheet - ordered practice sheets."""


@cli.command()
@config_option
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--seed",
    "seed_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Sheet JSON file to start from (overrides config)",
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Validate full-sheet replacements and reorders (overrides config, default: disabled)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
def serve(
    config_path: Path | None,
    host: str | None,
    port: int | None,
    seed_path: Path | None,
    strict: bool | None,
    verbose: bool,
) -> None:
    """Start the sheet server."""
    from topicsheet.server import run_server

    setup_logging(verbose)
    config = Config.load(config_path).with_overrides(
        host=host,
        port=port,
        seed_path=seed_path,
        strict_replace=strict,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    if config.sheet.seed_path:
        click.echo(f"Seed file: {config.sheet.seed_path}")
    else:
        click.echo("Seed file: none (built-in sample sheet)")
    click.echo(f"Strict replace: {'enabled' if config.sheet.strict_replace else 'disabled'}")

    run_server(config)


@cli.command()
@click.argument("sheet_file", type=click.Path(exists=True, path_type=Path, dir_okay=False))
def validate(sheet_file: Path) -> None:
    """Check a sheet JSON file for duplicate ids and order gaps."""
    sheet = _read_sheet(sheet_file)
    violations = validate_sheet(sheet)

    if not violations:
        click.echo(click.style(f"{sheet_file}: OK", fg="green"))
        click.echo(f"{len(sheet.topics)} topics, {sheet.question_count()} questions")
        return

    click.echo(click.style(f"{sheet_file}: {len(violations)} problem(s)", fg="red"), err=True)
    for violation in violations:
        click.echo(f"  - {violation}", err=True)
    sys.exit(1)


@cli.command()
@click.argument("sheet_file", type=click.Path(exists=True, path_type=Path, dir_okay=False))
def stats(sheet_file: Path) -> None:
    """Print question counts for a sheet JSON file."""
    sheet = _read_sheet(sheet_file)
    result = compute_stats(sheet)

    click.echo(click.style(sheet.title, bold=True))
    click.echo(f"Questions: {result.total} ({result.solved} solved)")
    click.echo("\nBy topic:")
    for item in result.by_topic:
        click.echo(f"  {item.title}: {item.questions}")
    click.echo("\nBy difficulty:")
    for difficulty, count in result.by_difficulty.items():
        click.echo(f"  {difficulty}: {count}")
    click.echo("\nBy status:")
    for status, count in result.by_status.items():
        click.echo(f"  {status}: {count}")


@cli.command()
@click.argument("output", type=click.Path(path_type=Path, dir_okay=False))
@config_option
@url_option
def export(output: Path, config_path: Path | None, url: str | None) -> None:
    """Download the sheet from a running server into a JSON file."""
    config = Config.load(config_path).with_overrides(base_url=url)
    data = _run_remote(_export(config))
    output.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    click.echo(f"Exported {len(data['topics'])} topics to {output}")


@cli.command()
@click.argument("sheet_file", type=click.Path(exists=True, path_type=Path, dir_okay=False))
@config_option
@url_option
def restore(sheet_file: Path, config_path: Path | None, url: str | None) -> None:
    """Replace the sheet on a running server with a JSON file."""
    config = Config.load(config_path).with_overrides(base_url=url)
    sheet = _read_sheet(sheet_file)
    data = _run_remote(_restore(config, sheet))
    click.echo(click.style("Sheet restored.", fg="green", bold=True))
    click.echo(f"{len(data['topics'])} topics on server")


async def _export(config: Config) -> dict:
    async with httpx.AsyncClient(timeout=config.client.timeout) as http:
        client = SheetClient(http, config.client.base_url)
        return dict(await client.get_sheet())


async def _restore(config: Config, sheet: Sheet) -> dict:
    async with httpx.AsyncClient(timeout=config.client.timeout) as http:
        client = SheetClient(http, config.client.base_url)
        return dict(await client.replace_sheet(sheet.to_dict()))


def _run_remote(coro: Coroutine[Any, Any, dict]) -> dict:
    try:
        return asyncio.run(coro)
    except (SheetApiError, httpx.HTTPError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


def _read_sheet(path: Path) -> Sheet:
    try:
        return parse_seed(json.loads(path.read_text(encoding="utf-8")))
    except (UnicodeDecodeError, json.JSONDecodeError, InvalidInputError) as e:
        click.echo(click.style(f"Error: {path}: {e}", fg="red"), err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
