"""Click CLI for platecache: inspect and maintain the analysis cache."""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from platecache.cache.keys import hash_image_file
from platecache.cache.manager import ImageAnalysisCache
from platecache.config.hierarchy import load_config_hierarchy
from platecache.config.schema import build_cache_config
from platecache.errors.exceptions import ConfigError, ImageHashError

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int, default_level: str = "WARNING") -> None:
    """Configure logging based on verbosity level, falling back to the configured level."""
    level = logging.getLevelName(default_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _open_cache(ctx: click.Context) -> ImageAnalysisCache:
    try:
        config = build_cache_config(**ctx.obj)
    except (ValidationError, ConfigError) as e:
        error_console.print(f"[red]Invalid configuration:[/red] {e}")
        sys.exit(1)
    return ImageAnalysisCache(config)


def _format_timestamp(ts: float | None) -> str:
    if ts is None:
        return "-"
    return datetime.fromtimestamp(ts).isoformat(sep=" ", timespec="seconds")


@click.group()
@click.version_option(package_name="platecache")
@click.option(
    "--cache-file", type=click.Path(dir_okay=False), default=None, help="Snapshot file path."
)
@click.option("--ttl-hours", type=float, default=None, help="Entry time-to-live in hours.")
@click.option("--max-size", type=int, default=None, help="Maximum number of entries.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
@click.pass_context
def cli(
    ctx: click.Context,
    cache_file: str | None,
    ttl_hours: float | None,
    max_size: int | None,
    verbose: int,
) -> None:
    """platecache: content-addressed cache for food-image analyses."""
    try:
        log_level = str(load_config_hierarchy()["log_level"])
    except ConfigError as e:
        error_console.print(f"[red]Invalid configuration:[/red] {e}")
        sys.exit(1)
    _setup_logging(verbose, log_level)
    ctx.obj = {
        "persistence_file": cache_file,
        "ttl_hours": ttl_hours,
        "max_size": max_size,
    }


@cli.command("hash")
@click.argument("image", type=click.Path())
def hash_command(image: str) -> None:
    """Print the content digest of an image."""
    try:
        digest = asyncio.run(hash_image_file(image))
    except ImageHashError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    console.print(digest)


@cli.command()
@click.argument("image", type=click.Path())
@click.option("--show", is_flag=True, default=False, help="Print the cached analysis as JSON.")
@click.pass_context
def lookup(ctx: click.Context, image: str, show: bool) -> None:
    """Check whether an image has a fresh cached analysis."""
    cache = _open_cache(ctx)
    try:
        if show:
            result = asyncio.run(cache.get(image))
            found = result is not None
        else:
            result = None
            found = asyncio.run(cache.has(image))
    except ImageHashError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    finally:
        cache.destroy()

    if not found:
        console.print("[yellow]Not cached[/yellow]")
        return
    console.print("[green]Cached[/green]")
    if result is not None:
        console.print_json(result.model_dump_json(by_alias=True))


@cli.group()
def cache() -> None:
    """Cache management commands."""


@cache.command("stats")
@click.pass_context
def cache_stats(ctx: click.Context) -> None:
    """Show cache statistics."""
    mgr = _open_cache(ctx)
    stats = mgr.get_stats()
    mgr.destroy()

    table = Table(title="Cache Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    table.add_row("Entries", f"{stats.current_size}/{stats.max_size}")
    table.add_row("Requests", str(stats.total_requests))
    table.add_row("Hits", str(stats.cache_hits))
    table.add_row("Misses", str(stats.cache_misses))
    table.add_row("Hit rate", f"{stats.hit_rate}%")
    table.add_row("Evictions", str(stats.total_evictions))
    table.add_row("Oldest entry", _format_timestamp(stats.oldest_entry))
    table.add_row("Newest entry", _format_timestamp(stats.newest_entry))

    console.print(table)


@cache.command("cleanup")
@click.pass_context
def cache_cleanup(ctx: click.Context) -> None:
    """Remove expired entries now."""
    mgr = _open_cache(ctx)
    try:
        removed = asyncio.run(mgr.cleanup())
    finally:
        mgr.destroy()
    console.print(f"[green]Removed {removed} expired entries.[/green]")


@cache.command("clear")
@click.confirmation_option(prompt="Are you sure you want to clear the cache?")
@click.pass_context
def cache_clear(ctx: click.Context) -> None:
    """Clear all cached analyses."""
    mgr = _open_cache(ctx)
    try:
        asyncio.run(mgr.clear())
    finally:
        mgr.destroy()
    console.print("[green]Cache cleared.[/green]")


def main() -> None:
    """Entry point for the CLI."""
    cli()
