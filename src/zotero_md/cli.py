# SPDX-License-Identifier: MIT
"""Command-line interface for zotero-md."""

import asyncio
import functools
import sys
import traceback
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from . import __version__
from .config import ConfigManager
from .context import ZoteroContext
from .enums import LoadStatus
from .logging_config import get_status_logger, setup_logging
from .models import ReferenceRecord
from .output_formatter import output_formatter


F = TypeVar("F", bound=Callable[..., Any])


def handle_cli_errors(func: F) -> F:
    """Decorator to handle common CLI error patterns.

    Logs the error through the status logger (with a traceback when
    ``--verbose`` is set) and exits with status code 1.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        status_logger = get_status_logger()
        verbose = kwargs.get("verbose", False)

        try:
            return func(*args, **kwargs)
        except (click.ClickException, click.exceptions.Exit):
            raise
        except Exception as e:
            if verbose:
                status_logger.error(f"Error in {func.__name__}: {e}")
                traceback.print_exc()
            else:
                status_logger.error(f"Error: {e}")
            sys.exit(1)

    return wrapper  # type: ignore


def print_version(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Print version and exit if requested."""
    if value:
        click.echo(f"zotero-md version {__version__}")
        ctx.exit(0)


def _load_references(ctx: click.Context, force: bool = False) -> list[ReferenceRecord]:
    """Load references through the context, exiting on failure."""
    status_logger = get_status_logger()
    context: ZoteroContext = ctx.obj["context"]
    result = asyncio.run(context.get_references(force=force))

    if result.status is LoadStatus.FAILED:
        status_logger.error(f"Failed to load references: {result.error}")
        sys.exit(1)
    if result.status is LoadStatus.ALREADY_LOADING:
        status_logger.warning("References are already loading, try again shortly")
        sys.exit(1)
    if result.status is LoadStatus.EMPTY:
        status_logger.warning("No references found in the Zotero library")
    return result.references


def _require_reference(ctx: click.Context, key: str) -> ReferenceRecord:
    _load_references(ctx)
    context: ZoteroContext = ctx.obj["context"]
    reference = context.find_by_key(key)
    if reference is None:
        raise click.ClickException(f"No reference with key '{key}'")
    return reference


@click.group()
@click.option(
    "--version",
    is_flag=True,
    callback=print_version,
    expose_value=False,
    is_eager=True,
    help="Show version information and exit",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to a YAML configuration file",
)
@click.pass_context
def main(ctx: click.Context, config_path: Path | None) -> None:
    """zotero-md - Look up Zotero references and render Markdown citations."""
    config_manager = ConfigManager(config_path)
    config = config_manager.load_config()
    detail_logger, _ = setup_logging(config.cache.file.parent)
    detail_logger.debug("CLI initialized")

    ctx.ensure_object(dict)
    ctx.obj["config_manager"] = config_manager
    ctx.obj["context"] = ZoteroContext(config)


@main.command(name="list")
@click.option("--force", is_flag=True, help="Reload from the database")
@click.option("--limit", type=int, default=None, help="Show at most N references")
@click.pass_context
@handle_cli_errors
def list_references(ctx: click.Context, force: bool, limit: int | None) -> None:
    """List cached references with their citation text."""
    context: ZoteroContext = ctx.obj["context"]
    references = _load_references(ctx, force=force)
    shown = references if limit is None else references[:limit]
    for reference in shown:
        citation = context.render_citation(reference).text
        click.echo(f"{reference.item_key}\t{citation}")


@main.command()
@click.pass_context
@handle_cli_errors
def refresh(ctx: click.Context) -> None:
    """Reload references from the database and rewrite the cache file."""
    status_logger = get_status_logger()
    references = _load_references(ctx, force=True)
    status_logger.info(f"Loaded {len(references)} references")


@main.command()
@click.argument("key")
@click.pass_context
@handle_cli_errors
def cite(ctx: click.Context, key: str) -> None:
    """Print the Markdown citation for KEY."""
    context: ZoteroContext = ctx.obj["context"]
    click.echo(context.render_citation(_require_reference(ctx, key)).text)


@main.command()
@click.argument("key")
@click.pass_context
@handle_cli_errors
def preview(ctx: click.Context, key: str) -> None:
    """Print the preview text for KEY."""
    context: ZoteroContext = ctx.obj["context"]
    click.echo(context.render_preview(_require_reference(ctx, key)).text)


@main.command()
@click.argument("key")
@click.pass_context
@handle_cli_errors
def info(ctx: click.Context, key: str) -> None:
    """Show all details of the reference KEY."""
    click.echo(output_formatter.format_reference_info(_require_reference(ctx, key)))


@main.command()
@click.argument("key", required=False)
@click.pass_context
@handle_cli_errors
def debug(ctx: click.Context, key: str | None) -> None:
    """Diagnose the database connection, optionally for one item KEY."""
    context: ZoteroContext = ctx.obj["context"]
    report = context.diagnostics(key)
    click.echo(output_formatter.format_diagnostics(report))


@main.command()
@click.pass_context
@handle_cli_errors
def config(ctx: click.Context) -> None:
    """Show the complete current configuration."""
    config_manager: ConfigManager = ctx.obj["config_manager"]
    click.echo(config_manager.show_config())


@main.command(name="init-config")
@click.argument("output_path", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
@handle_cli_errors
def init_config(ctx: click.Context, output_path: Path) -> None:
    """Write a configuration file with all defaults to OUTPUT_PATH."""
    status_logger = get_status_logger()
    config_manager: ConfigManager = ctx.obj["config_manager"]
    config_manager.create_default_config(output_path)
    status_logger.info(f"Wrote default configuration to {output_path}")


if __name__ == "__main__":
    main()
