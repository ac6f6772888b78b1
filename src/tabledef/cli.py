"""
Click-based CLI for tabledef.
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from . import __version__
from .commands import run_apply, run_export, run_init, run_plan
from .commands._runtime import Runtime, build_runtime
from .config import DEFAULT_CONFIG_PATH, load_config
from .domain.errors import TableDefError
from .logging_config import configure_logging
from .target_filter import TargetFilter, compile_targets, resolve_targets

console = Console()
logger = logging.getLogger(__name__)


def _fail(error: Exception) -> None:
    console.print(f"[red]✗ Error:[/red] {escape(str(error))}")
    sys.exit(1)


def _runtime(ctx: click.Context) -> tuple[Runtime, TargetFilter]:
    """Load configuration and build the runtime; returns (runtime, target filter)"""
    obj = ctx.obj
    config = load_config(Path(obj["config_path"]))
    runtime = build_runtime(config, service=obj.get("service"), catalog=obj.get("catalog"))
    targets = resolve_targets(obj["targets"], config.databases)
    return runtime, compile_targets(targets)


@click.group()
@click.version_option(version=__version__, prog_name="tabledef")
@click.option(
    "--config",
    "-c",
    "config_path",
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    type=click.Path(dir_okay=False),
    help="Path to the configuration file",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--target",
    "-t",
    "targets",
    multiple=True,
    help="Limit to <database>.<table> (wildcards allowed, repeatable)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str, debug: bool, targets: tuple[str, ...]) -> None:
    """tabledef: declarative table definitions for SQL warehouses"""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["targets"] = list(targets)
    configure_logging(debug)


@cli.command()
@click.option("--show-unchanged", is_flag=True, help="Also list tables without changes")
@click.option("--json", "as_json", is_flag=True, help="Print the plan as JSON")
@click.pass_context
def plan(ctx: click.Context, show_unchanged: bool, as_json: bool) -> None:
    """Show changes required by the current configuration"""
    try:
        runtime, target_filter = _runtime(ctx)
        run_plan(
            runtime.differ,
            Path.cwd(),
            target_filter,
            show_unchanged=show_unchanged,
            as_json=as_json,
        )
    except TableDefError as e:
        _fail(e)
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        _fail(e)


@cli.command()
@click.option("--auto-approve", is_flag=True, help="Skip the confirmation prompt")
@click.option("--dry-run", is_flag=True, help="Show the statements without executing them")
@click.pass_context
def apply(ctx: click.Context, auto_approve: bool, dry_run: bool) -> None:
    """Apply table definition changes to the warehouse"""
    try:
        runtime, target_filter = _runtime(ctx)
        run_apply(
            runtime.differ,
            runtime.executor,
            Path.cwd(),
            target_filter,
            auto_approve=auto_approve,
            dry_run=dry_run,
        )
    except TableDefError as e:
        _fail(e)
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        _fail(e)


@cli.command()
@click.option("--overwrite", is_flag=True, help="Overwrite existing SQL files")
@click.pass_context
def export(ctx: click.Context, overwrite: bool) -> None:
    """Export remote table definitions to local SQL files"""
    try:
        runtime, target_filter = _runtime(ctx)
        run_export(runtime.differ, Path.cwd(), target_filter, overwrite=overwrite)
    except TableDefError as e:
        _fail(e)
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        _fail(e)


@cli.command()
@click.option("--force", is_flag=True, help="Overwrite an existing configuration file")
@click.pass_context
def init(ctx: click.Context, force: bool) -> None:
    """Create a default configuration file"""
    try:
        run_init(Path(ctx.obj["config_path"]), force=force)
    except TableDefError as e:
        _fail(e)
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        _fail(e)


if __name__ == "__main__":
    cli()
