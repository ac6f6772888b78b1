"""
Plan Command - Show what apply would change

Diffs local definitions against the warehouse and renders the result as a
coloured plan or as JSON.
"""

from pathlib import Path

import click
from rich.console import Console

from tabledef.differ import Differ, TablePredicate
from tabledef.models import DiffResult
from tabledef.output import diff_result_json, display_diff_result

console = Console()


def run_plan(
    differ: Differ,
    base_path: Path,
    target_filter: TablePredicate,
    show_unchanged: bool = False,
    as_json: bool = False,
    out: Console | None = None,
) -> DiffResult:
    """Compute and print the plan

    Args:
        differ: Diff engine bound to the remote warehouse
        base_path: Directory holding ``<database>/<table>.sql`` files
        target_filter: Table inclusion predicate
        show_unchanged: Also list tables without changes
        as_json: Print the DiffResult as JSON instead of the coloured plan
        out: Console to render to

    Returns:
        The computed DiffResult
    """
    out = out or console
    if not as_json:
        out.print("[cyan]Calculating differences...[/cyan]")

    result = differ.calculate_diff(base_path, target_filter)

    if as_json:
        click.echo(diff_result_json(result))
    else:
        display_diff_result(result, show_unchanged=show_unchanged, out=out)
    return result
