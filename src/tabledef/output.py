"""
Console rendering of diff results.

Uses rich for coloured output: ``+`` create (green), ``~`` update (yellow),
``-`` destroy (red).
"""

from typing import Optional

from rich.console import Console
from rich.text import Text

from tabledef.models import (
    ChangeDetails,
    ColumnChangeType,
    DiffOperation,
    DiffResult,
    TableDiff,
)

console = Console()

CREATE_STYLE = "bold green"
UPDATE_STYLE = "bold yellow"
DELETE_STYLE = "bold red"
UNCHANGED_STYLE = "dim"

NO_CHANGES_MESSAGE = "No changes. Your infrastructure matches the configuration."


def summary_line(result: DiffResult) -> str:
    s = result.summary
    return f"Plan: {s.to_add} to add, {s.to_change} to change, {s.to_destroy} to destroy."


def databases_to_create(result: DiffResult) -> list[str]:
    """Databases that receive at least one new table, sorted"""
    return sorted({d.database_name for d in result.diffs_for(DiffOperation.CREATE)})


def _diff_line(line: str) -> Text:
    if line.startswith("+") and not line.startswith("+++"):
        return Text(line, style="green")
    if line.startswith("-") and not line.startswith("---"):
        return Text(line, style="red")
    if line.startswith("@@"):
        return Text(line, style="cyan")
    return Text(line)


def _render_change_details(details: ChangeDetails, out: Console) -> None:
    for change in details.column_changes:
        if change.change_type == ColumnChangeType.ADDED:
            out.print(Text(f"    + column {change.column_name}: {change.new_type}", style="green"))
        elif change.change_type == ColumnChangeType.REMOVED:
            out.print(Text(f"    - column {change.column_name}: {change.old_type}", style="red"))
        else:
            out.print(
                Text(
                    f"    ~ column {change.column_name}: {change.old_type} -> {change.new_type}",
                    style="yellow",
                )
            )
    for prop in details.property_changes:
        old_value = prop.old_value if prop.old_value is not None else "(none)"
        new_value = prop.new_value if prop.new_value is not None else "(none)"
        out.print(Text(f"    ~ {prop.property_name}: {old_value} -> {new_value}", style="yellow"))


def _render_table_diff(table_diff: TableDiff, show_unchanged: bool, out: Console) -> None:
    name = table_diff.qualified_name

    if table_diff.operation == DiffOperation.CREATE:
        out.print(Text.assemble(("+ ", CREATE_STYLE), (name, CREATE_STYLE)))
        out.print("  Will create table")
        out.print()
    elif table_diff.operation == DiffOperation.UPDATE:
        out.print(Text.assemble(("~ ", UPDATE_STYLE), (name, UPDATE_STYLE)))
        out.print("  Will update table")
        if table_diff.change_details and not table_diff.change_details.is_empty:
            _render_change_details(table_diff.change_details, out)
        if table_diff.text_diff:
            for line in table_diff.text_diff.splitlines():
                out.print(_diff_line(line))
        out.print()
    elif table_diff.operation == DiffOperation.DELETE:
        out.print(Text.assemble(("- ", DELETE_STYLE), (name, DELETE_STYLE)))
        out.print("  Will destroy table")
        out.print()
    elif show_unchanged:
        out.print(Text(f"  {name}", style=UNCHANGED_STYLE))
        out.print("  No changes")
        out.print()


def display_diff_result(
    result: DiffResult, show_unchanged: bool = False, out: Optional[Console] = None
) -> None:
    """Print the plan: summary, database notices, then one block per table"""
    out = out or console
    out.print(Text(summary_line(result), style="bold"))

    if result.no_change:
        out.print()
        out.print(Text(NO_CHANGES_MESSAGE, style="green"))
        if not show_unchanged:
            return

    out.print()

    for database_name in databases_to_create(result):
        out.print(Text.assemble(("+ ", CREATE_STYLE), "database: ", (database_name, CREATE_STYLE)))
        out.print("  Will create database if it does not exist")
        out.print()

    for table_diff in result.table_diffs:
        _render_table_diff(table_diff, show_unchanged, out)


def diff_result_json(result: DiffResult) -> str:
    return result.model_dump_json(indent=2)
