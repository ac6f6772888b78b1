"""
Apply Command - Execute the plan against the warehouse

Tables are processed one at a time in plan order. Creates first ensure their
database exists, updates recreate the table from the local definition, and
deletes drop the table. The first failing statement stops the run.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm

from tabledef.ddl import quote_identifier
from tabledef.differ import Differ, TablePredicate
from tabledef.domain.errors import ApplyError
from tabledef.models import DiffOperation, DiffResult, TableDiff, TableKey
from tabledef.output import display_diff_result
from tabledef.query import QueryExecutor

console = Console()


@dataclass
class TableStatements:
    """Statements that apply one TableDiff, in execution order"""

    table_diff: TableDiff
    statements: list[str] = field(default_factory=list)


@dataclass
class ApplySummary:
    added: int = 0
    changed: int = 0
    destroyed: int = 0

    def __str__(self) -> str:
        return (
            f"Apply complete! Resources: {self.added} added, "
            f"{self.changed} changed, {self.destroyed} destroyed."
        )


def drop_table_statement(key: TableKey) -> str:
    return (
        f"DROP TABLE IF EXISTS {quote_identifier(key.database_name)}"
        f".{quote_identifier(key.table_name)}"
    )


def create_database_statement(database_name: str) -> str:
    return f"CREATE DATABASE IF NOT EXISTS {quote_identifier(database_name)}"


def build_apply_statements(
    result: DiffResult, local_sql: Mapping[TableKey, str]
) -> list[TableStatements]:
    """Translate a DiffResult into per-table statement lists

    NoChange entries are skipped. ``CREATE DATABASE IF NOT EXISTS`` is emitted
    once per database, ahead of the first table created in it.

    Raises:
        ApplyError: If a create/update has no local definition
    """
    planned: list[TableStatements] = []
    ensured_databases: set[str] = set()

    for table_diff in result.table_diffs:
        if not table_diff.is_change:
            continue
        key = table_diff.key
        operation = table_diff.operation
        statements: list[str] = []

        if operation in (DiffOperation.CREATE, DiffOperation.UPDATE):
            ddl = local_sql.get(key)
            if ddl is None:
                raise ApplyError(f"No local definition for {key.qualified_name}")
            if operation == DiffOperation.CREATE:
                if key.database_name not in ensured_databases:
                    statements.append(create_database_statement(key.database_name))
                    ensured_databases.add(key.database_name)
            else:
                statements.append(drop_table_statement(key))
            statements.append(ddl.strip().rstrip(";"))
        else:
            statements.append(drop_table_statement(key))

        planned.append(TableStatements(table_diff=table_diff, statements=statements))

    return planned


def execute_apply(
    planned: list[TableStatements], executor: QueryExecutor, out: Console | None = None
) -> ApplySummary:
    """Run planned statements serially

    Raises:
        ApplyError: On the first failing statement, naming the table
    """
    out = out or console
    summary = ApplySummary()
    verbs = {
        DiffOperation.CREATE: "Creating",
        DiffOperation.UPDATE: "Updating",
        DiffOperation.DELETE: "Destroying",
    }

    for item in planned:
        table_diff = item.table_diff
        name = table_diff.qualified_name
        out.print(f"{verbs[table_diff.operation]} {escape(name)}...")

        for statement in item.statements:
            try:
                executor.execute(statement)
            except Exception as e:
                out.print(f"  [red]✗[/red] {escape(str(e))}")
                raise ApplyError(f"Failed to {table_diff.operation.value} {name}: {e}") from e

        out.print(f"  [green]✓[/green] {escape(name)}")
        if table_diff.operation == DiffOperation.CREATE:
            summary.added += 1
        elif table_diff.operation == DiffOperation.UPDATE:
            summary.changed += 1
        else:
            summary.destroyed += 1

    return summary


def run_apply(
    differ: Differ,
    executor: QueryExecutor,
    base_path: Path,
    target_filter: TablePredicate,
    auto_approve: bool = False,
    dry_run: bool = False,
    out: Console | None = None,
) -> ApplySummary | None:
    """Plan, confirm and apply

    Returns:
        ApplySummary, or None when nothing was executed (no changes, dry run,
        or the user declined)

    Raises:
        ApplyError: If a statement fails
    """
    out = out or console
    out.print("[cyan]Calculating differences...[/cyan]")
    result = differ.calculate_diff(base_path, target_filter)
    display_diff_result(result, out=out)

    if result.no_change:
        return None

    local_sql = differ.get_local_tables(base_path, target_filter)
    planned = build_apply_statements(result, local_sql)

    if dry_run:
        out.print("[yellow]Dry run: no changes applied[/yellow]")
        for item in planned:
            for statement in item.statements:
                out.print(f"  {escape(statement)};")
        return None

    if not auto_approve and not Confirm.ask(
        "[bold]Do you want to perform these actions?[/bold]", default=False, console=out
    ):
        out.print("[yellow]Apply cancelled[/yellow]")
        return None

    summary = execute_apply(planned, executor, out=out)
    out.print()
    out.print(f"[green]{summary}[/green]")
    return summary
