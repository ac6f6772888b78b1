"""
Export Command - Write remote table definitions to local SQL files

Fetches SHOW CREATE TABLE output for every targeted remote table through the
bounded parallel executor and writes it to ``<database>/<table>.sql``.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from tabledef.differ import Differ, TablePredicate
from tabledef.local_files import sql_file_path, write_sql_file
from tabledef.models import TableKey

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class ExportSummary:
    written: list[TableKey] = field(default_factory=list)
    skipped: list[TableKey] = field(default_factory=list)
    failed: list[TableKey] = field(default_factory=list)


def run_export(
    differ: Differ,
    base_path: Path,
    target_filter: TablePredicate,
    overwrite: bool = False,
    out: Console | None = None,
) -> ExportSummary:
    """Export remote DDL to local files

    Existing files are kept unless ``overwrite`` is set. Tables whose DDL
    cannot be fetched are reported as failed and do not stop the export.

    Raises:
        CatalogListError: If remote tables cannot be listed
        SqlFileError: If a file cannot be written
    """
    out = out or console
    out.print("[cyan]Exporting table definitions...[/cyan]")

    summary = ExportSummary()
    keys = differ.list_remote_tables(target_filter)

    pending: list[TableKey] = []
    for key in keys:
        if sql_file_path(base_path, key).exists() and not overwrite:
            summary.skipped.append(key)
            logger.debug("Skipping %s: file exists", key.qualified_name)
        else:
            pending.append(key)

    ddl_by_key = differ.fetch_ddl(pending)

    for key in pending:
        ddl = ddl_by_key.get(key)
        if ddl is None:
            summary.failed.append(key)
            continue
        path = sql_file_path(base_path, key)
        write_sql_file(path, ddl)
        summary.written.append(key)
        out.print(f"  [green]✓[/green] {escape(str(path.relative_to(base_path)))}")

    if summary.skipped:
        out.print(
            f"[yellow]Skipped {len(summary.skipped)} existing file(s); "
            "use --overwrite to replace them[/yellow]"
        )
    if summary.failed:
        out.print(f"[yellow]Could not export {len(summary.failed)} table(s)[/yellow]")

    out.print()
    out.print(f"[green]Export complete! {len(summary.written)} tables exported.[/green]")
    return summary
