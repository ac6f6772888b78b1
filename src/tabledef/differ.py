"""
Diff Engine

Compares local SQL definitions against the DDL the warehouse reports for
each remote table and classifies every table as create, update, delete or
no change. Updates carry a unified text diff and a heuristic breakdown of
column and property changes.
"""

import difflib
import logging
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence

from tabledef.catalog import RemoteCatalog
from tabledef.ddl import (
    PROPERTY_NAMES,
    ddl_from_result,
    extract_columns,
    extract_property,
    normalize_sql,
    show_create_table_query,
)
from tabledef.domain.errors import CatalogListError, DdlFetchError
from tabledef.local_files import find_sql_files
from tabledef.models import (
    ChangeDetails,
    ColumnChange,
    ColumnChangeType,
    DiffOperation,
    DiffResult,
    PropertyChange,
    TableDiff,
    TableKey,
)
from tabledef.query import ParallelQueryExecutor, QueryOutcome

logger = logging.getLogger(__name__)

TablePredicate = Callable[[str, str], bool]


# --- Pure diff computation ---


def format_sql_diff(qualified_name: str, remote_sql: str, local_sql: str) -> str:
    """Unified line diff from remote (old) to local (new)"""
    lines = difflib.unified_diff(
        remote_sql.splitlines(),
        local_sql.splitlines(),
        fromfile=f"remote: {qualified_name}",
        tofile=f"local:  {qualified_name}",
        lineterm="",
    )
    return "\n".join(lines)


def detect_column_changes(
    remote_columns: Mapping[str, str], local_columns: Mapping[str, str]
) -> list[ColumnChange]:
    changes: list[ColumnChange] = []

    for name, remote_type in remote_columns.items():
        local_type = local_columns.get(name)
        if local_type is None:
            changes.append(
                ColumnChange(
                    change_type=ColumnChangeType.REMOVED, column_name=name, old_type=remote_type
                )
            )
        elif local_type != remote_type:
            changes.append(
                ColumnChange(
                    change_type=ColumnChangeType.TYPE_CHANGED,
                    column_name=name,
                    old_type=remote_type,
                    new_type=local_type,
                )
            )

    for name, local_type in local_columns.items():
        if name not in remote_columns:
            changes.append(
                ColumnChange(
                    change_type=ColumnChangeType.ADDED, column_name=name, new_type=local_type
                )
            )

    return changes


def detect_property_changes(remote_sql: str, local_sql: str) -> list[PropertyChange]:
    changes: list[PropertyChange] = []
    for name in PROPERTY_NAMES:
        old_value = extract_property(remote_sql, name)
        new_value = extract_property(local_sql, name)
        if old_value != new_value:
            changes.append(
                PropertyChange(property_name=name, old_value=old_value, new_value=new_value)
            )
    return changes


def detect_changes(remote_sql: str, local_sql: str) -> ChangeDetails:
    return ChangeDetails(
        column_changes=detect_column_changes(
            extract_columns(remote_sql), extract_columns(local_sql)
        ),
        property_changes=detect_property_changes(remote_sql, local_sql),
    )


def compute_table_diffs(
    local: Mapping[TableKey, str], remote: Mapping[TableKey, str]
) -> list[TableDiff]:
    """Classify every key in ``local`` and ``remote`` into exactly one operation

    Returns one TableDiff per key, sorted by (database, table).
    """
    table_diffs: list[TableDiff] = []

    for key in sorted(set(local) | set(remote), key=lambda k: (k.database_name, k.table_name)):
        local_sql = local.get(key)
        remote_sql = remote.get(key)

        if remote_sql is None:
            operation = DiffOperation.CREATE
            text_diff = None
            details = None
        elif local_sql is None:
            operation = DiffOperation.DELETE
            text_diff = None
            details = None
        else:
            normalized_remote = normalize_sql(remote_sql)
            normalized_local = normalize_sql(local_sql)
            if normalized_remote == normalized_local:
                operation = DiffOperation.NO_CHANGE
                text_diff = None
                details = None
            else:
                operation = DiffOperation.UPDATE
                text_diff = format_sql_diff(key.qualified_name, normalized_remote, normalized_local)
                details = detect_changes(normalized_remote, normalized_local)

        table_diffs.append(
            TableDiff(
                database_name=key.database_name,
                table_name=key.table_name,
                operation=operation,
                text_diff=text_diff,
                change_details=details,
            )
        )

    return table_diffs


# --- Orchestration ---


class Differ:
    """Compute a DiffResult for a local definition directory

    Attributes:
        catalog: Remote database/table enumeration
        parallel: Bounded executor used for SHOW CREATE TABLE fan-out
    """

    def __init__(self, catalog: RemoteCatalog, parallel: ParallelQueryExecutor) -> None:
        self.catalog = catalog
        self.parallel = parallel

    def calculate_diff(
        self, base_path: Path, target_filter: Optional[TablePredicate] = None
    ) -> DiffResult:
        """Diff local definitions under ``base_path`` against the warehouse

        Raises:
            SqlFileError: If ``base_path`` cannot be read
            CatalogListError: If remote databases or tables cannot be listed
        """
        local = self.get_local_tables(base_path, target_filter)
        remote = self.get_remote_tables(target_filter)
        table_diffs = compute_table_diffs(local, remote)
        result = DiffResult.from_table_diffs(table_diffs)
        logger.debug(
            "Diff computed: %d local, %d remote, %d to add, %d to change, %d to destroy",
            len(local),
            len(remote),
            result.summary.to_add,
            result.summary.to_change,
            result.summary.to_destroy,
        )
        return result

    def get_local_tables(
        self, base_path: Path, target_filter: Optional[TablePredicate] = None
    ) -> dict[TableKey, str]:
        return {
            key: sql_file.content
            for key, sql_file in find_sql_files(base_path).items()
            if target_filter is None or target_filter(key.database_name, key.table_name)
        }

    def list_remote_tables(self, target_filter: Optional[TablePredicate] = None) -> list[TableKey]:
        """List every remote table passing ``target_filter``

        Tables of all databases are listed concurrently under the executor's
        concurrency limit; the result keeps catalog order.

        Raises:
            CatalogListError: If listing fails
        """
        try:
            databases = self.catalog.list_databases()
        except Exception as e:
            raise CatalogListError(f"Failed to list databases: {e}") from e

        tables_by_database = self.parallel.run_all(databases, self.catalog.list_tables)

        keys: list[TableKey] = []
        for database_name, tables in zip(databases, tables_by_database):
            if isinstance(tables, Exception):
                raise CatalogListError(
                    f"Failed to list tables in {database_name}: {tables}"
                ) from tables
            for table_name in tables:
                if target_filter is None or target_filter(database_name, table_name):
                    keys.append(TableKey(database_name=database_name, table_name=table_name))
        return keys

    def fetch_ddl(self, keys: Sequence[TableKey]) -> dict[TableKey, str]:
        """Fetch SHOW CREATE TABLE output for ``keys`` in parallel

        Tables whose fetch fails, or whose result holds no DDL, are logged at
        WARNING and left out of the returned mapping.
        """
        if not keys:
            return {}

        queries = [show_create_table_query(key) for key in keys]
        outcomes = self.parallel.execute_all(queries)

        ddl_by_key: dict[TableKey, str] = {}
        for key, outcome in zip(keys, outcomes):
            try:
                ddl_by_key[key] = _ddl_from_outcome(key, outcome)
            except DdlFetchError as e:
                logger.warning("%s", e)
        return ddl_by_key

    def get_remote_tables(
        self, target_filter: Optional[TablePredicate] = None
    ) -> dict[TableKey, str]:
        return self.fetch_ddl(self.list_remote_tables(target_filter))


def _ddl_from_outcome(key: TableKey, outcome: QueryOutcome) -> str:
    """DDL text carried by one SHOW CREATE TABLE outcome

    Raises:
        DdlFetchError: If the query failed or returned no DDL
    """
    if not outcome.ok:
        raise DdlFetchError(key.qualified_name, outcome.error)
    ddl = ddl_from_result(outcome.unwrap())
    if ddl is None:
        raise DdlFetchError(key.qualified_name, "empty result")
    return ddl
