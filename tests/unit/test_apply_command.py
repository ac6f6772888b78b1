"""Unit tests for apply statement planning and serial execution."""

from __future__ import annotations

from pathlib import Path

import pytest
from rich.console import Console

from tabledef.commands.apply import (
    build_apply_statements,
    create_database_statement,
    drop_table_statement,
    execute_apply,
    run_apply,
)
from tabledef.differ import Differ
from tabledef.domain.errors import ApplyError
from tabledef.models import DiffOperation, DiffResult, QueryState, TableDiff, TableKey
from tabledef.query import ParallelQueryExecutor, QueryExecutor
from tabledef.target_filter import compile_targets
from tests.utils import FakeCatalog, FakeQueryService

NEW_T1 = TableKey(database_name="newdb", table_name="t1")
NEW_T2 = TableKey(database_name="newdb", table_name="t2")
CUSTOMERS = TableKey(database_name="sales", table_name="customers")
LEGACY = TableKey(database_name="sales", table_name="legacy")


def _diff(key: TableKey, operation: DiffOperation) -> TableDiff:
    return TableDiff(
        database_name=key.database_name, table_name=key.table_name, operation=operation
    )


def _quiet() -> Console:
    return Console(record=True, width=120)


def _result() -> DiffResult:
    return DiffResult.from_table_diffs(
        [
            _diff(NEW_T1, DiffOperation.CREATE),
            _diff(NEW_T2, DiffOperation.CREATE),
            _diff(CUSTOMERS, DiffOperation.UPDATE),
            _diff(LEGACY, DiffOperation.DELETE),
            _diff(TableKey(database_name="sales", table_name="orders"), DiffOperation.NO_CHANGE),
        ]
    )


LOCAL_SQL = {
    NEW_T1: "CREATE TABLE newdb.t1 (id int);\n",
    NEW_T2: "CREATE TABLE newdb.t2 (id int)",
    CUSTOMERS: "CREATE TABLE sales.customers (id bigint)",
}


def test_build_apply_statements() -> None:
    planned = build_apply_statements(_result(), LOCAL_SQL)

    assert [(p.table_diff.qualified_name, p.statements) for p in planned] == [
        (
            "newdb.t1",
            ["CREATE DATABASE IF NOT EXISTS `newdb`", "CREATE TABLE newdb.t1 (id int)"],
        ),
        ("newdb.t2", ["CREATE TABLE newdb.t2 (id int)"]),
        (
            "sales.customers",
            [
                "DROP TABLE IF EXISTS `sales`.`customers`",
                "CREATE TABLE sales.customers (id bigint)",
            ],
        ),
        ("sales.legacy", ["DROP TABLE IF EXISTS `sales`.`legacy`"]),
    ]


def test_build_apply_statements_requires_local_definition() -> None:
    with pytest.raises(ApplyError, match="No local definition for newdb.t2"):
        build_apply_statements(_result(), {NEW_T1: "x", CUSTOMERS: "y"})


def test_statement_helpers_quote_identifiers() -> None:
    assert drop_table_statement(LEGACY) == "DROP TABLE IF EXISTS `sales`.`legacy`"
    assert create_database_statement("we`ird") == "CREATE DATABASE IF NOT EXISTS `we``ird`"


def test_execute_apply_runs_serially_in_plan_order(
    fake_service: FakeQueryService, executor: QueryExecutor
) -> None:
    planned = build_apply_statements(_result(), LOCAL_SQL)

    summary = execute_apply(planned, executor, out=_quiet())

    assert fake_service.submitted == [s for p in planned for s in p.statements]
    assert (summary.added, summary.changed, summary.destroyed) == (2, 1, 1)
    assert str(summary) == "Apply complete! Resources: 2 added, 1 changed, 1 destroyed."


def test_execute_apply_stops_at_first_failure(
    fake_service: FakeQueryService, executor: QueryExecutor
) -> None:
    fake_service.script(
        "DROP TABLE IF EXISTS `sales`.`customers`", QueryState.FAILED, reason="permission denied"
    )
    planned = build_apply_statements(_result(), LOCAL_SQL)

    with pytest.raises(ApplyError, match="Failed to update sales.customers") as exc:
        execute_apply(planned, executor, out=_quiet())

    assert "permission denied" in str(exc.value)
    assert "DROP TABLE IF EXISTS `sales`.`legacy`" not in fake_service.submitted


def _differ(service: FakeQueryService, catalog: FakeCatalog) -> tuple[Differ, QueryExecutor]:
    executor = QueryExecutor(service, "wh-test", sleep=lambda _: None)
    return Differ(catalog, ParallelQueryExecutor(executor, max_concurrent=2)), executor


def test_run_apply_dry_run_executes_nothing(
    fake_service: FakeQueryService, definitions_dir: Path, write_sql
) -> None:
    write_sql("newdb", "t1", "CREATE TABLE newdb.t1 (id int)")
    differ, executor = _differ(fake_service, FakeCatalog({}))
    out = _quiet()

    result = run_apply(
        differ, executor, definitions_dir, compile_targets([]), dry_run=True, out=out
    )

    assert result is None
    assert fake_service.submitted == []
    text = out.export_text()
    assert "Dry run" in text
    assert "CREATE DATABASE IF NOT EXISTS `newdb`;" in text


def test_run_apply_auto_approve(
    fake_service: FakeQueryService, definitions_dir: Path, write_sql
) -> None:
    write_sql("newdb", "t1", "CREATE TABLE newdb.t1 (id int)")
    differ, executor = _differ(fake_service, FakeCatalog({}))

    summary = run_apply(
        differ, executor, definitions_dir, compile_targets([]), auto_approve=True, out=_quiet()
    )

    assert summary is not None and summary.added == 1
    assert fake_service.submitted == [
        "CREATE DATABASE IF NOT EXISTS `newdb`",
        "CREATE TABLE newdb.t1 (id int)",
    ]


def test_run_apply_without_changes_returns_none(
    fake_service: FakeQueryService, definitions_dir: Path
) -> None:
    differ, executor = _differ(fake_service, FakeCatalog({}))

    assert run_apply(differ, executor, definitions_dir, compile_targets([]), out=_quiet()) is None
    assert fake_service.submitted == []
