"""Unit tests for plan rendering."""

import json

from rich.console import Console

from tabledef.models import (
    ChangeDetails,
    ColumnChange,
    ColumnChangeType,
    DiffOperation,
    DiffResult,
    PropertyChange,
    TableDiff,
)
from tabledef.output import (
    NO_CHANGES_MESSAGE,
    databases_to_create,
    diff_result_json,
    display_diff_result,
    summary_line,
)


def _render(result: DiffResult, show_unchanged: bool = False) -> str:
    out = Console(record=True, width=120, force_terminal=False)
    display_diff_result(result, show_unchanged=show_unchanged, out=out)
    return out.export_text()


def _result() -> DiffResult:
    return DiffResult.from_table_diffs(
        [
            TableDiff(database_name="newdb", table_name="t1", operation=DiffOperation.CREATE),
            TableDiff(database_name="newdb", table_name="t2", operation=DiffOperation.CREATE),
            TableDiff(
                database_name="sales",
                table_name="customers",
                operation=DiffOperation.UPDATE,
                text_diff="--- remote: sales.customers\n+++ local:  sales.customers\n"
                "@@ -1,2 +1,2 @@\n CREATE TABLE c (\n-  id int)\n+  id bigint)",
                change_details=ChangeDetails(
                    column_changes=[
                        ColumnChange(
                            change_type=ColumnChangeType.TYPE_CHANGED,
                            column_name="id",
                            old_type="int",
                            new_type="bigint",
                        )
                    ],
                    property_changes=[
                        PropertyChange(property_name="location", old_value="s3://a/[x]")
                    ],
                ),
            ),
            TableDiff(database_name="sales", table_name="legacy", operation=DiffOperation.DELETE),
            TableDiff(
                database_name="sales", table_name="orders", operation=DiffOperation.NO_CHANGE
            ),
        ]
    )


def test_summary_line() -> None:
    assert summary_line(_result()) == "Plan: 2 to add, 1 to change, 1 to destroy."


def test_databases_to_create_is_sorted_and_unique() -> None:
    assert databases_to_create(_result()) == ["newdb"]


def test_display_renders_every_operation() -> None:
    text = _render(_result())

    assert "Plan: 2 to add, 1 to change, 1 to destroy." in text
    assert "+ database: newdb" in text
    assert "Will create database if it does not exist" in text
    assert "+ newdb.t1" in text
    assert "~ sales.customers" in text
    assert "~ column id: int -> bigint" in text
    assert "~ location: s3://a/[x] -> (none)" in text
    assert "+  id bigint)" in text
    assert "- sales.legacy" in text
    assert "Will destroy table" in text
    assert "sales.orders" not in text


def test_show_unchanged_lists_no_change_tables() -> None:
    text = _render(_result(), show_unchanged=True)

    assert "sales.orders" in text
    assert "No changes" in text


def test_no_change_message() -> None:
    text = _render(DiffResult())

    assert "Plan: 0 to add, 0 to change, 0 to destroy." in text
    assert NO_CHANGES_MESSAGE in text


def test_json_output_round_trips() -> None:
    payload = diff_result_json(_result())

    assert json.loads(payload)["summary"]["to_add"] == 2
    assert DiffResult.model_validate_json(payload) == _result()
