"""Unit tests for the pydantic data model."""

import json

import pytest
from pydantic import ValidationError

from tabledef.models import (
    ChangeDetails,
    ColumnChange,
    ColumnChangeType,
    DiffOperation,
    DiffResult,
    PropertyChange,
    QueryResult,
    QueryState,
    TableDiff,
    TableKey,
)


def _sample_result() -> DiffResult:
    return DiffResult.from_table_diffs(
        [
            TableDiff(
                database_name="sales", table_name="customers", operation=DiffOperation.CREATE
            ),
            TableDiff(
                database_name="sales",
                table_name="orders",
                operation=DiffOperation.UPDATE,
                text_diff="--- remote: sales.orders\n+++ local:  sales.orders",
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
                        PropertyChange(property_name="format", old_value="PARQUET", new_value="ORC")
                    ],
                ),
            ),
            TableDiff(database_name="mkt", table_name="leads", operation=DiffOperation.DELETE),
            TableDiff(database_name="mkt", table_name="ads", operation=DiffOperation.NO_CHANGE),
        ]
    )


def test_summary_counts_operations() -> None:
    result = _sample_result()

    assert (result.summary.to_add, result.summary.to_change, result.summary.to_destroy) == (1, 1, 1)
    assert result.summary.total == 3
    assert result.no_change is False


def test_no_change_is_derived() -> None:
    result = DiffResult.from_table_diffs(
        [TableDiff(database_name="a", table_name="b", operation=DiffOperation.NO_CHANGE)]
    )

    assert result.no_change is True
    assert DiffResult().no_change is True


def test_json_round_trip_preserves_everything() -> None:
    result = _sample_result()

    restored = DiffResult.model_validate_json(result.model_dump_json())

    assert restored == result
    assert restored.no_change == result.no_change


def test_json_uses_stable_enum_values() -> None:
    payload = json.loads(_sample_result().model_dump_json())

    assert payload["no_change"] is False
    assert payload["summary"] == {"to_add": 1, "to_change": 1, "to_destroy": 1}
    assert [d["operation"] for d in payload["table_diffs"]] == [
        "create",
        "update",
        "delete",
        "no_change",
    ]
    details = payload["table_diffs"][1]["change_details"]
    assert details["column_changes"][0]["change_type"] == "type_changed"


def test_diffs_for_filters_by_operation() -> None:
    result = _sample_result()

    assert [d.qualified_name for d in result.diffs_for(DiffOperation.DELETE)] == ["mkt.leads"]


@pytest.mark.parametrize(
    ("operation", "expected"),
    [
        (DiffOperation.CREATE, True),
        (DiffOperation.UPDATE, True),
        (DiffOperation.DELETE, True),
        (DiffOperation.NO_CHANGE, False),
    ],
)
def test_is_change(operation: DiffOperation, expected: bool) -> None:
    table_diff = TableDiff(database_name="db", table_name="t", operation=operation)

    assert table_diff.is_change is expected


def test_table_key_parse_and_render() -> None:
    key = TableKey.parse("sales.customers")

    assert key == TableKey(database_name="sales", table_name="customers")
    assert str(key) == "sales.customers"
    assert {key: 1}[TableKey(database_name="sales", table_name="customers")] == 1


@pytest.mark.parametrize("bad", ["sales", "a.b.c", ".t", "db."])
def test_table_key_parse_rejects_bad_input(bad: str) -> None:
    with pytest.raises(ValueError, match="Invalid table key format"):
        TableKey.parse(bad)


def test_table_key_is_frozen() -> None:
    key = TableKey(database_name="a", table_name="b")

    with pytest.raises(ValidationError):
        key.table_name = "c"


def test_query_result_helpers() -> None:
    running = QueryResult(execution_id="e1", state=QueryState.QUEUED)
    done = QueryResult(execution_id="e2", state=QueryState.SUCCEEDED, rows=[["a"], ["b"]])

    assert running.is_running and not running.is_success
    assert done.is_success and done.row_count == 2
    assert QueryState.CANCELLED.is_terminal
    assert not QueryState.UNKNOWN.is_terminal
