"""
Pydantic models for tabledef.

Covers query executions against the remote warehouse and the structured
result of a local/remote diff (operations, summary, column and property changes).
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


class TableKey(BaseModel):
    """Unique identifier of a table: (database, table)"""

    model_config = ConfigDict(frozen=True)

    database_name: str
    table_name: str

    @property
    def qualified_name(self) -> str:
        return f"{self.database_name}.{self.table_name}"

    @classmethod
    def parse(cls, qualified_name: str) -> "TableKey":
        """Parse ``"<database>.<table>"`` into a TableKey.

        Raises:
            ValueError: If the name does not have exactly two non-empty segments
        """
        parts = qualified_name.split(".")
        if len(parts) != 2 or not all(parts):
            raise ValueError(f"Invalid table key format: {qualified_name}")
        return cls(database_name=parts[0], table_name=parts[1])

    def __str__(self) -> str:
        return self.qualified_name


# --- Query execution ---


class QueryState(str, Enum):
    """State of a remote query execution"""

    QUEUED = "QUEUED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    UNKNOWN = "UNKNOWN"

    @property
    def is_terminal(self) -> bool:
        return self in (QueryState.SUCCEEDED, QueryState.FAILED, QueryState.CANCELLED)


class QueryResult(BaseModel):
    """Result of a query execution

    Rows are only populated for SUCCEEDED executions. Each row is the list of
    cell values as literal text.
    """

    execution_id: str
    state: QueryState
    error_message: Optional[str] = None
    rows: list[list[str]] = Field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return self.state == QueryState.SUCCEEDED

    @property
    def is_failed(self) -> bool:
        return self.state == QueryState.FAILED

    @property
    def is_running(self) -> bool:
        return self.state in (QueryState.QUEUED, QueryState.RUNNING)

    @property
    def row_count(self) -> int:
        return len(self.rows)


# --- Diff result ---


class DiffOperation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    NO_CHANGE = "no_change"


class ColumnChangeType(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    TYPE_CHANGED = "type_changed"


class ColumnChange(BaseModel):
    """Column-level change between remote (old) and local (new) DDL"""

    change_type: ColumnChangeType
    column_name: str
    old_type: Optional[str] = None
    new_type: Optional[str] = None


class PropertyChange(BaseModel):
    """Table property change: location, format or partitions"""

    property_name: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None


class ChangeDetails(BaseModel):
    column_changes: list[ColumnChange] = Field(default_factory=list)
    property_changes: list[PropertyChange] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.column_changes and not self.property_changes


class TableDiff(BaseModel):
    """Planned operation for a single table"""

    database_name: str
    table_name: str
    operation: DiffOperation
    text_diff: Optional[str] = None
    change_details: Optional[ChangeDetails] = None

    @property
    def key(self) -> TableKey:
        return TableKey(database_name=self.database_name, table_name=self.table_name)

    @property
    def qualified_name(self) -> str:
        return f"{self.database_name}.{self.table_name}"

    @property
    def is_change(self) -> bool:
        return self.operation != DiffOperation.NO_CHANGE


class DiffSummary(BaseModel):
    to_add: int = 0
    to_change: int = 0
    to_destroy: int = 0

    @classmethod
    def from_table_diffs(cls, table_diffs: list[TableDiff]) -> "DiffSummary":
        ops = [d.operation for d in table_diffs]
        return cls(
            to_add=ops.count(DiffOperation.CREATE),
            to_change=ops.count(DiffOperation.UPDATE),
            to_destroy=ops.count(DiffOperation.DELETE),
        )

    @property
    def total(self) -> int:
        return self.to_add + self.to_change + self.to_destroy


class DiffResult(BaseModel):
    """Aggregate result of a diff run"""

    summary: DiffSummary = Field(default_factory=DiffSummary)
    table_diffs: list[TableDiff] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def no_change(self) -> bool:
        return self.summary.total == 0

    @classmethod
    def from_table_diffs(cls, table_diffs: list[TableDiff]) -> "DiffResult":
        return cls(summary=DiffSummary.from_table_diffs(table_diffs), table_diffs=table_diffs)

    def diffs_for(self, operation: DiffOperation) -> list[TableDiff]:
        return [d for d in self.table_diffs if d.operation == operation]
