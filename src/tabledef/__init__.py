"""
tabledef - declarative table definitions for SQL warehouses

Diffs ``<database>/<table>.sql`` files against the live warehouse schema and
applies the differences.
"""

__version__ = "0.1.0"

from .differ import Differ, compute_table_diffs
from .models import (
    ChangeDetails,
    ColumnChange,
    ColumnChangeType,
    DiffOperation,
    DiffResult,
    DiffSummary,
    PropertyChange,
    QueryResult,
    QueryState,
    TableDiff,
    TableKey,
)
from .target_filter import TargetFilter, compile_targets, resolve_targets

__all__ = [
    "__version__",
    "Differ",
    "compute_table_diffs",
    "ChangeDetails",
    "ColumnChange",
    "ColumnChangeType",
    "DiffOperation",
    "DiffResult",
    "DiffSummary",
    "PropertyChange",
    "QueryResult",
    "QueryState",
    "TableDiff",
    "TableKey",
    "TargetFilter",
    "compile_targets",
    "resolve_targets",
]
