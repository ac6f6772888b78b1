"""
Query execution against the remote warehouse.

- :class:`QueryExecutor`: submit / wait / fetch for a single query
- :class:`ParallelQueryExecutor`: bounded fan-out, order-preserving
"""

from .client import DEFAULT_POLL_INTERVAL_SECONDS, DEFAULT_TIMEOUT_SECONDS, QueryExecutor
from .parallel import (
    DEFAULT_MAX_CONCURRENT_QUERIES,
    ParallelQueryExecutor,
    QueryOutcome,
    raise_first_error,
)
from .protocol import ExecutionStatus, QueryService, ResultPage

__all__ = [
    "QueryExecutor",
    "ParallelQueryExecutor",
    "QueryOutcome",
    "raise_first_error",
    "QueryService",
    "ExecutionStatus",
    "ResultPage",
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_MAX_CONCURRENT_QUERIES",
]
