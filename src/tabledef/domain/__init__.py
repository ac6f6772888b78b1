"""Domain-level error taxonomy."""

from .errors import (
    ApplyError,
    AuthenticationError,
    CatalogListError,
    ConfigError,
    DdlFetchError,
    ExecutionCancelledError,
    ExecutionFailedError,
    QueryTimeoutError,
    SqlFileError,
    StateUnavailableError,
    SubmissionError,
    TableDefError,
)

__all__ = [
    "TableDefError",
    "ConfigError",
    "SqlFileError",
    "SubmissionError",
    "ExecutionFailedError",
    "ExecutionCancelledError",
    "QueryTimeoutError",
    "StateUnavailableError",
    "CatalogListError",
    "DdlFetchError",
    "ApplyError",
    "AuthenticationError",
]
