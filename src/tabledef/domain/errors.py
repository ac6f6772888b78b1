"""Error taxonomy for query execution, diffing and apply."""


class TableDefError(Exception):
    """Base class for all tabledef failures."""


class ConfigError(TableDefError):
    """Raised when the configuration file cannot be loaded or is invalid."""


class SqlFileError(TableDefError):
    """Raised when local SQL definitions cannot be read or written."""


class SubmissionError(TableDefError):
    """Raised when the remote service rejects a query or returns no execution id."""


class ExecutionFailedError(TableDefError):
    """Raised when a query execution reaches the FAILED state."""

    def __init__(self, reason: str, execution_id: str | None = None):
        self.reason = reason
        self.execution_id = execution_id
        super().__init__(f"Query execution failed: {reason}")


class ExecutionCancelledError(TableDefError):
    """Raised when a query execution was cancelled remotely."""

    def __init__(self, execution_id: str | None = None):
        self.execution_id = execution_id
        super().__init__("Query execution was cancelled")


class QueryTimeoutError(TableDefError, TimeoutError):
    """Raised when waiting for an execution exceeds the configured timeout.

    The remote execution is left running.
    """

    def __init__(self, timeout_seconds: float, execution_id: str | None = None):
        self.timeout_seconds = timeout_seconds
        self.execution_id = execution_id
        super().__init__(f"Query execution timed out after {timeout_seconds:g} seconds")


class StateUnavailableError(TableDefError):
    """Raised when a status payload carries no recognizable state."""


class CatalogListError(TableDefError):
    """Raised when databases or tables cannot be listed. Aborts the diff."""


class DdlFetchError(TableDefError):
    """Raised when SHOW CREATE TABLE for a single table fails."""

    def __init__(self, qualified_name: str, cause: Exception | str):
        self.qualified_name = qualified_name
        self.cause = cause
        super().__init__(f"Could not fetch DDL for {qualified_name}: {cause}")


class ApplyError(TableDefError):
    """Raised when a DDL statement fails during apply."""


class AuthenticationError(TableDefError):
    """Raised when the warehouse client cannot authenticate."""
