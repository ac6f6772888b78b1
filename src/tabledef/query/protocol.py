"""
Remote Query Protocol

Defines the contract the Query Execution Client drives: submit a query,
read its status, page through its results. Backends (e.g. Databricks SQL
Statement Execution) implement this protocol.
"""

from dataclasses import dataclass, field
from typing import Optional, Protocol

from tabledef.models import QueryState


@dataclass(frozen=True)
class ExecutionStatus:
    """Status payload of a remote execution.

    ``state`` is None when the service returned no recognizable state.
    """

    state: Optional[QueryState]
    reason: Optional[str] = None


@dataclass(frozen=True)
class ResultPage:
    """One page of result rows plus the continuation token for the next page"""

    rows: list[list[str]] = field(default_factory=list)
    next_token: Optional[str] = None


class QueryService(Protocol):
    """Protocol for an asynchronous, poll-based query submission service"""

    def submit(
        self, query: str, workgroup: str, output_location: Optional[str] = None
    ) -> Optional[str]:
        """Submit a query and return its execution id (None if the service returned none)"""
        ...

    def get_status(self, execution_id: str) -> ExecutionStatus: ...

    def get_result_page(
        self, execution_id: str, next_token: Optional[str] = None
    ) -> ResultPage: ...
