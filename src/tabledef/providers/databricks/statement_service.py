"""
Databricks SQL Statement Execution backend

Implements the remote query protocol on top of the Databricks SQL Statement
Execution API. Statements are submitted asynchronously (``wait_timeout="0s"``)
and their results are read back chunk by chunk.
"""

import logging
from typing import Any, Optional

from databricks.sdk import WorkspaceClient
from databricks.sdk.service.sql import StatementState

from tabledef.models import QueryState
from tabledef.query.protocol import ExecutionStatus, ResultPage

logger = logging.getLogger(__name__)

_STATE_MAP = {
    StatementState.PENDING: QueryState.QUEUED,
    StatementState.RUNNING: QueryState.RUNNING,
    StatementState.SUCCEEDED: QueryState.SUCCEEDED,
    StatementState.FAILED: QueryState.FAILED,
    StatementState.CANCELED: QueryState.CANCELLED,
}


def map_statement_state(state: Optional[StatementState]) -> Optional[QueryState]:
    """Map a Databricks statement state onto QueryState

    None stays None; states without a counterpart (e.g. CLOSED) map to UNKNOWN.
    """
    if state is None:
        return None
    return _STATE_MAP.get(state, QueryState.UNKNOWN)


def _rows(data_array: Optional[list[list[Any]]]) -> list[list[str]]:
    if not data_array:
        return []
    return [["" if cell is None else str(cell) for cell in row] for row in data_array]


class DatabricksQueryService:
    """QueryService backed by ``WorkspaceClient.statement_execution``

    Attributes:
        client: Authenticated Databricks WorkspaceClient
        catalog: Default catalog for submitted statements (None uses the warehouse default)
    """

    def __init__(self, client: WorkspaceClient, catalog: Optional[str] = None) -> None:
        self.client = client
        self.catalog = catalog

    def submit(
        self, query: str, workgroup: str, output_location: Optional[str] = None
    ) -> Optional[str]:
        """Submit a statement to the SQL warehouse ``workgroup``"""
        if output_location:
            logger.debug(
                "Ignoring output location %s: statement results are returned inline",
                output_location,
            )
        response = self.client.statement_execution.execute_statement(
            statement=query,
            warehouse_id=workgroup,
            catalog=self.catalog,
            wait_timeout="0s",
        )
        return response.statement_id or None

    def get_status(self, execution_id: str) -> ExecutionStatus:
        response = self.client.statement_execution.get_statement(execution_id)
        if not response or not response.status:
            return ExecutionStatus(state=None)

        status = response.status
        reason = status.error.message if status.error else None
        return ExecutionStatus(state=map_statement_state(status.state), reason=reason)

    def get_result_page(self, execution_id: str, next_token: Optional[str] = None) -> ResultPage:
        """Return one result chunk

        The first page comes from the statement itself; later pages are fetched
        by chunk index, which doubles as the continuation token.
        """
        if next_token is None:
            response = self.client.statement_execution.get_statement(execution_id)
            data = response.result if response else None
        else:
            data = self.client.statement_execution.get_statement_result_chunk_n(
                execution_id, int(next_token)
            )

        if data is None:
            return ResultPage()

        next_chunk = data.next_chunk_index
        return ResultPage(
            rows=_rows(data.data_array),
            next_token=str(next_chunk) if next_chunk is not None else None,
        )
