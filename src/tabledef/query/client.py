"""
Query Execution Client

Submits one query to the remote warehouse, polls its status until a terminal
state is reached, then pages through the result rows.
"""

import logging
import time
from typing import Callable, Optional

from tabledef.domain.errors import (
    ExecutionCancelledError,
    ExecutionFailedError,
    QueryTimeoutError,
    StateUnavailableError,
    SubmissionError,
)
from tabledef.models import QueryResult, QueryState

from .protocol import ExecutionStatus, QueryService

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 2.0
DEFAULT_TIMEOUT_SECONDS = 300


def _preview(query: str, limit: int = 80) -> str:
    flat = " ".join(query.split())
    return flat if len(flat) <= limit else flat[: limit - 3] + "..."


class QueryExecutor:
    """Drive a single query through submit -> wait -> fetch

    The wait loop is a small state machine over ``QueryState``:

    - QUEUED / RUNNING / UNKNOWN: sleep ``poll_interval`` and poll again
    - SUCCEEDED: done
    - FAILED: raise ExecutionFailedError with the service-reported reason
    - CANCELLED: raise ExecutionCancelledError
    - no state at all: raise StateUnavailableError

    ``sleep`` and ``clock`` are injectable so the timeout path can be tested
    without wall-clock delay.

    Attributes:
        service: Remote query service implementation
        workgroup: Execution context (workgroup / warehouse) queries are submitted to
        output_location: Optional result location (None uses the service default)
        timeout_seconds: Maximum time to wait for one execution
    """

    def __init__(
        self,
        service: QueryService,
        workgroup: str,
        output_location: Optional[str] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.service = service
        self.workgroup = workgroup
        self.output_location = output_location
        self.timeout_seconds = timeout_seconds
        self.poll_interval = poll_interval
        self._sleep = sleep
        self._clock = clock

    def execute(self, query: str) -> QueryResult:
        """Submit a query, wait for it to finish and return all result rows

        Raises:
            SubmissionError: If the query could not be submitted
            ExecutionFailedError: If the execution failed remotely
            ExecutionCancelledError: If the execution was cancelled
            QueryTimeoutError: If the execution did not finish in time
        """
        execution_id = self.submit(query)
        self.await_completion(execution_id)
        return self.fetch_results(execution_id)

    def submit(self, query: str) -> str:
        """Submit a query without waiting; return the execution id"""
        try:
            execution_id = self.service.submit(query, self.workgroup, self.output_location)
        except Exception as e:
            raise SubmissionError(
                f"Failed to start query execution ({_preview(query)}): {e}"
            ) from e

        if not execution_id:
            raise SubmissionError(f"No query execution ID returned for: {_preview(query)}")

        logger.debug("Submitted %s: %s", execution_id, _preview(query))
        return execution_id

    def await_completion(self, execution_id: str, timeout: Optional[float] = None) -> None:
        """Poll until the execution reaches a terminal state

        A timeout only stops the local wait; the remote execution keeps running.
        """
        timeout_seconds = self.timeout_seconds if timeout is None else timeout
        start = self._clock()

        while True:
            if self._clock() - start > timeout_seconds:
                raise QueryTimeoutError(timeout_seconds, execution_id)

            status = self.service.get_status(execution_id)
            state = status.state

            if state is None:
                raise StateUnavailableError(
                    f"Query execution state not available for {execution_id}"
                )
            if state == QueryState.SUCCEEDED:
                logger.debug("Execution %s succeeded", execution_id)
                return
            if state == QueryState.FAILED:
                raise ExecutionFailedError(status.reason or "Unknown error", execution_id)
            if state == QueryState.CANCELLED:
                raise ExecutionCancelledError(execution_id)

            # QUEUED, RUNNING and states the service may add later
            logger.debug("Execution %s is %s", execution_id, state.value)
            self._sleep(self.poll_interval)

    def get_status(self, execution_id: str) -> ExecutionStatus:
        status = self.service.get_status(execution_id)
        if status.state is None:
            raise StateUnavailableError(
                f"Query execution state not available for {execution_id}"
            )
        return status

    def fetch_results(self, execution_id: str) -> QueryResult:
        """Return the rows of an execution, flattened across all result pages

        For an execution that has not succeeded, an empty result tagged with its
        state is returned; FAILED results carry the failure reason.
        """
        status = self.get_status(execution_id)
        state = status.state

        if state != QueryState.SUCCEEDED:
            result = QueryResult(execution_id=execution_id, state=state)
            if state == QueryState.FAILED:
                result.error_message = status.reason
            return result

        rows: list[list[str]] = []
        next_token: Optional[str] = None
        pages = 0
        while True:
            page = self.service.get_result_page(execution_id, next_token)
            rows.extend(page.rows)
            pages += 1
            next_token = page.next_token
            if not next_token:
                break

        logger.debug("Fetched %d rows in %d page(s) for %s", len(rows), pages, execution_id)
        return QueryResult(execution_id=execution_id, state=state, rows=rows)
