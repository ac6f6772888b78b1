"""
Bounded Parallel Executor

Runs many independent query executions with at most ``max_concurrent``
in flight at once. Output order always matches input order.

A failure in one task never cancels its siblings. All tasks run to
completion before results are handed back.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, TypeVar

from tabledef.models import QueryResult

from .client import QueryExecutor

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT_QUERIES = 5

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class QueryOutcome:
    """Outcome of one task: exactly one of ``result`` / ``error`` is set"""

    query: str
    result: Optional[QueryResult] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> QueryResult:
        if self.error is not None:
            raise self.error
        assert self.result is not None
        return self.result


def raise_first_error(outcomes: Sequence[QueryOutcome]) -> list[QueryResult]:
    """Return all results, or raise the first error in input order"""
    return [outcome.unwrap() for outcome in outcomes]


class ParallelQueryExecutor:
    """Fan out queries over a QueryExecutor with fixed admission control

    Attributes:
        executor: Underlying single-query executor
        max_concurrent: Number of executions allowed in flight at once
    """

    def __init__(
        self, executor: QueryExecutor, max_concurrent: int = DEFAULT_MAX_CONCURRENT_QUERIES
    ) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self.executor = executor
        self.max_concurrent = max_concurrent
        self._slots = threading.BoundedSemaphore(max_concurrent)

    def execute_all(self, queries: Sequence[str]) -> list[QueryOutcome]:
        """Execute every query; return one outcome per query, in input order"""
        raw = self.run_all(list(queries), self.executor.execute)
        outcomes = [
            QueryOutcome(query=q, error=value)
            if isinstance(value, Exception)
            else QueryOutcome(query=q, result=value)
            for q, value in zip(queries, raw)
        ]
        failed = sum(1 for o in outcomes if not o.ok)
        logger.debug("Executed %d queries (%d failed)", len(outcomes), failed)
        return outcomes

    def submit_all(self, queries: Sequence[str]) -> list[str]:
        """Submit every query without waiting; return execution ids in input order

        Raises:
            The first submission error in input order, after all submissions finished
        """
        raw = self.run_all(list(queries), self.executor.submit)
        return _first_error_or_values(raw)

    def await_all(self, execution_ids: Sequence[str]) -> None:
        """Wait for every execution to reach a terminal state

        Raises:
            The first wait error in input order, after all waits finished
        """
        raw = self.run_all(list(execution_ids), self.executor.await_completion)
        _first_error_or_values(raw)

    def run_all(self, items: Sequence[T], fn: Callable[[T], R]) -> list[R | Exception]:
        """Run ``fn`` over ``items`` under the admission slots

        Returns one entry per item in input order: the return value, or the
        exception ``fn`` raised for that item.
        """
        items = list(items)
        results: list[R | Exception] = [None] * len(items)  # type: ignore[list-item]
        if not items:
            return results

        def _task(index: int, item: T) -> None:
            with self._slots:
                try:
                    results[index] = fn(item)
                except Exception as e:
                    logger.debug("Task %d failed: %s", index, e)
                    results[index] = e

        workers = min(self.max_concurrent, len(items))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="tabledef-query") as pool:
            futures = [pool.submit(_task, i, item) for i, item in enumerate(items)]
            for future in futures:
                future.result()

        return results


def _first_error_or_values(values: list[R | Exception]) -> list[R]:
    for value in values:
        if isinstance(value, Exception):
            raise value
    return values  # type: ignore[return-value]
