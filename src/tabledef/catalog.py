"""
Remote catalog enumeration.

Lists the databases and tables that exist on the warehouse. Backends with a
metadata API implement :class:`RemoteCatalog` directly; :class:`QueryCatalog`
falls back to ``SHOW DATABASES`` / ``SHOW TABLES`` through the query client.
"""

import logging
from typing import Protocol

from tabledef.ddl import quote_identifier
from tabledef.models import QueryResult
from tabledef.query import QueryExecutor

logger = logging.getLogger(__name__)


class RemoteCatalog(Protocol):
    """Protocol for listing remote databases and tables"""

    def list_databases(self) -> list[str]: ...

    def list_tables(self, database_name: str) -> list[str]: ...


def _names_from_result(result: QueryResult, column: int = 0) -> list[str]:
    names: list[str] = []
    for row in result.rows:
        if len(row) > column and row[column]:
            names.append(row[column])
    return names


class QueryCatalog:
    """RemoteCatalog backed by SHOW statements

    ``SHOW TABLES IN <db>`` returns ``(database, tableName, isTemporary)`` on
    Spark-style warehouses and a single ``tab_name`` column elsewhere; the
    table name is taken from the second column when present.
    """

    def __init__(self, executor: QueryExecutor) -> None:
        self.executor = executor

    def list_databases(self) -> list[str]:
        result = self.executor.execute("SHOW DATABASES")
        names = _names_from_result(result)
        logger.debug("Found %d database(s)", len(names))
        return names

    def list_tables(self, database_name: str) -> list[str]:
        result = self.executor.execute(f"SHOW TABLES IN {quote_identifier(database_name)}")
        names: list[str] = []
        for row in result.rows:
            name = row[1] if len(row) >= 2 else (row[0] if row else "")
            if name:
                names.append(name)
        logger.debug("Found %d table(s) in %s", len(names), database_name)
        return names
