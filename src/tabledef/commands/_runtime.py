"""
Wiring shared by plan, apply and export: configuration to executors,
catalog and differ.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from tabledef.catalog import QueryCatalog, RemoteCatalog
from tabledef.config import Config
from tabledef.differ import Differ
from tabledef.providers.databricks import (
    DatabricksCatalog,
    DatabricksQueryService,
    create_workspace_client,
)
from tabledef.query import ParallelQueryExecutor, QueryExecutor, QueryService

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    """Collaborators for one command invocation"""

    executor: QueryExecutor
    parallel: ParallelQueryExecutor
    catalog: RemoteCatalog
    differ: Differ


def build_runtime(
    config: Config,
    service: Optional[QueryService] = None,
    catalog: Optional[RemoteCatalog] = None,
) -> Runtime:
    """Build the runtime for ``config``

    Without an explicit ``service`` a Databricks client is created from the
    configured profile. Catalog listing uses Unity Catalog metadata when a
    catalog is configured and SHOW statements otherwise.

    Raises:
        AuthenticationError: If the Databricks client cannot authenticate
    """
    client = None
    if service is None:
        client = create_workspace_client(config.profile)
        service = DatabricksQueryService(client, catalog=config.catalog)

    executor = QueryExecutor(
        service,
        workgroup=config.workgroup,
        output_location=config.output_location,
        timeout_seconds=config.query_timeout_seconds,
    )
    parallel = ParallelQueryExecutor(executor, max_concurrent=config.max_concurrent_queries)

    if catalog is None:
        if client is not None and config.catalog:
            catalog = DatabricksCatalog(client, config.catalog)
        else:
            catalog = QueryCatalog(executor)
    logger.debug("Using %s for catalog listing", type(catalog).__name__)

    return Runtime(
        executor=executor,
        parallel=parallel,
        catalog=catalog,
        differ=Differ(catalog, parallel),
    )
