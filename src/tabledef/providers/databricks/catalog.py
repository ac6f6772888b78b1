"""Unity Catalog metadata listing for one catalog."""

import logging

from databricks.sdk import WorkspaceClient

logger = logging.getLogger(__name__)

# Catalog metadata schemas, never diffed
_SYSTEM_SCHEMAS = frozenset({"information_schema"})


class DatabricksCatalog:
    """RemoteCatalog backed by ``schemas.list`` / ``tables.list``

    Databases map to Unity Catalog schemas inside ``catalog_name``.
    """

    def __init__(self, client: WorkspaceClient, catalog_name: str) -> None:
        self.client = client
        self.catalog_name = catalog_name

    def list_databases(self) -> list[str]:
        names = [
            schema.name
            for schema in self.client.schemas.list(catalog_name=self.catalog_name)
            if schema.name and schema.name not in _SYSTEM_SCHEMAS
        ]
        logger.debug("Found %d schema(s) in catalog %s", len(names), self.catalog_name)
        return names

    def list_tables(self, database_name: str) -> list[str]:
        names = [
            table.name
            for table in self.client.tables.list(
                catalog_name=self.catalog_name, schema_name=database_name
            )
            if table.name
        ]
        logger.debug("Found %d table(s) in %s.%s", len(names), self.catalog_name, database_name)
        return names
