"""
Databricks backend: SQL Statement Execution and Unity Catalog listing
"""

from .auth import create_workspace_client
from .catalog import DatabricksCatalog
from .statement_service import DatabricksQueryService, map_statement_state

__all__ = [
    "create_workspace_client",
    "DatabricksCatalog",
    "DatabricksQueryService",
    "map_statement_state",
]
