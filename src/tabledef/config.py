"""
Configuration file loading.

The configuration is a YAML file (``tabledef.yaml`` by default) validated
into a pydantic model.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from tabledef.domain.errors import ConfigError

DEFAULT_CONFIG_PATH = "tabledef.yaml"

DEFAULT_CONFIG_CONTENT = """\
# Workgroup
# Execution context queries are submitted to. For Databricks this is the
# SQL warehouse ID.
workgroup: "primary"

# Output Location (Optional)
# Where query results are stored, for services that write results to
# object storage. If not specified, the service default is used.
# output_location: ""

# Catalog (Optional)
# Default catalog for queries and for listing databases and tables.
# catalog: "main"

# Profile (Optional)
# Authentication profile from ~/.databrickscfg. If not specified,
# environment variables or the DEFAULT profile are used.
# profile: "DEFAULT"

# Query Timeout (Optional)
# Maximum time in seconds to wait for a query to complete
# Default: 300
# query_timeout_seconds: 300

# Max Concurrent Queries (Optional)
# Maximum number of queries to run concurrently
# Default: 5
# max_concurrent_queries: 5

# Databases (Optional)
# List of databases to manage
# If specified and --target is not provided, only these databases are processed
# databases:
#   - salesdb
#   - marketingdb
"""


class Config(BaseModel):
    """tabledef configuration

    Attributes:
        workgroup: Execution context (workgroup / SQL warehouse id)
        output_location: Optional result location; None uses the service default
        catalog: Optional default catalog
        profile: Optional authentication profile
        query_timeout_seconds: Timeout for a single query
        max_concurrent_queries: Concurrency cap for read-side queries
        databases: Databases to manage when no --target is given
    """

    workgroup: str = Field(default="primary", description="Workgroup / warehouse id")
    output_location: Optional[str] = Field(None, description="Query result location")
    catalog: Optional[str] = Field(None, description="Default catalog")
    profile: Optional[str] = Field(None, description="Authentication profile")
    query_timeout_seconds: int = Field(default=300, gt=0, description="Query timeout")
    max_concurrent_queries: int = Field(default=5, gt=0, description="Concurrent queries")
    databases: Optional[list[str]] = Field(None, description="Managed databases")

    @field_validator("workgroup")
    @classmethod
    def _workgroup_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Workgroup cannot be empty")
        return value


def load_config(path: Path) -> Config:
    """Load and validate a YAML configuration file

    Raises:
        ConfigError: If the file is missing, not valid YAML, or fails validation
    """
    if not path.exists():
        raise ConfigError(
            f"Configuration file not found: {path}\nRun 'tabledef init' to create one."
        )
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML configuration {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Invalid configuration {path}: expected a mapping at top level")

    try:
        return Config.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration {path}:\n{e}") from e


def write_default_config(path: Path, force: bool = False) -> None:
    """Write the commented default configuration

    Raises:
        ConfigError: If the file exists and ``force`` is not set
    """
    if path.exists() and not force:
        raise ConfigError(
            f"Configuration file '{path}' already exists\n"
            "Use --force to overwrite the existing file"
        )
    path.write_text(DEFAULT_CONFIG_CONTENT, encoding="utf-8")
