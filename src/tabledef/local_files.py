"""
Local SQL definition files.

Table definitions live one file per table at ``<database>/<table>.sql``
under a base directory.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from tabledef.domain.errors import SqlFileError
from tabledef.models import TableKey

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9_]+$")


@dataclass(frozen=True)
class SqlFile:
    """A local table definition"""

    key: TableKey
    path: Path
    content: str

    @property
    def qualified_name(self) -> str:
        return self.key.qualified_name


def validate_identifier(name: str, kind: str) -> None:
    if not name:
        raise SqlFileError(f"Empty {kind}")
    if not _IDENTIFIER_RE.match(name):
        raise SqlFileError(
            f"Invalid {kind} '{name}': only letters, digits and underscores are allowed"
        )


def key_from_path(path: Path) -> TableKey:
    """Derive (database, table) from ``<database>/<table>.sql``"""
    database_name = path.parent.name
    table_name = path.stem
    validate_identifier(database_name, "database name")
    validate_identifier(table_name, "table name")
    return TableKey(database_name=database_name, table_name=table_name)


def read_sql_file(path: Path) -> SqlFile:
    if not path.is_file():
        raise SqlFileError(f"File does not exist: {path}")
    if path.suffix != ".sql":
        raise SqlFileError(f"File does not have .sql extension: {path}")
    key = key_from_path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SqlFileError(f"Failed to read SQL file {path}: {e}") from e
    return SqlFile(key=key, path=path, content=content)


def find_sql_files(base_path: Path) -> dict[TableKey, SqlFile]:
    """Find every ``<database>/<table>.sql`` directly under ``base_path``

    Files with invalid database/table names are skipped with a warning.

    Raises:
        SqlFileError: If ``base_path`` is missing or not a directory
    """
    if not base_path.exists():
        raise SqlFileError(f"Directory does not exist: {base_path}")
    if not base_path.is_dir():
        raise SqlFileError(f"Path is not a directory: {base_path}")

    sql_files: dict[TableKey, SqlFile] = {}
    for path in sorted(base_path.glob("*/*.sql")):
        if not path.is_file():
            continue
        try:
            sql_file = read_sql_file(path)
        except SqlFileError as e:
            logger.warning("Skipping %s: %s", path, e)
            continue
        sql_files[sql_file.key] = sql_file

    logger.debug("Found %d SQL file(s) under %s", len(sql_files), base_path)
    return sql_files


def sql_file_path(base_path: Path, key: TableKey) -> Path:
    return base_path / key.database_name / f"{key.table_name}.sql"


def write_sql_file(path: Path, content: str) -> None:
    """Write SQL content, creating the database directory if needed"""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if not content.endswith("\n"):
            content += "\n"
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise SqlFileError(f"Failed to write SQL file {path}: {e}") from e
