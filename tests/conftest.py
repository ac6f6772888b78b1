from pathlib import Path
from typing import Callable

import pytest

from tabledef.query import ParallelQueryExecutor, QueryExecutor
from tests.utils import FakeQueryService


@pytest.fixture
def fake_service() -> FakeQueryService:
    return FakeQueryService()


@pytest.fixture
def sleeps() -> list[float]:
    """Records every poll-interval sleep requested by the executor"""
    return []


@pytest.fixture
def executor(fake_service: FakeQueryService, sleeps: list[float]) -> QueryExecutor:
    return QueryExecutor(fake_service, workgroup="wh-test", sleep=sleeps.append)


@pytest.fixture
def parallel(executor: QueryExecutor) -> ParallelQueryExecutor:
    return ParallelQueryExecutor(executor, max_concurrent=2)


@pytest.fixture
def definitions_dir(tmp_path: Path) -> Path:
    """Empty directory for ``<database>/<table>.sql`` files"""
    base = tmp_path / "definitions"
    base.mkdir()
    return base


@pytest.fixture
def write_sql(definitions_dir: Path) -> Callable[[str, str, str], Path]:
    def _write(database: str, table: str, content: str) -> Path:
        path = definitions_dir / database / f"{table}.sql"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "tabledef.yaml"
    path.write_text('workgroup: "wh-test"\n', encoding="utf-8")
    return path
