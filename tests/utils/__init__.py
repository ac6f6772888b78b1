"""Shared test helpers."""

from .cli_helpers import invoke_cli
from .fakes import FakeCatalog, FakeQueryService, ScriptedQuery

__all__ = ["invoke_cli", "FakeCatalog", "FakeQueryService", "ScriptedQuery"]
