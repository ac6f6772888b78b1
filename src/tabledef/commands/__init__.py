"""
Command implementations for the tabledef CLI
"""

from .apply import ApplySummary, build_apply_statements, execute_apply, run_apply
from .export import ExportSummary, run_export
from .init import run_init
from .plan import run_plan

__all__ = [
    "ApplySummary",
    "build_apply_statements",
    "execute_apply",
    "run_apply",
    "ExportSummary",
    "run_export",
    "run_init",
    "run_plan",
]
