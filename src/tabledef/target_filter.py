"""
Target filter for selecting tables by ``<database>.<table>`` patterns.

Supports ``*`` wildcards in either segment:

- ``salesdb.customers`` - one table
- ``salesdb.*`` - every table in salesdb
- ``*.customers`` - customers tables across all databases

Matching is case-sensitive. Every character other than ``*`` is literal.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

logger = logging.getLogger(__name__)


def _segment_regex(pattern: str) -> re.Pattern[str]:
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")))


@dataclass(frozen=True)
class TargetPattern:
    """A compiled two-segment pattern"""

    database_pattern: str
    table_pattern: str
    _database_re: re.Pattern[str] = field(init=False, repr=False, compare=False)
    _table_re: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_database_re", _segment_regex(self.database_pattern))
        object.__setattr__(self, "_table_re", _segment_regex(self.table_pattern))

    @classmethod
    def parse(cls, target: str) -> Optional["TargetPattern"]:
        """Parse ``"A.B"``; return None unless there are exactly two segments"""
        parts = target.split(".")
        if len(parts) != 2:
            return None
        return cls(database_pattern=parts[0], table_pattern=parts[1])

    def matches(self, database: str, table: str) -> bool:
        return bool(self._database_re.fullmatch(database) and self._table_re.fullmatch(table))


class TargetFilter:
    """Inclusion predicate over (database, table)

    With no patterns every table is included; otherwise a table is included
    when it matches at least one pattern.
    """

    def __init__(self, patterns: Iterable[TargetPattern] = ()) -> None:
        self.patterns = tuple(patterns)

    def matches(self, database: str, table: str) -> bool:
        if not self.patterns:
            return True
        return any(p.matches(database, table) for p in self.patterns)

    def __call__(self, database: str, table: str) -> bool:
        return self.matches(database, table)

    @property
    def is_empty(self) -> bool:
        return not self.patterns


def compile_targets(targets: Sequence[str]) -> TargetFilter:
    """Compile target strings into a TargetFilter

    Targets without exactly two dot-separated segments are dropped.
    """
    patterns: list[TargetPattern] = []
    for target in targets:
        pattern = TargetPattern.parse(target)
        if pattern is None:
            logger.warning(
                "Ignoring malformed target pattern (expected <database>.<table>): %r", target
            )
            continue
        patterns.append(pattern)
    return TargetFilter(patterns)


def resolve_targets(
    cli_targets: Sequence[str], config_databases: Optional[Sequence[str]]
) -> list[str]:
    """Pick the effective target patterns

    Priority:
    1. ``cli_targets`` when non-empty
    2. one ``<db>.*`` pattern per configured database
    3. no patterns (include everything)
    """
    if cli_targets:
        return list(cli_targets)
    if config_databases is not None:
        return [f"{db}.*" for db in config_databases]
    return []
