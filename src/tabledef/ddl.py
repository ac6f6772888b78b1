"""
DDL text helpers.

Whitespace normalization plus heuristic extraction of columns and storage
properties from CREATE TABLE text. Columns are found by depth-tracked
scanning and properties by regular expressions. Callers outside this module
only use :func:`extract_columns` and :func:`extract_property`.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from tabledef.models import QueryResult, TableKey

PROPERTY_NAMES = ("location", "format", "partitions")

_COLUMN_SECTION_END_RE = re.compile(
    r"(STORED\s+AS|PARTITIONED\s+BY|LOCATION\s+'|ROW\s+FORMAT)", re.IGNORECASE
)

_LOCATION_RE = re.compile(r"LOCATION\s+'([^']+)'", re.IGNORECASE)
_STORED_AS_RE = re.compile(r"STORED\s+AS\s+(\w+)", re.IGNORECASE)
_PARTITIONED_BY_RE = re.compile(r"PARTITIONED\s+BY\s*\(", re.IGNORECASE)


def normalize_sql(sql: str) -> str:
    """Canonicalize whitespace before comparing DDL

    Unifies line endings, strips trailing whitespace from each line and drops
    trailing blank lines. Indentation and line structure are kept.
    """
    text = sql.replace("\r\n", "\n").replace("\r", "\n")
    return "\n".join(line.rstrip() for line in text.split("\n")).rstrip()


def quote_identifier(name: str) -> str:
    return "`" + name.replace("`", "``") + "`"


def show_create_table_query(key: TableKey) -> str:
    return (
        f"SHOW CREATE TABLE {quote_identifier(key.database_name)}"
        f".{quote_identifier(key.table_name)}"
    )


def ddl_from_result(result: QueryResult) -> Optional[str]:
    """Reassemble DDL text from SHOW CREATE TABLE result rows

    Services return either one row holding the whole statement or one row per
    line; in both cases the first cell of each row is joined with newlines.
    """
    lines = [row[0] for row in result.rows if row]
    text = "\n".join(lines)
    return text if text.strip() else None


# --- Quote-aware scanning ---


def _scan(text: str, start: int = 0) -> Iterator[tuple[int, str, bool]]:
    """Yield ``(index, char, quoted)`` for ``text[start:]``

    ``quoted`` is True for every character of a single-quoted literal after
    its opening quote, up to and including the closing quote. Inside a
    literal a backslash escapes the next character and ``''`` is an escaped
    quote, so neither ends the literal.
    """
    in_quote = False
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if not in_quote:
            if ch == "'":
                in_quote = True
            yield i, ch, False
            i += 1
            continue

        if ch == "\\" and i + 1 < n:
            yield i, ch, True
            yield i + 1, text[i + 1], True
            i += 2
            continue
        if ch == "'":
            if i + 1 < n and text[i + 1] == "'":
                yield i, ch, True
                yield i + 1, ch, True
                i += 2
                continue
            in_quote = False
        yield i, ch, True
        i += 1


# --- Columns ---


def _column_section(ddl: str) -> str:
    """Return the text between the first ``(`` and its matching ``)``

    Scanning also stops at a line starting with STORED / PARTITIONED /
    LOCATION / ROW FORMAT, for DDL whose column list is not closed.
    """
    start = ddl.find("(")
    if start < 0:
        return ""

    out: list[str] = []
    depth = 0
    at_line_start = False
    rest = ddl[start + 1 :]
    for i, ch, quoted in _scan(rest):
        if at_line_start and not quoted:
            if _COLUMN_SECTION_END_RE.match(rest[i:].lstrip(" \t")):
                break
            at_line_start = False
        if ch == "\n":
            at_line_start = True
        elif not quoted:
            if ch in "(<":
                depth += 1
            elif ch in ")>":
                if depth == 0 and ch == ")":
                    break
                depth -= 1
        out.append(ch)
    return "".join(out)


def split_column_definitions(text: str) -> list[str]:
    """Split on commas at nesting depth 0, ignoring commas inside quotes"""
    result: list[str] = []
    current: list[str] = []
    depth = 0

    for _, ch, quoted in _scan(text):
        if not quoted:
            if ch in "(<":
                depth += 1
            elif ch in ")>":
                depth -= 1
            elif ch == "," and depth == 0:
                fragment = "".join(current).strip()
                if fragment:
                    result.append(fragment)
                current = []
                continue
        current.append(ch)

    fragment = "".join(current).strip()
    if fragment:
        result.append(fragment)
    return result


def parse_column_definition(fragment: str) -> Optional[tuple[str, str]]:
    """Split ``"name type ..."`` into (name, type); None without a type"""
    parts = fragment.strip().split(None, 1)
    if len(parts) < 2:
        return None
    name = parts[0].strip("`\"")
    typ = " ".join(parts[1].split())
    if not name or not typ:
        return None
    return name, typ


def extract_columns(ddl: str) -> dict[str, str]:
    """Map lower-cased column name to lower-cased type text"""
    columns: dict[str, str] = {}
    for fragment in split_column_definitions(_column_section(ddl)):
        parsed = parse_column_definition(fragment)
        if parsed is not None:
            name, typ = parsed
            columns[name.lower()] = typ.lower()
    return columns


# --- Properties ---


def _balanced_paren_body(text: str, open_index: int) -> Optional[str]:
    """Return the text inside the parenthesis opening at ``open_index``"""
    depth = 0
    for i, ch, quoted in _scan(text, open_index):
        if quoted:
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return text[open_index + 1 : i]
    return None


def extract_location(ddl: str) -> Optional[str]:
    match = _LOCATION_RE.search(ddl)
    return match.group(1) if match else None


def extract_stored_as(ddl: str) -> Optional[str]:
    match = _STORED_AS_RE.search(ddl)
    return match.group(1).upper() if match else None


def extract_partitioned_by(ddl: str) -> Optional[str]:
    match = _PARTITIONED_BY_RE.search(ddl)
    if not match:
        return None
    body = _balanced_paren_body(ddl, match.end() - 1)
    if body is None:
        return None
    return " ".join(body.split()) or None


_PROPERTY_EXTRACTORS = {
    "location": extract_location,
    "format": extract_stored_as,
    "partitions": extract_partitioned_by,
}


def extract_property(ddl: str, name: str) -> Optional[str]:
    """Extract ``location``, ``format`` or ``partitions`` from DDL text

    Raises:
        KeyError: For an unknown property name
    """
    return _PROPERTY_EXTRACTORS[name](ddl)
