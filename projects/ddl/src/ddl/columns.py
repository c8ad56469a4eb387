"""Primary key resolution and column line parsing for table bodies."""

import re
from collections.abc import Collection, Iterable, Iterator

from ddl.types import ColumnDefinition

IDENTIFIER = r"[\"'`]?(\w+)[\"'`]?"
QUOTES = "`\"'"

PRIMARY_KEY = re.compile(r"PRIMARY KEY\s*\(([^)]+)\)", re.IGNORECASE)
COLUMN_NAME = re.compile(r"^" + IDENTIFIER)
COLUMN_TYPE = re.compile(r"^(\w+(?:\([^)]+\))?)")
COLUMN_COMMENT = re.compile(r"COMMENT\s+'([^']+)'", re.IGNORECASE)
NOT_NULL = re.compile(r"NOT NULL", re.IGNORECASE)

# Prefixes as emitted by DDL export tools; matched case-sensitively
STRUCTURAL_PREFIXES = (
    "PRIMARY KEY",
    "KEY",
    "INDEX",
    "UNIQUE",
    "CONSTRAINT",
    "FOREIGN KEY",
    "--",
    "/*",
    "PARTITION",
)
RESERVED_NAMES = frozenset(
    {"KEY", "PRIMARY", "INDEX", "UNIQUE", "CONSTRAINT", "FOREIGN", "CHECK"},
)
UNKNOWN_TYPE = "unknown"


def resolve_primary_key(body: str) -> frozenset[str]:
    """Return the column names listed in the first ``PRIMARY KEY (...)`` clause."""
    match = PRIMARY_KEY.search(body)
    if not match:
        return frozenset()
    names = (token.strip().strip(QUOTES) for token in match[1].split(","))
    return frozenset(name for name in names if name)


def is_structural_line(line: str) -> bool:
    """Check whether a trimmed body line declares a key, constraint or comment."""
    return line.startswith(STRUCTURAL_PREFIXES)


def parse_column_line(
    line: str,
    primary_keys: Collection[str] = (),
) -> ColumnDefinition | None:
    """Parse one body line into a column, or ``None`` if it is not a column."""
    line = line.strip()
    if not line or is_structural_line(line):
        return None

    name_match = COLUMN_NAME.match(line)
    if not name_match:
        return None

    name = name_match[1]
    # Constraint lines whose casing or indentation defeated the prefix check
    if name.upper() in RESERVED_NAMES:
        return None

    remaining = line[name_match.end() :].strip()
    type_match = COLUMN_TYPE.match(remaining)
    comment_match = COLUMN_COMMENT.search(line)

    return ColumnDefinition(
        name=name,
        type=type_match[1] if type_match else UNKNOWN_TYPE,
        comment=comment_match[1] if comment_match else "",
        is_primary_key=name in primary_keys,
        is_nullable=not NOT_NULL.search(line),
    )


def iter_columns(body: str, primary_keys: Iterable[str]) -> Iterator[ColumnDefinition]:
    """Yield the columns declared in a table body, in line order."""
    keys = frozenset(primary_keys)
    for line in body.splitlines():
        if column := parse_column_line(line, keys):
            yield column


def parse_columns(
    body: str,
    primary_keys: Iterable[str] | None = None,
) -> list[ColumnDefinition]:
    """Parse every column of a table body.

    The primary key set is resolved from the body when not given.
    """
    if primary_keys is None:
        primary_keys = resolve_primary_key(body)
    return list(iter_columns(body, primary_keys))
