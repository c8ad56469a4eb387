"""Locate ``CREATE TABLE`` statements and their bodies inside a DDL dump."""

import re
from collections.abc import Iterator
from logging import getLogger

from ddl.types import SkippedBlock, SkipReason, TableBlock

logger = getLogger(__name__)

# Reusable regex components for better readability
IDENTIFIER = r"[\"'`]?(\w+)[\"'`]?"  # Captures identifier inside optional quotes
IF_NOT_EXISTS = r"(?:IF\s+NOT\s+EXISTS\s+)?"
LEADING = r"^\s*"

CREATE_TABLE = re.compile(r"CREATE\s+TABLE", re.IGNORECASE)
TABLE_NAME = re.compile(LEADING + IF_NOT_EXISTS + IDENTIFIER, re.IGNORECASE)
TABLE_COMMENT = re.compile(r"COMMENT\s*=\s*'([^']+)'", re.IGNORECASE)

EXCERPT_LENGTH = 80


def split_blocks(sql: str) -> list[str]:
    """Split a dump into candidate blocks, dropping the preamble."""
    return CREATE_TABLE.split(sql)[1:]


def find_body_end(text: str, open_index: int) -> int:
    """Return the index of the parenthesis closing the one at ``open_index``.

    Nested groups such as ``decimal(17, 2)`` are skipped by keeping a depth
    counter. Returns -1 when the group is never closed.
    """
    depth = 0
    for index in range(open_index, len(text)):
        char = text[index]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
    return -1


def table_comment(trailing: str) -> str:
    """Extract the table-level ``COMMENT = '...'`` from the text after a body."""
    if match := TABLE_COMMENT.search(trailing):
        return match[1]
    return ""


def _skip(reason: SkipReason, block: str) -> SkippedBlock:
    excerpt = " ".join(block.split())[:EXCERPT_LENGTH]
    logger.warning("Skipping CREATE TABLE block (%s): %s", reason, excerpt)
    return SkippedBlock(reason=reason, excerpt=excerpt)


def parse_block(block: str) -> TableBlock | SkippedBlock:
    """Recover the table name, body and trailing text of one candidate block."""
    name_match = TABLE_NAME.match(block)
    if not name_match:
        return _skip(SkipReason.MISSING_NAME, block)

    open_index = block.find("(")
    if open_index == -1:
        return _skip(SkipReason.MISSING_BODY, block)

    close_index = find_body_end(block, open_index)
    if close_index == -1:
        return _skip(SkipReason.UNBALANCED_BODY, block)

    return TableBlock(
        name=name_match[1],
        body=block[open_index + 1 : close_index],
        trailing=block[close_index + 1 :],
    )


def extract_blocks(sql: str) -> Iterator[TableBlock | SkippedBlock]:
    """Yield a table block or a skip diagnostic for every candidate block."""
    for block in split_blocks(sql):
        yield parse_block(block)
