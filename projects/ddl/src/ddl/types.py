"""Type definitions for schemas extracted from DDL dumps."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class SkipReason(StrEnum):
    """Why a candidate ``CREATE TABLE`` block produced no table."""

    MISSING_NAME = "missing-name"
    MISSING_BODY = "missing-body"
    UNBALANCED_BODY = "unbalanced-body"


@dataclass(frozen=True)
class ColumnDefinition:
    """One column of one table, in declaration order."""

    name: str
    type: str  # Raw head token plus its argument list, e.g. "decimal(17, 2)"
    comment: str = ""
    is_primary_key: bool = False
    is_nullable: bool = True


@dataclass(frozen=True)
class TableDefinition:
    """One table recovered from a ``CREATE TABLE`` statement."""

    id: str
    name: str
    comment: str = ""
    columns: tuple[ColumnDefinition, ...] = ()

    @property
    def primary_keys(self) -> list[str]:
        """Names of the primary key columns, in declaration order."""
        return [column.name for column in self.columns if column.is_primary_key]


@dataclass(frozen=True)
class TableBlock:
    """Raw pieces of a table statement located by the block extractor."""

    name: str
    body: str
    trailing: str


@dataclass(frozen=True)
class SkippedBlock:
    """Diagnostic for a candidate block that was dropped."""

    reason: SkipReason
    excerpt: str


@dataclass(frozen=True)
class ParsedSchema:
    """Result of one extraction pass over a dump."""

    tables: tuple[TableDefinition, ...] = ()
    skipped: tuple[SkippedBlock, ...] = ()

    @property
    def table_ids(self) -> list[str]:
        """Table ids in schema order."""
        return [table.id for table in self.tables]
