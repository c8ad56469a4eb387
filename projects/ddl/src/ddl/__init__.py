"""Tolerant extraction of table definitions from MySQL-style DDL dumps."""

from ddl.main import (
    NoTablesFoundError,
    SchemaExtractionError,
    extract_schema,
    load_sample_sql,
    parse_sql,
)
from ddl.types import (
    ColumnDefinition,
    ParsedSchema,
    SkippedBlock,
    SkipReason,
    TableDefinition,
)

__all__ = [
    "ColumnDefinition",
    "NoTablesFoundError",
    "ParsedSchema",
    "SchemaExtractionError",
    "SkipReason",
    "SkippedBlock",
    "TableDefinition",
    "extract_schema",
    "load_sample_sql",
    "parse_sql",
]
