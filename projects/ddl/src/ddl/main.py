"""Main module for turning DDL dumps into table definitions."""

from logging import getLogger
from pathlib import Path

from ddl.blocks import extract_blocks, table_comment
from ddl.columns import parse_columns, resolve_primary_key
from ddl.types import ParsedSchema, SkippedBlock, TableBlock, TableDefinition

logger = getLogger(__name__)

SAMPLE_FILE = Path(__file__).parent / "samples" / "cif_dump.sql"

NO_TABLES_MESSAGE = "No tables found in the provided SQL."
PARSE_FAILED_MESSAGE = "Failed to parse SQL. Please check the syntax."


class SchemaExtractionError(Exception):
    """Raised when a dump cannot be turned into a usable schema."""


class NoTablesFoundError(SchemaExtractionError):
    """Raised when a dump contains no recognisable table definitions."""


def build_table(block: TableBlock) -> TableDefinition:
    """Assemble a table definition from a located block."""
    primary_keys = resolve_primary_key(block.body)
    columns = parse_columns(block.body, primary_keys)
    logger.debug(
        "Parsed table %s: %d columns, primary key %s",
        block.name,
        len(columns),
        sorted(primary_keys),
    )
    return TableDefinition(
        id=block.name,
        name=block.name,
        comment=table_comment(block.trailing),
        columns=tuple(columns),
    )


def parse_sql(sql: str) -> ParsedSchema:
    """Extract every table of a dump, collecting diagnostics for dropped blocks."""
    tables: list[TableDefinition] = []
    skipped: list[SkippedBlock] = []

    for block in extract_blocks(sql):
        if isinstance(block, SkippedBlock):
            skipped.append(block)
        else:
            tables.append(build_table(block))

    return ParsedSchema(tables=tuple(tables), skipped=tuple(skipped))


def extract_schema(sql: str) -> ParsedSchema:
    """Parse a dump, reporting an empty or failed extraction as an error.

    Raises:
        NoTablesFoundError: If no table survives extraction
        SchemaExtractionError: If extraction fails unexpectedly

    """
    try:
        schema = parse_sql(sql)
    except Exception as err:
        raise SchemaExtractionError(PARSE_FAILED_MESSAGE) from err

    if not schema.tables:
        raise NoTablesFoundError(NO_TABLES_MESSAGE)
    return schema


def load_sample_sql() -> str:
    """Load the bundled sample dump."""
    return SAMPLE_FILE.read_text(encoding="utf-8")
