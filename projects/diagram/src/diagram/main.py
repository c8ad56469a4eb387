"""Main module for ER diagram generation."""

from __future__ import annotations

from math import ceil, sqrt
from typing import TYPE_CHECKING

from diagram.highlight import HighlightEngine
from diagram.schema_types import (
    ColumnSchema,
    DiagramSchema,
    Position,
    RelationshipSchema,
    TableSchema,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ddl import ColumnDefinition, TableDefinition

    from diagram.relationships import Relationship

SPACING_X = 400
SPACING_Y = 400
EXTRA_GRID_COLUMNS = 2


def layout_positions(count: int) -> list[Position]:
    """Place ``count`` nodes row by row on a grid wider than it is tall."""
    grid_columns = ceil(sqrt(count)) + EXTRA_GRID_COLUMNS
    return [
        {
            "x": (index % grid_columns) * SPACING_X,
            "y": (index // grid_columns) * SPACING_Y,
        }
        for index in range(count)
    ]


def _build_column(column: ColumnDefinition) -> ColumnSchema:
    """Build a column schema from an extracted column."""
    return {
        "name": column.name,
        "type": column.type,
        "comment": column.comment,
        "primary_key": column.is_primary_key,
        "nullable": column.is_nullable,
    }


def _build_table(
    table: TableDefinition,
    position: Position,
    highlight: HighlightEngine,
) -> TableSchema:
    """Build a table node from an extracted table."""
    return {
        "id": table.id,
        "name": table.name,
        "comment": table.comment,
        "columns": [_build_column(column) for column in table.columns],
        "primary_keys": table.primary_keys,
        "position": position,
        "selected": highlight.is_table_selected(table.id),
        "dimmed": highlight.is_table_dimmed(table.id),
    }


def _build_relationship(
    relationship: Relationship,
    highlight: HighlightEngine,
) -> RelationshipSchema:
    """Build an edge from an inferred relationship."""
    return {
        "id": relationship.id,
        "source": relationship.source,
        "target": relationship.target,
        "column": relationship.column,
        "emphasized": highlight.is_relationship_connected(relationship),
        "dimmed": highlight.is_relationship_dimmed(relationship),
    }


def schema_to_diagram(
    tables: Sequence[TableDefinition],
    relationships: Sequence[Relationship],
    highlight: HighlightEngine | None = None,
    name: str = "schema",
) -> DiagramSchema:
    """Generate the ER diagram document consumed by renderers."""
    if highlight is None:
        highlight = HighlightEngine(relationships)

    return {
        "name": name,
        "selected": highlight.selected,
        "tables": [
            _build_table(table, position, highlight)
            for table, position in zip(
                tables,
                layout_positions(len(tables)),
                strict=True,
            )
        ],
        "relationships": [_build_relationship(rel, highlight) for rel in relationships],
    }
