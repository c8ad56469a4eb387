"""TypedDict schemas for the ER diagram JSON structure."""

from typing import TypedDict


class ColumnSchema(TypedDict):
    """Schema for a table column."""

    name: str
    type: str
    comment: str
    primary_key: bool
    nullable: bool


class Position(TypedDict):
    """Grid position of a table node."""

    x: int
    y: int


class TableSchema(TypedDict):
    """Schema for a table node."""

    id: str
    name: str
    comment: str
    columns: list[ColumnSchema]
    primary_keys: list[str]
    position: Position
    selected: bool
    dimmed: bool


class RelationshipSchema(TypedDict):
    """Schema for an inferred relationship edge."""

    id: str
    source: str  # Referencing table
    target: str  # Table owning the key column
    column: str
    emphasized: bool
    dimmed: bool


class DiagramSchema(TypedDict):
    """Root schema for the complete ER diagram."""

    name: str
    selected: str | None
    tables: list[TableSchema]
    relationships: list[RelationshipSchema]
