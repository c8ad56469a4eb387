"""Interactive diagram state for one loaded dump."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from ddl import ParsedSchema, SchemaExtractionError, extract_schema

from diagram.highlight import HighlightEngine
from diagram.main import schema_to_diagram
from diagram.relationships import infer_relationships

if TYPE_CHECKING:
    from diagram.relationships import KeyOwnershipPolicy, Relationship
    from diagram.schema_types import DiagramSchema

logger = getLogger(__name__)


class DiagramSession:
    """Owns the displayed schema, its relationships and the selection.

    A successful load replaces all of them together and clears the
    selection. A failed load records the error and keeps the previous
    schema displayed.
    """

    def __init__(self, policy: KeyOwnershipPolicy | None = None) -> None:
        self.policy = policy
        self.schema = ParsedSchema()
        self.highlight = HighlightEngine()
        self.error: str | None = None

    @property
    def relationships(self) -> list[Relationship]:
        """Relationships inferred for the displayed schema."""
        return self.highlight.relationships

    def load(self, sql: str) -> bool:
        """Parse a dump and display it, returning whether it succeeded."""
        try:
            schema = extract_schema(sql)
            relationships = infer_relationships(schema.tables, self.policy)
        except (SchemaExtractionError, ValueError) as err:
            logger.warning("Keeping previous schema: %s", err)
            self.error = str(err)
            return False

        self.schema = schema
        self.highlight.relationships = relationships
        self.highlight.clear_selection()
        self.error = None
        return True

    def select(self, table_id: str | None) -> None:
        """Select a table, or clear the selection with ``None``."""
        self.highlight.select(table_id)

    def clear_selection(self) -> None:
        """Clear the selection, as when clicking the empty canvas."""
        self.highlight.clear_selection()

    def document(self, name: str = "schema") -> DiagramSchema:
        """Diagram document for the displayed schema and selection."""
        return schema_to_diagram(
            self.schema.tables,
            self.relationships,
            self.highlight,
            name=name,
        )
