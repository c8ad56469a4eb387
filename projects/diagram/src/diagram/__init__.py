"""ER diagram generation and visualization package."""

from diagram.highlight import HighlightEngine, RelationshipHighlight, TableHighlight
from diagram.html_export import diagram_to_html
from diagram.main import layout_positions, schema_to_diagram
from diagram.relationships import (
    KeyOwnershipPolicy,
    PreferredOwner,
    Relationship,
    default_policy,
    infer_relationships,
    load_policy,
)
from diagram.session import DiagramSession

__all__ = [
    "DiagramSession",
    "HighlightEngine",
    "KeyOwnershipPolicy",
    "PreferredOwner",
    "Relationship",
    "RelationshipHighlight",
    "TableHighlight",
    "default_policy",
    "diagram_to_html",
    "infer_relationships",
    "layout_positions",
    "load_policy",
    "schema_to_diagram",
]
