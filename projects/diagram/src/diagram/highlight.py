"""Selection state and derived highlight flags for diagram tables and edges."""

from __future__ import annotations

from collections import defaultdict
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING, NamedTuple, TypeAlias

if TYPE_CHECKING:
    from collections.abc import Iterable

    from diagram.relationships import Relationship

logger = getLogger(__name__)

Adjacency: TypeAlias = dict[str, frozenset[str]]
Fingerprint: TypeAlias = frozenset[tuple[str, str]]


class TableHighlight(NamedTuple):
    """Highlight state of one table."""

    table_id: str
    selected: bool
    dimmed: bool


class RelationshipHighlight(NamedTuple):
    """Highlight state of one relationship."""

    relationship: Relationship
    emphasized: bool
    dimmed: bool


def topology_fingerprint(relationships: Iterable[Relationship]) -> Fingerprint:
    """Order-independent identity of the edge endpoints, ignoring columns."""
    return frozenset((rel.source, rel.target) for rel in relationships)


def build_adjacency(relationships: Iterable[Relationship]) -> Adjacency:
    """Build the undirected neighbour index of a relationship set."""
    adjacency: defaultdict[str, set[str]] = defaultdict(set)
    for rel in relationships:
        adjacency[rel.source].add(rel.target)
        adjacency[rel.target].add(rel.source)
    return {table_id: frozenset(ids) for table_id, ids in adjacency.items()}


class HighlightEngine:
    """Tracks the selected table and derives which tables and edges are dimmed.

    Without a selection nothing is dimmed. With a selection, tables other
    than the selected one and its neighbours are dimmed, as are edges not
    touching the selected table.
    """

    def __init__(self, relationships: Iterable[Relationship] = ()) -> None:
        self._relationships: list[Relationship] = []
        self._fingerprint: Fingerprint | None = None
        self._adjacency: Adjacency = {}
        self._selected: str | None = None
        self.relationships = relationships

    @property
    def relationships(self) -> list[Relationship]:
        """Relationships currently displayed."""
        return self._relationships

    @relationships.setter
    def relationships(self, relationships: Iterable[Relationship]) -> None:
        self._relationships = list(relationships)
        fingerprint = topology_fingerprint(self._relationships)
        if fingerprint != self._fingerprint:
            self._adjacency = build_adjacency(self._relationships)
            self._fingerprint = fingerprint
            logger.debug("Rebuilt adjacency for %d tables", len(self._adjacency))

    @property
    def adjacency(self) -> MappingProxyType[str, frozenset[str]]:
        """Undirected neighbour index of the current relationships."""
        return MappingProxyType(self._adjacency)

    @property
    def selected(self) -> str | None:
        """Id of the selected table, if any."""
        return self._selected

    def select(self, table_id: str | None) -> None:
        """Select a table, or clear the selection with ``None``."""
        self._selected = table_id

    def clear_selection(self) -> None:
        """Return to the nothing-selected state."""
        self._selected = None

    def neighbours(self, table_id: str) -> frozenset[str]:
        """Tables sharing at least one relationship with the given table."""
        return self._adjacency.get(table_id, frozenset())

    def is_table_selected(self, table_id: str) -> bool:
        """Check whether the table is the selected one."""
        return self._selected is not None and table_id == self._selected

    def is_table_dimmed(self, table_id: str) -> bool:
        """Check whether the table is unrelated to the selection."""
        if self._selected is None:
            return False
        return table_id != self._selected and table_id not in self.neighbours(
            self._selected,
        )

    def is_relationship_connected(self, relationship: Relationship) -> bool:
        """Check whether the relationship touches the selected table."""
        return self._selected is not None and self._selected in (
            relationship.source,
            relationship.target,
        )

    def is_relationship_dimmed(self, relationship: Relationship) -> bool:
        """Check whether the relationship is unrelated to the selection."""
        return self._selected is not None and not self.is_relationship_connected(
            relationship,
        )

    def table_states(self, table_ids: Iterable[str]) -> list[TableHighlight]:
        """Highlight state of every given table."""
        return [
            TableHighlight(
                table_id=table_id,
                selected=self.is_table_selected(table_id),
                dimmed=self.is_table_dimmed(table_id),
            )
            for table_id in table_ids
        ]

    def relationship_states(self) -> list[RelationshipHighlight]:
        """Highlight state of every current relationship."""
        return [
            RelationshipHighlight(
                relationship=rel,
                emphasized=self.is_relationship_connected(rel),
                dimmed=self.is_relationship_dimmed(rel),
            )
            for rel in self._relationships
        ]
