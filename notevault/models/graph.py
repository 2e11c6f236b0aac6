"""Relationship graph models."""

from typing import Any

from pydantic import BaseModel, Field

from notevault.utils.id_generator import generate_edge_id


class Edge(BaseModel):
    """Directed link between two notes."""

    id: str = Field(default_factory=generate_edge_id)
    source: str  # Source note ID
    target: str  # Target note ID
    label: str | None = None

    def touches(self, note_id: str) -> bool:
        return self.source == note_id or self.target == note_id


class RelationshipGraph(BaseModel):
    """
    Process-wide graph of note relationships.

    ``nodes`` maps note IDs to opaque layout/metadata values owned by the
    caller; ``edges`` is kept in insertion order.
    """

    nodes: dict[str, Any] = Field(default_factory=dict)
    edges: list[Edge] = Field(default_factory=list)

    def prune_note(self, note_id: str) -> bool:
        """
        Drop every reference to ``note_id``.

        Returns:
            True if anything was removed
        """
        kept = [edge for edge in self.edges if not edge.touches(note_id)]
        removed = len(kept) != len(self.edges)
        self.edges = kept
        if note_id in self.nodes:
            del self.nodes[note_id]
            removed = True
        return removed

    def to_document(self) -> dict[str, Any]:
        return {
            "nodes": self.nodes,
            "edges": [edge.model_dump(exclude_none=True) for edge in self.edges],
        }
