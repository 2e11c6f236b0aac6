"""
Relationship graph store - one ``graph.json`` document for the whole vault.

Saves overwrite the document wholesale; there is no merge on save.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from notevault.core.codec.record_codec import decode_document, encode_document
from notevault.core.storage.base import RecordBackend
from notevault.models.graph import Edge, RelationshipGraph
from notevault.utils.exceptions import MalformedRecordError
from notevault.utils.logger import get_logger

logger = get_logger(__name__)


class GraphStore:
    """Reads and writes the relationship graph."""

    KEY = "graph.json"

    def __init__(self, backend: RecordBackend):
        self.backend = backend

    async def get(self, strict: bool = False) -> RelationshipGraph:
        """
        Load the graph.

        Args:
            strict: Raise on a malformed document instead of returning an empty graph

        Returns:
            The graph, empty if no document exists

        Raises:
            MalformedRecordError: If strict and the document is malformed
        """
        text = await self.backend.read(self.KEY)
        if text is None:
            return RelationshipGraph()

        try:
            data = decode_document(text, self.KEY)
            try:
                return RelationshipGraph.model_validate(data)
            except PydanticValidationError as e:
                raise MalformedRecordError(
                    f"Invalid graph document: {e}", context={"key": self.KEY}
                ) from e
        except MalformedRecordError as e:
            if strict:
                raise
            logger.warning(f"Malformed {self.KEY}, returning empty graph: {e}")
            return RelationshipGraph()

    async def write(self, graph: RelationshipGraph) -> None:
        await self.backend.write(self.KEY, encode_document(graph.to_document()))

    async def save(
        self, nodes: dict[str, Any], edges: list[Edge | dict[str, Any]]
    ) -> RelationshipGraph:
        """
        Replace the graph with the given nodes and edges.

        Args:
            nodes: Note id to layout/metadata value
            edges: Edges as models or dicts with source, target and optional id/label

        Returns:
            The saved graph
        """
        graph = RelationshipGraph(nodes=nodes, edges=edges)
        await self.write(graph)
        logger.debug(f"Saved graph: {len(graph.nodes)} nodes, {len(graph.edges)} edges")
        return graph

    async def reset(self) -> None:
        """Replace the graph with an empty one."""
        await self.write(RelationshipGraph())
        logger.info("Graph reset")

    async def update_node(self, node_id: str, updates: dict[str, Any]) -> Any:
        """
        Merge values into one node's metadata, creating it if absent.

        A non-mapping value already stored for the node is replaced.

        Returns:
            The node's new metadata
        """
        graph = await self.get(strict=True)
        current = graph.nodes.get(node_id)
        merged = {**current, **updates} if isinstance(current, dict) else dict(updates)
        graph.nodes[node_id] = merged
        await self.write(graph)

        logger.debug(f"Updated graph node: {node_id}")
        return merged
