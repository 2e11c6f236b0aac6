"""Per-note canvas document."""

from typing import Any

from pydantic import BaseModel, Field


class CanvasDocument(BaseModel):
    """Diagram attached to a single note. Nodes and edges are opaque to the store."""

    nodes: Any = Field(default_factory=list)
    edges: Any = Field(default_factory=list)
