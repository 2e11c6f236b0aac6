"""Relationship graph store."""

from notevault.core.graph_store.graph_store import GraphStore

__all__ = ["GraphStore"]
