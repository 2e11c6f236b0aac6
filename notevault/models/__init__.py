"""
Data models for NoteVault.

Core models:
- Note, NoteCreate, NoteUpdate: Rich-text notes and their DTOs
- Folder, FolderUpdate: Folder forest
- FolderNode, FolderTree: Nested hierarchy view
- Edge, RelationshipGraph: Cross-note relationship graph
- CanvasDocument: Per-note diagram
"""

from notevault.models.canvas import CanvasDocument
from notevault.models.folder import Folder, FolderNode, FolderTree, FolderUpdate
from notevault.models.graph import Edge, RelationshipGraph
from notevault.models.note import (
    Note,
    NoteCreate,
    NoteUpdate,
    default_content,
    empty_document,
    paragraph_document,
)

__all__ = [
    # Note models
    "Note",
    "NoteCreate",
    "NoteUpdate",
    "default_content",
    "empty_document",
    "paragraph_document",
    # Folder models
    "Folder",
    "FolderUpdate",
    "FolderNode",
    "FolderTree",
    # Graph models
    "Edge",
    "RelationshipGraph",
    # Canvas models
    "CanvasDocument",
]
