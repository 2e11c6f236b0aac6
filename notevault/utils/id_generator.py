"""
ID generation utilities for NoteVault.

Provides consistent ID generation for all entity types:
- Notes: note_xxx
- Folders: folder_xxx
- Graph edges: edge_xxx
"""

from uuid import uuid4


def generate_note_id() -> str:
    """
    Generate unique Note ID.

    Returns:
        ID in format "note_xxx" where xxx is 12 hex characters
    """
    return f"note_{uuid4().hex[:12]}"


def generate_folder_id() -> str:
    """
    Generate unique Folder ID.

    Returns:
        ID in format "folder_xxx" where xxx is 12 hex characters
    """
    return f"folder_{uuid4().hex[:12]}"


def generate_edge_id() -> str:
    """Generate unique graph Edge ID (edge_xxx)."""
    return f"edge_{uuid4().hex[:12]}"
