"""Folder store and hierarchy view."""

from notevault.core.folder_store.folder_store import FolderStore
from notevault.core.folder_store.tree import build_tree

__all__ = ["FolderStore", "build_tree"]
