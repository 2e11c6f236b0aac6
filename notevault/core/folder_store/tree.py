"""Nested view of folders and notes."""

from notevault.core.ordering.positions import scope_key
from notevault.models.folder import Folder, FolderNode, FolderTree
from notevault.models.note import Note


def _on_cycle(folder: Folder, by_id: dict[str, Folder]) -> bool:
    """Whether walking up from the folder's parent leads back to the folder."""
    seen: set[str] = set()
    current = folder.parent_id
    while current is not None and current not in seen:
        if current == folder.id:
            return True
        seen.add(current)
        ancestor = by_id.get(current)
        current = ancestor.parent_id if ancestor else None
    return False


def build_tree(folders: list[Folder], notes: list[Note]) -> FolderTree:
    """
    Assemble the folder forest with the notes of each folder.

    Folders keep folder-list order among siblings; notes are sorted by
    position. Folders whose parent is missing, folders caught in a parent
    cycle, and notes whose folder is missing are shown at the top level.
    """
    by_id = {folder.id: folder for folder in folders}
    nodes = {folder.id: FolderNode(folder=folder) for folder in folders}

    root_notes: list[Note] = []
    for note in sorted(notes, key=scope_key):
        if note.folder_id is not None and note.folder_id in nodes:
            nodes[note.folder_id].notes.append(note)
        else:
            root_notes.append(note)

    top_level: list[FolderNode] = []
    for folder in folders:
        node = nodes[folder.id]
        parent = nodes.get(folder.parent_id) if folder.parent_id else None
        if parent is not None and not _on_cycle(folder, by_id):
            parent.children.append(node)
        else:
            top_level.append(node)

    return FolderTree(folders=top_level, notes=root_notes)
