"""
Consistency Coordinator - single entry point for every vault operation.

Brings together:
- Note store & ordering engine (dense positions per scope)
- Folder store (forest, reparenting on delete)
- Graph & canvas stores (auxiliary documents keyed by note id)

Operations run one at a time behind a process-wide lock. Multi-record
cascades are not atomic: a failure partway leaves earlier writes applied.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from notevault.config import Config, ConsistencyConfig, SearchConfig
from notevault.core.canvas_store import CanvasStore
from notevault.core.factory import StorageFactory
from notevault.core.folder_store import FolderStore, build_tree
from notevault.core.graph_store import GraphStore
from notevault.core.note_store import NoteStore
from notevault.core.ordering import OrderingEngine, next_position, presentation_order
from notevault.core.storage.base import RecordBackend
from notevault.models.canvas import CanvasDocument
from notevault.models.folder import Folder, FolderTree, FolderUpdate
from notevault.models.graph import Edge, RelationshipGraph
from notevault.models.note import Note, NoteCreate, NoteUpdate
from notevault.utils.exceptions import (
    MalformedRecordError,
    NoteVaultError,
    StorageError,
    StoreError,
)
from notevault.utils.logger import get_logger

logger = get_logger(__name__)


class ConsistencyCoordinator:
    """
    Orchestrates operations that span several stores.

    Cascades:
    - Delete note: close the gap in its scope, prune it from the graph,
      optionally drop its canvas
    - Delete folder: evict its notes to the root scope, hoist its child
      folders to its former parent
    """

    def __init__(
        self,
        backend: RecordBackend,
        consistency: ConsistencyConfig | None = None,
        search: SearchConfig | None = None,
    ):
        """
        Initialize coordinator.

        Args:
            backend: Record backend shared by all stores
            consistency: Cascade options
            search: Search defaults
        """
        self.backend = backend
        self.consistency = consistency or ConsistencyConfig()
        self.search = search or SearchConfig()

        self.note_store = NoteStore(backend)
        self.folder_store = FolderStore(backend)
        self.graph_store = GraphStore(backend)
        self.canvas_store = CanvasStore(backend)
        self.ordering = OrderingEngine(self.note_store)

        self._lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: Config) -> "ConsistencyCoordinator":
        """Build a coordinator and its backend from configuration."""
        return cls(
            backend=StorageFactory.create(config.storage),
            consistency=config.consistency,
            search=config.search,
        )

    async def initialize(self) -> None:
        """Prepare the storage backend."""
        await self.backend.initialize()
        logger.info("Consistency coordinator initialized")

    @asynccontextmanager
    async def _operation(self, name: str, **context: Any) -> AsyncIterator[None]:
        """Serialize an operation and normalize unexpected failures."""
        async with self._lock:
            try:
                yield
            except NoteVaultError:
                raise
            except Exception as e:
                logger.error(f"Unexpected error in {name}: {e}")
                raise StoreError(f"{name} failed: {e}", context=context) from e

    # ═══════════════════════════════════════════════════════════
    # NOTE OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def _scope_order(self) -> list[str]:
        return [folder.id for folder in await self.folder_store.list_folders()]

    async def list_notes(self) -> list[Note]:
        """List notes: root scope first, then folders in folder-list order."""
        async with self._operation("list_notes"):
            return await self.note_store.list_notes(await self._scope_order())

    async def get_note(self, note_id: str) -> Note:
        """
        Raises:
            NotFoundError: If the note doesn't exist
        """
        async with self._operation("get_note", note_id=note_id):
            return await self.note_store.get(note_id)

    async def create_note(self, data: NoteCreate | None = None) -> Note:
        """Create a note appended to the end of its scope."""
        async with self._operation("create_note"):
            return await self.note_store.create(data or NoteCreate())

    async def update_note(self, note_id: str, update: NoteUpdate) -> Note:
        """
        Partial update. Changing ``folder_id`` here does not renumber any
        scope; use ``reorder_note`` to move a note between folders.

        Raises:
            NotFoundError: If the note doesn't exist
        """
        async with self._operation("update_note", note_id=note_id):
            return await self.note_store.update(note_id, update)

    async def reorder_note(
        self, note_id: str, target_folder_id: str | None, new_position: int
    ) -> Note:
        """
        Move a note to ``new_position`` in the target scope (clamped).

        Raises:
            NotFoundError: If the note doesn't exist
        """
        async with self._operation("reorder_note", note_id=note_id):
            return await self.ordering.reorder(note_id, target_folder_id, new_position)

    async def normalize_scope(self, folder_id: str | None) -> list[Note]:
        """Re-densify one scope in its current order."""
        async with self._operation("normalize_scope", folder_id=folder_id):
            return await self.ordering.normalize_scope(folder_id)

    async def _prune_graph(self, note_id: str) -> None:
        try:
            graph = await self.graph_store.get(strict=True)
        except (MalformedRecordError, StorageError) as e:
            logger.warning(f"Graph unreadable, skipping cleanup for note {note_id}: {e}")
            return

        if graph.prune_note(note_id):
            await self.graph_store.write(graph)
            logger.debug(f"Pruned note {note_id} from graph")

    async def _delete_note(self, note_id: str) -> bool:
        removed = await self.note_store.delete(note_id)
        if removed is not None:
            await self.ordering.normalize_scope(removed.folder_id)

        await self._prune_graph(note_id)

        if removed is not None and self.consistency.delete_canvas_with_note:
            await self.canvas_store.delete(note_id)

        return removed is not None

    async def delete_note(self, note_id: str) -> bool:
        """
        Delete a note and run the cleanup cascade. Deleting a missing note
        is a no-op.

        Returns:
            True if a note record existed
        """
        async with self._operation("delete_note", note_id=note_id):
            return await self._delete_note(note_id)

    async def delete_notes(self, note_ids: list[str]) -> int:
        """
        Delete several notes, each with the full cascade.

        Returns:
            Number of notes that existed
        """
        async with self._operation("delete_notes", count=len(note_ids)):
            deleted = 0
            for note_id in note_ids:
                if await self._delete_note(note_id):
                    deleted += 1
            logger.info(f"Batch deleted {deleted} of {len(note_ids)} notes")
            return deleted

    async def delete_all_notes(self) -> int:
        """
        Delete every note and reset the graph.

        Returns:
            Number of notes removed
        """
        async with self._operation("delete_all_notes"):
            count = await self.note_store.delete_all()
            await self.graph_store.reset()

            if self.consistency.delete_canvas_with_note:
                for note_id in await self.canvas_store.list_note_ids():
                    await self.canvas_store.delete(note_id)

            return count

    async def search_notes(
        self,
        query: str,
        limit: int | None = None,
        include_archived: bool | None = None,
    ) -> list[Note]:
        """
        Case-insensitive substring search over title and body.

        Args:
            query: Text to look for
            limit: Maximum results (default from search config)
            include_archived: Also match archived notes (default from search config)

        Returns:
            Matching notes in presentation order
        """
        limit = limit if limit is not None else self.search.limit
        if include_archived is None:
            include_archived = self.search.include_archived
        needle = query.casefold()

        async with self._operation("search_notes"):
            notes = await self.note_store.list_notes(await self._scope_order())

        matches = [
            note
            for note in notes
            if (include_archived or not note.archived)
            and (needle in note.title.casefold() or needle in note.raw_text.casefold())
        ]
        logger.debug(f"Search '{query}' matched {len(matches)} notes")
        return matches[:limit]

    # ═══════════════════════════════════════════════════════════
    # FOLDER OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def list_folders(self) -> list[Folder]:
        async with self._operation("list_folders"):
            return await self.folder_store.list_folders()

    async def get_folder(self, folder_id: str) -> Folder:
        """
        Raises:
            NotFoundError: If the folder doesn't exist
        """
        async with self._operation("get_folder", folder_id=folder_id):
            return await self.folder_store.get(folder_id)

    async def list_folder_notes(self, folder_id: str | None) -> list[Note]:
        """
        Notes of one scope in position order; ``None`` is the root scope.

        Raises:
            NotFoundError: If folder_id names no folder
        """
        async with self._operation("list_folder_notes", folder_id=folder_id):
            if folder_id is not None:
                await self.folder_store.get(folder_id)
            return await self.note_store.list_scope(folder_id)

    async def create_folder(self, name: str, parent_id: str | None = None) -> Folder:
        """
        Raises:
            NotFoundError: If parent_id doesn't exist
        """
        async with self._operation("create_folder"):
            return await self.folder_store.create(name, parent_id)

    async def update_folder(self, folder_id: str, update: FolderUpdate) -> Folder:
        """
        Raises:
            NotFoundError: If the folder or new parent doesn't exist
            CycleDetectedError: If the new parent is the folder or a descendant
        """
        async with self._operation("update_folder", folder_id=folder_id):
            return await self.folder_store.update(folder_id, update)

    async def delete_folder(self, folder_id: str) -> bool:
        """
        Delete a folder.

        Its notes move to the root scope and its child folders move to its
        former parent. A missing folder id is not an error.

        Returns:
            True if the folder existed
        """
        async with self._operation("delete_folder", folder_id=folder_id):
            notes = await self.note_store.load_all()
            evicted = [note for note in presentation_order(notes) if note.folder_id == folder_id]

            normalize = self.consistency.normalize_on_folder_delete
            base = next_position(notes, None)
            for offset, note in enumerate(evicted):
                if normalize:
                    update = NoteUpdate(folder_id=None, position=base + offset)
                else:
                    update = NoteUpdate(folder_id=None)
                await self.note_store.update(note.id, update)

            removed = await self.folder_store.remove(folder_id)

            if normalize and evicted:
                await self.ordering.normalize_scope(None)

            if evicted:
                logger.info(f"Moved {len(evicted)} notes from folder {folder_id} to root")
            return removed is not None

    async def folder_tree(self) -> FolderTree:
        """Nested folders with their notes, plus root notes."""
        async with self._operation("folder_tree"):
            folders = await self.folder_store.list_folders()
            notes = await self.note_store.load_all()
        return build_tree(folders, notes)

    # ═══════════════════════════════════════════════════════════
    # GRAPH & CANVAS OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def get_graph(self) -> RelationshipGraph:
        async with self._operation("get_graph"):
            return await self.graph_store.get()

    async def save_graph(
        self, nodes: dict[str, Any], edges: list[Edge | dict[str, Any]]
    ) -> RelationshipGraph:
        """Overwrite the graph wholesale."""
        async with self._operation("save_graph"):
            return await self.graph_store.save(nodes, edges)

    async def update_graph_node(self, node_id: str, updates: dict[str, Any]) -> Any:
        """Merge values into one node's graph metadata."""
        async with self._operation("update_graph_node", node_id=node_id):
            return await self.graph_store.update_node(node_id, updates)

    async def get_canvas(self, note_id: str) -> CanvasDocument:
        async with self._operation("get_canvas", note_id=note_id):
            return await self.canvas_store.get(note_id)

    async def save_canvas(self, note_id: str, nodes: Any, edges: Any) -> CanvasDocument:
        """Overwrite a note's canvas wholesale."""
        async with self._operation("save_canvas", note_id=note_id):
            return await self.canvas_store.save(note_id, nodes, edges)

    async def clear_canvas(self, note_id: str) -> CanvasDocument:
        async with self._operation("clear_canvas", note_id=note_id):
            return await self.canvas_store.clear(note_id)

    async def list_canvases(self) -> list[str]:
        """IDs of notes that have a canvas document."""
        async with self._operation("list_canvases"):
            return await self.canvas_store.list_note_ids()
