"""
NoteVault FastAPI Application

A thin REST surface over the consistency coordinator.
Provides endpoints for notes, folders, ordering, the relationship graph and canvases.
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from notevault.config import Config
from notevault.models import (
    CanvasDocument,
    Edge,
    FolderTree,
    FolderUpdate,
    NoteCreate,
    NoteUpdate,
    RelationshipGraph,
)
from notevault.services import ConsistencyCoordinator
from notevault.utils.exceptions import (
    CycleDetectedError,
    NotFoundError,
    NoteVaultError,
    ValidationError,
)
from notevault.utils.logger import get_logger, setup_logging

# Global coordinator instance
coordinator: ConsistencyCoordinator | None = None
logger = get_logger(__name__)


# Pydantic models for API
class ReorderRequest(BaseModel):
    """Request model for moving a note."""

    target_folder_id: str | None = Field(default=None, alias="targetFolderId")
    new_position: int = Field(..., alias="newPosition", description="Index in the target scope")

    model_config = ConfigDict(populate_by_name=True)


class BatchDeleteRequest(BaseModel):
    """Request model for deleting several notes."""

    note_ids: list[str] = Field(..., alias="noteIds", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class CreateFolderRequest(BaseModel):
    """Request model for creating a folder."""

    name: str
    parent_id: str | None = Field(default=None, alias="parentId")

    model_config = ConfigDict(populate_by_name=True)


class SaveGraphRequest(BaseModel):
    """Request model for overwriting the graph."""

    nodes: dict[str, Any] = Field(default_factory=dict)
    edges: list[Edge] = Field(default_factory=list)


class SaveCanvasRequest(BaseModel):
    """Request model for overwriting a canvas."""

    nodes: Any = Field(default_factory=list)
    edges: Any = Field(default_factory=list)


class DeleteResponse(BaseModel):
    """Response model for deletes."""

    deleted: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    coordinator_initialized: bool


def _require_coordinator() -> ConsistencyCoordinator:
    if not coordinator:
        raise HTTPException(status_code=503, detail="Coordinator not initialized")
    return coordinator


def _to_http(e: Exception, action: str) -> HTTPException:
    """Map a NoteVault error to an HTTP error with a single detail string."""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=e.message)
    if isinstance(e, CycleDetectedError):
        return HTTPException(status_code=409, detail=e.message)
    if isinstance(e, ValidationError):
        return HTTPException(status_code=422, detail=e.message)
    logger.error(f"Error {action}: {e}")
    return HTTPException(status_code=500, detail=str(e))


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global coordinator

    # Load configuration from environment or use defaults
    config = Config.from_env()

    # Initialize logging with config
    setup_logging(config.logging)

    logger.info("Starting NoteVault server")
    logger.info(
        f"Configuration: storage={config.storage.backend} ({config.storage.data_dir}), "
        f"delete_canvas_with_note={config.consistency.delete_canvas_with_note}"
    )

    coordinator = ConsistencyCoordinator.from_config(config)
    await coordinator.initialize()

    yield

    logger.info("Shutting down NoteVault server")
    coordinator = None


# Create FastAPI app
app = FastAPI(
    title="NoteVault API",
    description="Local note store with folder ordering, relationship graph and canvases",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy" if coordinator else "initializing",
        coordinator_initialized=coordinator is not None,
    )


# Note endpoints
@app.get("/notes")
async def list_notes():
    """List notes grouped by folder (root first) and ordered by position."""
    store = _require_coordinator()
    try:
        return [_dump(note) for note in await store.list_notes()]
    except NoteVaultError as e:
        raise _to_http(e, "listing notes") from e


@app.post("/notes")
async def create_note(request: NoteCreate):
    """Create a note at the end of its folder."""
    store = _require_coordinator()
    try:
        return _dump(await store.create_note(request))
    except NoteVaultError as e:
        raise _to_http(e, "creating note") from e


@app.get("/notes/search")
async def search_notes(
    query: str,
    limit: int | None = Query(default=None, ge=1, le=100),
    include_archived: bool | None = Query(default=None),
):
    """Case-insensitive substring search over note titles and bodies."""
    store = _require_coordinator()
    try:
        notes = await store.search_notes(query, limit=limit, include_archived=include_archived)
        return [_dump(note) for note in notes]
    except NoteVaultError as e:
        raise _to_http(e, "searching notes") from e


@app.post("/notes/batch-delete", response_model=DeleteResponse)
async def delete_notes(request: BatchDeleteRequest):
    """Delete several notes, each with the full cleanup cascade."""
    store = _require_coordinator()
    try:
        return DeleteResponse(deleted=await store.delete_notes(request.note_ids))
    except NoteVaultError as e:
        raise _to_http(e, "batch deleting notes") from e


@app.delete("/notes", response_model=DeleteResponse)
async def delete_all_notes():
    """Delete every note and reset the relationship graph."""
    store = _require_coordinator()
    try:
        return DeleteResponse(deleted=await store.delete_all_notes())
    except NoteVaultError as e:
        raise _to_http(e, "deleting all notes") from e


@app.get("/notes/{note_id}")
async def get_note(note_id: str):
    """Retrieve a note by ID."""
    store = _require_coordinator()
    try:
        return _dump(await store.get_note(note_id))
    except NoteVaultError as e:
        raise _to_http(e, "getting note") from e


@app.patch("/notes/{note_id}")
async def update_note(note_id: str, request: NoteUpdate):
    """
    Update only the supplied fields of a note.

    Sending ``"folderId": null`` moves the note to the root; leaving the key
    out keeps its folder. Positions are not renumbered.
    """
    store = _require_coordinator()
    try:
        return _dump(await store.update_note(note_id, request))
    except NoteVaultError as e:
        raise _to_http(e, "updating note") from e


@app.delete("/notes/{note_id}", response_model=DeleteResponse)
async def delete_note(note_id: str):
    """Delete a note. Deleting a missing note succeeds with ``deleted == 0``."""
    store = _require_coordinator()
    try:
        return DeleteResponse(deleted=int(await store.delete_note(note_id)))
    except NoteVaultError as e:
        raise _to_http(e, "deleting note") from e


@app.post("/notes/{note_id}/reorder")
async def reorder_note(note_id: str, request: ReorderRequest):
    """Move a note to a position in a folder; out-of-range positions are clamped."""
    store = _require_coordinator()
    try:
        note = await store.reorder_note(note_id, request.target_folder_id, request.new_position)
        return _dump(note)
    except NoteVaultError as e:
        raise _to_http(e, "reordering note") from e


# Folder endpoints
@app.get("/folders")
async def list_folders():
    """List folders in creation order."""
    store = _require_coordinator()
    try:
        return [_dump(folder) for folder in await store.list_folders()]
    except NoteVaultError as e:
        raise _to_http(e, "listing folders") from e


@app.post("/folders")
async def create_folder(request: CreateFolderRequest):
    """Create a folder."""
    store = _require_coordinator()
    try:
        return _dump(await store.create_folder(request.name, request.parent_id))
    except NoteVaultError as e:
        raise _to_http(e, "creating folder") from e


@app.get("/folders/tree", response_model=FolderTree)
async def folder_tree():
    """Nested folder hierarchy with the notes of each folder."""
    store = _require_coordinator()
    try:
        return await store.folder_tree()
    except NoteVaultError as e:
        raise _to_http(e, "building folder tree") from e


@app.get("/folders/{folder_id}")
async def get_folder(folder_id: str):
    """Get a folder by ID."""
    store = _require_coordinator()
    try:
        return _dump(await store.get_folder(folder_id))
    except NoteVaultError as e:
        raise _to_http(e, "getting folder") from e


@app.get("/folders/{folder_id}/notes")
async def list_folder_notes(folder_id: str):
    """Notes directly inside a folder, in position order."""
    store = _require_coordinator()
    try:
        return [_dump(note) for note in await store.list_folder_notes(folder_id)]
    except NoteVaultError as e:
        raise _to_http(e, "listing folder notes") from e


@app.patch("/folders/{folder_id}")
async def update_folder(folder_id: str, request: FolderUpdate):
    """Rename, move or expand/collapse a folder."""
    store = _require_coordinator()
    try:
        return _dump(await store.update_folder(folder_id, request))
    except NoteVaultError as e:
        raise _to_http(e, "updating folder") from e


@app.delete("/folders/{folder_id}", response_model=DeleteResponse)
async def delete_folder(folder_id: str):
    """Delete a folder; its notes move to the root and its children to its parent."""
    store = _require_coordinator()
    try:
        return DeleteResponse(deleted=int(await store.delete_folder(folder_id)))
    except NoteVaultError as e:
        raise _to_http(e, "deleting folder") from e


# Graph endpoints
@app.get("/graph")
async def get_graph():
    """Relationship graph: node metadata and edges."""
    store = _require_coordinator()
    try:
        return (await store.get_graph()).to_document()
    except NoteVaultError as e:
        raise _to_http(e, "getting graph") from e


@app.put("/graph")
async def save_graph(request: SaveGraphRequest):
    """Overwrite the relationship graph."""
    store = _require_coordinator()
    try:
        graph: RelationshipGraph = await store.save_graph(request.nodes, request.edges)
        return graph.to_document()
    except NoteVaultError as e:
        raise _to_http(e, "saving graph") from e


@app.patch("/graph/nodes/{node_id}")
async def update_graph_node(node_id: str, updates: dict[str, Any]):
    """Merge values into one node's graph metadata."""
    store = _require_coordinator()
    try:
        return {"id": node_id, "metadata": await store.update_graph_node(node_id, updates)}
    except NoteVaultError as e:
        raise _to_http(e, "updating graph node") from e


# Canvas endpoints
@app.get("/canvas")
async def list_canvases():
    """IDs of notes that have a canvas."""
    store = _require_coordinator()
    try:
        note_ids = await store.list_canvases()
        return {"canvases": note_ids, "total": len(note_ids)}
    except NoteVaultError as e:
        raise _to_http(e, "listing canvases") from e


@app.get("/canvas/{note_id}", response_model=CanvasDocument)
async def get_canvas(note_id: str):
    """Canvas of a note (empty if none saved)."""
    store = _require_coordinator()
    try:
        return await store.get_canvas(note_id)
    except NoteVaultError as e:
        raise _to_http(e, "getting canvas") from e


@app.put("/canvas/{note_id}", response_model=CanvasDocument)
async def save_canvas(note_id: str, request: SaveCanvasRequest):
    """Overwrite a note's canvas."""
    store = _require_coordinator()
    try:
        return await store.save_canvas(note_id, request.nodes, request.edges)
    except NoteVaultError as e:
        raise _to_http(e, "saving canvas") from e


@app.delete("/canvas/{note_id}", response_model=CanvasDocument)
async def clear_canvas(note_id: str):
    """Reset a note's canvas to empty."""
    store = _require_coordinator()
    try:
        return await store.clear_canvas(note_id)
    except NoteVaultError as e:
        raise _to_http(e, "clearing canvas") from e
