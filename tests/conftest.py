"""
Shared test fixtures.

Every fixture is function-scoped and writes under pytest's ``tmp_path``,
so tests never share a vault.
"""

from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta, timezone

import pytest

from notevault.core.canvas_store import CanvasStore
from notevault.core.folder_store import FolderStore
from notevault.core.graph_store import GraphStore
from notevault.core.note_store import NoteStore
from notevault.core.storage import FileSystemBackend
from notevault.models import Note
from notevault.services import ConsistencyCoordinator

BASE_TIME = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


# Builders


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """Build a note whose updated_at is BASE_TIME + ``minutes``."""

    def _make(
        note_id: str,
        folder_id: str | None = None,
        position: int = 0,
        minutes: int = 0,
        **fields,
    ) -> Note:
        stamp = BASE_TIME + timedelta(minutes=minutes)
        return Note(
            id=note_id,
            folder_id=folder_id,
            position=position,
            created_at=stamp,
            updated_at=stamp,
            **fields,
        )

    return _make


@pytest.fixture
def assert_dense() -> Callable[[list[Note]], None]:
    """Check that every scope holds exactly positions 0..n-1."""

    def _check(notes: list[Note]) -> None:
        for folder_id in {note.folder_id for note in notes}:
            positions = sorted(note.position for note in notes if note.folder_id == folder_id)
            assert positions == list(range(len(positions))), f"scope {folder_id}: {positions}"

    return _check


# Stores


@pytest.fixture
def data_dir(tmp_path):
    """Root data directory of the vault under test."""
    return tmp_path / "vault"


@pytest.fixture
async def backend(data_dir) -> AsyncGenerator[FileSystemBackend, None]:
    """Initialized filesystem backend."""
    backend = FileSystemBackend(data_dir)
    await backend.initialize()
    yield backend


@pytest.fixture
def note_store(backend) -> NoteStore:
    return NoteStore(backend)


@pytest.fixture
def folder_store(backend) -> FolderStore:
    return FolderStore(backend)


@pytest.fixture
def graph_store(backend) -> GraphStore:
    return GraphStore(backend)


@pytest.fixture
def canvas_store(backend) -> CanvasStore:
    return CanvasStore(backend)


@pytest.fixture
async def coordinator(backend) -> AsyncGenerator[ConsistencyCoordinator, None]:
    """Coordinator with default cascade options."""
    coordinator = ConsistencyCoordinator(backend)
    await coordinator.initialize()
    yield coordinator
