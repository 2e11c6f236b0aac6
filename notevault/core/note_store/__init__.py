"""Note record store."""

from notevault.core.note_store.note_store import NoteStore

__all__ = ["NoteStore"]
