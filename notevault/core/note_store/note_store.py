"""
Note store - CRUD over individual note records.

Each note lives in its own record ``notes/{id}.md``. There is no index:
every listing re-scans the collection.
"""

import asyncio

from notevault.core.codec.record_codec import decode_note, encode_note
from notevault.core.ordering.positions import in_scope, next_position, presentation_order
from notevault.core.storage.base import RecordBackend, record_key
from notevault.models.note import Note, NoteCreate, NoteUpdate, default_content
from notevault.utils.exceptions import NotFoundError
from notevault.utils.id_generator import generate_note_id
from notevault.utils.logger import get_logger
from notevault.utils.timestamps import utc_now

logger = get_logger(__name__)


class NoteStore:
    """Reads and writes note records through a record backend."""

    COLLECTION = "notes"
    SUFFIX = ".md"

    def __init__(self, backend: RecordBackend):
        """
        Initialize note store.

        Args:
            backend: Record backend holding the ``notes`` collection
        """
        self.backend = backend

    def _key(self, note_id: str) -> str:
        return record_key(self.COLLECTION, note_id, self.SUFFIX)

    # ═══════════════════════════════════════════════════════════
    # READ OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def load_all(self) -> list[Note]:
        """Decode every note record, in record-name order."""
        note_ids = await self.backend.list_keys(self.COLLECTION, self.SUFFIX)
        notes = []
        for note_id in note_ids:
            text = await self.backend.read(self._key(note_id))
            # Removed between listing and reading
            if text is None:
                continue
            notes.append(decode_note(note_id, text))

        logger.debug(f"Scanned {len(notes)} note records")
        return notes

    async def list_notes(self, scope_order: list[str] | None = None) -> list[Note]:
        """
        List all notes in presentation order.

        Args:
            scope_order: Folder ids in display order; root always comes first

        Returns:
            Notes grouped by scope and sorted within each scope
        """
        return presentation_order(await self.load_all(), scope_order)

    async def list_scope(self, folder_id: str | None) -> list[Note]:
        """List the notes of one scope in scope order."""
        return in_scope(await self.load_all(), folder_id)

    async def find(self, note_id: str) -> Note | None:
        """Get a note, or None if it doesn't exist."""
        text = await self.backend.read(self._key(note_id))
        if text is None:
            return None
        return decode_note(note_id, text)

    async def get(self, note_id: str) -> Note:
        """
        Get a note by ID.

        Raises:
            NotFoundError: If no record exists for note_id
        """
        note = await self.find(note_id)
        if note is None:
            raise NotFoundError(f"Note not found: {note_id}", context={"note_id": note_id})
        return note

    # ═══════════════════════════════════════════════════════════
    # WRITE OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def save(self, note: Note) -> None:
        """Persist a note record as-is."""
        await self.backend.write(self._key(note.id), encode_note(note))

    async def create(self, data: NoteCreate) -> Note:
        """
        Create a note at the end of its target scope.

        Args:
            data: Create fields; missing ones take note defaults

        Returns:
            Created note
        """
        notes = await self.load_all()
        now = utc_now()
        content = data.content if data.content is not None else default_content(data.raw_text)

        note = Note(
            id=generate_note_id(),
            title=data.title,
            raw_text=data.raw_text,
            content=content,
            created_at=now,
            updated_at=now,
            sticky=data.sticky,
            ephemeral=data.ephemeral,
            type=data.type,
            color=data.color,
            folder_id=data.folder_id,
            position=next_position(notes, data.folder_id),
        )
        await self.save(note)

        logger.bind(note_id=note.id, folder_id=note.folder_id, position=note.position).info(
            f"Created note: {note.id}"
        )
        return note

    async def update(self, note_id: str, update: NoteUpdate) -> Note:
        """
        Apply a partial update.

        Only supplied fields change; ``updated_at`` is refreshed. Positions
        of other notes are never touched, so a bare ``folder_id`` change can
        leave scopes non-dense (use the ordering engine to move notes).

        Args:
            note_id: Note to update
            update: Supplied fields

        Returns:
            Updated note

        Raises:
            NotFoundError: If the note doesn't exist
        """
        note = await self.get(note_id)
        changes = update.changes()
        changes["updated_at"] = utc_now()

        updated = note.model_copy(update=changes)
        await self.save(updated)

        logger.bind(note_id=note_id, fields=sorted(changes)).info(f"Updated note: {note_id}")
        return updated

    async def delete(self, note_id: str) -> Note | None:
        """
        Remove a note record.

        Returns:
            The removed note, or None if it didn't exist
        """
        note = await self.find(note_id)
        if note is None:
            logger.debug(f"Delete of missing note ignored: {note_id}")
            return None

        await self.backend.delete(self._key(note_id))
        logger.bind(note_id=note_id).info(f"Deleted note: {note_id}")
        return note

    async def delete_all(self) -> int:
        """
        Remove every note record.

        Returns:
            Number of records removed
        """
        note_ids = await self.backend.list_keys(self.COLLECTION, self.SUFFIX)
        removed = await asyncio.gather(*(self.backend.delete(self._key(i)) for i in note_ids))
        count = sum(1 for existed in removed if existed)

        logger.info(f"Deleted all notes ({count})")
        return count
