"""
Canvas store - one ``canvas/{noteId}.json`` document per note.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from notevault.core.codec.record_codec import decode_document, encode_document
from notevault.core.storage.base import RecordBackend, record_key
from notevault.models.canvas import CanvasDocument
from notevault.utils.exceptions import MalformedRecordError
from notevault.utils.logger import get_logger

logger = get_logger(__name__)


class CanvasStore:
    """Reads and writes per-note canvas documents."""

    COLLECTION = "canvas"
    SUFFIX = ".json"

    def __init__(self, backend: RecordBackend):
        self.backend = backend

    def _key(self, note_id: str) -> str:
        return record_key(self.COLLECTION, note_id, self.SUFFIX)

    async def get(self, note_id: str) -> CanvasDocument:
        """
        Load a note's canvas.

        Returns:
            The canvas, empty if none is stored or the stored one is malformed
        """
        text = await self.backend.read(self._key(note_id))
        if text is None:
            return CanvasDocument()

        try:
            data = decode_document(text, self._key(note_id))
            return CanvasDocument.model_validate(data)
        except (MalformedRecordError, PydanticValidationError) as e:
            logger.warning(f"Malformed canvas for note {note_id}, returning empty: {e}")
            return CanvasDocument()

    async def save(self, note_id: str, nodes: Any, edges: Any) -> CanvasDocument:
        """Replace a note's canvas wholesale."""
        canvas = CanvasDocument(nodes=nodes, edges=edges)
        await self.backend.write(self._key(note_id), encode_document(canvas.model_dump()))
        logger.debug(f"Saved canvas for note {note_id}")
        return canvas

    async def clear(self, note_id: str) -> CanvasDocument:
        """Reset an existing canvas to empty. A missing canvas stays missing."""
        if not await self.backend.exists(self._key(note_id)):
            return CanvasDocument()
        return await self.save(note_id, [], [])

    async def delete(self, note_id: str) -> bool:
        """Remove a note's canvas document."""
        removed = await self.backend.delete(self._key(note_id))
        if removed:
            logger.info(f"Deleted canvas for note {note_id}")
        return removed

    async def list_note_ids(self) -> list[str]:
        """IDs of notes that have a canvas document."""
        return await self.backend.list_keys(self.COLLECTION, self.SUFFIX)
