"""
Ordering engine - persists dense-position changes through the note store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from notevault.core.ordering.positions import in_scope, plan_move, renumber
from notevault.utils.logger import get_logger
from notevault.utils.timestamps import utc_now

if TYPE_CHECKING:
    from notevault.core.note_store.note_store import NoteStore
    from notevault.models.note import Note

logger = get_logger(__name__)


class OrderingEngine:
    """
    Keeps every scope dense across moves and removals.

    Mutations are staged in memory first (see ``plan_move``); only notes
    whose placement changed are written back.
    """

    def __init__(self, note_store: NoteStore):
        self.note_store = note_store

    async def reorder(self, note_id: str, target_folder_id: str | None, new_position: int) -> Note:
        """
        Move a note into a scope at a given index.

        Out-of-range indices saturate to the nearest end. Both the source
        and the target scope are dense afterwards.

        Args:
            note_id: Note to move
            target_folder_id: Destination folder (None for root)
            new_position: Requested index in the destination scope

        Returns:
            The moved note

        Raises:
            NotFoundError: If the note doesn't exist
            StorageError: If a write fails (earlier writes stay applied)
        """
        notes = await self.note_store.load_all()
        plan = plan_move(notes, note_id, target_folder_id, new_position, utc_now())

        for note in plan.writes:
            await self.note_store.save(note)

        logger.bind(
            note_id=note_id,
            source_folder_id=plan.source_folder_id,
            target_folder_id=target_folder_id,
            writes=len(plan.writes),
        ).info(f"Moved note {note_id} to position {plan.note.position}")
        return plan.note

    async def normalize_scope(self, folder_id: str | None) -> list[Note]:
        """
        Re-densify one scope, keeping its current order.

        Args:
            folder_id: Scope to normalize (None for root)

        Returns:
            Notes of the scope in their final order
        """
        scope = in_scope(await self.note_store.load_all(), folder_id)
        changed = renumber(scope)
        for note in changed:
            await self.note_store.save(note)

        if changed:
            logger.debug(f"Renumbered {len(changed)} notes in scope {folder_id or '<root>'}")
        return scope
