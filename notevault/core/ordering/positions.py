"""
Dense-position rules over an in-memory working set of notes.

A scope is the set of notes sharing one ``folder_id`` (``None`` is the root
scope). Within a scope positions must be exactly ``0..n-1``. Functions here
never perform I/O; they mutate the notes they are given and report which
ones changed so the caller can persist just those.
"""

from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel

from notevault.models.note import Note
from notevault.utils.exceptions import NotFoundError


class MovePlan(BaseModel):
    """Every record mutation a move needs, computed before any write."""

    note: Note
    source_folder_id: str | None
    writes: list[Note]


def scope_key(note: Note) -> tuple[int, float]:
    """Order inside a scope: position ascending, then most recently updated first."""
    return (note.position, -note.updated_at.timestamp())


def in_scope(notes: Iterable[Note], folder_id: str | None) -> list[Note]:
    """Notes of one scope, in scope order."""
    return sorted((note for note in notes if note.folder_id == folder_id), key=scope_key)


def next_position(notes: Iterable[Note], folder_id: str | None) -> int:
    """Append rule: one past the highest position in the scope, or 0 if it is empty."""
    positions = [note.position for note in notes if note.folder_id == folder_id]
    return max(positions) + 1 if positions else 0


def clamp(index: int, length: int) -> int:
    """Saturate an insertion index into ``[0, length]``."""
    return max(0, min(index, length))


def renumber(ordered: list[Note]) -> list[Note]:
    """
    Assign positions ``0..n-1`` in list order.

    Returns:
        Notes whose position actually changed
    """
    changed = []
    for index, note in enumerate(ordered):
        if note.position != index:
            note.position = index
            changed.append(note)
    return changed


def plan_move(
    notes: list[Note],
    note_id: str,
    target_folder_id: str | None,
    new_position: int,
    moved_at: datetime,
) -> MovePlan:
    """
    Compute a move of one note into a scope at a given index.

    The target scope is renumbered with the moved note inserted at the
    clamped index. When the scope changes, the remaining notes of the
    source scope are renumbered as well. No other scope is touched.

    Args:
        notes: Working set of all notes (mutated in place)
        note_id: Note to move
        target_folder_id: Destination scope (None for root)
        new_position: Requested index in the destination scope
        moved_at: Timestamp recorded as the moved note's updated_at

    Returns:
        MovePlan listing every note that must be written

    Raises:
        NotFoundError: If note_id is not in the working set
    """
    moved = next((note for note in notes if note.id == note_id), None)
    if moved is None:
        raise NotFoundError(f"Note not found: {note_id}", context={"note_id": note_id})

    source_folder_id = moved.folder_id
    others = [note for note in notes if note.id != note_id]

    moved.folder_id = target_folder_id
    moved.updated_at = moved_at

    target = in_scope(others, target_folder_id)
    target.insert(clamp(new_position, len(target)), moved)

    writes = {note.id: note for note in renumber(target)}
    writes[moved.id] = moved

    if source_folder_id != target_folder_id:
        for note in renumber(in_scope(others, source_folder_id)):
            writes[note.id] = note

    return MovePlan(note=moved, source_folder_id=source_folder_id, writes=list(writes.values()))


def presentation_order(notes: Iterable[Note], scope_order: Iterable[str] | None = None) -> list[Note]:
    """
    Group notes by scope, sort each group, then concatenate groups.

    Scope order is: root first, then folders in ``scope_order``, then any
    remaining folder ids (e.g. dangling references) sorted by id.

    Args:
        notes: Notes to order
        scope_order: Folder ids in display order (usually folder-list order)

    Returns:
        Notes in presentation order
    """
    groups: dict[str | None, list[Note]] = {}
    for note in notes:
        groups.setdefault(note.folder_id, []).append(note)

    ordered_scopes: list[str | None] = [None]
    for folder_id in scope_order or []:
        if folder_id is not None and folder_id not in ordered_scopes:
            ordered_scopes.append(folder_id)
    known = set(ordered_scopes)
    ordered_scopes.extend(sorted(key for key in groups if key not in known))

    result: list[Note] = []
    for folder_id in ordered_scopes:
        result.extend(sorted(groups.get(folder_id, []), key=scope_key))
    return result
