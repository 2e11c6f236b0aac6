"""
Note model and its create/update DTOs.

A note is persisted as one self-describing record: a JSON header holding
every field except ``rawText``, followed by ``rawText`` as the body.
Persisted names are camelCase; Python attributes are snake_case.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from notevault.utils.timestamps import ensure_aware, utc_now

DEFAULT_TITLE = "Untitled"
DEFAULT_TYPE = "text"
DEFAULT_COLOR = "#ffffff"


def empty_document() -> dict[str, Any]:
    """Rich-text document with no content."""
    return {"type": "doc", "content": []}


def paragraph_document(text: str) -> dict[str, Any]:
    """Minimal rich-text document wrapping ``text`` in a single paragraph."""
    return {
        "type": "doc",
        "content": [
            {
                "type": "paragraph",
                "content": [{"type": "text", "text": text}],
            }
        ],
    }


def default_content(raw_text: str) -> dict[str, Any]:
    """Content to use when a note carries no stored rich-text document."""
    return paragraph_document(raw_text) if raw_text else empty_document()


class Note(BaseModel):
    """
    A rich-text note.

    ``position`` orders the note inside its scope, the set of notes sharing
    the same ``folder_id`` (``None`` is the root scope).
    """

    model_config = ConfigDict(populate_by_name=True)

    # Core identity
    id: str = Field(..., description="Unique note ID (note_xxx)")
    title: str = Field(default=DEFAULT_TITLE)

    # Content
    raw_text: str = Field(default="", alias="rawText", description="Plain-text body")
    content: Any = Field(default_factory=empty_document, description="Rich-text document tree")

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")

    # Flags
    sticky: bool = False
    ephemeral: bool = True
    archived: bool = False

    # Presentation
    type: str = DEFAULT_TYPE
    color: str = DEFAULT_COLOR

    # Placement
    folder_id: str | None = Field(default=None, alias="folderId")
    position: int = Field(default=0, ge=0)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _timezone_aware(cls, value: datetime) -> datetime:
        return ensure_aware(value)

    def header(self) -> dict[str, Any]:
        """Serialisable header: every persisted field except the body."""
        return self.model_dump(mode="json", by_alias=True, exclude={"raw_text"})


class NoteCreate(BaseModel):
    """Fields accepted when creating a note. Missing fields take note defaults."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = DEFAULT_TITLE
    raw_text: str = Field(default="", alias="rawText")
    content: Any = None
    sticky: bool = False
    ephemeral: bool = True
    type: str = DEFAULT_TYPE
    color: str = DEFAULT_COLOR
    folder_id: str | None = Field(default=None, alias="folderId")


class NoteUpdate(BaseModel):
    """
    Partial note update.

    Only fields explicitly passed are applied. ``folder_id`` distinguishes
    three states: not passed (unchanged), passed as ``None`` (move to the
    root scope) and passed as a string (move to that folder).
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    raw_text: str | None = Field(default=None, alias="rawText")
    content: Any = None
    sticky: bool | None = None
    ephemeral: bool | None = None
    archived: bool | None = None
    type: str | None = None
    color: str | None = None
    folder_id: str | None = Field(default=None, alias="folderId")
    position: int | None = Field(default=None, ge=0)

    def changes(self) -> dict[str, Any]:
        """Supplied fields keyed by attribute name."""
        supplied = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in supplied.items()
            if value is not None or key == "folder_id"
        }
