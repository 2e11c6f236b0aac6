"""Folder models: the folder forest, partial updates and the nested tree view."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from notevault.models.note import Note
from notevault.utils.timestamps import ensure_aware, utc_now


class Folder(BaseModel):
    """Folder in the hierarchy. ``parent_id`` of ``None`` means top level."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Unique folder ID (folder_xxx)")
    name: str
    parent_id: str | None = Field(default=None, alias="parentId")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")
    expanded: bool = True  # UI hint only

    @field_validator("created_at", "updated_at")
    @classmethod
    def _timezone_aware(cls, value: datetime) -> datetime:
        return ensure_aware(value)


class FolderUpdate(BaseModel):
    """
    Partial folder update.

    Passing ``parent_id=None`` explicitly moves the folder to the top level;
    leaving it out keeps the current parent.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    parent_id: str | None = Field(default=None, alias="parentId")
    expanded: bool | None = None

    def changes(self) -> dict[str, Any]:
        """Supplied fields keyed by attribute name."""
        supplied = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in supplied.items()
            if value is not None or key == "parent_id"
        }


class FolderNode(BaseModel):
    """A folder with its child folders and the notes it contains."""

    folder: Folder
    children: list[FolderNode] = Field(default_factory=list)
    notes: list[Note] = Field(default_factory=list)


class FolderTree(BaseModel):
    """Nested view of the whole hierarchy."""

    folders: list[FolderNode] = Field(default_factory=list)
    notes: list[Note] = Field(default_factory=list, description="Root-scope notes")
