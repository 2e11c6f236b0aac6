"""
Base interface for record storage.

A backend maps record keys (relative paths such as ``notes/note_x.md``)
to text. Stores build on it and never touch the filesystem directly.
"""

from abc import ABC, abstractmethod

from notevault.utils.exceptions import ValidationError


def record_key(collection: str, record_id: str, suffix: str) -> str:
    """
    Build the key of a record inside a collection.

    Ids must name a single visible file, so one collection can never
    address a record of another.

    Raises:
        ValidationError: If the id is empty, hidden or contains a path separator
    """
    if not record_id or record_id.startswith(".") or "/" in record_id or "\\" in record_id:
        raise ValidationError(
            f"Invalid record id: {record_id!r}",
            context={"collection": collection, "record_id": record_id},
        )
    return f"{collection}/{record_id}{suffix}"


class RecordBackend(ABC):
    """Abstract base class for record storage implementations."""

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backend (create directories, etc.)."""
        pass

    @abstractmethod
    async def read(self, key: str) -> str | None:
        """
        Read a record.

        Args:
            key: Record key

        Returns:
            Record text or None if the record doesn't exist

        Raises:
            StorageError: If the record exists but cannot be read
        """
        pass

    @abstractmethod
    async def write(self, key: str, text: str) -> None:
        """
        Write a record, replacing any previous content.

        Args:
            key: Record key
            text: Record text

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete a record.

        Args:
            key: Record key

        Returns:
            True if a record was removed, False if it didn't exist
        """
        pass

    @abstractmethod
    async def list_keys(self, collection: str, suffix: str = "") -> list[str]:
        """
        List record names inside a collection.

        Args:
            collection: Collection directory (e.g. "notes")
            suffix: Only names ending with this suffix; it is stripped

        Returns:
            Sorted record names without the suffix
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check whether a record exists."""
        pass
