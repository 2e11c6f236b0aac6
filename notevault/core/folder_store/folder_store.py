"""
Folder store - the folder forest, persisted as a single ``folders.json``.
"""

from pydantic import ValidationError as PydanticValidationError

from notevault.core.codec.record_codec import decode_document, encode_document
from notevault.core.storage.base import RecordBackend
from notevault.models.folder import Folder, FolderUpdate
from notevault.utils.exceptions import (
    CycleDetectedError,
    MalformedRecordError,
    NotFoundError,
)
from notevault.utils.id_generator import generate_folder_id
from notevault.utils.logger import get_logger
from notevault.utils.timestamps import utc_now

logger = get_logger(__name__)


class FolderStore:
    """
    CRUD over the folder hierarchy.

    Reads absorb a malformed ``folders.json`` into an empty list. Mutations
    read strictly so that a damaged document is never overwritten.
    """

    KEY = "folders.json"

    def __init__(self, backend: RecordBackend):
        self.backend = backend

    async def _load(self, strict: bool) -> list[Folder]:
        text = await self.backend.read(self.KEY)
        if text is None:
            return []

        try:
            data = decode_document(text, self.KEY)
            if not isinstance(data, list):
                raise MalformedRecordError(
                    f"{self.KEY} must hold a list, got {type(data).__name__}",
                    context={"key": self.KEY},
                )
            try:
                return [Folder.model_validate(item) for item in data]
            except PydanticValidationError as e:
                raise MalformedRecordError(
                    f"Invalid folder entry in {self.KEY}: {e}", context={"key": self.KEY}
                ) from e
        except MalformedRecordError as e:
            if strict:
                raise
            logger.warning(f"Malformed {self.KEY}, treating as empty: {e}")
            return []

    async def _write(self, folders: list[Folder]) -> None:
        data = [folder.model_dump(mode="json", by_alias=True) for folder in folders]
        await self.backend.write(self.KEY, encode_document(data))

    @staticmethod
    def _find(folders: list[Folder], folder_id: str) -> Folder | None:
        return next((folder for folder in folders if folder.id == folder_id), None)

    @classmethod
    def _check_parent(cls, folders: list[Folder], folder_id: str | None, parent_id: str) -> None:
        """
        Validate a prospective parent by walking its ancestor chain.

        Raises:
            NotFoundError: If parent_id doesn't exist
            CycleDetectedError: If parent_id is folder_id or one of its descendants
        """
        by_id = {folder.id: folder for folder in folders}
        if parent_id not in by_id:
            raise NotFoundError(
                f"Parent folder not found: {parent_id}", context={"parent_id": parent_id}
            )

        seen: set[str] = set()
        current: str | None = parent_id
        while current is not None and current not in seen:
            if current == folder_id:
                raise CycleDetectedError(
                    f"Folder {folder_id} cannot be moved under its own descendant {parent_id}",
                    context={"folder_id": folder_id, "parent_id": parent_id},
                )
            seen.add(current)
            ancestor = by_id.get(current)
            current = ancestor.parent_id if ancestor else None

    async def list_folders(self) -> list[Folder]:
        """List folders in stored (creation) order."""
        return await self._load(strict=False)

    async def get(self, folder_id: str) -> Folder:
        """
        Get a folder by ID.

        Raises:
            NotFoundError: If the folder doesn't exist
        """
        folder = self._find(await self._load(strict=False), folder_id)
        if folder is None:
            raise NotFoundError(f"Folder not found: {folder_id}", context={"folder_id": folder_id})
        return folder

    async def create(self, name: str, parent_id: str | None = None) -> Folder:
        """
        Create a folder.

        Args:
            name: Display name
            parent_id: Parent folder (None for top level)

        Returns:
            Created folder

        Raises:
            NotFoundError: If parent_id doesn't exist
        """
        folders = await self._load(strict=True)
        if parent_id is not None:
            self._check_parent(folders, None, parent_id)

        now = utc_now()
        folder = Folder(
            id=generate_folder_id(),
            name=name,
            parent_id=parent_id,
            created_at=now,
            updated_at=now,
            expanded=True,
        )
        folders.append(folder)
        await self._write(folders)

        logger.bind(folder_id=folder.id, parent_id=parent_id).info(f"Created folder: {folder.id}")
        return folder

    async def update(self, folder_id: str, update: FolderUpdate) -> Folder:
        """
        Apply a partial update to name, parent or expanded state.

        Raises:
            NotFoundError: If the folder or the new parent doesn't exist
            CycleDetectedError: If the new parent is the folder or a descendant
        """
        folders = await self._load(strict=True)
        folder = self._find(folders, folder_id)
        if folder is None:
            raise NotFoundError(f"Folder not found: {folder_id}", context={"folder_id": folder_id})

        changes = update.changes()
        new_parent = changes.get("parent_id")
        if new_parent is not None:
            self._check_parent(folders, folder_id, new_parent)
        changes["updated_at"] = utc_now()

        updated = folder.model_copy(update=changes)
        folders = [updated if item.id == folder_id else item for item in folders]
        await self._write(folders)

        logger.bind(folder_id=folder_id, fields=sorted(changes)).info(f"Updated folder: {folder_id}")
        return updated

    async def remove(self, folder_id: str) -> Folder | None:
        """
        Remove a folder and hoist its children to its former parent.

        Notes inside the folder are not handled here.

        Returns:
            The removed folder, or None if it didn't exist
        """
        folders = await self._load(strict=True)
        folder = self._find(folders, folder_id)
        if folder is None:
            logger.debug(f"Delete of missing folder ignored: {folder_id}")
            return None

        remaining = []
        for item in folders:
            if item.id == folder_id:
                continue
            if item.parent_id == folder_id:
                item = item.model_copy(update={"parent_id": folder.parent_id})
            remaining.append(item)
        await self._write(remaining)

        logger.bind(folder_id=folder_id, new_parent_id=folder.parent_id).info(f"Deleted folder: {folder_id}")
        return folder
