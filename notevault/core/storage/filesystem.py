"""
Filesystem record backend.

Every record is one file under the data directory. Writes go through a
same-directory temp file and ``os.replace`` so a record on disk is always
either the old or the new version. Blocking I/O runs in a worker thread.
"""

import asyncio
import os
import uuid
from pathlib import Path

from notevault.core.storage.base import RecordBackend
from notevault.utils.exceptions import StorageError, ValidationError
from notevault.utils.logger import get_logger

logger = get_logger(__name__)


def atomic_write_text(dst_path: Path, text: str) -> None:
    """Atomically write text to dst_path (same-dir temp + fsync + replace)."""
    dst_dir = dst_path.parent
    dst_dir.mkdir(parents=True, exist_ok=True)
    tmp_path = dst_dir / f".{dst_path.name}.tmp-{os.getpid()}-{uuid.uuid4().hex[:8]}"

    try:
        with open(tmp_path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, dst_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


class FileSystemBackend(RecordBackend):
    """Record backend rooted at a local data directory."""

    def __init__(self, data_dir: str | Path):
        """
        Initialize filesystem backend.

        Args:
            data_dir: Root data directory (``~`` is expanded)
        """
        self.root = Path(data_dir).expanduser().resolve()

    def _path(self, key: str) -> Path:
        # Keys are relative and never step back up a level
        path = (self.root / key).resolve()
        if ".." in Path(key).parts or "\\" in key or path == self.root or self.root not in path.parents:
            raise ValidationError(f"Invalid record key: {key!r}", context={"key": key})
        return path

    async def initialize(self) -> None:
        try:
            await asyncio.to_thread(self.root.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                f"Failed to create data directory {self.root}: {e}",
                context={"path": str(self.root)},
            ) from e
        logger.info(f"Filesystem backend ready at {self.root}")

    async def read(self, key: str) -> str | None:
        path = self._path(key)

        def _read() -> str | None:
            try:
                with open(path, encoding="utf-8", newline="") as f:
                    return f.read()
            except FileNotFoundError:
                return None

        try:
            return await asyncio.to_thread(_read)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {key}: {e}")
            raise StorageError(f"Failed to read {key}: {e}", context={"key": key}) from e

    async def write(self, key: str, text: str) -> None:
        path = self._path(key)
        try:
            await asyncio.to_thread(atomic_write_text, path, text)
        except OSError as e:
            logger.error(f"Failed to write {key}: {e}")
            raise StorageError(f"Failed to write {key}: {e}", context={"key": key}) from e

    async def delete(self, key: str) -> bool:
        path = self._path(key)

        def _delete() -> bool:
            try:
                path.unlink()
                return True
            except FileNotFoundError:
                return False

        try:
            return await asyncio.to_thread(_delete)
        except OSError as e:
            logger.error(f"Failed to delete {key}: {e}")
            raise StorageError(f"Failed to delete {key}: {e}", context={"key": key}) from e

    async def list_keys(self, collection: str, suffix: str = "") -> list[str]:
        directory = self._path(collection)

        def _list() -> list[str]:
            if not directory.is_dir():
                return []
            names = []
            for entry in directory.iterdir():
                # Skip in-flight temp files and anything that isn't a record
                if entry.name.startswith(".") or "\\" in entry.name or not entry.is_file():
                    continue
                if suffix and not entry.name.endswith(suffix):
                    continue
                names.append(entry.name[: len(entry.name) - len(suffix)])
            return sorted(names)

        try:
            return await asyncio.to_thread(_list)
        except OSError as e:
            logger.error(f"Failed to list {collection}: {e}")
            raise StorageError(
                f"Failed to list {collection}: {e}", context={"collection": collection}
            ) from e

    async def exists(self, key: str) -> bool:
        path = self._path(key)
        return await asyncio.to_thread(path.is_file)
