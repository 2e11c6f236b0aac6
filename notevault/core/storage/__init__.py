"""
Record storage backends for NoteVault.

Available backends:
- FileSystemBackend: One file per record under a data directory
- InMemoryBackend: Dictionary-backed, non-persistent
"""

from notevault.core.storage.base import RecordBackend, record_key
from notevault.core.storage.filesystem import FileSystemBackend
from notevault.core.storage.memory import InMemoryBackend

__all__ = [
    "RecordBackend",
    "record_key",
    "FileSystemBackend",
    "InMemoryBackend",
]
