"""Utility modules for NoteVault."""

from notevault.utils.exceptions import (
    ConfigurationError,
    CycleDetectedError,
    MalformedRecordError,
    NoteVaultError,
    NotFoundError,
    StorageError,
    StoreError,
    ValidationError,
)
from notevault.utils.id_generator import (
    generate_edge_id,
    generate_folder_id,
    generate_note_id,
)
from notevault.utils.logger import get_logger, setup_logging
from notevault.utils.timestamps import ensure_aware, utc_now

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # ID Generators
    "generate_note_id",
    "generate_folder_id",
    "generate_edge_id",
    # Timestamps
    "utc_now",
    "ensure_aware",
    # Exceptions
    "NoteVaultError",
    "StoreError",
    "StorageError",
    "MalformedRecordError",
    "NotFoundError",
    "CycleDetectedError",
    "ValidationError",
    "ConfigurationError",
]
