"""
Custom exception hierarchy for NoteVault.

Provides structured error types for better error handling and debugging.
All exceptions inherit from NoteVaultError for easy catching.
"""


class NoteVaultError(Exception):
    """
    Base exception for all NoteVault errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize NoteVault error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class StoreError(NoteVaultError):
    """
    Base exception for store operations.
    Used for errors related to data storage operations.
    """

    pass


class StorageError(StoreError):
    """
    Storage backend errors.
    Raised when reading or writing a persisted record fails.
    """

    pass


class MalformedRecordError(StoreError):
    """
    Malformed record errors.
    Raised by strict reads when a persisted record fails structural decode.
    """

    pass


class NotFoundError(NoteVaultError):
    """
    Resource not found errors.
    Raised when a requested note or folder doesn't exist.
    """

    pass


class CycleDetectedError(NoteVaultError):
    """
    Folder hierarchy errors.
    Raised when a folder would become its own ancestor.
    """

    pass


class ValidationError(NoteVaultError):
    """
    Validation errors.
    Raised when input validation fails or data is invalid.
    """

    pass


class ConfigurationError(NoteVaultError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass
