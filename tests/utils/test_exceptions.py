"""
Tests for the exception hierarchy.
"""

import pytest

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


class TestExceptionHierarchy:
    """Test exception inheritance and payload."""

    @pytest.mark.parametrize(
        "error_class",
        [
            StoreError,
            StorageError,
            MalformedRecordError,
            NotFoundError,
            CycleDetectedError,
            ValidationError,
            ConfigurationError,
        ],
    )
    def test_all_inherit_base(self, error_class):
        assert issubclass(error_class, NoteVaultError)

    def test_store_errors(self):
        """Test storage and decode failures are store errors."""
        assert issubclass(StorageError, StoreError)
        assert issubclass(MalformedRecordError, StoreError)
        assert not issubclass(NotFoundError, StoreError)

    def test_message_and_context(self):
        error = NotFoundError("Note not found: n1", context={"note_id": "n1"})

        assert str(error) == "Note not found: n1"
        assert error.message == "Note not found: n1"
        assert error.context == {"note_id": "n1"}

    def test_context_defaults_to_empty(self):
        assert StorageError("boom").context == {}
