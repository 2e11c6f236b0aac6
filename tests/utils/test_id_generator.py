"""
Tests for ID generation utilities.

Tests cover:
1. Note ID generation
2. Folder ID generation
3. Edge ID generation
4. Uniqueness guarantees
"""

import pytest

from notevault.utils import generate_edge_id, generate_folder_id, generate_note_id


class TestGenerateNoteId:
    """Tests for Note ID generation."""

    def test_format(self):
        """Test Note ID format: note_xxx (12 hex chars)."""
        note_id = generate_note_id()

        assert note_id.startswith("note_")
        assert len(note_id) == 17  # "note_" (5) + 12 hex chars
        assert note_id[5:].isalnum()

    def test_uniqueness(self):
        """Test that generated Note IDs are unique."""
        ids = [generate_note_id() for _ in range(1000)]
        assert len(ids) == len(set(ids))


class TestGenerateFolderId:
    """Tests for Folder ID generation."""

    def test_format(self):
        """Test Folder ID format: folder_xxx (12 hex chars)."""
        folder_id = generate_folder_id()

        assert folder_id.startswith("folder_")
        assert len(folder_id) == 19  # "folder_" (7) + 12 hex chars

    def test_uniqueness(self):
        ids = [generate_folder_id() for _ in range(1000)]
        assert len(ids) == len(set(ids))


class TestGenerateEdgeId:
    """Tests for graph Edge ID generation."""

    def test_format(self):
        edge_id = generate_edge_id()

        assert edge_id.startswith("edge_")
        assert len(edge_id) == 17


class TestIdUniquenessAcrossTypes:
    """Test that IDs never collide across entity types."""

    @pytest.mark.parametrize(
        "generator,prefix",
        [
            (generate_note_id, "note_"),
            (generate_folder_id, "folder_"),
            (generate_edge_id, "edge_"),
        ],
    )
    def test_prefix_identifies_type(self, generator, prefix):
        assert all(generator().startswith(prefix) for _ in range(50))

    def test_ids_are_safe_record_names(self):
        """Test IDs can be used directly as file names."""
        for generator in (generate_note_id, generate_folder_id, generate_edge_id):
            value = generator()
            assert "/" not in value
            assert not value.startswith(".")
