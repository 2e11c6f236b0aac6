"""
Tests for dense-position rules.

Tests cover:
1. Append rule and index clamping
2. Moves within and across scopes
3. Renumbering and write minimisation
4. Presentation order across scopes
"""

from datetime import datetime, timezone

import pytest

from notevault.core.ordering import (
    clamp,
    in_scope,
    next_position,
    plan_move,
    presentation_order,
    renumber,
)
from notevault.utils.exceptions import NotFoundError

MOVED_AT = datetime(2026, 6, 1, tzinfo=timezone.utc)


def _ids(notes):
    return [note.id for note in notes]


@pytest.mark.unit
class TestAppendRule:
    """Test next_position."""

    def test_empty_scope(self, make_note):
        """Test the first note of a scope gets position 0."""
        assert next_position([make_note("a", "f1")], None) == 0

    def test_one_past_highest(self, make_note):
        """Test appending after existing notes."""
        notes = [make_note("a", position=0), make_note("b", position=1), make_note("c", position=2)]

        assert next_position(notes, None) == 3

    def test_uses_maximum_not_count(self, make_note):
        """Test a gapped scope appends after its highest position."""
        notes = [make_note("a", position=0), make_note("b", position=5)]

        assert next_position(notes, None) == 6

    def test_other_scopes_ignored(self, make_note):
        """Test positions in other folders don't count."""
        notes = [make_note("a", "f1", position=7), make_note("b", position=0)]

        assert next_position(notes, None) == 1
        assert next_position(notes, "f1") == 8


@pytest.mark.unit
class TestClamp:
    """Test insertion index saturation."""

    @pytest.mark.parametrize(
        "index,length,expected",
        [(0, 3, 0), (2, 3, 2), (3, 3, 3), (1000, 2, 2), (-5, 4, 0), (0, 0, 0)],
    )
    def test_clamp(self, index, length, expected):
        assert clamp(index, length) == expected


@pytest.mark.unit
class TestScopeOrder:
    """Test ordering inside a scope."""

    def test_sorted_by_position(self, make_note):
        notes = [make_note("b", position=1), make_note("a", position=0)]

        assert _ids(in_scope(notes, None)) == ["a", "b"]

    def test_ties_broken_by_most_recent_update(self, make_note):
        """Test equal positions put the most recently updated note first."""
        notes = [
            make_note("old", position=0, minutes=1),
            make_note("new", position=0, minutes=5),
        ]

        assert _ids(in_scope(notes, None)) == ["new", "old"]

    def test_renumber_reports_changes_only(self, make_note):
        """Test renumber returns just the notes it moved."""
        ordered = [make_note("a", position=0), make_note("b", position=4), make_note("c", position=2)]

        changed = renumber(ordered)

        assert _ids(changed) == ["b"]
        assert [note.position for note in ordered] == [0, 1, 2]


@pytest.mark.unit
class TestPlanMove:
    """Test move planning."""

    def test_cross_scope_move(self, make_note, assert_dense):
        """Test moving B from f1 to the head of f2."""
        notes = [
            make_note("A", "f1", 0),
            make_note("B", "f1", 1),
            make_note("C", "f1", 2),
            make_note("X", "f2", 0),
        ]

        plan = plan_move(notes, "B", "f2", 0, MOVED_AT)

        assert _ids(in_scope(notes, "f1")) == ["A", "C"]
        assert _ids(in_scope(notes, "f2")) == ["B", "X"]
        assert {note.id: note.position for note in notes} == {"A": 0, "C": 1, "B": 0, "X": 1}
        assert plan.source_folder_id == "f1"
        assert plan.note.folder_id == "f2"
        assert sorted(_ids(plan.writes)) == ["B", "C", "X"]
        assert_dense(notes)

    def test_move_within_scope(self, make_note):
        """Test moving the first note to the end of its own scope."""
        notes = [make_note("A", None, 0), make_note("B", None, 1), make_note("C", None, 2)]

        plan = plan_move(notes, "A", None, 2, MOVED_AT)

        assert _ids(in_scope(notes, None)) == ["B", "C", "A"]
        assert sorted(_ids(plan.writes)) == ["A", "B", "C"]

    def test_same_position_writes_only_moved_note(self, make_note):
        """Test a no-op move still refreshes the moved note alone."""
        notes = [make_note("A", None, 0), make_note("B", None, 1)]

        plan = plan_move(notes, "B", None, 1, MOVED_AT)

        assert _ids(plan.writes) == ["B"]
        assert plan.note.updated_at == MOVED_AT

    def test_position_clamped_high(self, make_note):
        """Test an index past the end appends."""
        notes = [make_note("A", "f1", 0), make_note("B", "f1", 1), make_note("X", None, 0)]

        plan_move(notes, "X", "f1", 1000, MOVED_AT)

        assert _ids(in_scope(notes, "f1")) == ["A", "B", "X"]
        assert [note.position for note in in_scope(notes, "f1")] == [0, 1, 2]

    def test_position_clamped_low(self, make_note):
        """Test a negative index inserts at the head."""
        notes = [make_note("A", "f1", 0), make_note("X", None, 0)]

        plan_move(notes, "X", "f1", -5, MOVED_AT)

        assert _ids(in_scope(notes, "f1")) == ["X", "A"]

    def test_move_into_empty_scope(self, make_note, assert_dense):
        """Test moving into a folder with no notes."""
        notes = [make_note("A", None, 0), make_note("B", None, 1)]

        plan_move(notes, "A", "empty", 3, MOVED_AT)

        assert _ids(in_scope(notes, "empty")) == ["A"]
        assert _ids(in_scope(notes, None)) == ["B"]
        assert_dense(notes)

    def test_unrelated_scopes_untouched(self, make_note):
        """Test only the source and target scopes are renumbered."""
        notes = [
            make_note("A", "f1", 0),
            make_note("X", "f2", 0),
            make_note("G1", "g", 3),
            make_note("G2", "g", 9),
        ]

        plan = plan_move(notes, "A", "f2", 1, MOVED_AT)

        assert "G1" not in _ids(plan.writes)
        assert [note.position for note in in_scope(notes, "g")] == [3, 9]

    def test_moved_timestamp_recorded(self, make_note):
        notes = [make_note("A", None, 0)]

        plan = plan_move(notes, "A", "f1", 0, MOVED_AT)

        assert plan.note.updated_at == MOVED_AT

    def test_missing_note(self, make_note):
        """Test moving an unknown note raises NotFoundError."""
        with pytest.raises(NotFoundError):
            plan_move([make_note("A")], "nope", None, 0, MOVED_AT)


@pytest.mark.unit
class TestPresentationOrder:
    """Test grouping notes across scopes."""

    def test_root_first_then_folder_order(self, make_note):
        """Test root scope leads and folders follow the given order."""
        notes = [
            make_note("f2-a", "f2", 0),
            make_note("root-b", None, 1),
            make_note("f1-a", "f1", 0),
            make_note("root-a", None, 0),
        ]

        ordered = presentation_order(notes, ["f2", "f1"])

        assert _ids(ordered) == ["root-a", "root-b", "f2-a", "f1-a"]

    def test_dangling_folders_last_by_id(self, make_note):
        """Test notes pointing at unknown folders come last, grouped by id."""
        notes = [
            make_note("z", "zz", 0),
            make_note("y", "yy", 0),
            make_note("k", "known", 0),
        ]

        ordered = presentation_order(notes, ["known"])

        assert _ids(ordered) == ["k", "y", "z"]

    def test_without_scope_order(self, make_note):
        """Test folders sort by id when no order is given."""
        notes = [make_note("b", "f_b", 0), make_note("a", "f_a", 0), make_note("r", None, 0)]

        assert _ids(presentation_order(notes)) == ["r", "a", "b"]
