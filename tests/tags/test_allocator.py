"""
Unit Tests for Gap Number Allocation

Tests for next_tag_number, scope numbers and tag insertion.
"""

from ielts_toolkit.core.models import GroupType, QuestionGroup, Ref, TagDialect
from ielts_toolkit.tags.allocator import (
    allocate_tag,
    group_scope_numbers,
    insert_tag,
    next_tag_number,
    part_heading_numbers,
)


class TestNextTagNumber:
    """Tests for next_tag_number."""

    def test_next_when_empty_scope_then_one(self):
        assert next_tag_number([]) == 1

    def test_next_when_middle_tag_deleted_then_reuses_gap(self):
        """Deleting tag 2 from {1, 2, 3} frees number 2."""
        # Arrange
        numbers = {1, 2, 3}
        numbers.discard(2)

        # Act
        result = next_tag_number(numbers)

        # Assert
        assert result == 2

    def test_next_when_dense_then_max_plus_one(self):
        assert next_tag_number({1, 2, 3}) == 4


class TestScopeNumbers:
    """Tests for per-scope number collection."""

    def test_group_scope_numbers_when_table_then_cells_scanned(self, table_group):
        assert group_scope_numbers(table_group) == {1, 2}

    def test_group_scope_numbers_when_note_group_then_ignores_standard_tags(self):
        group = QuestionGroup(Ref.persisted("g"), GroupType.NOTE_COMPLETION,
                              group_text="[[n1]] [[4]] [[n3]]")

        assert group_scope_numbers(group) == {1, 3}

    def test_group_scope_numbers_when_heading_group_then_empty(self, heading_group):
        assert group_scope_numbers(heading_group) == set()

    def test_part_heading_numbers_when_both_forms_then_union(self, reading_part):
        assert part_heading_numbers(reading_part) == {1, 2}


class TestInsertTag:
    """Tests for allocate_tag/insert_tag."""

    def test_allocate_when_note_scope_then_canonical_token(self):
        tag = allocate_tag(TagDialect.NOTE, {1, 2})

        assert tag.token == "[[n3]]"
        assert tag.raw == "[[n3]]"

    def test_insert_when_cursor_given_then_inserted_at_cursor(self):
        tag = allocate_tag(TagDialect.STANDARD, [])

        assert insert_tag("The  opened", tag, cursor=4) == "The [[1]] opened"

    def test_insert_when_cursor_missing_then_appended(self):
        tag = allocate_tag(TagDialect.FLOWCHART, [])

        assert insert_tag("Heat", tag) == "Heat[f1]"

    def test_insert_when_cursor_out_of_range_then_clamped(self):
        tag = allocate_tag(TagDialect.STANDARD, [])

        assert insert_tag("ab", tag, cursor=99) == "ab[[1]]"
        assert insert_tag(None, tag, cursor=-5) == "[[1]]"
