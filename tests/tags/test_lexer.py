"""
Unit Tests for the Gap Tag Lexer

Tests for extract_tags, first_tag and tag_numbers.
"""

from ielts_toolkit.core.models import TagDialect
from ielts_toolkit.tags.lexer import extract_tags, first_tag, iter_tag_matches, tag_numbers


class TestExtractTags:
    """Tests for extract_tags."""

    def test_extract_when_mixed_dialects_then_first_occurrence_order(self):
        """Duplicates are dropped and document order kept."""
        # Arrange
        text = "A [[1]] b [[n2]] c [[1]] [f3] [H4]"

        # Act
        tags = extract_tags(text)

        # Assert
        assert [t.token for t in tags] == ["[[1]]", "[[n2]]", "[f3]", "[H4]"]
        assert [t.dialect for t in tags] == [
            TagDialect.STANDARD, TagDialect.NOTE, TagDialect.FLOWCHART, TagDialect.HEADING,
        ]

    def test_extract_when_malformed_tags_then_empty(self):
        """Malformed markers are literal text, never errors."""
        assert extract_tags("unterminated [[4] and [[x]] and [n1] and [F2]") == []

    def test_extract_when_none_then_empty(self):
        assert extract_tags(None) == []

    def test_extract_when_dialect_filter_then_only_that_dialect(self):
        tags = extract_tags("[[1]] [[n1]] [[n2]]", TagDialect.NOTE)

        assert [t.number for t in tags] == [1, 2]

    def test_extract_when_attribute_form_then_inline_answer_unescaped(self):
        """The attribute form carries the paragraph's correct heading."""
        # Arrange
        html = '<span class="gap" data-heading-gap="2" data-correct-answer="a &amp; b"></span>'

        # Act
        tags = extract_tags(html)

        # Assert
        assert len(tags) == 1
        assert tags[0].key == (TagDialect.HEADING, 2)
        assert tags[0].inline_answer == "a & b"

    def test_extract_when_attribute_form_without_answer_then_empty_answer(self):
        tags = extract_tags('<span data-heading-gap="5"></span>')

        assert tags[0].inline_answer == ""

    def test_extract_when_bracket_heading_then_no_inline_answer(self):
        tags = extract_tags("[H1] Paragraph")

        assert tags[0].inline_answer is None

    def test_extract_when_bracket_then_attribute_duplicate_then_answer_kept(self):
        """A later attribute form fills in the answer of the first occurrence."""
        # Arrange
        html = '[H3] text <span data-heading-gap="3" data-correct-answer="ii"></span>'

        # Act
        tags = extract_tags(html)

        # Assert
        assert len(tags) == 1
        assert tags[0].raw == "[H3]"
        assert tags[0].inline_answer == "ii"

    def test_extract_when_number_too_long_then_literal_text(self):
        """Digit runs past nine digits are not tags."""
        text = "[[" + "1" * 5000 + "]] [[123456789]] [H1234567890]"

        tags = extract_tags(text)

        assert [t.number for t in tags] == [123456789]

    def test_iter_tag_matches_when_duplicates_then_all_yielded(self):
        assert len(list(iter_tag_matches("[[1]] [[1]]"))) == 2


class TestFirstTag:
    """Tests for first_tag."""

    def test_first_tag_when_prompt_has_tag_then_returned(self):
        tag = first_tag("Gap 2 from table: [[2]] then [[3]]")

        assert tag.number == 2

    def test_first_tag_when_no_tag_then_none(self):
        assert first_tag("Which year?") is None

    def test_first_tag_when_filtered_then_skips_other_dialects(self):
        tag = first_tag("[[1]] [H2]", TagDialect.HEADING)

        assert tag.token == "[H2]"


class TestTagNumbers:
    """Tests for tag_numbers."""

    def test_tag_numbers_when_several_texts_then_union(self):
        numbers = tag_numbers(["[[1]] x", None, "[[3]] [[n7]]"], TagDialect.STANDARD)

        assert numbers == {1, 3}
