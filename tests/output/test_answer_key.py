"""
Unit tests for answer key output generation.
"""

from unittest.mock import patch

import pytest

from ielts_toolkit.core.models import GroupType, Part, Question, QuestionGroup, Ref
from ielts_toolkit.output.answer_key import (
    A4_HEIGHT,
    LINE_HEIGHT,
    MARGIN,
    answer_key_lines,
    render_answer_key,
)


@pytest.fixture
def writing_part():
    group = QuestionGroup(Ref.persisted("g-w"), GroupType.WRITING_TASK)
    return Part(Ref.persisted("p2"), order_index=2, groups=(group,))


@pytest.fixture
def all_questions(reading_questions, writing_part):
    essay = Question(Ref.persisted("q-w"), writing_part.ref, Ref.persisted("g-w"),
                     prompt="Describe the chart")
    return reading_questions + (essay,)


class TestAnswerKeyLines:
    """Tests for answer_key_lines."""

    def test_lines_when_section_given_then_numbered_alternatives(self, reading_part, reading_questions):
        lines = answer_key_lines([reading_part], reading_questions)

        assert lines == ["1. ii", "2. iii", "3. cat / feline", "4. dog"]

    def test_lines_when_offset_then_numbers_shifted(self, reading_part, reading_questions):
        lines = answer_key_lines([reading_part], reading_questions, offset=10)

        assert lines[0] == "11. ii"

    def test_lines_when_writing_task_then_excluded(self, reading_part, writing_part, all_questions):
        lines = answer_key_lines([reading_part, writing_part], all_questions)

        assert len(lines) == 4

    def test_lines_when_key_blank_then_dash(self):
        part = Part(Ref.persisted("p1"))
        question = Question(Ref.pending("temp-q1"), part.ref, prompt="Gap [[1]]")

        assert answer_key_lines([part], [question]) == ["1. -"]


@patch("reportlab.pdfgen.canvas.Canvas")
def test_render_answer_key_when_lines_then_drawn_and_saved(
    mock_canvas_cls, reading_part, reading_questions, tmp_path
):
    # Arrange
    output_path = tmp_path / "out" / "key.pdf"
    mock_canvas = mock_canvas_cls.return_value

    # Act
    written = render_answer_key([reading_part], reading_questions, output_path, title="Reading")

    # Assert
    assert written == 4
    drawn = [call.args[2] for call in mock_canvas.drawString.call_args_list]
    assert drawn == ["Reading", "1. ii", "2. iii", "3. cat / feline", "4. dog"]
    mock_canvas.save.assert_called_once()
    assert output_path.parent.exists()


@patch("reportlab.pdfgen.canvas.Canvas")
def test_render_answer_key_when_page_fills_then_new_page(mock_canvas_cls, tmp_path):
    # Arrange
    part = Part(Ref.persisted("p1"))
    per_page = int((A4_HEIGHT - 2 * MARGIN) // LINE_HEIGHT)
    questions = [
        Question(Ref.persisted(f"q{i}"), part.ref, correct_answer="x", order_index=i)
        for i in range(per_page * 2)
    ]
    mock_canvas = mock_canvas_cls.return_value

    # Act
    render_answer_key([part], questions, tmp_path / "key.pdf")

    # Assert
    # One break per overflow plus the closing showPage
    assert mock_canvas.showPage.call_count >= 2


def test_render_answer_key_when_written_then_pdf_file(reading_part, reading_questions, tmp_path):
    output_path = tmp_path / "key.pdf"

    render_answer_key([reading_part], reading_questions, output_path)

    assert output_path.read_bytes().startswith(b"%PDF")
