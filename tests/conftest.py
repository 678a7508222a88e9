import os
import pytest
import sys

# Run Qt headless when no display is available.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
from pathlib import Path

# Add src to sys.path so we can import ielts_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from ielts_toolkit.core.models import (  # noqa: E402
    GroupType,
    Part,
    Question,
    QuestionGroup,
    Ref,
    Table,
)


# Common test fixtures
@pytest.fixture
def note_group():
    """Note completion group with two gaps."""
    return QuestionGroup(
        ref=Ref.persisted("g-notes"),
        type=GroupType.NOTE_COMPLETION,
        instruction="Complete the notes below.",
        group_text="Item [[n1]] and [[n2]]",
    )


@pytest.fixture
def heading_group():
    """Heading matching group with three headings."""
    return QuestionGroup(
        ref=Ref.persisted("g-headings"),
        type=GroupType.MATCHING_HEADINGS,
        instruction="Choose the correct heading for each paragraph.",
        options=("Early history", "Modern methods", "Future plans"),
    )


@pytest.fixture
def table_group():
    """Table completion group with one gap per row."""
    return QuestionGroup(
        ref=Ref.persisted("g-table"),
        type=GroupType.TABLE_COMPLETION,
        table=Table(
            headers=("Year", "Event"),
            rows=(("1901", "[[1]]"), ("1920", "The [[2]] opened")),
        ),
    )


@pytest.fixture
def reading_part(note_group, heading_group):
    """Reading passage with two heading gaps and two groups."""
    return Part(
        ref=Ref.persisted("p1"),
        order_index=1,
        title="Passage 1",
        body=(
            '<p>[H1] Paragraph A</p>'
            '<p><span data-heading-gap="2" data-correct-answer="iii"></span> Paragraph B</p>'
        ),
        groups=(heading_group, note_group),
    )


@pytest.fixture
def reading_questions(reading_part):
    """Questions already in sync with reading_part."""
    p = reading_part.ref
    return (
        Question(Ref.persisted("q-h1"), p, Ref.persisted("g-headings"),
                 prompt="Paragraph A", correct_answer="ii", order_index=1, gap_number=1),
        Question(Ref.persisted("q-h2"), p, Ref.persisted("g-headings"),
                 prompt="Paragraph B", correct_answer="iii", order_index=2, gap_number=2),
        Question(Ref.persisted("q-n1"), p, Ref.persisted("g-notes"),
                 type=GroupType.NOTE_COMPLETION, prompt="Gap 1: [[n1]]",
                 correct_answer="cat/feline", order_index=3),
        Question(Ref.persisted("q-n2"), p, Ref.persisted("g-notes"),
                 type=GroupType.NOTE_COMPLETION, prompt="Gap 2: [[n2]]",
                 correct_answer="dog", order_index=4),
    )
