"""
Module: output.answer_key

Purpose:
    Generate an answer key PDF listing every numbered gradable question
    with its accepted answers, in display order.

Key Functions:
    - answer_key_lines(): Numbered text lines for the key
    - render_answer_key(): Write the key as a PDF

Dependencies:
    - reportlab: PDF generation
    - ielts_toolkit.numbering: Display numbers

Used By:
    - Authoring surfaces exporting a section's key
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from ielts_toolkit.core.models.groups import QuestionGroup
from ielts_toolkit.core.models.parts import Part
from ielts_toolkit.core.models.questions import Question
from ielts_toolkit.core.models.refs import Ref
from ielts_toolkit.numbering import display_numbers

logger = logging.getLogger(__name__)

# Constants
A4_WIDTH, A4_HEIGHT = A4
MARGIN = 50
LINE_HEIGHT = 18
TITLE_FONT = ("Helvetica-Bold", 16)
BODY_FONT = ("Helvetica", 11)


def answer_key_lines(
    parts: Sequence[Part],
    questions: Sequence[Question],
    offset: int = 0,
) -> List[str]:
    """
    Build one "<number>. <answers>" line per numbered gradable question.

    Args:
        parts: Parts in display order
        questions: Question collection
        offset: Number of questions in earlier sections

    Returns:
        Lines in display order; blank keys render as "-"
    """
    groups: Dict[Ref, QuestionGroup] = {
        g.ref: g for part in parts for g in part.groups
    }
    numbering = display_numbers(parts, questions, offset)

    lines = []
    for question in numbering.ordered:
        group: Optional[QuestionGroup] = (
            groups.get(question.group_ref) if question.group_ref is not None else None
        )
        question_type = question.effective_type(group)
        if question_type is not None and not question_type.is_gradable:
            continue
        answers = " / ".join(question.alternatives) or "-"
        lines.append(f"{numbering(question.ref)}. {answers}")
    return lines


def render_answer_key(
    parts: Sequence[Part],
    questions: Sequence[Question],
    output_path: Path,
    title: str = "Answer Key",
    offset: int = 0,
) -> int:
    """
    Write the answer key PDF.

    A new page is started whenever the current one fills.

    Args:
        parts: Parts in display order
        questions: Question collection
        output_path: Path to write the PDF
        title: Heading drawn on the first page
        offset: Number of questions in earlier sections

    Returns:
        Number of answer lines written

    Example:
        >>> render_answer_key(parts, questions, Path("output/key.pdf"))
        13
    """
    lines = answer_key_lines(parts, questions, offset)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    c = canvas.Canvas(str(output_path), pagesize=A4)
    y = A4_HEIGHT - MARGIN

    c.setFont(*TITLE_FONT)
    c.drawString(MARGIN, y, title)
    y -= LINE_HEIGHT * 2
    c.setFont(*BODY_FONT)

    pages = 1
    for line in lines:
        if y < MARGIN:
            c.showPage()
            c.setFont(*BODY_FONT)
            y = A4_HEIGHT - MARGIN
            pages += 1
        c.drawString(MARGIN, y, line)
        y -= LINE_HEIGHT

    if not lines:
        logger.warning("No gradable questions to include in answer key")

    c.showPage()
    c.save()
    logger.info(f"Wrote answer key with {len(lines)} answers on {pages} pages to {output_path}")
    return len(lines)
