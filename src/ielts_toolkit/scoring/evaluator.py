"""
Module: scoring.evaluator

Purpose:
    Answer evaluation - decides whether a learner's submission matches a
    question's accepted answers. Blank submissions are UNANSWERED, never
    INCORRECT.

Key Functions:
    - evaluate(): Verdict for one question
    - evaluate_gaps(): Verdicts for a multi-gap submission
    - normalize_answer(): Trim + lower-case

Key Classes:
    - Verdict: CORRECT / INCORRECT / UNANSWERED

Dependencies:
    - common.labels: Roman numeral positions
    - config.ScoringConfig: Separators

Used By:
    - scoring.report: Aggregate scoring
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Sequence, Union

from ielts_toolkit.common.labels import from_roman
from ielts_toolkit.config import ScoringConfig
from ielts_toolkit.core.models.groups import GroupType, QuestionGroup
from ielts_toolkit.core.models.questions import Question

logger = logging.getLogger(__name__)


class Verdict(str, Enum):
    """Outcome of evaluating one answer."""
    CORRECT = "correct"
    INCORRECT = "incorrect"
    UNANSWERED = "unanswered"

    def __str__(self) -> str:
        return self.value

    @property
    def is_correct(self) -> bool:
        return self is Verdict.CORRECT


def normalize_answer(value: Optional[str]) -> str:
    """Trim surrounding whitespace and lower-case."""
    return (value or "").strip().lower()


def split_alternatives(answer: Optional[str], separator: str = "/") -> List[str]:
    """
    Split an answer key into normalized alternatives.

    Example:
        >>> split_alternatives(" Cat / FELINE ")
        ['cat', 'feline']
    """
    return [a for a in (normalize_answer(p) for p in (answer or "").split(separator)) if a]


def _heading_position(value: str, options: Sequence[str]) -> Optional[int]:
    """
    0-based option position denoted by a heading answer.

    A Roman numeral denotes its position; otherwise the literal heading
    text is looked up in the option list.
    """
    numeral = from_roman(value)
    if numeral is not None and numeral <= len(options):
        return numeral - 1
    normalized = [normalize_answer(o) for o in options]
    if value in normalized:
        return normalized.index(value)
    return None


def _is_heading(question: Question, group: Optional[QuestionGroup]) -> bool:
    return question.effective_type(group) is GroupType.MATCHING_HEADINGS or (
        group is not None and group.type is GroupType.MATCHING_HEADINGS
    )


def evaluate(
    question: Question,
    submitted: Optional[str],
    options: Optional[Sequence[str]] = None,
    *,
    group: Optional[QuestionGroup] = None,
    config: Optional[ScoringConfig] = None,
) -> Verdict:
    """
    Evaluate one submitted answer.

    Args:
        question: Question with its accepted answers
        submitted: Raw learner value
        options: Heading/option list used for Roman numeral equivalence;
            defaults to the group's options, then the question's own
        group: Owning group, if known
        config: Scoring configuration

    Returns:
        Verdict

    Example:
        >>> q = Question(Ref.persisted("q1"), Ref.persisted("p1"), correct_answer="cat/feline")
        >>> evaluate(q, "  Feline ")
        <Verdict.CORRECT: 'correct'>
    """
    config = config or ScoringConfig()
    value = normalize_answer(submitted)
    if not value:
        return Verdict.UNANSWERED

    alternatives = split_alternatives(question.correct_answer, config.alternative_separator)
    if not alternatives:
        return Verdict.INCORRECT
    if value in alternatives:
        return Verdict.CORRECT

    if _is_heading(question, group):
        if options is None:
            options = group.options if group is not None and group.options else question.options
        position = _heading_position(value, options)
        if position is not None and any(
            _heading_position(alt, options) == position for alt in alternatives
        ):
            return Verdict.CORRECT

    return Verdict.INCORRECT


def evaluate_gaps(
    questions: Sequence[Question],
    submitted: Union[str, Sequence[str], None],
    *,
    group: Optional[QuestionGroup] = None,
    config: Optional[ScoringConfig] = None,
) -> List[Verdict]:
    """
    Evaluate a multi-gap submission, one verdict per gap.

    Each gap is checked against its own question; missing trailing values
    are UNANSWERED and surplus values are ignored.

    Args:
        questions: Gap questions in gap order
        submitted: Per-gap values, or one string joined by the gap separator
        group: Owning group, if known
        config: Scoring configuration

    Returns:
        List of Verdict, same length as `questions`
    """
    config = config or ScoringConfig()
    if submitted is None:
        values: Sequence[str] = ()
    elif isinstance(submitted, str):
        values = submitted.split(config.gap_separator)
    else:
        values = submitted

    if len(values) > len(questions):
        logger.debug(f"Ignoring {len(values) - len(questions)} surplus gap values")

    verdicts = []
    for i, question in enumerate(questions):
        value = values[i] if i < len(values) else None
        verdicts.append(evaluate(question, value, group=group, config=config))
    return verdicts
