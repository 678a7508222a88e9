"""
Module: scoring.report

Purpose:
    Aggregate scoring for a group, a section or a whole test. Counts
    correct answers over gradable questions (writing tasks excluded) and
    converts section scores to bands the way mock-test submission does:
    proportion correct times the band scale.

Key Functions:
    - score_questions(): ScoreReport for a response map
    - band_score(): Section band from correct/total
    - overall_band(): Mean of available section bands

Key Classes:
    - QuestionResult: One question's verdict
    - ScoreReport: Counts plus per-question results

Dependencies:
    - scoring.evaluator: evaluate()

Used By:
    - Delivery and results surfaces
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from ielts_toolkit.config import ScoringConfig
from ielts_toolkit.core.models.groups import QuestionGroup
from ielts_toolkit.core.models.questions import Question
from ielts_toolkit.core.models.refs import Ref
from ielts_toolkit.scoring.evaluator import Verdict, evaluate

Responses = Mapping[Union[Ref, str], Optional[str]]


@dataclass(frozen=True)
class QuestionResult:
    """Verdict for one question."""

    question: Question
    submitted: Optional[str]
    verdict: Verdict

    @property
    def points_awarded(self) -> int:
        return self.question.points if self.verdict is Verdict.CORRECT else 0


@dataclass(frozen=True)
class ScoreReport:
    """
    Aggregate score (immutable).

    Attributes:
        results: Per-question results in input order (gradable only)

    Example:
        >>> report = score_questions(questions, {"q1": "cat"})
        >>> report.correct, report.total
        (1, 2)
    """

    results: Tuple[QuestionResult, ...] = ()

    def _count(self, verdict: Verdict) -> int:
        return sum(1 for r in self.results if r.verdict is verdict)

    @property
    def correct(self) -> int:
        return self._count(Verdict.CORRECT)

    @property
    def incorrect(self) -> int:
        return self._count(Verdict.INCORRECT)

    @property
    def unanswered(self) -> int:
        return self._count(Verdict.UNANSWERED)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def points(self) -> int:
        return sum(r.points_awarded for r in self.results)

    @property
    def percentage(self) -> float:
        if not self.results:
            return 0.0
        return 100.0 * self.correct / self.total

    def verdict_for(self, ref: Ref) -> Optional[Verdict]:
        for result in self.results:
            if result.question.ref == ref:
                return result.verdict
        return None

    def band(self, config: Optional[ScoringConfig] = None) -> float:
        config = config or ScoringConfig()
        return band_score(self.correct, self.total, config.band_scale)


def _lookup(responses: Responses, ref: Ref) -> Optional[str]:
    """Responses may be keyed by Ref or by raw id string."""
    if ref in responses:
        return responses[ref]
    return responses.get(ref.value)


def score_questions(
    questions: Sequence[Question],
    responses: Responses,
    groups: Optional[Iterable[QuestionGroup]] = None,
    config: Optional[ScoringConfig] = None,
) -> ScoreReport:
    """
    Score a response map against a question collection.

    Args:
        questions: Questions to grade
        responses: Learner answers keyed by question Ref or raw id
        groups: Groups used to resolve types and heading option lists
        config: Scoring configuration

    Returns:
        ScoreReport over gradable questions
    """
    config = config or ScoringConfig()
    group_by_ref: Dict[Ref, QuestionGroup] = {g.ref: g for g in groups or ()}

    results = []
    for question in questions:
        group = group_by_ref.get(question.group_ref) if question.group_ref else None
        question_type = question.effective_type(group)
        if question_type is not None and not question_type.is_gradable:
            continue
        submitted = _lookup(responses, question.ref)
        verdict = evaluate(question, submitted, group=group, config=config)
        results.append(QuestionResult(question, submitted, verdict))
    return ScoreReport(results=tuple(results))


def band_score(correct: int, total: int, scale: float = 9.0) -> float:
    """
    Section band: proportion correct times the scale.

    Returns:
        0.0 when total is 0

    Raises:
        ValueError: If counts are negative or correct exceeds total
    """
    if correct < 0 or total < 0:
        raise ValueError(f"Counts cannot be negative: {correct}/{total}")
    if correct > total:
        raise ValueError(f"correct ({correct}) exceeds total ({total})")
    if total == 0:
        return 0.0
    return correct / total * scale


def overall_band(bands: Iterable[Optional[float]]) -> float:
    """
    Mean of the section bands that are available.

    Writing bands arrive later from examiners and are None until then.

    Returns:
        0.0 when no band is available
    """
    available = [b for b in bands if b is not None]
    if not available:
        return 0.0
    return sum(available) / len(available)
