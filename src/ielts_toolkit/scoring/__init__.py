"""
Module: scoring

Purpose:
    Answer evaluation and aggregate scoring.

Key Modules:
    - evaluator: evaluate(), evaluate_gaps(), Verdict
    - report: score_questions(), band_score(), overall_band()
"""

from .evaluator import Verdict, evaluate, evaluate_gaps, normalize_answer, split_alternatives
from .report import QuestionResult, ScoreReport, band_score, overall_band, score_questions

__all__ = [
    "Verdict",
    "evaluate",
    "evaluate_gaps",
    "normalize_answer",
    "split_alternatives",
    "QuestionResult",
    "ScoreReport",
    "band_score",
    "overall_band",
    "score_questions",
]
