"""
Module: questions

Purpose:
    Provides the Question dataclass - one answerable unit. Questions are
    either authored directly (multiple choice, true/false/not given) or
    derived from gap tags found in content by the reconciler.

Key Functions:
    - Question.alternatives: Accepted answers split on "/"
    - Question.effective_type(group): Own type, defaulting to the group's

Dependencies:
    - dataclasses (std)
    - .refs.Ref
    - .groups.GroupType

Used By:
    - sync.reconciler
    - numbering
    - scoring.evaluator
    - core.utils.serialization
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .groups import GroupType, QuestionGroup
from .refs import Ref


ALTERNATIVE_SEPARATOR = "/"


@dataclass(frozen=True)
class Question:
    """
    Answerable question (immutable).

    Attributes:
        ref: Question identifier (persisted or pending)
        part_ref: Owning part
        group_ref: Owning group, None for ungrouped questions
        type: Question type; None means "same as the owning group"
        prompt: Raw prompt text; derived questions embed their gap tag
        correct_answer: Accepted answers joined by "/"
        options: Choice options for choice-style types
        order_index: Sequence hint within the part
        gap_number: Heading gap number (heading matching only)
        points: Score weight

    Invariants:
        - points >= 0
        - gap_number is None or >= 0

    Example:
        >>> q = Question(Ref.pending("temp-q1"), Ref.persisted("p1"),
        ...              prompt="Gap 1: [[1]]", correct_answer="cat/feline")
        >>> q.alternatives
        ('cat', 'feline')
    """

    ref: Ref
    part_ref: Ref
    group_ref: Optional[Ref] = None
    type: Optional[GroupType] = None
    prompt: str = ""
    correct_answer: str = ""
    options: tuple[str, ...] = ()
    order_index: int = 0
    gap_number: Optional[int] = None
    points: int = 1

    def __post_init__(self) -> None:
        """Validate question on construction."""
        if self.points < 0:
            raise ValueError(f"points cannot be negative: {self.points}")
        if self.gap_number is not None and self.gap_number < 0:
            raise ValueError(f"gap_number cannot be negative: {self.gap_number}")

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def alternatives(self) -> tuple[str, ...]:
        """Accepted answers, trimmed, empty entries dropped."""
        return tuple(
            a.strip()
            for a in (self.correct_answer or "").split(ALTERNATIVE_SEPARATOR)
            if a.strip()
        )

    @property
    def is_grouped(self) -> bool:
        return self.group_ref is not None

    def effective_type(self, group: Optional[QuestionGroup] = None) -> Optional[GroupType]:
        """
        Resolve the question type.

        Args:
            group: Owning group, if known

        Returns:
            Own type, else the group's type, else None
        """
        if self.type is not None:
            return self.type
        if group is not None:
            return group.type
        return None

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"Question({self.ref!r}, prompt={self.prompt!r}, order={self.order_index})"
