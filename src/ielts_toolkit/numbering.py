"""
Module: numbering

Purpose:
    Display numbering - the 1-based question numbers shown to authors and
    learners. Numbers follow the order of parts, then each question's
    sequence hint inside its part, and are always recomputed from the
    snapshot (never stored).

Key Functions:
    - display_numbers(): Build a Numbering for a snapshot
    - display_number(): Shortcut returning the ref -> number lookup

Key Classes:
    - Numbering: Ordered questions with number lookup and group ranges

Dependencies:
    - dataclasses (std)

Used By:
    - output.answer_key: Numbered answer lines
    - Authoring and delivery surfaces
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

from ielts_toolkit.core.models.parts import Part
from ielts_toolkit.core.models.questions import Question
from ielts_toolkit.core.models.refs import Ref


@dataclass(frozen=True)
class Numbering:
    """
    Display numbers for one snapshot (immutable).

    Attributes:
        ordered: Numbered questions in display order
        offset: Constant added to every rank (questions in earlier sections)

    Invariants:
        - numbers are contiguous: offset + 1 .. offset + len(ordered)
        - questions whose part is missing are unassigned

    Example:
        >>> numbering = display_numbers(parts, questions, offset=13)
        >>> numbering(questions[0].ref)
        14
    """

    ordered: Tuple[Question, ...]
    offset: int = 0

    def __post_init__(self) -> None:
        """Build the lookup table once."""
        numbers: Dict[Ref, int] = {}
        for rank, question in enumerate(self.ordered, start=1):
            numbers.setdefault(question.ref, rank + self.offset)
        object.__setattr__(self, "_numbers", numbers)

    @property
    def total(self) -> int:
        return len(self.ordered)

    @property
    def first(self) -> Optional[int]:
        return self.offset + 1 if self.ordered else None

    @property
    def last(self) -> Optional[int]:
        return self.offset + len(self.ordered) if self.ordered else None

    def number_for(self, ref: Ref) -> Optional[int]:
        """
        Display number of a question.

        Args:
            ref: Question ref

        Returns:
            1-based number (plus offset), or None if unassigned
        """
        return self._numbers.get(ref)

    def __call__(self, ref: Ref) -> Optional[int]:
        return self.number_for(ref)

    def group_range(self, group_ref: Ref) -> Optional[Tuple[int, int]]:
        """
        First and last display number within a group, e.g. (8, 13) for
        "Questions 8-13".

        Returns:
            (first, last) or None when the group has no numbered questions
        """
        numbers = [
            self._numbers[q.ref] for q in self.ordered if q.group_ref == group_ref
        ]
        if not numbers:
            return None
        return (min(numbers), max(numbers))

    def part_range(self, part_ref: Ref) -> Optional[Tuple[int, int]]:
        """First and last display number within a part."""
        numbers = [
            self._numbers[q.ref] for q in self.ordered if q.part_ref == part_ref
        ]
        if not numbers:
            return None
        return (min(numbers), max(numbers))


def display_numbers(
    parts: Sequence[Part],
    questions: Sequence[Question],
    offset: int = 0,
) -> Numbering:
    """
    Number every question by (part position, sequence hint).

    Parts are ordered by their position in `parts`; ties inside a part keep
    the input order of `questions`.

    Args:
        parts: Parts in display order
        questions: Question collection
        offset: Number of questions in earlier sections

    Returns:
        Numbering for the snapshot

    Raises:
        ValueError: If offset is negative
    """
    if offset < 0:
        raise ValueError(f"offset must be non-negative: {offset}")

    part_position = {}
    for position, part in enumerate(parts):
        part_position.setdefault(part.ref, position)

    numbered = [q for q in questions if q.part_ref in part_position]
    numbered.sort(key=lambda q: (part_position[q.part_ref], q.order_index))
    return Numbering(ordered=tuple(numbered), offset=offset)


def display_number(
    parts: Sequence[Part],
    questions: Sequence[Question],
    offset: int = 0,
) -> Callable[[Ref], Optional[int]]:
    """Lookup function ref -> display number (None when unassigned)."""
    return display_numbers(parts, questions, offset).number_for
