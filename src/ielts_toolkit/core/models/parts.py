"""
Module: parts

Purpose:
    Provides the Part dataclass - one logical section of a test (a reading
    passage, a listening part or a writing task). Parts own a body that may
    carry heading gaps and an ordered tuple of question groups.

Key Functions:
    - Part.find_group(ref): Look up a group by ref
    - Part.iter_groups(): Groups in display order

Dependencies:
    - dataclasses (std)
    - .refs.Ref
    - .groups.QuestionGroup

Used By:
    - sync.reconciler: Part-level heading scopes
    - numbering: Part ordering
    - core.utils.serialization
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from .groups import QuestionGroup
from .refs import Ref


@dataclass(frozen=True)
class Part:
    """
    Test part (immutable).

    Attributes:
        ref: Part identifier
        order_index: Ordering index stored with the part
        title: Display title like "Part 1"
        body: Rich text passage; may contain [HN]/data-heading-gap tags and
            [[N]] gaps for ungrouped questions
        groups: Question groups in display order
        instructions: Text shown above the passage
        image_url: Opaque URL (writing task 1 charts, listening maps)

    Invariants:
        - order_index >= 0
        - group refs are unique within the part

    Example:
        >>> p = Part(Ref.persisted("p1"), 1, body="<p>[H1] Paragraph A</p>")
        >>> p.group_count
        0
    """

    ref: Ref
    order_index: int = 0
    title: str = ""
    body: str = ""
    groups: tuple[QuestionGroup, ...] = ()
    instructions: str = ""
    image_url: str = ""

    def __post_init__(self) -> None:
        """Validate part on construction."""
        if self.order_index < 0:
            raise ValueError(f"order_index cannot be negative: {self.order_index}")
        refs = [g.ref for g in self.groups]
        if len(refs) != len(set(refs)):
            raise ValueError(f"Duplicate group refs in part {self.ref}")

    @property
    def group_count(self) -> int:
        return len(self.groups)

    def iter_groups(self) -> Iterator[QuestionGroup]:
        return iter(self.groups)

    def find_group(self, ref: Ref) -> Optional[QuestionGroup]:
        """
        Find a group by ref.

        Args:
            ref: Group ref

        Returns:
            Matching QuestionGroup or None
        """
        for group in self.groups:
            if group.ref == ref:
                return group
        return None

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"Part({self.ref!r}, order={self.order_index}, groups={self.group_count})"
