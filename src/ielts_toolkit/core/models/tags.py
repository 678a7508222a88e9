"""
Module: tags

Purpose:
    Provides the GapTag dataclass and TagDialect enum - the parsed form of an
    inline gap marker found in authored text. Every tagging dialect is
    represented by the same closed type so callers never re-parse raw
    strings.

Key Classes:
    - TagDialect: STANDARD [[n]], NOTE [[nN]], HEADING [HN], FLOWCHART [fN]
    - GapTag: Dialect + number + raw match + optional inline answer

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - tags.lexer: Produces GapTag instances
    - tags.allocator: Builds new tags
    - sync.reconciler: Compares tags between content and questions
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TagDialect(str, Enum):
    """Gap tag notation."""
    STANDARD = "standard"    # [[3]]
    NOTE = "note"            # [[n3]]
    HEADING = "heading"      # [H3] or data-heading-gap="3"
    FLOWCHART = "flowchart"  # [f3]

    def __str__(self) -> str:
        return self.value

    def format(self, number: int) -> str:
        """
        Render the canonical bracket token for a number.

        Args:
            number: Gap number

        Returns:
            Token like "[[3]]", "[[n3]]", "[H3]" or "[f3]"
        """
        if self is TagDialect.STANDARD:
            return f"[[{number}]]"
        if self is TagDialect.NOTE:
            return f"[[n{number}]]"
        if self is TagDialect.HEADING:
            return f"[H{number}]"
        return f"[f{number}]"


@dataclass(frozen=True, slots=True)
class GapTag:
    """
    One gap marker parsed from authored text (immutable).

    Attributes:
        dialect: Which notation matched
        number: Numeric identity, unique within its scope
        raw: Exact matched text (attribute form keeps the HTML snippet)
        inline_answer: Correct answer carried by the heading attribute form.
            None for every bracket form; "" for an attribute form without
            data-correct-answer.

    Invariants:
        - number >= 0
        - inline_answer is None unless dialect is HEADING

    Example:
        >>> tag = GapTag(TagDialect.NOTE, 2, "[[n2]]")
        >>> tag.token
        '[[n2]]'
    """

    dialect: TagDialect
    number: int
    raw: str = ""
    inline_answer: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate tag on construction."""
        if self.number < 0:
            raise ValueError(f"Tag number cannot be negative: {self.number}")
        if self.inline_answer is not None and self.dialect is not TagDialect.HEADING:
            raise ValueError(f"Only heading tags carry inline answers: {self.dialect}")

    @property
    def key(self) -> tuple[TagDialect, int]:
        """Identity used for de-duplication and scope membership."""
        return (self.dialect, self.number)

    @property
    def token(self) -> str:
        """Canonical bracket form, also used for the attribute form."""
        return self.dialect.format(self.number)

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        if self.inline_answer is not None:
            return f"GapTag({self.token}, answer={self.inline_answer!r})"
        return f"GapTag({self.token})"
