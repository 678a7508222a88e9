"""
Module: tags.allocator

Purpose:
    Gap number allocation. Given the numbers already used in a scope,
    hands out the lowest free positive number so numbering stays dense
    when authors delete gaps from the middle of content.

Key Functions:
    - next_tag_number(): Lowest unused positive integer
    - group_scope_numbers(): Numbers used by a group (body, table, flowchart, sections)
    - part_heading_numbers(): Heading gap numbers used by a part body
    - allocate_tag(): Build the next GapTag for a scope
    - insert_tag(): Insert a tag token into text at a cursor position

Dependencies:
    - tags.lexer: Tag extraction

Used By:
    - Authoring surfaces that insert new gaps
"""

from __future__ import annotations

from typing import Iterable, Optional

from ielts_toolkit.core.models.groups import QuestionGroup
from ielts_toolkit.core.models.parts import Part
from ielts_toolkit.core.models.tags import GapTag, TagDialect
from ielts_toolkit.tags.lexer import tag_numbers


def next_tag_number(existing: Iterable[int]) -> int:
    """
    Smallest positive integer not in `existing`.

    Args:
        existing: Numbers already present in the scope

    Returns:
        Next free number; 1 for an empty scope

    Example:
        >>> next_tag_number({1, 3})
        2
        >>> next_tag_number([])
        1
    """
    used = {n for n in existing if n > 0}
    candidate = 1
    while candidate in used:
        candidate += 1
    return candidate


def group_scope_numbers(group: QuestionGroup) -> set[int]:
    """
    Gap numbers used anywhere in a group, in the group type's dialect.

    Heading-matching groups have no gaps of their own (their gaps live in
    the part body), so they report an empty set.
    """
    if group.gap_dialect is TagDialect.HEADING:
        return set()
    return tag_numbers(group.scope_texts(), group.gap_dialect)


def part_heading_numbers(part: Part) -> set[int]:
    """Heading gap numbers in a part body (headings are numbered per part)."""
    return tag_numbers([part.body], TagDialect.HEADING)


def allocate_tag(dialect: TagDialect, existing: Iterable[int]) -> GapTag:
    """
    Build the next tag for a scope.

    Args:
        dialect: Dialect of the scope
        existing: Numbers already used

    Returns:
        GapTag whose raw text is the canonical token
    """
    number = next_tag_number(existing)
    return GapTag(dialect, number, dialect.format(number))


def insert_tag(text: Optional[str], tag: GapTag, cursor: Optional[int] = None) -> str:
    """
    Insert a tag token into text at a cursor position.

    Args:
        text: Current text (None treated as empty)
        tag: Tag to insert
        cursor: Insert position; None appends, out-of-range values are clamped

    Returns:
        New text
    """
    current = text or ""
    if cursor is None:
        position = len(current)
    else:
        position = max(0, min(cursor, len(current)))
    return current[:position] + tag.token + current[position:]
