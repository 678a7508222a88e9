"""
Module: tags.lexer

Purpose:
    Gap tag extraction - finds every gap marker in a text/HTML fragment,
    independent of dialect, and returns them as GapTag instances in
    first-occurrence order.

Key Functions:
    - extract_tags(): Ordered, de-duplicated tags in a fragment
    - first_tag(): The first tag in a fragment (a question's own tag)
    - tag_numbers(): Numbers of one dialect across several fragments

Dependencies:
    - re (std)
    - html (std): Unescape attribute values
    - core.models.tags: GapTag, TagDialect

Used By:
    - tags.allocator: Scope numbering
    - sync.reconciler: Scope extraction and question tags
"""

from __future__ import annotations

import html
import re
from typing import Iterable, List, Optional, Union

from ielts_toolkit.core.models.tags import GapTag, TagDialect

# One alternation so a single left-to-right scan yields document order.
# Numbers are capped at nine digits; longer runs stay literal text.
# The element form must come before the bare attribute form.
_TAG_RE = re.compile(
    r"\[\[(?P<standard>\d{1,9})\]\]"
    r"|\[\[n(?P<note>\d{1,9})\]\]"
    r"|\[H(?P<heading>\d{1,9})\]"
    r"|\[f(?P<flowchart>\d{1,9})\]"
    r"|(?P<element><[^<>]*?\bdata-heading-gap=\"(?P<element_num>\d{1,9})\"[^<>]*>)"
    r"|\bdata-heading-gap=\"(?P<attr_num>\d{1,9})\""
)

_ANSWER_ATTR_RE = re.compile(r"\bdata-correct-answer=\"(?P<answer>[^\"]*)\"")

DialectFilter = Union[None, TagDialect, Iterable[TagDialect]]


def _normalize_filter(dialect: DialectFilter) -> Optional[frozenset]:
    if dialect is None:
        return None
    if isinstance(dialect, TagDialect):
        return frozenset({dialect})
    return frozenset(dialect)


def _tag_from_match(match: re.Match) -> GapTag:
    """Build a GapTag from one regex match."""
    raw = match.group(0)
    if match.group("standard") is not None:
        return GapTag(TagDialect.STANDARD, int(match.group("standard")), raw)
    if match.group("note") is not None:
        return GapTag(TagDialect.NOTE, int(match.group("note")), raw)
    if match.group("heading") is not None:
        return GapTag(TagDialect.HEADING, int(match.group("heading")), raw)
    if match.group("flowchart") is not None:
        return GapTag(TagDialect.FLOWCHART, int(match.group("flowchart")), raw)
    if match.group("element") is not None:
        answer_match = _ANSWER_ATTR_RE.search(match.group("element"))
        answer = html.unescape(answer_match.group("answer")) if answer_match else ""
        return GapTag(TagDialect.HEADING, int(match.group("element_num")), raw, answer)
    return GapTag(TagDialect.HEADING, int(match.group("attr_num")), raw, "")


def iter_tag_matches(text: Optional[str]) -> Iterable[GapTag]:
    """
    Yield every tag occurrence in document order, duplicates included.

    Args:
        text: Fragment to scan; None is treated as empty

    Yields:
        GapTag per occurrence
    """
    if not text:
        return
    for match in _TAG_RE.finditer(text):
        yield _tag_from_match(match)


def extract_tags(text: Optional[str], dialect: DialectFilter = None) -> List[GapTag]:
    """
    Extract the ordered, de-duplicated gap tags of a fragment.

    The first occurrence of each (dialect, number) wins. If that first
    occurrence is a bracket heading tag and a later attribute-form
    duplicate carries an inline answer, the answer is kept on the first
    occurrence so it is never lost.

    Args:
        text: Text or HTML fragment
        dialect: None for all dialects, one TagDialect, or an iterable

    Returns:
        List of GapTag in first-occurrence order; [] when nothing matches

    Example:
        >>> [t.token for t in extract_tags("A [[1]] b [[n2]] c [[1]] [f3]")]
        ['[[1]]', '[[n2]]', '[f3]']
        >>> extract_tags("unterminated [[4] and [[x]]")
        []
    """
    wanted = _normalize_filter(dialect)
    tags: List[GapTag] = []
    index_by_key: dict = {}

    for tag in iter_tag_matches(text):
        if wanted is not None and tag.dialect not in wanted:
            continue
        existing = index_by_key.get(tag.key)
        if existing is None:
            index_by_key[tag.key] = len(tags)
            tags.append(tag)
            continue
        first = tags[existing]
        if first.inline_answer is None and tag.inline_answer is not None:
            tags[existing] = GapTag(first.dialect, first.number, first.raw, tag.inline_answer)

    return tags


def first_tag(text: Optional[str], dialect: DialectFilter = None) -> Optional[GapTag]:
    """
    Return the first tag in a fragment, or None.

    Used to find the tag a question prompt represents.
    """
    wanted = _normalize_filter(dialect)
    for tag in iter_tag_matches(text):
        if wanted is None or tag.dialect in wanted:
            return tag
    return None


def tag_numbers(texts: Iterable[Optional[str]], dialect: DialectFilter = None) -> set[int]:
    """
    Collect tag numbers across several fragments.

    Args:
        texts: Fragments belonging to one scope
        dialect: Dialect filter as for extract_tags

    Returns:
        Set of numbers present in the scope
    """
    numbers: set[int] = set()
    for text in texts:
        numbers.update(tag.number for tag in extract_tags(text, dialect))
    return numbers
