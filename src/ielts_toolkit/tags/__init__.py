"""
Module: tags

Purpose:
    Gap tag lexing and allocation.

Key Modules:
    - lexer: extract_tags(), first_tag(), tag_numbers()
    - allocator: next_tag_number(), allocate_tag(), insert_tag()
"""

from .lexer import extract_tags, first_tag, tag_numbers, iter_tag_matches
from .allocator import (
    next_tag_number,
    allocate_tag,
    insert_tag,
    group_scope_numbers,
    part_heading_numbers,
)

__all__ = [
    "extract_tags",
    "first_tag",
    "tag_numbers",
    "iter_tag_matches",
    "next_tag_number",
    "allocate_tag",
    "insert_tag",
    "group_scope_numbers",
    "part_heading_numbers",
]
