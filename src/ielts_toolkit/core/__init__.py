"""
IELTS Toolkit Core Package

Shared data models and utilities. These models are the single source of
truth for every other module.

1. **Immutable Data Models**
   Frozen dataclasses; edits create new instances via dataclasses.replace.

2. **Derived Values Never Stored**
   Option labels and display numbers are computed from position.

3. **One Identifier Type**
   Ref covers both persisted and pending (pre-save) records.
"""

from .models import Ref, GapTag, TagDialect, GroupType, QuestionGroup, Part, Question

__all__ = [
    "Ref",
    "GapTag",
    "TagDialect",
    "GroupType",
    "QuestionGroup",
    "Part",
    "Question",
]
