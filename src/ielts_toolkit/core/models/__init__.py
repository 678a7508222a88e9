"""
Core Models Package

Immutable data models that serve as the single source of truth for the
authored test snapshot.

All models in this package are frozen dataclasses. The editor owns the
read-modify-write cycle: it hands a snapshot to the pure functions in
`ielts_toolkit.sync`, `ielts_toolkit.numbering` and `ielts_toolkit.scoring`
and persists whatever comes back.
"""

from .refs import Ref, RefKind, QuestionRef
from .tags import GapTag, TagDialect
from .groups import (
    GroupType,
    QuestionGroup,
    Table,
    Flowchart,
    FlowchartStep,
    FlowchartBranch,
    NoteSection,
)
from .parts import Part
from .questions import Question

__all__ = [
    "Ref",
    "RefKind",
    "QuestionRef",
    "GapTag",
    "TagDialect",
    "GroupType",
    "QuestionGroup",
    "Table",
    "Flowchart",
    "FlowchartStep",
    "FlowchartBranch",
    "NoteSection",
    "Part",
    "Question",
]
