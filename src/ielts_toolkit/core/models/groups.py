"""
Module: groups

Purpose:
    Provides the QuestionGroup dataclass and its auxiliary content types -
    a named cluster of questions sharing an instruction and an interaction
    type. Groups own the free text that gap tags live in: the group body,
    table cells, flowchart steps/branches and note sections.

Key Classes:
    - GroupType: Fixed enumeration of interaction types
    - Table: Headers x rows of cell strings
    - FlowchartStep / FlowchartBranch / Flowchart: Ordered steps, optionally split
    - NoteSection: Titled block of note text
    - QuestionGroup: The group itself

Key Functions:
    - QuestionGroup.scope_texts(): Every text fragment that may carry tags
    - QuestionGroup.option_labels: Positional labels (A.. or I..)

Dependencies:
    - dataclasses (std)
    - enum (std)
    - .refs.Ref
    - .tags.TagDialect

Used By:
    - core.models.parts.Part
    - tags.allocator: Group scope numbering
    - sync.reconciler: Group scope extraction
    - scoring.evaluator: Heading option lists
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from .refs import Ref
from .tags import TagDialect


class GroupType(str, Enum):
    """Interaction type shared by every question in a group."""
    MATCHING_HEADINGS = "matching_headings"
    PARAGRAPH_MATCHING = "paragraph_matching"
    MATCHING_FEATURES = "matching_features"
    MATCHING_SENTENCE_ENDINGS = "matching_sentence_endings"
    TRUE_FALSE_NG = "true_false_ng"
    MULTIPLE_CHOICE = "multiple_choice"
    LIST_SELECTION = "list_selection"
    CHOOSING_A_TITLE = "choosing_a_title"
    SHORT_ANSWER = "short_answer"
    SENTENCE_COMPLETION = "sentence_completion"
    SUMMARY_COMPLETION = "summary_completion"
    NOTE_COMPLETION = "note_completion"
    TABLE_COMPLETION = "table_completion"
    DIAGRAM_COMPLETION = "diagram_completion"
    FLOWCHART_COMPLETION = "flowchart_completion"
    WRITING_TASK = "writing_task"

    def __str__(self) -> str:
        return self.value

    @property
    def gap_dialect(self) -> TagDialect:
        """
        The single tag dialect this group type uses for its gaps.

        Note completion numbers its gaps [[nN]] only; flowcharts use [fN];
        heading matching uses [HN] in the part body; everything else [[N]].
        """
        if self is GroupType.NOTE_COMPLETION:
            return TagDialect.NOTE
        if self is GroupType.FLOWCHART_COMPLETION:
            return TagDialect.FLOWCHART
        if self is GroupType.MATCHING_HEADINGS:
            return TagDialect.HEADING
        return TagDialect.STANDARD

    @property
    def is_auto_growing(self) -> bool:
        """True when the question set is derived entirely from body tags."""
        return self in AUTO_GROWING_TYPES

    @property
    def uses_roman_labels(self) -> bool:
        return self is GroupType.MATCHING_HEADINGS

    @property
    def is_gradable(self) -> bool:
        """Writing tasks are marked by examiners, not by key."""
        return self is not GroupType.WRITING_TASK


AUTO_GROWING_TYPES = frozenset({
    GroupType.TABLE_COMPLETION,
    GroupType.NOTE_COMPLETION,
    GroupType.SUMMARY_COMPLETION,
    GroupType.FLOWCHART_COMPLETION,
    GroupType.DIAGRAM_COMPLETION,
})


# ─────────────────────────────────────────────────────────────────────────────
# Auxiliary content
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Table:
    """
    Completion table.

    Attributes:
        headers: Column headers (not scanned for gaps)
        rows: Rows of cell strings; any cell may contain gap tags
    """

    headers: tuple[str, ...] = ()
    rows: tuple[tuple[str, ...], ...] = ()

    def iter_cells(self) -> Iterator[str]:
        for row in self.rows:
            yield from row

    def to_dict(self) -> dict:
        return {"headers": list(self.headers), "rows": [list(r) for r in self.rows]}

    @classmethod
    def from_dict(cls, data: dict) -> Table:
        return cls(
            headers=tuple(str(h) for h in data.get("headers") or []),
            rows=tuple(
                tuple(str(c or "") for c in row) for row in data.get("rows") or []
            ),
        )


@dataclass(frozen=True)
class FlowchartBranch:
    """One named branch of a split step."""

    title: str = ""
    text: str = ""


@dataclass(frozen=True)
class FlowchartStep:
    """
    One flowchart box.

    A plain step carries `text`; a split step carries `branches` shown side
    by side. Both may contain [fN] tags.
    """

    id: str
    text: str = ""
    branches: tuple[FlowchartBranch, ...] = ()

    @property
    def is_split(self) -> bool:
        return bool(self.branches)

    def iter_texts(self) -> Iterator[str]:
        yield self.text
        for branch in self.branches:
            yield branch.text


@dataclass(frozen=True)
class Flowchart:
    """Ordered flowchart steps plus the layout style shown to learners."""

    steps: tuple[FlowchartStep, ...] = ()
    style: str = "scientific"

    def iter_texts(self) -> Iterator[str]:
        for step in self.steps:
            yield from step.iter_texts()

    def to_dict(self) -> dict:
        return {
            "type": self.style,
            "steps": [
                {
                    "id": s.id,
                    "type": "split" if s.is_split else "step",
                    "text": s.text,
                    "theories": [{"title": b.title, "text": b.text} for b in s.branches],
                }
                for s in self.steps
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Flowchart:
        steps = []
        for i, raw in enumerate(data.get("steps") or []):
            branches = tuple(
                FlowchartBranch(title=str(t.get("title") or ""), text=str(t.get("text") or ""))
                for t in raw.get("theories") or []
            )
            steps.append(FlowchartStep(
                id=str(raw.get("id") or f"step-{i}"),
                text=str(raw.get("text") or ""),
                branches=branches,
            ))
        return cls(steps=tuple(steps), style=str(data.get("type") or "scientific"))


@dataclass(frozen=True)
class NoteSection:
    """Titled block inside a note-completion group."""

    title: str = ""
    content: str = ""


# ─────────────────────────────────────────────────────────────────────────────
# Group
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class QuestionGroup:
    """
    Question group (immutable).

    Attributes:
        ref: Group identifier
        type: Interaction type
        instruction: Text shown above the group
        options: Answer-bank entries; labels are positional, never stored
        group_text: Free-text body that may contain gap tags
        table: Optional completion table
        flowchart: Optional flowchart
        sections: Note sections (note completion)
        image_url: Opaque URL for diagram/writing groups
        title: Optional heading shown above diagrams/notes

    Example:
        >>> g = QuestionGroup(Ref.pending("temp-g1"), GroupType.NOTE_COMPLETION,
        ...                   group_text="Item [[n1]] and [[n2]]")
        >>> list(g.scope_texts())
        ['Item [[n1]] and [[n2]]']
    """

    ref: Ref
    type: GroupType
    instruction: str = ""
    options: tuple[str, ...] = ()
    group_text: str = ""
    table: Optional[Table] = None
    flowchart: Optional[Flowchart] = None
    sections: tuple[NoteSection, ...] = field(default_factory=tuple)
    image_url: str = ""
    title: str = ""

    @property
    def gap_dialect(self) -> TagDialect:
        return self.type.gap_dialect

    @property
    def option_labels(self) -> tuple[str, ...]:
        """Positional labels for `options` (Roman numerals or letters)."""
        from ielts_toolkit.common.labels import option_label

        return tuple(option_label(self.type, i) for i in range(len(self.options)))

    def scope_texts(self) -> Iterator[str]:
        """
        Yield every text fragment owned by this group.

        Order: group body, table cells (row-major), flowchart step and
        branch texts, note section contents.
        """
        yield self.group_text
        if self.table is not None:
            yield from self.table.iter_cells()
        if self.flowchart is not None:
            yield from self.flowchart.iter_texts()
        for section in self.sections:
            yield section.content

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"QuestionGroup({self.ref!r}, {self.type.value})"
