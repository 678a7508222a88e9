"""
Module: sync.reconciler

Purpose:
    Question reconciliation - keeps the question collection consistent with
    the gap tags currently present in authored content. Pure function over
    an immutable snapshot: no I/O, never raises on malformed content, and
    re-running it on its own output is a no-op.

Key Functions:
    - reconcile(): Prune orphans, grow missing questions, propagate inline answers
    - build_scope_index(): Per-scope tag sets for a list of parts

Key Classes:
    - ScopeIndex: Tags present per group and per part
    - ReconcileResult: Updated questions plus what changed

Dependencies:
    - tags.lexer: Tag extraction
    - config.SyncConfig: Auto-growing types and prompt templates

Used By:
    - sync.scheduler: Debounced re-synchronization
    - sync.session: Authoring session state

Algorithm:
    1. Extract tag sets per scope (group scopes use the group type's
       dialect; part bodies provide heading gaps and ungrouped gaps).
    2. Prune questions whose own tag vanished from their scope, or whose
       part/group no longer exists.
    3. Grow questions for tags in auto-growing groups that have none.
    4. Backfill heading gap numbers and copy inline heading answers.
    5. Report the result, short-circuiting when nothing changed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ielts_toolkit.config import SyncConfig
from ielts_toolkit.core.models.groups import GroupType, QuestionGroup
from ielts_toolkit.core.models.parts import Part
from ielts_toolkit.core.models.questions import Question
from ielts_toolkit.core.models.refs import Ref
from ielts_toolkit.core.models.tags import GapTag, TagDialect
from ielts_toolkit.tags.lexer import extract_tags, first_tag

logger = logging.getLogger(__name__)

TagKey = Tuple[TagDialect, int]

# Prefix of pending refs minted for synthesized questions
AUTO_REF_PREFIX = "temp-auto-"


# ─────────────────────────────────────────────────────────────────────────────
# Scope extraction
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScopeIndex:
    """
    Tags present in every scope of a snapshot.

    Attributes:
        parts: Part by ref
        groups: (owning part, group) by group ref
        group_tags: Ordered tags per group scope, in the group's dialect
        part_headings: Heading tags per part, keyed by gap number
        part_body_keys: Every tag key present in a part body
    """

    parts: Dict[Ref, Part] = field(default_factory=dict)
    groups: Dict[Ref, Tuple[Part, QuestionGroup]] = field(default_factory=dict)
    group_tags: Dict[Ref, Tuple[GapTag, ...]] = field(default_factory=dict)
    part_headings: Dict[Ref, Dict[int, GapTag]] = field(default_factory=dict)
    part_body_keys: Dict[Ref, Set[TagKey]] = field(default_factory=dict)

    def group_keys(self, group_ref: Ref) -> Set[TagKey]:
        return {tag.key for tag in self.group_tags.get(group_ref, ())}

    def group_of(self, group_ref: Optional[Ref]) -> Optional[QuestionGroup]:
        if group_ref is None:
            return None
        entry = self.groups.get(group_ref)
        return entry[1] if entry else None


def _group_scope_tags(group: QuestionGroup) -> Tuple[GapTag, ...]:
    """Ordered, de-duplicated tags across all texts of a group."""
    if group.gap_dialect is TagDialect.HEADING:
        return ()
    seen: Set[TagKey] = set()
    tags: List[GapTag] = []
    for text in group.scope_texts():
        for tag in extract_tags(text, group.gap_dialect):
            if tag.key in seen:
                continue
            seen.add(tag.key)
            tags.append(tag)
    return tuple(tags)


def build_scope_index(parts: Iterable[Part]) -> ScopeIndex:
    """
    Extract per-scope tag sets from a list of parts.

    Args:
        parts: Current authored parts

    Returns:
        ScopeIndex covering every part and group
    """
    index = ScopeIndex()
    for part in parts:
        index.parts[part.ref] = part
        body_tags = extract_tags(part.body)
        index.part_body_keys[part.ref] = {tag.key for tag in body_tags}
        index.part_headings[part.ref] = {
            tag.number: tag for tag in body_tags if tag.dialect is TagDialect.HEADING
        }
        for group in part.groups:
            index.groups[group.ref] = (part, group)
            index.group_tags[group.ref] = _group_scope_tags(group)
    return index


# ─────────────────────────────────────────────────────────────────────────────
# Result
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ReconcileResult:
    """
    Outcome of one reconciliation pass.

    Attributes:
        questions: Reconciled question collection (the input tuple when
            nothing changed)
        removed: Questions pruned in this pass
        created: Questions synthesized in this pass
        updated: Questions whose answer or gap number was rewritten
    """

    questions: Tuple[Question, ...]
    removed: Tuple[Question, ...] = ()
    created: Tuple[Question, ...] = ()
    updated: Tuple[Question, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.removed or self.created or self.updated)

    @property
    def removed_persisted_refs(self) -> Tuple[Ref, ...]:
        """Refs of pruned questions that exist in the store."""
        return tuple(q.ref for q in self.removed if q.ref.is_persisted)

    @property
    def removed_persisted_ids(self) -> Tuple[str, ...]:
        """Store ids the caller must schedule for deletion."""
        return tuple(ref.value for ref in self.removed_persisted_refs)

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return (
            f"ReconcileResult(questions={len(self.questions)}, removed={len(self.removed)}, "
            f"created={len(self.created)}, updated={len(self.updated)})"
        )


# ─────────────────────────────────────────────────────────────────────────────
# Steps
# ─────────────────────────────────────────────────────────────────────────────

def _is_heading_question(question: Question, group: Optional[QuestionGroup]) -> bool:
    if group is not None and group.type is GroupType.MATCHING_HEADINGS:
        return True
    return question.effective_type(group) is GroupType.MATCHING_HEADINGS


def _heading_gap(question: Question) -> Optional[int]:
    """Explicit gap number, else the number of a heading tag in the prompt."""
    if question.gap_number is not None:
        return question.gap_number
    tag = first_tag(question.prompt, TagDialect.HEADING)
    return tag.number if tag is not None else None


def _is_backed(question: Question, index: ScopeIndex) -> bool:
    """True when the question's backing tag (if any) is still in its scope."""
    if question.part_ref not in index.parts:
        return False

    group: Optional[QuestionGroup] = None
    if question.group_ref is not None:
        group = index.group_of(question.group_ref)
        if group is None:
            return False

    if _is_heading_question(question, group):
        gap = _heading_gap(question)
        if gap is None:
            return False
        return gap in index.part_headings.get(question.part_ref, {})

    own = first_tag(question.prompt)
    if own is None:
        return True
    if group is None:
        return own.key in index.part_body_keys.get(question.part_ref, set())
    return own.key in index.group_keys(group.ref)


def _prune(
    questions: Sequence[Question],
    index: ScopeIndex,
) -> Tuple[List[Question], List[Question]]:
    kept: List[Question] = []
    removed: List[Question] = []
    for question in questions:
        if _is_backed(question, index):
            kept.append(question)
        else:
            removed.append(question)
    return kept, removed


def _unique_ref(base: str, used: Set[Ref]) -> Ref:
    candidate = Ref.pending(base)
    suffix = 2
    while candidate in used:
        candidate = Ref.pending(f"{base}-{suffix}")
        suffix += 1
    return candidate


def _grow(
    questions: List[Question],
    parts: Sequence[Part],
    index: ScopeIndex,
    config: SyncConfig,
) -> List[Question]:
    """
    Synthesize questions for tags in auto-growing groups that have none.

    Checked against `questions` as already pruned in this pass, so a
    tag is never synthesized twice.
    """
    used_refs: Set[Ref] = {q.ref for q in questions}
    covered: Dict[Ref, Set[TagKey]] = {}
    for question in questions:
        if question.group_ref is None:
            continue
        own = first_tag(question.prompt)
        if own is not None:
            covered.setdefault(question.group_ref, set()).add(own.key)

    created: List[Question] = []
    for part in parts:
        for group in part.groups:
            if not config.grows(group.type):
                continue
            have = covered.setdefault(group.ref, set())
            missing = [t for t in index.group_tags.get(group.ref, ()) if t.key not in have]
            for tag in sorted(missing, key=lambda t: t.number):
                ref = _unique_ref(f"{AUTO_REF_PREFIX}{group.ref.value}-{tag.token}", used_refs)
                used_refs.add(ref)
                have.add(tag.key)
                created.append(Question(
                    ref=ref,
                    part_ref=part.ref,
                    group_ref=group.ref,
                    type=group.type,
                    prompt=config.prompt_for(group.type, tag.token, tag.number),
                    correct_answer="",
                    order_index=tag.number,
                ))
    return created


def _propagate_heading_answers(
    questions: List[Question],
    index: ScopeIndex,
) -> Tuple[List[Question], List[Question]]:
    """Backfill heading gap numbers and copy inline answers from the body."""
    result: List[Question] = []
    updated: List[Question] = []
    for question in questions:
        group = index.group_of(question.group_ref)
        if not _is_heading_question(question, group):
            result.append(question)
            continue

        gap = _heading_gap(question)
        new = question
        if gap is not None and question.gap_number is None:
            new = replace(new, gap_number=gap)

        tag = index.part_headings.get(question.part_ref, {}).get(gap) if gap is not None else None
        if tag is not None and tag.inline_answer is not None and new.correct_answer != tag.inline_answer:
            new = replace(new, correct_answer=tag.inline_answer)

        if new != question:
            updated.append(new)
        result.append(new)
    return result, updated


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def reconcile(
    parts: Sequence[Part],
    questions: Sequence[Question],
    config: Optional[SyncConfig] = None,
) -> ReconcileResult:
    """
    Reconcile the question collection against the tags in content.

    Args:
        parts: Current authored parts (with their groups)
        questions: Current question collection
        config: Sync configuration (defaults to SyncConfig())

    Returns:
        ReconcileResult; `changed` is False and `questions` is the input
        when the snapshot was already consistent

    Example:
        >>> group = QuestionGroup(Ref.pending("temp-g1"), GroupType.NOTE_COMPLETION,
        ...                       group_text="Item [[n1]] and [[n2]]")
        >>> part = Part(Ref.persisted("p1"), groups=(group,))
        >>> result = reconcile([part], [])
        >>> [q.order_index for q in result.questions]
        [1, 2]
    """
    config = config or SyncConfig()
    current = tuple(questions)
    index = build_scope_index(parts)

    kept, removed = _prune(current, index)
    kept, updated = _propagate_heading_answers(kept, index)
    created = _grow(kept, parts, index, config)
    reconciled = kept + created

    if not (removed or created or updated):
        return ReconcileResult(questions=current)

    logger.debug(
        f"Reconciled {len(current)} questions: removed={len(removed)}, "
        f"created={len(created)}, updated={len(updated)}"
    )
    return ReconcileResult(
        questions=tuple(reconciled),
        removed=tuple(removed),
        created=tuple(created),
        updated=tuple(updated),
    )
