"""
Module: sync.session

Purpose:
    In-memory authoring state for one test section. Holds the current
    snapshot, replaces it on every edit, schedules debounced reconciliation
    and accumulates the store ids that must be deleted on the next save.
    All persistence stays with the caller.

Key Classes:
    - AuthoringSession: Snapshot holder driving a ReconcileScheduler

Dependencies:
    - PySide6.QtCore: QObject, Signal
    - sync.scheduler: ReconcileScheduler

Used By:
    - Authoring surfaces (editor widgets, import scripts)
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence, Tuple

from PySide6.QtCore import QObject, Signal

from ielts_toolkit.config import SyncConfig
from ielts_toolkit.core.models.groups import QuestionGroup
from ielts_toolkit.core.models.parts import Part
from ielts_toolkit.core.models.questions import Question
from ielts_toolkit.core.models.refs import Ref
from ielts_toolkit.sync.reconciler import ReconcileResult
from ielts_toolkit.sync.scheduler import ReconcileScheduler

logger = logging.getLogger(__name__)


class AuthoringSession(QObject):
    """
    Current parts/questions plus pending deletions.

    Content edits replace parts and schedule reconciliation; question edits
    apply immediately. Deleting a persisted part or question records its id
    in `deleted_part_ids` / `deleted_question_ids` for the caller to flush
    to the store.
    """

    questionsChanged = Signal()
    partsChanged = Signal()

    def __init__(
        self,
        parts: Sequence[Part] = (),
        questions: Sequence[Question] = (),
        config: Optional[SyncConfig] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._parts: Tuple[Part, ...] = tuple(parts)
        self._questions: Tuple[Question, ...] = tuple(questions)
        self._deleted_question_ids: List[str] = []
        self._deleted_part_ids: List[str] = []
        self.scheduler = ReconcileScheduler(
            self.snapshot, apply=self._apply_result, config=config, parent=self
        )

    # ─────────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def parts(self) -> Tuple[Part, ...]:
        return self._parts

    @property
    def questions(self) -> Tuple[Question, ...]:
        return self._questions

    @property
    def deleted_question_ids(self) -> Tuple[str, ...]:
        return tuple(self._deleted_question_ids)

    @property
    def deleted_part_ids(self) -> Tuple[str, ...]:
        return tuple(self._deleted_part_ids)

    def snapshot(self) -> Tuple[Tuple[Part, ...], Tuple[Question, ...]]:
        return self._parts, self._questions

    # ─────────────────────────────────────────────────────────────────────────
    # Content edits (debounced reconciliation)
    # ─────────────────────────────────────────────────────────────────────────

    def set_parts(self, parts: Iterable[Part]) -> None:
        """Replace all parts (reorder, add, edit) and schedule a sync."""
        self._parts = tuple(parts)
        self.partsChanged.emit()
        self.scheduler.schedule()

    def replace_part(self, part: Part) -> None:
        """Swap in an edited part with the same ref."""
        self.set_parts(part if p.ref == part.ref else p for p in self._parts)

    def replace_group(self, part_ref: Ref, group: QuestionGroup) -> None:
        """Swap in an edited group inside a part."""
        for part in self._parts:
            if part.ref != part_ref:
                continue
            groups = tuple(group if g.ref == group.ref else g for g in part.groups)
            self.replace_part(replace(part, groups=groups))
            return
        logger.warning(f"replace_group: no part {part_ref!r}")

    def remove_part(self, part_ref: Ref) -> None:
        """Delete a part; its questions are pruned on the next sync."""
        if part_ref.is_persisted:
            self._remember(self._deleted_part_ids, [part_ref.value])
        self.set_parts(p for p in self._parts if p.ref != part_ref)

    # ─────────────────────────────────────────────────────────────────────────
    # Question edits (immediate)
    # ─────────────────────────────────────────────────────────────────────────

    def add_question(self, question: Question) -> None:
        self._questions = self._questions + (question,)
        self.questionsChanged.emit()

    def update_question(self, ref: Ref, **changes) -> None:
        """Apply field changes to one question."""
        self._questions = tuple(
            replace(q, **changes) if q.ref == ref else q for q in self._questions
        )
        self.questionsChanged.emit()

    def remove_question(self, ref: Ref) -> None:
        if ref.is_persisted:
            self._remember(self._deleted_question_ids, [ref.value])
        self._questions = tuple(q for q in self._questions if q.ref != ref)
        self.questionsChanged.emit()

    def mark_saved(self) -> None:
        """Forget pending deletions once the caller has flushed them."""
        self._deleted_question_ids.clear()
        self._deleted_part_ids.clear()

    # ─────────────────────────────────────────────────────────────────────────
    # Reconciliation
    # ─────────────────────────────────────────────────────────────────────────

    def _apply_result(self, result: ReconcileResult) -> None:
        self._questions = result.questions
        self._remember(self._deleted_question_ids, result.removed_persisted_ids)
        self.questionsChanged.emit()

    @staticmethod
    def _remember(target: List[str], ids: Iterable[str]) -> None:
        for value in ids:
            if value not in target:
                target.append(value)
