"""
Module: sync.scheduler

Purpose:
    Debounced re-synchronization. Wraps the pure reconcile() in a single-shot
    QTimer so questions are not created and deleted on every keystroke while
    an author is typing a tag. The snapshot is fetched when the timer fires,
    never captured when it is scheduled, so two rapid edits in different
    scopes cannot resurrect a question the later edit removed.

Key Classes:
    - ReconcileScheduler: Timer + cancel-on-new-edit around reconcile()

Dependencies:
    - PySide6.QtCore: QObject, QTimer, Signal
    - sync.reconciler: reconcile()

Used By:
    - sync.session.AuthoringSession
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence, Tuple

from PySide6.QtCore import QObject, QTimer, Signal

from ielts_toolkit.config import SyncConfig
from ielts_toolkit.core.models.parts import Part
from ielts_toolkit.core.models.questions import Question
from ielts_toolkit.sync.reconciler import ReconcileResult, reconcile

logger = logging.getLogger(__name__)

SnapshotProvider = Callable[[], Tuple[Sequence[Part], Sequence[Question]]]


class ReconcileScheduler(QObject):
    """
    Debounce timer around reconcile().

    Each call to schedule() restarts the window. When the timer fires the
    latest snapshot is pulled from `snapshot_provider`, reconciled, handed
    to `apply` and announced via `reconciled` - only when something changed.

    Example:
        >>> scheduler = ReconcileScheduler(lambda: (state.parts, state.questions),
        ...                                apply=state.apply)
        >>> scheduler.schedule()   # after every content edit
    """

    reconciled = Signal(object)  # ReconcileResult

    def __init__(
        self,
        snapshot_provider: SnapshotProvider,
        apply: Optional[Callable[[ReconcileResult], None]] = None,
        config: Optional[SyncConfig] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._snapshot_provider = snapshot_provider
        self._apply = apply
        self._config = config or SyncConfig()

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def config(self) -> SyncConfig:
        return self._config

    def is_pending(self) -> bool:
        """True while a debounce window is open."""
        return self._timer.isActive()

    def schedule(self) -> None:
        """Open (or restart) the debounce window."""
        self._timer.start(self._config.debounce_ms)

    def cancel(self) -> None:
        """Drop a pending run without reconciling."""
        self._timer.stop()

    def flush(self) -> ReconcileResult:
        """
        Reconcile immediately, cancelling any pending window.

        Used before saving so the persisted snapshot is consistent.

        Returns:
            The ReconcileResult of the immediate run
        """
        self._timer.stop()
        return self._run()

    def _on_timeout(self) -> None:
        self._run()

    def _run(self) -> ReconcileResult:
        parts, questions = self._snapshot_provider()
        result = reconcile(parts, questions, self._config)
        if not result.changed:
            return result

        logger.info(
            f"Questions synced with content: {len(result.created)} added, "
            f"{len(result.removed)} removed, {len(result.updated)} updated"
        )
        if self._apply is not None:
            self._apply(result)
        self.reconciled.emit(result)
        return result
