"""
Module: sync

Purpose:
    Keeps the question collection in step with the gap tags in authored
    content.

Key Modules:
    - reconciler: Pure reconcile() over a snapshot
    - scheduler: Debounced QTimer wrapper
    - session: In-memory authoring state with pending deletions

Dependencies:
    - PySide6 (scheduler and session only)
"""

from .reconciler import ReconcileResult, ScopeIndex, build_scope_index, reconcile

__all__ = [
    "ReconcileResult",
    "ScopeIndex",
    "build_scope_index",
    "reconcile",
]
