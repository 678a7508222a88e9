"""
Module: config

Purpose:
    Configuration dataclasses for synchronization and scoring. Immutable
    configuration with validation on construction.

Key Classes:
    - SyncConfig: Debounce delay, auto-growing types, prompt templates
    - ScoringConfig: Answer separators and band scale

Dependencies:
    - dataclasses (std)

Used By:
    - sync.reconciler: Grow step
    - sync.scheduler: Debounce window
    - scoring.evaluator / scoring.report
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet

from ielts_toolkit.core.models.groups import AUTO_GROWING_TYPES, GroupType


DEFAULT_PROMPT_TEMPLATE = "Gap {number}: {tag}"

DEFAULT_PROMPT_TEMPLATES: Dict[GroupType, str] = {
    GroupType.NOTE_COMPLETION: "Gap {number}: {tag}",
    GroupType.SUMMARY_COMPLETION: "Gap {number}: {tag}",
    GroupType.TABLE_COMPLETION: "Gap {number} from table: {tag}",
    GroupType.DIAGRAM_COMPLETION: "Gap {number}: {tag}",
    GroupType.FLOWCHART_COMPLETION: "{tag}",
}


@dataclass(frozen=True)
class SyncConfig:
    """
    Configuration for question synchronization (immutable).

    Attributes:
        debounce_ms: Delay after the last edit before reconciling
        auto_grow_types: Group types whose questions are created from tags
        prompt_templates: Per-type prompt for synthesized questions; must
            contain "{tag}" and may contain "{number}"

    Invariants:
        - debounce_ms >= 0
        - every template embeds "{tag}"

    Example:
        >>> config = SyncConfig(debounce_ms=500)
        >>> config.prompt_for(GroupType.FLOWCHART_COMPLETION, "[f2]", 2)
        '[f2]'
    """

    debounce_ms: int = 2000
    auto_grow_types: FrozenSet[GroupType] = AUTO_GROWING_TYPES
    prompt_templates: Dict[GroupType, str] = field(
        default_factory=lambda: dict(DEFAULT_PROMPT_TEMPLATES)
    )

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.debounce_ms < 0:
            raise ValueError(f"debounce_ms must be non-negative: {self.debounce_ms}")
        for group_type, template in self.prompt_templates.items():
            if "{tag}" not in template:
                raise ValueError(f"Prompt template for {group_type} must contain {{tag}}: {template!r}")

    def grows(self, group_type: GroupType) -> bool:
        return group_type in self.auto_grow_types

    def prompt_for(self, group_type: GroupType, tag: str, number: int) -> str:
        """
        Build the prompt for a synthesized question.

        Args:
            group_type: Owning group type
            tag: Canonical tag token, e.g. "[[n3]]"
            number: Tag number

        Returns:
            Prompt text embedding the tag
        """
        template = self.prompt_templates.get(group_type, DEFAULT_PROMPT_TEMPLATE)
        return template.format(tag=tag, number=number)


@dataclass(frozen=True)
class ScoringConfig:
    """
    Configuration for answer evaluation and scoring (immutable).

    Attributes:
        alternative_separator: Separator between accepted answers
        gap_separator: Separator joining per-gap values of a multi-gap answer
        band_scale: Band awarded for a perfect section

    Invariants:
        - separators are non-empty and different
        - band_scale > 0
    """

    alternative_separator: str = "/"
    gap_separator: str = "|"
    band_scale: float = 9.0

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.alternative_separator or not self.gap_separator:
            raise ValueError("Separators must be non-empty")
        if self.alternative_separator == self.gap_separator:
            raise ValueError(
                f"alternative_separator and gap_separator must differ: {self.gap_separator!r}"
            )
        if self.band_scale <= 0:
            raise ValueError(f"band_scale must be positive: {self.band_scale}")
