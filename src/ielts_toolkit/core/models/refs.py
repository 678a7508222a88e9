"""
Module: refs

Purpose:
    Provides the Ref dataclass - a single opaque identifier for parts,
    groups and questions. A record is either persisted (durable id from the
    store) or pending (temporary id minted by the editor before the first
    save). Callers compare refs directly instead of checking id prefixes.

Key Functions:
    - Ref.persisted(value): Durable identifier
    - Ref.pending(value): Temporary pre-save identifier
    - Ref.parse(raw): Map a raw store identifier to a Ref

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - core.models.parts.Part
    - core.models.groups.QuestionGroup
    - core.models.questions.Question
    - sync.reconciler: Reports removed persisted ids
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


# Prefix the editor uses when minting temporary identifiers
PENDING_PREFIX = "temp-"


class RefKind(str, Enum):
    """Whether a record has been saved to the store yet."""
    PERSISTED = "persisted"
    PENDING = "pending"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Ref:
    """
    Identifier for a part, group or question (immutable, hashable).

    Attributes:
        kind: PERSISTED or PENDING
        value: Raw identifier string

    Invariants:
        - value is a non-empty string

    Example:
        >>> Ref.parse("temp-q-17")
        Ref(pending:'temp-q-17')
        >>> Ref.parse(42).is_persisted
        True
    """

    kind: RefKind
    value: str

    def __post_init__(self) -> None:
        """Validate ref on construction."""
        if not isinstance(self.value, str) or not self.value:
            raise ValueError(f"Ref value must be a non-empty string: {self.value!r}")
        if not isinstance(self.kind, RefKind):
            raise ValueError(f"Invalid ref kind: {self.kind!r}")

    # ─────────────────────────────────────────────────────────────────────────
    # Factory Methods
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def persisted(cls, value: Union[str, int]) -> Ref:
        """Ref for a record that already exists in the store."""
        return cls(kind=RefKind.PERSISTED, value=str(value))

    @classmethod
    def pending(cls, value: str) -> Ref:
        """Ref for a record that has not been saved yet."""
        return cls(kind=RefKind.PENDING, value=str(value))

    @classmethod
    def parse(cls, raw: Union[str, int, Ref, None]) -> Optional[Ref]:
        """
        Map a raw identifier from the store to a Ref.

        This is the only place the temporary-id prefix is interpreted.

        Args:
            raw: Identifier string/int, an existing Ref, or None

        Returns:
            Ref, or None when raw is None or empty
        """
        if raw is None or raw == "":
            return None
        if isinstance(raw, Ref):
            return raw
        text = str(raw)
        if text.startswith(PENDING_PREFIX):
            return cls.pending(text)
        return cls.persisted(text)

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_persisted(self) -> bool:
        return self.kind is RefKind.PERSISTED

    @property
    def is_pending(self) -> bool:
        return self.kind is RefKind.PENDING

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict) -> Ref:
        return cls(kind=RefKind(data["kind"]), value=str(data["value"]))

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"Ref({self.kind.value}:{self.value!r})"


# Alias used where only question identifiers are meant
QuestionRef = Ref
