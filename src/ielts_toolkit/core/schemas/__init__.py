"""
Schemas Package

Snapshot validation utilities.
"""

from .validator import (
    validate_group,
    validate_part,
    validate_question,
    validate_snapshot,
    ValidationError,
    SNAPSHOT_SCHEMA_VERSION,
)

__all__ = [
    "validate_group",
    "validate_part",
    "validate_question",
    "validate_snapshot",
    "ValidationError",
    "SNAPSHOT_SCHEMA_VERSION",
]
