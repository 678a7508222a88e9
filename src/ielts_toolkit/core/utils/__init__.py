"""
Utils Package

Serialization and utility functions.
"""

from .serialization import (
    SnapshotError,
    serialize_ref,
    deserialize_ref,
    serialize_group,
    deserialize_group,
    serialize_part,
    deserialize_part,
    serialize_question,
    deserialize_question,
    serialize_snapshot,
    deserialize_snapshot,
    load_snapshot,
    save_snapshot,
    load_questions_jsonl,
    save_questions_jsonl,
)

__all__ = [
    "SnapshotError",
    "serialize_ref",
    "deserialize_ref",
    "serialize_group",
    "deserialize_group",
    "serialize_part",
    "deserialize_part",
    "serialize_question",
    "deserialize_question",
    "serialize_snapshot",
    "deserialize_snapshot",
    "load_snapshot",
    "save_snapshot",
    "load_questions_jsonl",
    "save_questions_jsonl",
]
