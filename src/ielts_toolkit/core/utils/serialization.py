"""
Serialization Utilities

Provides to/from dict and JSON utilities for the snapshot models.

- `serialize_*` / `deserialize_*` for parts, groups and questions
- `load_snapshot` / `save_snapshot` for a whole section snapshot
- `load_questions_jsonl` / `save_questions_jsonl` for question rows
- Validation via schemas before deserialization
- Ids are written as raw strings; pending ids keep their "temp-" prefix
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Sequence

from ..models.groups import (
    Flowchart,
    GroupType,
    NoteSection,
    QuestionGroup,
    Table,
)
from ..models.parts import Part
from ..models.questions import Question
from ..models.refs import PENDING_PREFIX, Ref
from ..schemas.validator import (
    SNAPSHOT_SCHEMA_VERSION,
    ValidationError,
    validate_group,
    validate_part,
    validate_question,
    validate_snapshot,
)

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """Raised when a snapshot file cannot be read or parsed."""


# ─────────────────────────────────────────────────────────────────────────────
# Refs
# ─────────────────────────────────────────────────────────────────────────────

def serialize_ref(ref: Ref | None) -> Any:
    """
    Write a ref as its raw id when that round-trips through Ref.parse,
    else as an explicit {"kind", "value"} object.
    """
    if ref is None:
        return None
    if ref.is_pending == ref.value.startswith(PENDING_PREFIX):
        return ref.value
    return ref.to_dict()


def deserialize_ref(raw: Any) -> Ref | None:
    if isinstance(raw, dict):
        return Ref.from_dict(raw)
    return Ref.parse(raw)


# ─────────────────────────────────────────────────────────────────────────────
# Groups
# ─────────────────────────────────────────────────────────────────────────────

def serialize_group(group: QuestionGroup) -> dict[str, Any]:
    """Serialize a QuestionGroup to a dictionary."""
    d: dict[str, Any] = {
        "id": serialize_ref(group.ref),
        "type": group.type.value,
        "instruction": group.instruction,
        "options": list(group.options),
        "group_text": group.group_text,
    }
    if group.table is not None:
        d["table"] = group.table.to_dict()
    if group.flowchart is not None:
        d["flowchart"] = group.flowchart.to_dict()
    if group.sections:
        d["sections"] = [{"title": s.title, "content": s.content} for s in group.sections]
    if group.image_url:
        d["image_url"] = group.image_url
    if group.title:
        d["title"] = group.title
    return d


def deserialize_group(data: dict[str, Any], *, validate: bool = True) -> QuestionGroup:
    """
    Deserialize a QuestionGroup from a dictionary.

    Raises:
        ValidationError: If validate=True and data is invalid
    """
    if validate:
        validate_group(data)

    return QuestionGroup(
        ref=deserialize_ref(data["id"]),
        type=GroupType(data["type"]),
        instruction=data.get("instruction") or "",
        options=tuple(data.get("options") or []),
        group_text=data.get("group_text") or "",
        table=Table.from_dict(data["table"]) if data.get("table") else None,
        flowchart=Flowchart.from_dict(data["flowchart"]) if data.get("flowchart") else None,
        sections=tuple(
            NoteSection(title=s.get("title") or "", content=s.get("content") or "")
            for s in data.get("sections") or []
        ),
        image_url=data.get("image_url") or "",
        title=data.get("title") or "",
    )


# ─────────────────────────────────────────────────────────────────────────────
# Parts
# ─────────────────────────────────────────────────────────────────────────────

def serialize_part(part: Part) -> dict[str, Any]:
    """Serialize a Part (with its groups) to a dictionary."""
    return {
        "id": serialize_ref(part.ref),
        "order_index": part.order_index,
        "title": part.title,
        "body": part.body,
        "instructions": part.instructions,
        "image_url": part.image_url,
        "groups": [serialize_group(g) for g in part.groups],
    }


def deserialize_part(data: dict[str, Any], *, validate: bool = True) -> Part:
    """
    Deserialize a Part from a dictionary.

    Raises:
        ValidationError: If validate=True and data is invalid
    """
    if validate:
        validate_part(data)

    return Part(
        ref=deserialize_ref(data["id"]),
        order_index=data.get("order_index", 0),
        title=data.get("title") or "",
        body=data.get("body") or "",
        groups=tuple(deserialize_group(g, validate=False) for g in data.get("groups") or []),
        instructions=data.get("instructions") or "",
        image_url=data.get("image_url") or "",
    )


# ─────────────────────────────────────────────────────────────────────────────
# Questions
# ─────────────────────────────────────────────────────────────────────────────

def serialize_question(question: Question) -> dict[str, Any]:
    """
    Serialize a Question to a dictionary.

    Optional fields are omitted when unset.
    """
    d: dict[str, Any] = {
        "id": serialize_ref(question.ref),
        "part_id": serialize_ref(question.part_ref),
        "prompt": question.prompt,
        "correct_answer": question.correct_answer,
        "order_index": question.order_index,
        "points": question.points,
    }
    if question.group_ref is not None:
        d["group_id"] = serialize_ref(question.group_ref)
    if question.type is not None:
        d["type"] = question.type.value
    if question.options:
        d["options"] = list(question.options)
    if question.gap_number is not None:
        d["gap_number"] = question.gap_number
    return d


def deserialize_question(data: dict[str, Any], *, validate: bool = True) -> Question:
    """
    Deserialize a Question from a dictionary.

    Raises:
        ValidationError: If validate=True and data is invalid
    """
    if validate:
        validate_question(data)

    return Question(
        ref=deserialize_ref(data["id"]),
        part_ref=deserialize_ref(data["part_id"]),
        group_ref=deserialize_ref(data.get("group_id")),
        type=GroupType(data["type"]) if data.get("type") else None,
        prompt=data.get("prompt") or "",
        correct_answer=data.get("correct_answer") or "",
        options=tuple(data.get("options") or []),
        order_index=data.get("order_index", 0),
        gap_number=data.get("gap_number"),
        points=data.get("points", 1),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Snapshots
# ─────────────────────────────────────────────────────────────────────────────

def serialize_snapshot(parts: Sequence[Part], questions: Sequence[Question]) -> dict[str, Any]:
    """Serialize parts and questions into one snapshot dictionary."""
    return {
        "schema_version": SNAPSHOT_SCHEMA_VERSION,
        "parts": [serialize_part(p) for p in parts],
        "questions": [serialize_question(q) for q in questions],
    }


def deserialize_snapshot(
    data: dict[str, Any],
    *,
    validate: bool = True,
) -> tuple[tuple[Part, ...], tuple[Question, ...]]:
    """
    Deserialize a snapshot dictionary.

    Args:
        data: Snapshot dictionary
        validate: Whether to validate the whole snapshot first

    Returns:
        (parts, questions)

    Raises:
        ValidationError: If validate=True and data is invalid
    """
    if validate:
        validate_snapshot(data)

    parts = tuple(deserialize_part(p, validate=False) for p in data.get("parts", []))
    questions = tuple(deserialize_question(q, validate=False) for q in data.get("questions", []))
    return parts, questions


def load_snapshot(path: Path, *, validate: bool = True) -> tuple[tuple[Part, ...], tuple[Question, ...]]:
    """
    Load a snapshot from a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        SnapshotError: If the file is not valid JSON
        ValidationError: If the snapshot is invalid
    """
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot file is corrupted: {path}: {e}") from e

    return deserialize_snapshot(data, validate=validate)


def save_snapshot(path: Path, parts: Sequence[Part], questions: Sequence[Question]) -> None:
    """Save parts and questions to a JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)

    data = serialize_snapshot(parts, questions)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


# ─────────────────────────────────────────────────────────────────────────────
# JSONL Utilities
# ─────────────────────────────────────────────────────────────────────────────

def load_questions_jsonl(
    path: Path,
    *,
    validate: bool = True,
    skip_invalid: bool = False,
) -> list[Question]:
    """
    Load question rows from a JSONL file.

    Args:
        path: Path to questions.jsonl file
        validate: Whether to validate each question
        skip_invalid: Log and skip bad lines instead of raising

    Returns:
        List of Question instances

    Raises:
        FileNotFoundError: If file doesn't exist
        ValidationError: If any question is invalid and skip_invalid is False
    """
    if not path.exists():
        raise FileNotFoundError(f"Questions file not found: {path}")

    questions = []
    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue

            try:
                data = json.loads(line)
                questions.append(deserialize_question(data, validate=validate))
            except (json.JSONDecodeError, ValidationError, ValueError) as e:
                if skip_invalid:
                    logger.warning(f"Skipping invalid question on line {line_no} of {path}: {e}")
                    continue
                raise ValidationError(
                    f"Error parsing line {line_no}: {e}",
                    path=str(path),
                    errors=[str(e)]
                ) from e

    return questions


def save_questions_jsonl(questions: Sequence[Question], path: Path) -> None:
    """Save questions to a JSONL file, one row per question."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        for question in questions:
            f.write(json.dumps(serialize_question(question), ensure_ascii=False))
            f.write("\n")
