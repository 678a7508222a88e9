"""
Schema Validation Utilities

Validates snapshot dictionaries (parts, groups, questions) before they are
turned into models.

Checks are structural: required fields, field types and enum values.
Semantic consistency (orphaned questions, missing tags) is not a
validation error - the reconciler heals it.
"""

from __future__ import annotations

from typing import Any

from ..models.groups import GroupType


# Schema version constants
SNAPSHOT_SCHEMA_VERSION = 1

_GROUP_TYPES = frozenset(t.value for t in GroupType)


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _is_id(value: Any) -> bool:
    if isinstance(value, dict):
        return "kind" in value and "value" in value
    return isinstance(value, (str, int)) and not isinstance(value, bool) and value != ""


def _require(data: Any, required: list[str], path: str) -> None:
    if not isinstance(data, dict):
        raise ValidationError(f"Expected an object, got {type(data).__name__}", path=path)
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing]
        )


def _check_str(data: dict[str, Any], key: str, path: str) -> None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{key} must be a string", path=f"{path}.{key}")


def _check_str_list(data: dict[str, Any], key: str, path: str) -> None:
    value = data.get(key)
    if value is None:
        return
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"{key} must be a list of strings", path=f"{path}.{key}")


def validate_group(data: dict[str, Any], path: str = "group") -> None:
    """
    Validate a question group dictionary.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, ["id", "type"], path)
    if not _is_id(data["id"]):
        raise ValidationError(f"Invalid group id: {data['id']!r}", path=f"{path}.id")
    if data["type"] not in _GROUP_TYPES:
        raise ValidationError(f"Invalid group type: {data['type']!r}", path=f"{path}.type")

    for key in ("instruction", "group_text", "image_url", "title"):
        _check_str(data, key, path)
    _check_str_list(data, "options", path)

    table = data.get("table")
    if table is not None:
        if not isinstance(table, dict):
            raise ValidationError("table must be an object", path=f"{path}.table")
        rows = table.get("rows", [])
        if not isinstance(rows, list) or not all(isinstance(r, list) for r in rows):
            raise ValidationError("table.rows must be a list of lists", path=f"{path}.table.rows")

    flowchart = data.get("flowchart")
    if flowchart is not None:
        _validate_flowchart(flowchart, f"{path}.flowchart")

    sections = data.get("sections")
    if sections is not None:
        if not isinstance(sections, list):
            raise ValidationError("sections must be a list", path=f"{path}.sections")
        for i, section in enumerate(sections):
            section_path = f"{path}.sections[{i}]"
            if not isinstance(section, dict):
                raise ValidationError("section must be an object", path=section_path)
            for key in ("title", "content"):
                _check_str(section, key, section_path)


def _validate_flowchart(flowchart: Any, path: str) -> None:
    """Check steps and split-step branches ("theories") are objects with string texts."""
    if not isinstance(flowchart, dict) or not isinstance(flowchart.get("steps", []), list):
        raise ValidationError("flowchart.steps must be a list", path=path)

    for i, step in enumerate(flowchart.get("steps") or []):
        step_path = f"{path}.steps[{i}]"
        if not isinstance(step, dict):
            raise ValidationError("flowchart step must be an object", path=step_path)
        _check_str(step, "text", step_path)

        theories = step.get("theories")
        if theories is None:
            continue
        if not isinstance(theories, list):
            raise ValidationError("theories must be a list", path=f"{step_path}.theories")
        for j, theory in enumerate(theories):
            theory_path = f"{step_path}.theories[{j}]"
            if not isinstance(theory, dict):
                raise ValidationError("flowchart branch must be an object", path=theory_path)
            for key in ("title", "text"):
                _check_str(theory, key, theory_path)


def validate_part(data: dict[str, Any], path: str = "part") -> None:
    """
    Validate a part dictionary, including its groups.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, ["id"], path)
    if not _is_id(data["id"]):
        raise ValidationError(f"Invalid part id: {data['id']!r}", path=f"{path}.id")

    order_index = data.get("order_index", 0)
    if not isinstance(order_index, int) or order_index < 0:
        raise ValidationError(
            f"Invalid order_index: {order_index} (must be non-negative integer)",
            path=f"{path}.order_index"
        )
    for key in ("title", "body", "instructions", "image_url"):
        _check_str(data, key, path)

    groups = data.get("groups", [])
    if not isinstance(groups, list):
        raise ValidationError("groups must be a list", path=f"{path}.groups")
    for i, group in enumerate(groups):
        validate_group(group, f"{path}.groups[{i}]")


def validate_question(data: dict[str, Any], path: str = "question") -> None:
    """
    Validate a question dictionary.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, ["id", "part_id"], path)
    if not _is_id(data["id"]):
        raise ValidationError(f"Invalid question id: {data['id']!r}", path=f"{path}.id")
    if not _is_id(data["part_id"]):
        raise ValidationError(f"Invalid part_id: {data['part_id']!r}", path=f"{path}.part_id")

    group_id = data.get("group_id")
    if group_id is not None and not _is_id(group_id):
        raise ValidationError(f"Invalid group_id: {group_id!r}", path=f"{path}.group_id")

    question_type = data.get("type")
    if question_type is not None and question_type not in _GROUP_TYPES:
        raise ValidationError(f"Invalid question type: {question_type!r}", path=f"{path}.type")

    for key in ("prompt", "correct_answer"):
        _check_str(data, key, path)
    _check_str_list(data, "options", path)

    order_index = data.get("order_index", 0)
    if not isinstance(order_index, int):
        raise ValidationError(f"Invalid order_index: {order_index!r}", path=f"{path}.order_index")

    gap_number = data.get("gap_number")
    if gap_number is not None and (not isinstance(gap_number, int) or gap_number < 0):
        raise ValidationError(f"Invalid gap_number: {gap_number!r}", path=f"{path}.gap_number")

    points = data.get("points", 1)
    if not isinstance(points, int) or points < 0:
        raise ValidationError(
            f"Invalid points: {points} (must be non-negative integer)",
            path=f"{path}.points"
        )


def validate_snapshot(data: dict[str, Any]) -> None:
    """
    Validate a whole snapshot: schema version, parts and questions.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, ["schema_version", "parts", "questions"], "")

    version = data.get("schema_version")
    if version != SNAPSHOT_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported snapshot schema version: {version} (expected {SNAPSHOT_SCHEMA_VERSION})",
            path="schema_version"
        )

    if not isinstance(data["parts"], list):
        raise ValidationError("parts must be a list", path="parts")
    if not isinstance(data["questions"], list):
        raise ValidationError("questions must be a list", path="questions")

    for i, part in enumerate(data["parts"]):
        validate_part(part, f"parts[{i}]")
    for i, question in enumerate(data["questions"]):
        validate_question(question, f"questions[{i}]")
