"""
Schema Validation Utilities

Validates JSON payloads from the question-bank and attempt-submission
services before they are turned into models.

- Basic checks always run and report the offending field path
- Strict mode additionally validates against the bundled JSON Schemas
- Fail fast on any violation
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

from ..models.questions import Difficulty, QuestionType


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}

_QUESTION_TYPES = {t.value for t in QuestionType}
_DIFFICULTIES = {d.value for d in Difficulty}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _require(data: dict[str, Any], required: list[str], path: str = "") -> None:
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing],
        )


def _check_str(value: Any, path: str, *, optional: bool = False) -> None:
    if value is None and optional:
        return
    if not isinstance(value, str):
        raise ValidationError(
            f"Invalid {path}: {value!r} (must be a string)",
            path=path,
        )


def _check_number(value: Any, path: str) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise ValidationError(f"Invalid {path}: {value!r} (must be a number)", path=path)


def _validate_strict(data: dict[str, Any], schema_name: str) -> None:
    schema = _load_schema(schema_name)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise ValidationError(
            f"Schema validation failed: {e.message}",
            path=".".join(str(p) for p in e.absolute_path),
            errors=[e.message],
        ) from e


def validate_question(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate a question-bank record.

    Args:
        data: Question dictionary to validate
        strict: If True, also validate against question.schema.json

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, ["id", "type", "marks"])

    _check_str(data.get("text", ""), "text")

    qtype = data.get("type")
    if qtype not in _QUESTION_TYPES:
        raise ValidationError(f"Invalid question type: {qtype!r}", path="type")

    difficulty = data.get("difficulty", "MEDIUM")
    if difficulty not in _DIFFICULTIES:
        raise ValidationError(f"Invalid difficulty: {difficulty!r}", path="difficulty")

    marks = data.get("marks")
    if not isinstance(marks, (int, float)) or isinstance(marks, bool) or marks <= 0:
        raise ValidationError(
            f"Invalid marks: {marks} (must be a positive number)",
            path="marks",
        )

    options = data.get("options", [])
    if not isinstance(options, list):
        raise ValidationError("options must be a list", path="options")
    for i, option in enumerate(options):
        if not isinstance(option, dict):
            raise ValidationError("option must be a dict", path=f"options[{i}]")
        _require(option, ["id"], path=f"options[{i}]")
        _check_str(option.get("text", ""), f"options[{i}].text")
        _check_str(option.get("match_text"), f"options[{i}].match_text", optional=True)

    if strict:
        _validate_strict(data, "question")


def validate_response(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate a submitted response.

    Args:
        data: Response dictionary to validate
        strict: If True, also validate against response.schema.json

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, ["question_id"])

    time_spent = data.get("time_spent_seconds", 0)
    if not isinstance(time_spent, (int, float)) or isinstance(time_spent, bool) or time_spent < 0:
        raise ValidationError(
            f"Invalid time_spent_seconds: {time_spent} (must be non-negative)",
            path="time_spent_seconds",
        )

    selected = data.get("selected_option_ids", [])
    if not isinstance(selected, list):
        raise ValidationError("selected_option_ids must be a list", path="selected_option_ids")
    for i, option_id in enumerate(selected):
        _check_str(option_id, f"selected_option_ids[{i}]")

    _check_str(data.get("free_text"), "free_text", optional=True)

    blanks = data.get("blank_answers", [])
    if not isinstance(blanks, list):
        raise ValidationError("blank_answers must be a list", path="blank_answers")
    for i, answer in enumerate(blanks):
        _check_str(answer, f"blank_answers[{i}]")

    matches = data.get("matches", {})
    if not isinstance(matches, dict):
        raise ValidationError("matches must be a mapping", path="matches")
    for premise, chosen in matches.items():
        _check_str(chosen, f"matches.{premise}")

    if strict:
        _validate_strict(data, "response")


def validate_exam(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate an exam record.

    Args:
        data: Exam dictionary to validate
        strict: If True, also validate against exam.schema.json

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, ["id", "passing_marks", "duration_minutes"])
    _check_number(data["passing_marks"], "passing_marks")
    _check_number(data["duration_minutes"], "duration_minutes")

    for qtype in data.get("question_counts", {}):
        if qtype not in _QUESTION_TYPES:
            raise ValidationError(
                f"Invalid question type in question_counts: {qtype!r}",
                path=f"question_counts.{qtype}",
            )

    if strict:
        _validate_strict(data, "exam")
