"""
Serialization Utilities

Provides to/from JSON utilities for the core models.

- Clean separation: `deserialize_*` validate before building models
- All models have `to_dict()` and `from_dict()` methods
- Question banks are JSONL (one question per line); response sets and
  exams are plain JSON documents
- Derived values (marks awarded, summaries) are never read back as input
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List

from ..models.exams import Exam
from ..models.questions import Question
from ..models.responses import StudentResponse
from ..schemas.validator import (
    ValidationError,
    validate_exam,
    validate_question,
    validate_response,
)

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Questions
# ─────────────────────────────────────────────────────────────────────────────

def deserialize_question(data: dict[str, Any], *, validate: bool = True, strict: bool = False) -> Question:
    """
    Deserialize a Question from a dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate the payload first
        strict: Use full JSON Schema validation

    Returns:
        Question instance

    Raises:
        ValidationError: If validate=True and data is invalid
        ValueError: If data cannot be parsed
    """
    if validate:
        validate_question(data, strict=strict)
    return Question.from_dict(data)


def load_questions_jsonl(path: Path, *, strict: bool = False) -> List[Question]:
    """
    Load a question bank from a JSONL file.

    Blank lines are skipped. Any invalid record fails the whole load with
    the line number attached, so a broken bank is never half-imported.

    Args:
        path: Path to questions.jsonl
        strict: Use full JSON Schema validation

    Returns:
        Questions in file order

    Raises:
        ValidationError: If a record is invalid
    """
    questions: List[Question] = []
    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError as e:
                raise ValidationError(f"Invalid JSON on line {line_no}: {e}", path=f"line {line_no}") from e
            try:
                questions.append(deserialize_question(data, strict=strict))
            except ValidationError as e:
                raise ValidationError(f"Line {line_no}: {e}", path=e.path, errors=e.errors) from e
    logger.info(f"Loaded {len(questions)} questions from {path.name}")
    return questions


def save_questions_jsonl(questions: Iterable[Question], path: Path) -> None:
    """Write questions to a JSONL file, one record per line."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for question in questions:
            f.write(json.dumps(question.to_dict(), ensure_ascii=False) + "\n")


# ─────────────────────────────────────────────────────────────────────────────
# Responses
# ─────────────────────────────────────────────────────────────────────────────

def deserialize_response(data: dict[str, Any], *, validate: bool = True, strict: bool = False) -> StudentResponse:
    """Deserialize a StudentResponse, validating the payload first."""
    if validate:
        validate_response(data, strict=strict)
    return StudentResponse.from_dict(data)


def load_responses_json(path: Path, *, strict: bool = False) -> List[StudentResponse]:
    """
    Load a submitted response set.

    Accepts either a bare list of responses or {"responses": [...]}.

    Args:
        path: Path to responses JSON
        strict: Use full JSON Schema validation

    Returns:
        Responses in submission order
    """
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    if isinstance(payload, dict):
        payload = payload.get("responses", [])
    if not isinstance(payload, list):
        raise ValidationError("Response set must be a list", path="responses")
    return [deserialize_response(item, strict=strict) for item in payload]


def save_responses_json(responses: Iterable[StudentResponse], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"responses": [r.to_dict() for r in responses]}, f, indent=2, ensure_ascii=False)


# ─────────────────────────────────────────────────────────────────────────────
# Exams
# ─────────────────────────────────────────────────────────────────────────────

def load_exam_json(path: Path, *, strict: bool = False) -> Exam:
    """Load and validate an exam record."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    validate_exam(data, strict=strict)
    return Exam.from_dict(data)
