"""
Unit Tests for Payload Validation

Tests basic and strict (JSON Schema) validation of question, response and
exam payloads.
"""

import pytest

from exam_scoring.core.schemas import (
    ValidationError,
    validate_exam,
    validate_question,
    validate_response,
)


def _question(**overrides):
    data = {
        "id": "q1",
        "type": "SINGLE_CHOICE",
        "text": "2 + 2?",
        "difficulty": "EASY",
        "marks": 2,
        "options": [{"id": "a", "text": "4", "is_correct": True}],
    }
    data.update(overrides)
    return data


class TestValidateQuestion:
    """Tests for validate_question."""

    def test_validate_when_valid_then_passes(self):
        validate_question(_question())
        validate_question(_question(), strict=True)

    def test_validate_when_missing_fields_then_lists_them(self):
        with pytest.raises(ValidationError) as exc:
            validate_question({"id": "q1"})
        assert "Missing field: type" in exc.value.errors
        assert "Missing field: marks" in exc.value.errors

    def test_validate_when_unknown_type_then_raises_with_path(self):
        with pytest.raises(ValidationError) as exc:
            validate_question(_question(type="COMPOUND_CHOICE"))
        assert exc.value.path == "type"

    @pytest.mark.parametrize("marks", [0, -1, True, "2"])
    def test_validate_when_marks_invalid_then_raises(self, marks):
        with pytest.raises(ValidationError, match="Invalid marks"):
            validate_question(_question(marks=marks))

    def test_validate_when_option_without_id_then_raises(self):
        with pytest.raises(ValidationError) as exc:
            validate_question(_question(options=[{"text": "4"}]))
        assert exc.value.path == "options[0]"

    def test_validate_when_option_text_not_string_then_raises(self):
        with pytest.raises(ValidationError) as exc:
            validate_question(_question(options=[{"id": "a", "text": 4}]))
        assert exc.value.path == "options[0].text"


class TestValidateResponse:
    """Tests for validate_response."""

    def test_validate_when_negative_time_then_raises(self):
        with pytest.raises(ValidationError, match="time_spent_seconds"):
            validate_response({"question_id": "q1", "time_spent_seconds": -5})

    def test_validate_when_selection_not_list_then_raises(self):
        with pytest.raises(ValidationError, match="must be a list"):
            validate_response({"question_id": "q1", "selected_option_ids": "a"})

    def test_validate_when_strict_and_valid_then_passes(self):
        validate_response(
            {"question_id": "q1", "blank_answers": ["Paris"], "time_spent_seconds": 3},
            strict=True,
        )

    @pytest.mark.parametrize("field,value,path", [
        ("free_text", 5, "free_text"),
        ("blank_answers", ["Paris", 3], "blank_answers[1]"),
        ("blank_answers", "Paris", "blank_answers"),
        ("matches", {"p1": None}, "matches.p1"),
        ("selected_option_ids", ["a", 1], "selected_option_ids[1]"),
    ])
    def test_validate_when_answer_has_wrong_type_then_raises_with_path(self, field, value, path):
        with pytest.raises(ValidationError) as exc:
            validate_response({"question_id": "q1", field: value})
        assert exc.value.path == path


class TestValidateExam:
    """Tests for validate_exam."""

    def test_validate_when_unknown_count_type_then_raises(self):
        with pytest.raises(ValidationError) as exc:
            validate_exam({
                "id": "e1",
                "passing_marks": 5,
                "duration_minutes": 10,
                "question_counts": {"ESSAYS": 2},
            })
        assert exc.value.path == "question_counts.ESSAYS"

    def test_validate_when_missing_duration_then_raises(self):
        with pytest.raises(ValidationError, match="duration_minutes"):
            validate_exam({"id": "e1", "passing_marks": 5})

    def test_validate_when_duration_not_number_then_raises(self):
        with pytest.raises(ValidationError, match="must be a number"):
            validate_exam({"id": "e1", "passing_marks": 5, "duration_minutes": "ten"})
