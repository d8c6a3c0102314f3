"""
Unit Tests for Serialization Utilities

Tests loading and saving question banks, response sets and exam records.
"""

import json

import pytest

from exam_scoring.core.models import QuestionType, StudentResponse
from exam_scoring.core.schemas import ValidationError
from exam_scoring.core.utils import (
    load_exam_json,
    load_questions_jsonl,
    load_responses_json,
    save_questions_jsonl,
    save_responses_json,
)


class TestQuestionBank:
    """Tests for JSONL question bank I/O."""

    def test_load_when_saved_then_same_questions(self, tmp_path, single_choice_questions):
        # Arrange
        path = tmp_path / "bank" / "questions.jsonl"

        # Act
        save_questions_jsonl(single_choice_questions, path)
        loaded = load_questions_jsonl(path)

        # Assert
        assert loaded == single_choice_questions

    def test_load_when_blank_lines_then_skipped(self, tmp_path):
        path = tmp_path / "questions.jsonl"
        record = {"id": "q1", "type": "TRUE_FALSE", "marks": 1,
                  "options": [{"id": "t", "text": "True", "is_correct": True}]}
        path.write_text("\n" + json.dumps(record) + "\n\n", encoding="utf-8")

        loaded = load_questions_jsonl(path)

        assert [q.id for q in loaded] == ["q1"]
        assert loaded[0].type is QuestionType.TRUE_FALSE

    def test_load_when_invalid_json_then_reports_line(self, tmp_path):
        path = tmp_path / "questions.jsonl"
        path.write_text('{"id": "q1", "type": "TRUE_FALSE", "marks": 1}\n{broken\n', encoding="utf-8")

        with pytest.raises(ValidationError, match="line 2"):
            load_questions_jsonl(path)

    def test_load_when_invalid_record_then_reports_line(self, tmp_path):
        path = tmp_path / "questions.jsonl"
        path.write_text('{"id": "q1", "type": "NOPE", "marks": 1}\n', encoding="utf-8")

        with pytest.raises(ValidationError, match="Line 1"):
            load_questions_jsonl(path)


class TestResponseSet:
    """Tests for response set I/O."""

    def test_load_when_bare_list_then_accepted(self, tmp_path):
        path = tmp_path / "responses.json"
        path.write_text(json.dumps([{"question_id": "q1", "free_text": "Hi"}]), encoding="utf-8")

        responses = load_responses_json(path)

        assert responses == [StudentResponse("q1", free_text="Hi")]

    def test_load_when_saved_then_same_responses(self, tmp_path, perfect_responses):
        path = tmp_path / "responses.json"

        save_responses_json(perfect_responses, path)

        assert load_responses_json(path) == perfect_responses

    def test_load_when_not_a_list_then_raises(self, tmp_path):
        path = tmp_path / "responses.json"
        path.write_text(json.dumps({"responses": "nope"}), encoding="utf-8")

        with pytest.raises(ValidationError, match="must be a list"):
            load_responses_json(path)


class TestExamRecord:
    def test_load_when_valid_then_builds_exam(self, tmp_path, exam):
        path = tmp_path / "exam.json"
        path.write_text(json.dumps(exam.to_dict()), encoding="utf-8")

        assert load_exam_json(path, strict=True) == exam
