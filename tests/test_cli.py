"""
Tests for the command line entry point.
"""

import json

import pytest

from exam_scoring.__main__ import main
from exam_scoring.core.models import QuestionType
from exam_scoring.core.utils import save_questions_jsonl, save_responses_json


@pytest.fixture
def inputs(tmp_path, exam, single_choice_questions, perfect_responses):
    questions_path = tmp_path / "questions.jsonl"
    responses_path = tmp_path / "responses.json"
    exam_path = tmp_path / "exam.json"
    save_questions_jsonl(single_choice_questions, questions_path)
    save_responses_json(perfect_responses[:4], responses_path)
    exam_path.write_text(json.dumps(exam.to_dict()), encoding="utf-8")
    return questions_path, responses_path, exam_path


def test_grade_when_inputs_valid_then_prints_summary_and_stores(tmp_path, inputs, capsys):
    # Arrange
    questions_path, responses_path, exam_path = inputs
    output_dir = tmp_path / "out"

    # Act
    code = main([
        "grade",
        "--questions", str(questions_path),
        "--responses", str(responses_path),
        "--exam", str(exam_path),
        "--attempt-id", "a-1",
        "--output-dir", str(output_dir),
        "--report",
    ])

    # Assert
    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["summary"]["obtained_marks"] == 8.0
    assert output["summary"]["unanswered_count"] == 1
    assert (output_dir / "results.json").exists()
    assert (output_dir / "a-1.pdf").exists()


def test_select_when_pool_sufficient_then_prints_ids(inputs, capsys):
    questions_path, _, exam_path = inputs

    code = main(["select", "--questions", str(questions_path), "--exam", str(exam_path), "--seed", "3"])

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert sorted(output["question_ids"]) == ["q1", "q2", "q3", "q4", "q5"]
    assert output["warnings"] == [
        "SINGLE_CHOICE: exactly 5 questions available, no room for randomisation"
    ]


def test_select_when_pool_insufficient_then_exit_code_two(tmp_path, inputs, exam):
    questions_path, _, _ = inputs
    exam_path = tmp_path / "big_exam.json"
    data = exam.to_dict()
    data["total_questions"] = 8
    data["question_counts"] = {QuestionType.SINGLE_CHOICE.value: 8}
    exam_path.write_text(json.dumps(data), encoding="utf-8")

    assert main(["select", "--questions", str(questions_path), "--exam", str(exam_path)]) == 2


def test_select_when_counts_mismatch_total_then_exit_code_two(tmp_path, inputs, exam):
    questions_path, _, _ = inputs
    exam_path = tmp_path / "bad_exam.json"
    data = exam.to_dict()
    data["total_questions"] = 4
    exam_path.write_text(json.dumps(data), encoding="utf-8")

    assert main(["select", "--questions", str(questions_path), "--exam", str(exam_path)]) == 2


def _grade_args(tmp_path, questions_path, responses_path, exam_path, *extra):
    return [
        "grade",
        "--questions", str(questions_path),
        "--responses", str(responses_path),
        "--exam", str(exam_path),
        "--attempt-id", "a-1",
        "--output-dir", str(tmp_path / "out"),
        *extra,
    ]


def test_grade_when_free_text_not_string_then_exit_code_one(tmp_path, inputs, caplog):
    # Arrange
    questions_path, _, exam_path = inputs
    responses_path = tmp_path / "bad_responses.json"
    responses_path.write_text(
        json.dumps({"responses": [{"question_id": "q1", "free_text": 5}]}), encoding="utf-8"
    )

    # Act
    code = main(_grade_args(tmp_path, questions_path, responses_path, exam_path))

    # Assert
    assert code == 1
    assert "Invalid input" in caplog.text
    assert not (tmp_path / "out" / "results.json").exists()


def test_grade_when_exam_duration_zero_then_exit_code_one(tmp_path, inputs, exam, caplog):
    questions_path, responses_path, _ = inputs
    exam_path = tmp_path / "zero_exam.json"
    data = exam.to_dict()
    data["duration_minutes"] = 0
    exam_path.write_text(json.dumps(data), encoding="utf-8")

    assert main(_grade_args(tmp_path, questions_path, responses_path, exam_path)) == 1
    assert "Invalid input" in caplog.text


def test_grade_when_zero_workers_then_exit_code_one(tmp_path, inputs):
    questions_path, responses_path, exam_path = inputs

    code = main(_grade_args(tmp_path, questions_path, responses_path, exam_path, "--workers", "0"))

    assert code == 1
