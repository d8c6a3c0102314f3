"""
Unit Tests for the Result Aggregator

Tests totals, pass/fail, the outcome partition, grading and the
informational analytics.
"""

import pytest

from exam_scoring.core.models import (
    Difficulty,
    Exam,
    QuestionType,
    ResponseScore,
    StudentResponse,
)
from exam_scoring.grading.aggregator import aggregate
from exam_scoring.grading.scorer import score_attempt


def _score(qid, marks_awarded, max_marks=2.0, *, correct=None, answered=True,
           difficulty=Difficulty.EASY, seconds=0.0):
    normalized = marks_awarded / max_marks
    if correct is None:
        correct = normalized == 1.0
    return ResponseScore(
        question_id=qid,
        question_type=QuestionType.SINGLE_CHOICE,
        normalized_score=normalized,
        marks_awarded=marks_awarded,
        max_marks=max_marks,
        is_correct=correct,
        is_answered=answered,
        difficulty=difficulty,
        time_spent_seconds=seconds,
    )


class TestTotals:
    """Marks, percentage and pass/fail."""

    def test_aggregate_when_perfect_attempt_then_full_marks_and_passed(
        self, single_choice_questions, perfect_responses, exam
    ):
        # Arrange
        scores = score_attempt(single_choice_questions, perfect_responses)

        # Act
        summary = aggregate(scores, exam)

        # Assert
        assert summary.obtained_marks == 10
        assert summary.total_marks == 10
        assert summary.percentage == 100
        assert summary.is_passed is True
        assert summary.grade == "A"

    def test_aggregate_when_below_pass_mark_then_failed(self, exam):
        scores = [_score(f"q{i}", 2.0 if i < 2 else 0.0) for i in range(5)]

        summary = aggregate(scores, exam)

        assert summary.obtained_marks == 4.0
        assert summary.percentage == 40.0
        assert summary.is_passed is False
        assert summary.grade == "F"

    def test_aggregate_when_exactly_pass_mark_then_passed(self, exam):
        scores = [_score(f"q{i}", 2.0 if i < 3 else 0.0) for i in range(5)]
        assert aggregate(scores, exam).is_passed is True

    def test_aggregate_when_no_scores_then_zero_percentage(self, exam):
        summary = aggregate([], exam)

        assert summary.total_marks == 0
        assert summary.percentage == 0.0
        assert summary.question_count == 0

    def test_aggregate_when_fractional_marks_then_rounded(self, exam):
        scores = [_score("q1", 0.7, 3.0), _score("q2", 0.7, 3.0), _score("q3", 0.7, 3.0)]
        summary = aggregate(scores, exam)
        assert summary.obtained_marks == 2.1
        assert summary.percentage == 23.33

    def test_aggregate_when_quarter_marks_all_correct_then_full_marks_and_passed(self, single_choice_factory):
        # Arrange: 2.25 marks each, a half at one decimal place
        questions = [single_choice_factory(f"q{i}", marks=2.25) for i in range(4)]
        responses = [StudentResponse(q.id, selected_option_ids=(f"{q.id}-a",)) for q in questions]
        exam = Exam(
            "exam-q", "Quarter marks", passing_marks=9, duration_minutes=10,
            total_questions=4, question_counts={QuestionType.SINGLE_CHOICE: 4},
        )

        # Act
        scores = score_attempt(questions, responses)
        summary = aggregate(scores, exam)

        # Assert
        assert [s.marks_awarded for s in scores] == [2.25] * 4
        assert summary.obtained_marks == summary.total_marks == 9.0
        assert summary.percentage == 100
        assert summary.is_passed is True


class TestPartition:
    def test_aggregate_when_mixed_outcomes_then_buckets_partition(self, exam):
        scores = [
            _score("q1", 2.0),
            _score("q2", 1.0),
            _score("q3", 0.0),
            _score("q4", 0.0, answered=False),
        ]

        summary = aggregate(scores, exam)

        assert (summary.correct_count, summary.wrong_count, summary.unanswered_count) == (1, 2, 1)
        assert summary.correct_count + summary.wrong_count + summary.unanswered_count == len(scores)

    def test_aggregate_when_tiers_then_every_tier_reported(self, exam):
        scores = [
            _score("q1", 2.0, difficulty=Difficulty.EASY),
            _score("q2", 0.0, difficulty=Difficulty.HARD),
            _score("q3", 2.0, difficulty=Difficulty.HARD),
        ]

        tiers = aggregate(scores, exam).per_difficulty

        assert tiers[Difficulty.EASY].to_dict() == {"correct": 1, "total": 1}
        assert tiers[Difficulty.MEDIUM].to_dict() == {"correct": 0, "total": 0}
        assert tiers[Difficulty.HARD].to_dict() == {"correct": 1, "total": 2}


class TestAnalytics:
    def test_aggregate_when_timed_then_timing_ratios(self):
        # Arrange: 10 minute exam, 4 questions, 300 seconds spent
        exam = Exam("e1", "Timed", passing_marks=1, duration_minutes=10)
        scores = [
            _score("q1", 2.0, seconds=60),
            _score("q2", 2.0, seconds=90),
            _score("q3", 0.0, seconds=150),
            _score("q4", 0.0, answered=False),
        ]

        # Act
        timing = aggregate(scores, exam).timing

        # Assert
        assert timing.total_time_spent == 300
        assert timing.average_time_per_question == 75
        assert timing.allotted_seconds == 600
        assert timing.time_used_ratio == 0.5
        assert timing.time_efficiency == 2.0
        assert timing.speed_score == 0.6

    def test_aggregate_when_no_time_spent_then_ratios_zero(self, exam):
        timing = aggregate([_score("q1", 2.0)], exam).timing
        assert timing.time_efficiency == 0.0
        assert timing.speed_score == 0.0

    def test_aggregate_when_timing_changes_then_pass_unaffected(self, exam):
        fast = [_score(f"q{i}", 2.0, seconds=1) for i in range(5)]
        slow = [_score(f"q{i}", 2.0, seconds=10_000) for i in range(5)]
        assert aggregate(fast, exam).is_passed == aggregate(slow, exam).is_passed

    def test_aggregate_when_uniform_scores_then_full_consistency(self, exam):
        scores = [_score(f"q{i}", 2.0) for i in range(3)]
        assert aggregate(scores, exam).consistency_score == 100.0

    def test_aggregate_when_all_zero_then_zero_consistency(self, exam):
        scores = [_score(f"q{i}", 0.0) for i in range(3)]
        assert aggregate(scores, exam).consistency_score == 0.0

    def test_aggregate_when_scores_vary_then_consistency_reduced(self, exam):
        # normalized [1.0, 0.0]: mean 0.5, std 0.5, cv 1.0
        scores = [_score("q1", 2.0), _score("q2", 0.0)]
        assert aggregate(scores, exam).consistency_score == 0.0

    def test_aggregate_when_hard_questions_right_then_difficulty_score_weighted(self, exam):
        scores = [
            _score("q1", 0.0, difficulty=Difficulty.EASY),
            _score("q2", 2.0, difficulty=Difficulty.HARD),
        ]
        summary = aggregate(scores, exam)
        assert summary.accuracy == 50.0
        assert summary.difficulty_score == 75.0

    def test_aggregate_when_end_to_end_then_summary_serialisable(
        self, single_choice_questions, exam
    ):
        responses = [StudentResponse("q1", selected_option_ids=("q1-a",), time_spent_seconds=12)]
        summary = aggregate(score_attempt(single_choice_questions, responses), exam)

        data = summary.to_dict()

        assert data["unanswered_count"] == 4
        assert data["per_difficulty"]["EASY"] == {"correct": 1, "total": 5}
        assert summary.__class__.from_dict(data) == summary


@pytest.mark.parametrize("obtained,letter", [(9, "A"), (8, "B+"), (7, "B"), (6, "C"), (5, "D"), (4, "F")])
def test_aggregate_when_percentage_band_then_letter(obtained, letter):
    exam = Exam("e1", "Bands", passing_marks=5, duration_minutes=5)
    scores = [_score("q1", float(obtained), max_marks=10.0)]
    assert aggregate(scores, exam).grade == letter
