"""
Unit Tests for the Attempt Scorer

Tests response lookup, mark conversion, misconfigured-question policy,
cancellation and concurrent scoring.
"""

import threading

import pytest

from exam_scoring.core.models import (
    AnswerOption,
    Difficulty,
    Question,
    QuestionType,
    StudentResponse,
)
from exam_scoring.grading.comparators import MisconfiguredQuestion
from exam_scoring.grading.config import DEFAULT_SCORING_CONFIG, MisconfiguredPolicy, ScoringConfig
from exam_scoring.grading.scorer import (
    AttemptScorer,
    InvalidResponseShape,
    ScoringCancelled,
    index_responses,
    score_attempt,
)


@pytest.fixture
def broken_question():
    """Single choice with nothing flagged correct."""
    return Question(
        "broken", QuestionType.SINGLE_CHOICE, "?", Difficulty.MEDIUM, marks=3,
        options=(AnswerOption("x", "X"), AnswerOption("y", "Y")),
    )


@pytest.fixture
def mixed_questions(single_choice_factory, multiple_choice_question, essay_question):
    return [single_choice_factory("q1"), multiple_choice_question, essay_question]


@pytest.fixture
def mixed_responses():
    return [
        StudentResponse("q1", selected_option_ids=("q1-a",), time_spent_seconds=20),
        StudentResponse("mc-1", selected_option_ids=("A",), time_spent_seconds=40),
        StudentResponse(
            "essay-1",
            free_text="Photosynthesis is how plants convert sunlight, carbon dioxide, "
                      "and water into glucose and oxygen",
            time_spent_seconds=200,
        ),
    ]


class TestIndexResponses:
    def test_index_when_unknown_question_then_dropped_with_warning(self, single_choice_questions):
        responses = [StudentResponse("ghost", selected_option_ids=("x",))]

        indexed, warnings = index_responses(single_choice_questions, responses)

        assert indexed == {}
        assert warnings == ["Dropped response for unknown question ghost"]

    def test_index_when_unknown_question_and_strict_then_raises(self, single_choice_questions):
        with pytest.raises(InvalidResponseShape) as exc:
            index_responses(single_choice_questions, [StudentResponse("ghost")], strict=True)
        assert exc.value.question_id == "ghost"

    def test_index_when_duplicate_then_first_kept(self, single_choice_questions):
        first = StudentResponse("q1", selected_option_ids=("q1-a",))
        second = StudentResponse("q1", selected_option_ids=("q1-b",))

        indexed, warnings = index_responses(single_choice_questions, [first, second])

        assert indexed["q1"] is first
        assert len(warnings) == 1


class TestScoreAttempt:
    """Tests for score_attempt()."""

    def test_score_when_perfect_attempt_then_full_marks(self, single_choice_questions, perfect_responses):
        scores = score_attempt(single_choice_questions, perfect_responses)

        assert [s.marks_awarded for s in scores] == [2.0] * 5
        assert all(s.is_correct for s in scores)

    def test_score_when_responses_shuffled_then_question_order_kept(
        self, single_choice_questions, perfect_responses
    ):
        scores = score_attempt(single_choice_questions, list(reversed(perfect_responses)))
        assert [s.question_id for s in scores] == [q.id for q in single_choice_questions]

    def test_score_when_response_missing_then_unanswered(self, single_choice_questions, perfect_responses):
        scores = score_attempt(single_choice_questions, perfect_responses[1:])

        assert scores[0].is_answered is False
        assert scores[0].outcome == "unanswered"
        assert scores[0].marks_awarded == 0.0

    def test_score_when_partial_multiple_choice_then_half_marks_not_correct(self, mixed_questions, mixed_responses):
        scores = score_attempt(mixed_questions, mixed_responses)
        mc = scores[1]

        assert mc.normalized_score == 0.5
        assert mc.marks_awarded == 2.0
        assert mc.is_correct is False
        assert mc.outcome == "wrong"

    def test_score_when_partial_credit_lands_on_half_then_rounds_up(self):
        # Arrange: Jaccard 1/2 of 4.5 marks = 2.25
        question = Question(
            "mc-half", QuestionType.MULTIPLE_CHOICE, "Pick two", Difficulty.MEDIUM, marks=4.5,
            options=(
                AnswerOption("A", "Red", is_correct=True),
                AnswerOption("B", "Green", is_correct=True),
                AnswerOption("C", "Yellow"),
            ),
        )

        # Act
        scores = score_attempt([question], [StudentResponse("mc-half", selected_option_ids=("A",))])

        # Assert
        assert scores[0].marks_awarded == 2.3

    def test_score_when_essay_paraphrase_then_correct_with_breakdown(self, mixed_questions, mixed_responses):
        essay = score_attempt(mixed_questions, mixed_responses)[2]

        assert essay.is_correct
        assert essay.breakdown is not None
        assert essay.marks_awarded == DEFAULT_SCORING_CONFIG.round_marks(essay.normalized_score * 10)

    def test_score_when_any_attempt_then_marks_within_bounds(self, mixed_questions, mixed_responses):
        for score in score_attempt(mixed_questions, mixed_responses):
            assert 0.0 <= score.marks_awarded <= score.max_marks

    def test_score_when_called_twice_then_identical(self, mixed_questions, mixed_responses):
        assert score_attempt(mixed_questions, mixed_responses) == score_attempt(mixed_questions, mixed_responses)

    def test_score_when_free_text_below_threshold_then_partial_marks(self, essay_question):
        scores = score_attempt([essay_question], [StudentResponse("essay-1", free_text="Plants need water.")])

        assert scores[0].is_correct is False
        assert scores[0].is_answered is True
        assert scores[0].marks_awarded > 0.0


class TestMisconfiguredPolicy:
    def test_score_when_skip_policy_then_zero_with_warning(self, broken_question, single_choice_factory):
        # Arrange
        questions = [single_choice_factory("q1"), broken_question]
        responses = [
            StudentResponse("q1", selected_option_ids=("q1-a",)),
            StudentResponse("broken", selected_option_ids=("x",)),
        ]
        scorer = AttemptScorer(questions)

        # Act
        scores = scorer.score(responses)

        # Assert
        assert scores[0].is_correct
        assert scores[1].marks_awarded == 0.0
        assert scores[1].is_answered is True
        assert scores[1].warnings and "broken" in scores[1].warnings[0]
        assert any("misconfigured" in w for w in scorer.warnings)

    def test_score_when_fail_policy_then_raises(self, broken_question):
        config = ScoringConfig(misconfigured_policy=MisconfiguredPolicy.FAIL)
        with pytest.raises(MisconfiguredQuestion):
            score_attempt([broken_question], [], config)

    def test_score_when_essay_has_no_model_answer_then_skipped(self):
        q = Question("e1", QuestionType.ESSAY, "Explain", Difficulty.HARD, marks=5)
        scores = score_attempt([q], [StudentResponse("e1", free_text="Some answer text here.")])
        assert scores[0].marks_awarded == 0.0
        assert "no model answer" in scores[0].warnings[0]


class TestConcurrency:
    def test_score_when_cancelled_then_raises(self, single_choice_questions, perfect_responses):
        event = threading.Event()
        event.set()
        with pytest.raises(ScoringCancelled):
            score_attempt(single_choice_questions, perfect_responses, cancel_event=event)

    def test_score_when_parallel_then_same_as_sequential(self, mixed_questions, mixed_responses):
        sequential = score_attempt(mixed_questions, mixed_responses)
        parallel = score_attempt(mixed_questions, mixed_responses, ScoringConfig(max_workers=4))
        assert parallel == sequential

    def test_score_when_parallel_and_cancelled_then_raises(self, single_choice_questions, perfect_responses):
        event = threading.Event()
        event.set()
        with pytest.raises(ScoringCancelled):
            score_attempt(
                single_choice_questions, perfect_responses,
                ScoringConfig(max_workers=3), cancel_event=event,
            )
