import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import exam_scoring
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from exam_scoring.core.models import (  # noqa: E402
    AnswerOption,
    Difficulty,
    Exam,
    Question,
    QuestionType,
    StudentResponse,
)

MODEL_ANSWER = "Plants convert sunlight, CO2, and water into glucose and oxygen"


def make_single_choice(qid: str, marks: float = 2, difficulty: Difficulty = Difficulty.EASY) -> Question:
    """Single-choice question whose correct option is '<qid>-a'."""
    return Question(
        id=qid,
        type=QuestionType.SINGLE_CHOICE,
        text=f"Question {qid}",
        difficulty=difficulty,
        marks=marks,
        options=(
            AnswerOption(f"{qid}-a", "Right", is_correct=True, sort_order=0),
            AnswerOption(f"{qid}-b", "Wrong", sort_order=1),
            AnswerOption(f"{qid}-c", "Also wrong", sort_order=2),
        ),
    )


def make_essay(qid: str = "essay-1", marks: float = 10, model: str = MODEL_ANSWER) -> Question:
    return Question(
        id=qid,
        type=QuestionType.ESSAY,
        text="Describe photosynthesis.",
        difficulty=Difficulty.HARD,
        marks=marks,
        options=(AnswerOption(f"{qid}-model", model, is_correct=True),),
    )


# Common test fixtures
@pytest.fixture
def single_choice_questions():
    """Five single-choice questions worth 2 marks each."""
    return [make_single_choice(f"q{i}") for i in range(1, 6)]


@pytest.fixture
def perfect_responses(single_choice_questions):
    return [
        StudentResponse(q.id, selected_option_ids=(f"{q.id}-a",), time_spent_seconds=30)
        for q in single_choice_questions
    ]


@pytest.fixture
def exam():
    return Exam(
        id="exam-1",
        title="Biology Basics",
        passing_marks=6,
        duration_minutes=10,
        total_questions=5,
        question_counts={QuestionType.SINGLE_CHOICE: 5},
    )


@pytest.fixture
def multiple_choice_question():
    """Correct set {A, B} out of A-D."""
    return Question(
        id="mc-1",
        type=QuestionType.MULTIPLE_CHOICE,
        text="Pick the primary colours of light",
        difficulty=Difficulty.MEDIUM,
        marks=4,
        options=(
            AnswerOption("A", "Red", is_correct=True),
            AnswerOption("B", "Green", is_correct=True),
            AnswerOption("C", "Yellow"),
            AnswerOption("D", "Purple"),
        ),
    )


@pytest.fixture
def essay_question():
    return make_essay()


@pytest.fixture
def single_choice_factory():
    """Factory for single-choice questions (correct option '<id>-a')."""
    return make_single_choice


@pytest.fixture
def essay_factory():
    return make_essay


@pytest.fixture
def model_answer():
    return MODEL_ANSWER
