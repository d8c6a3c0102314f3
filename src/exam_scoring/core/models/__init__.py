"""
Core Models Package

Immutable, validated data models shared by every scoring component.

All models in this package are frozen dataclasses. This ensures:
1. An answer key cannot change while an attempt is being graded
2. Safe to pass between threads when grading concurrently
3. Re-grading produces new records instead of patching old ones
"""

from .questions import AnswerOption, Difficulty, Question, QuestionType
from .responses import StudentResponse
from .exams import Exam
from .scores import FreeTextBreakdown, ResponseScore
from .summary import AttemptSummary, DifficultyTally, TimingStats

__all__ = [
    "AnswerOption",
    "Difficulty",
    "Question",
    "QuestionType",
    "StudentResponse",
    "Exam",
    "FreeTextBreakdown",
    "ResponseScore",
    "AttemptSummary",
    "DifficultyTally",
    "TimingStats",
]
