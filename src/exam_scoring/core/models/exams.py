"""
Module: exams

Purpose:
    Provides the Exam dataclass - the exam configuration supplied with a
    completed attempt: pass mark, allotted duration and the per-type
    question counts used to assemble attempts.

Dependencies:
    - dataclasses (std)
    - .questions.QuestionType

Used By:
    - grading.aggregator: pass/fail and timing analytics
    - selection.config: SelectionConfig.from_exam
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from .questions import QuestionType


@dataclass(frozen=True)
class Exam:
    """
    Exam configuration (immutable).

    Attributes:
        id: Exam identifier
        title: Display title
        passing_marks: Obtained marks needed to pass
        duration_minutes: Allotted time for an attempt
        total_questions: Declared size of an assembled attempt
        question_counts: Required number of questions per type
        category_id: Category questions are drawn from

    Example:
        >>> exam = Exam("e1", "Biology", passing_marks=6, duration_minutes=30,
        ...             total_questions=5,
        ...             question_counts={QuestionType.SINGLE_CHOICE: 5})
        >>> exam.allotted_seconds
        1800
    """

    id: str
    title: str
    passing_marks: float
    duration_minutes: int
    total_questions: int = 0
    question_counts: Dict[QuestionType, int] = field(default_factory=dict)
    category_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate exam on construction."""
        if self.passing_marks < 0:
            raise ValueError(f"passing_marks cannot be negative: {self.passing_marks}")
        if self.duration_minutes <= 0:
            raise ValueError(f"duration_minutes must be positive: {self.duration_minutes}")
        if self.total_questions < 0:
            raise ValueError(f"total_questions cannot be negative: {self.total_questions}")

    @property
    def allotted_seconds(self) -> int:
        return self.duration_minutes * 60

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "title": self.title,
            "passing_marks": self.passing_marks,
            "duration_minutes": self.duration_minutes,
            "total_questions": self.total_questions,
            "question_counts": {t.value: n for t, n in self.question_counts.items()},
        }
        if self.category_id is not None:
            d["category_id"] = self.category_id
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Exam:
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            passing_marks=data["passing_marks"],
            duration_minutes=data["duration_minutes"],
            total_questions=data.get("total_questions", 0),
            question_counts={
                QuestionType(t): int(n)
                for t, n in data.get("question_counts", {}).items()
            },
            category_id=data.get("category_id"),
        )
