"""
Module: selection.config

Purpose:
    Configuration dataclass for question set assembly.
    Immutable configuration with validation on construction, so a
    count/total mismatch fails before any question is drawn.

Key Classes:
    - SelectionConfig: Per-type counts, declared total, category, seed
    - SelectionConfigError: Invalid exam selection configuration

Dependencies:
    - dataclasses (std)

Used By:
    - selection.selector: Question Selector
    - __main__: select command
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from exam_scoring.core.models import Exam, QuestionType


class SelectionConfigError(ValueError):
    """Exam selection configuration is inconsistent."""


@dataclass(frozen=True)
class SelectionConfig:
    """
    Configuration for question set assembly (immutable).

    Attributes:
        question_counts: Required number of questions per type
        total_questions: Declared size of the assembled set
        category_id: Only draw questions from this category (None = any)
        seed: Random seed; None draws a fresh set every time

    Invariants:
        - every count >= 0
        - sum(question_counts) == total_questions

    Example:
        >>> config = SelectionConfig({QuestionType.SINGLE_CHOICE: 5}, total_questions=5)
        >>> config.requested_types
        [<QuestionType.SINGLE_CHOICE: 'SINGLE_CHOICE'>]
    """

    question_counts: Dict[QuestionType, int] = field(default_factory=dict)
    total_questions: int = 0
    category_id: Optional[str] = None
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        for qtype, count in self.question_counts.items():
            if count < 0:
                raise SelectionConfigError(
                    f"Question count for {qtype.value} cannot be negative: {count}"
                )
        requested = sum(self.question_counts.values())
        if requested != self.total_questions:
            raise SelectionConfigError(
                f"Question counts add up to {requested} but the exam declares "
                f"{self.total_questions} questions"
            )

    @classmethod
    def from_exam(cls, exam: Exam, seed: Optional[int] = None) -> SelectionConfig:
        """Build the selection config declared by an exam record."""
        return cls(
            question_counts=dict(exam.question_counts),
            total_questions=exam.total_questions,
            category_id=exam.category_id,
            seed=seed,
        )

    @property
    def requested_types(self) -> list[QuestionType]:
        """Types with a positive count, in declaration order."""
        return [t for t, n in self.question_counts.items() if n > 0]
