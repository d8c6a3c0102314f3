"""
Module: scores

Purpose:
    Provides FreeTextBreakdown and ResponseScore - the per-question output
    of a grading pass. A ResponseScore is created once and never mutated;
    re-grading produces a new record.

Key Functions:
    - FreeTextBreakdown.as_dict(): Sub-scores keyed by dimension name
    - ResponseScore.outcome: correct / wrong / unanswered classification

Dependencies:
    - dataclasses (std)
    - .questions.Difficulty, QuestionType

Used By:
    - grading.scorer: produces ResponseScores
    - grading.aggregator: reduces them into an AttemptSummary
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from .questions import Difficulty, QuestionType

Outcome = Literal["correct", "wrong", "unanswered"]


@dataclass(frozen=True, slots=True)
class FreeTextBreakdown:
    """
    The five free-text sub-scores, each in [0, 1].

    Attributes:
        keyword_coverage: Share of model keywords present in the answer
        semantic_overlap: Term-frequency cosine similarity to the model
        structure: Sentence/length completeness with repetition penalty
        language_quality: Length floor and lexical diversity
        coherence: Connector use minus contradiction penalty
    """

    keyword_coverage: float
    semantic_overlap: float
    structure: float
    language_quality: float
    coherence: float

    def __post_init__(self) -> None:
        """Validate sub-scores on construction."""
        for name, value in self.as_dict().items():
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1]: {value}")

    @classmethod
    def zero(cls) -> FreeTextBreakdown:
        return cls(0.0, 0.0, 0.0, 0.0, 0.0)

    def as_dict(self) -> dict[str, float]:
        return {
            "keyword_coverage": self.keyword_coverage,
            "semantic_overlap": self.semantic_overlap,
            "structure": self.structure,
            "language_quality": self.language_quality,
            "coherence": self.coherence,
        }

    @classmethod
    def from_dict(cls, data: dict) -> FreeTextBreakdown:
        return cls(
            keyword_coverage=data["keyword_coverage"],
            semantic_overlap=data["semantic_overlap"],
            structure=data["structure"],
            language_quality=data["language_quality"],
            coherence=data["coherence"],
        )


@dataclass(frozen=True)
class ResponseScore:
    """
    Score for one question of an attempt (immutable).

    Attributes:
        question_id: Question scored
        question_type: Type of the question
        normalized_score: Comparator output in [0, 1]
        marks_awarded: normalized_score x max_marks, rounded
        max_marks: Question mark weight
        is_correct: normalized_score reached the correctness threshold
        is_answered: False when the response was empty or missing
        difficulty: Difficulty tier of the question
        time_spent_seconds: Time spent on the question
        feedback: Text surfaced to the student
        breakdown: Free-text sub-scores (free-text types only)
        warnings: Grading warnings, e.g. a misconfigured answer key

    Invariants:
        - 0 <= normalized_score <= 1
        - 0 <= marks_awarded <= max_marks
        - an unanswered response is never correct
    """

    question_id: str
    question_type: QuestionType
    normalized_score: float
    marks_awarded: float
    max_marks: float
    is_correct: bool
    is_answered: bool
    difficulty: Difficulty
    time_spent_seconds: float = 0.0
    feedback: str = ""
    breakdown: Optional[FreeTextBreakdown] = None
    warnings: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate score on construction."""
        if not 0.0 <= self.normalized_score <= 1.0:
            raise ValueError(f"normalized_score must be within [0, 1]: {self.normalized_score}")
        if not 0.0 <= self.marks_awarded <= self.max_marks:
            raise ValueError(
                f"marks_awarded {self.marks_awarded} outside [0, {self.max_marks}] "
                f"for question {self.question_id}"
            )
        if self.is_correct and not self.is_answered:
            raise ValueError(f"Unanswered question {self.question_id} cannot be correct")

    @property
    def outcome(self) -> Outcome:
        """Bucket used by the aggregator; the three buckets partition an attempt."""
        if self.is_correct:
            return "correct"
        if not self.is_answered:
            return "unanswered"
        return "wrong"

    def to_dict(self) -> dict:
        d = {
            "question_id": self.question_id,
            "question_type": self.question_type.value,
            "normalized_score": self.normalized_score,
            "marks_awarded": self.marks_awarded,
            "max_marks": self.max_marks,
            "is_correct": self.is_correct,
            "is_answered": self.is_answered,
            "difficulty": self.difficulty.value,
            "time_spent_seconds": self.time_spent_seconds,
            "feedback": self.feedback,
            "warnings": list(self.warnings),
        }
        if self.breakdown is not None:
            d["breakdown"] = self.breakdown.as_dict()
        return d

    @classmethod
    def from_dict(cls, data: dict) -> ResponseScore:
        return cls(
            question_id=data["question_id"],
            question_type=QuestionType(data["question_type"]),
            normalized_score=data["normalized_score"],
            marks_awarded=data["marks_awarded"],
            max_marks=data["max_marks"],
            is_correct=data["is_correct"],
            is_answered=data["is_answered"],
            difficulty=Difficulty(data["difficulty"]),
            time_spent_seconds=data.get("time_spent_seconds", 0.0),
            feedback=data.get("feedback", ""),
            breakdown=(
                FreeTextBreakdown.from_dict(data["breakdown"])
                if data.get("breakdown") else None
            ),
            warnings=tuple(data.get("warnings", [])),
        )
