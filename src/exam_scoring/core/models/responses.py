"""
Module: responses

Purpose:
    Provides the StudentResponse dataclass - one submitted answer for one
    question of a completed attempt, as handed over by the attempt
    submission service.

Key Functions:
    - StudentResponse.is_empty_for(type): Whether nothing meaningful was answered
    - StudentResponse.empty(question_id): Placeholder for a missing response

Dependencies:
    - dataclasses (std)
    - .questions.QuestionType

Used By:
    - grading.comparators
    - grading.scorer
    - core.utils.serialization
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from .questions import QuestionType


@dataclass(frozen=True)
class StudentResponse:
    """
    Submitted answer to a single question (immutable).

    Only the field matching the question type is meaningful; the rest
    are ignored by the comparators.

    Attributes:
        question_id: Question answered
        selected_option_ids: Chosen options (set semantics for choice
            types, submitted order for ORDERING)
        free_text: Text answer for ESSAY / SHORT_ANSWER
        blank_answers: One entry per blank for FILL_IN_THE_BLANK
        matches: Premise option id -> chosen text for MATCHING
        time_spent_seconds: Time the student spent on the question
    """

    question_id: str
    selected_option_ids: tuple[str, ...] = ()
    free_text: Optional[str] = None
    blank_answers: tuple[str, ...] = ()
    matches: Dict[str, str] = field(default_factory=dict)
    time_spent_seconds: float = 0.0

    def __post_init__(self) -> None:
        """Validate response on construction."""
        if not self.question_id:
            raise ValueError("StudentResponse question_id must be non-empty")
        if self.time_spent_seconds < 0:
            raise ValueError(
                f"time_spent_seconds cannot be negative: {self.time_spent_seconds}"
            )

    @classmethod
    def empty(cls, question_id: str) -> StudentResponse:
        """Response standing in for a question the student never answered."""
        return cls(question_id=question_id)

    def is_empty_for(self, question_type: QuestionType) -> bool:
        """
        Check whether the response answers nothing for the given type.

        Args:
            question_type: Type of the question this response belongs to

        Returns:
            True when the meaningful field for the type is empty
        """
        if question_type.is_free_text:
            return not (self.free_text or "").strip()
        if question_type is QuestionType.FILL_IN_THE_BLANK:
            if any(a.strip() for a in self.blank_answers):
                return False
            return not (self.free_text or "").strip()
        if question_type is QuestionType.MATCHING:
            return not any(v.strip() for v in self.matches.values())
        return not self.selected_option_ids

    def to_dict(self) -> dict:
        d: dict = {
            "question_id": self.question_id,
            "time_spent_seconds": self.time_spent_seconds,
        }
        if self.selected_option_ids:
            d["selected_option_ids"] = list(self.selected_option_ids)
        if self.free_text is not None:
            d["free_text"] = self.free_text
        if self.blank_answers:
            d["blank_answers"] = list(self.blank_answers)
        if self.matches:
            d["matches"] = dict(self.matches)
        return d

    @classmethod
    def from_dict(cls, data: dict) -> StudentResponse:
        return cls(
            question_id=data["question_id"],
            selected_option_ids=tuple(data.get("selected_option_ids", [])),
            free_text=data.get("free_text"),
            blank_answers=tuple(data.get("blank_answers", [])),
            matches=dict(data.get("matches", {})),
            time_spent_seconds=data.get("time_spent_seconds", 0.0),
        )
