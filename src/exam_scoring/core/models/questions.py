"""
Module: questions

Purpose:
    Provides the Question and AnswerOption dataclasses - the read-only view
    of question-bank records that every scoring component works from.
    Immutable, so an answer key cannot change while an attempt is graded.

Key Functions:
    - Question.correct_options: Options that make up the answer key
    - Question.model_answer: Reference text for free-text questions
    - Question.to_dict() / Question.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - enum (std)
    - functools (std)

Used By:
    - grading.comparators
    - grading.scorer
    - selection.selector
    - core.utils.serialization
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Optional


class QuestionType(Enum):
    """Question types supported by the question bank."""

    SINGLE_CHOICE = "SINGLE_CHOICE"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TRUE_FALSE = "TRUE_FALSE"
    FILL_IN_THE_BLANK = "FILL_IN_THE_BLANK"
    MATCHING = "MATCHING"
    ORDERING = "ORDERING"
    SHORT_ANSWER = "SHORT_ANSWER"
    ESSAY = "ESSAY"
    ACCOUNTING_TABLE = "ACCOUNTING_TABLE"

    @property
    def is_free_text(self) -> bool:
        """True for types graded by the free-text scorer."""
        return self in (QuestionType.ESSAY, QuestionType.SHORT_ANSWER)

    @property
    def is_choice(self) -> bool:
        """True for types answered by selecting options as a set."""
        return self in (
            QuestionType.SINGLE_CHOICE,
            QuestionType.MULTIPLE_CHOICE,
            QuestionType.TRUE_FALSE,
            QuestionType.ACCOUNTING_TABLE,
        )


class Difficulty(Enum):
    """Difficulty tier, used for breakdown analytics only."""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


@dataclass(frozen=True)
class AnswerOption:
    """
    One option of a question (immutable).

    Attributes:
        id: Option identifier
        text: Option text (model answer text for free-text questions)
        is_correct: Whether the option belongs to the answer key
        sort_order: Display order; key order for ORDERING, blank index
            for FILL_IN_THE_BLANK
        match_text: Correct right-hand side for a MATCHING premise
    """

    id: str
    text: str
    is_correct: bool = False
    sort_order: int = 0
    match_text: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate option on construction."""
        if not self.id:
            raise ValueError("AnswerOption id must be non-empty")

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "text": self.text,
            "is_correct": self.is_correct,
            "sort_order": self.sort_order,
        }
        if self.match_text is not None:
            d["match_text"] = self.match_text
        return d

    @classmethod
    def from_dict(cls, data: dict) -> AnswerOption:
        return cls(
            id=data["id"],
            text=data.get("text", ""),
            is_correct=bool(data.get("is_correct", False)),
            sort_order=int(data.get("sort_order", 0)),
            match_text=data.get("match_text"),
        )


@dataclass(frozen=True)
class Question:
    """
    Question-bank record (immutable, read-only to the engine).

    Attributes:
        id: Unique question identifier
        type: QuestionType controlling how responses are compared
        text: Question prompt
        difficulty: Difficulty tier (analytics only)
        marks: Positive mark weight
        options: Ordered answer options
        category_id: Exam category the question belongs to
        is_active: Inactive questions are never selected

    Invariants:
        - marks > 0
        - options are kept in the order given by the question bank

    Example:
        >>> q = Question(
        ...     id="q1",
        ...     type=QuestionType.SINGLE_CHOICE,
        ...     text="2 + 2 = ?",
        ...     difficulty=Difficulty.EASY,
        ...     marks=2,
        ...     options=(AnswerOption("a", "4", True), AnswerOption("b", "5")),
        ... )
        >>> q.correct_option_ids
        frozenset({'a'})
    """

    id: str
    type: QuestionType
    text: str
    difficulty: Difficulty
    marks: float
    options: tuple[AnswerOption, ...] = ()
    category_id: Optional[str] = None
    is_active: bool = True

    def __post_init__(self) -> None:
        """Validate question on construction."""
        if not self.id:
            raise ValueError("Question id must be non-empty")
        if self.marks <= 0:
            raise ValueError(f"marks must be positive: {self.marks}")

    # ─────────────────────────────────────────────────────────────────────────
    # Answer Key
    # ─────────────────────────────────────────────────────────────────────────

    @cached_property
    def correct_options(self) -> tuple[AnswerOption, ...]:
        """Options flagged correct, in ascending sort_order."""
        flagged = [o for o in self.options if o.is_correct]
        return tuple(sorted(flagged, key=lambda o: o.sort_order))

    @cached_property
    def correct_option_ids(self) -> frozenset[str]:
        return frozenset(o.id for o in self.correct_options)

    @cached_property
    def option_ids(self) -> frozenset[str]:
        return frozenset(o.id for o in self.options)

    @cached_property
    def model_answer(self) -> str:
        """
        Reference text for ESSAY / SHORT_ANSWER scoring.

        The first option flagged correct with non-empty text wins;
        otherwise the first option with text, by convention.

        Returns:
            Model answer text, or "" when no option carries text
        """
        for option in self.correct_options:
            if option.text.strip():
                return option.text
        for option in self.options:
            if option.text.strip():
                return option.text
        return ""

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "type": self.type.value,
            "text": self.text,
            "difficulty": self.difficulty.value,
            "marks": self.marks,
            "options": [o.to_dict() for o in self.options],
            "is_active": self.is_active,
        }
        if self.category_id is not None:
            d["category_id"] = self.category_id
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Question:
        return cls(
            id=data["id"],
            type=QuestionType(data["type"]),
            text=data.get("text", ""),
            difficulty=Difficulty(data.get("difficulty", "MEDIUM")),
            marks=data.get("marks", 1),
            options=tuple(AnswerOption.from_dict(o) for o in data.get("options", [])),
            category_id=data.get("category_id"),
            is_active=data.get("is_active", True),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return (
            f"Question({self.id!r}, type={self.type.value}, "
            f"marks={self.marks}, difficulty={self.difficulty.value})"
        )
