"""
Module: grading.config

Purpose:
    Grading policy as explicit, immutable configuration: free-text weights
    and thresholds, correctness thresholds, mark rounding, the letter-grade
    table, difficulty weights and the misconfigured-question policy.
    Passed into the scorers and the aggregator so policy can be tuned and
    tested independently of the algorithms.

Key Classes:
    - FreeTextWeights: Weights of the five free-text sub-scores
    - FreeTextConfig: Weights plus heuristic thresholds
    - GradeScale: Percentage breakpoints to letter grades
    - MisconfiguredPolicy: SKIP or FAIL on a broken answer key
    - ScoringConfig: Everything above, plus concurrency

Dependencies:
    - dataclasses (std)
    - common.thresholds: FreeTextThresholds

Used By:
    - grading.free_text, grading.comparators, grading.scorer
    - grading.aggregator, grading.controller
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum, auto
from typing import Dict

from exam_scoring.common.thresholds import FREE_TEXT_THRESHOLDS, FreeTextThresholds
from exam_scoring.core.models.questions import Difficulty, QuestionType


@dataclass(frozen=True)
class FreeTextWeights:
    """
    Weights of the free-text composite (immutable).

    Invariants:
        - every weight >= 0
        - weights sum to 1.0

    Example:
        >>> FreeTextWeights().keyword
        0.3
    """

    keyword: float = 0.30
    semantic: float = 0.30
    structure: float = 0.20
    language: float = 0.10
    coherence: float = 0.10

    def __post_init__(self) -> None:
        """Validate weights on construction."""
        values = (self.keyword, self.semantic, self.structure, self.language, self.coherence)
        if any(w < 0 for w in values):
            raise ValueError(f"Free-text weights must be non-negative: {values}")
        if not math.isclose(sum(values), 1.0, abs_tol=1e-9):
            raise ValueError(f"Free-text weights must sum to 1.0, got {sum(values)}")


@dataclass(frozen=True)
class FreeTextConfig:
    """Free-text scorer configuration."""

    weights: FreeTextWeights = field(default_factory=FreeTextWeights)
    thresholds: FreeTextThresholds = FREE_TEXT_THRESHOLDS


# Percentage breakpoints, highest first
GRADE_BANDS: tuple[tuple[float, str], ...] = (
    (90.0, "A"),
    (80.0, "B+"),
    (70.0, "B"),
    (60.0, "C"),
    (50.0, "D"),
)

# Weight of each tier in the difficulty score
DIFFICULTY_WEIGHTS: Dict[Difficulty, float] = {
    Difficulty.EASY: 1.0,
    Difficulty.MEDIUM: 2.0,
    Difficulty.HARD: 3.0,
}


@dataclass(frozen=True)
class GradeScale:
    """
    Letter-grade mapping from a single breakpoint table.

    Example:
        >>> GradeScale().letter_for(85.0)
        'B+'
    """

    bands: tuple[tuple[float, str], ...] = GRADE_BANDS
    fallback: str = "F"

    def __post_init__(self) -> None:
        """Validate the table is strictly descending."""
        cutoffs = [cutoff for cutoff, _ in self.bands]
        if any(a <= b for a, b in zip(cutoffs, cutoffs[1:])):
            raise ValueError(f"Grade bands must be strictly descending: {cutoffs}")

    def letter_for(self, percentage: float) -> str:
        for cutoff, letter in self.bands:
            if percentage >= cutoff:
                return letter
        return self.fallback


class MisconfiguredPolicy(Enum):
    """What the attempt scorer does with a question that has no valid key."""

    SKIP = auto()  # Score 0, record a warning, keep grading the attempt
    FAIL = auto()  # Re-raise and abort the whole attempt


@dataclass(frozen=True)
class ScoringConfig:
    """
    Grading policy (immutable).

    Attributes:
        free_text: Free-text weights and thresholds
        choice_correct_threshold: Normalised score counted as correct for
            non-free-text types
        free_text_correct_threshold: Composite counted as correct for
            ESSAY / SHORT_ANSWER
        marks_precision: Decimal places marks are rounded to
        grade_scale: Letter-grade table
        difficulty_weights: Tier weights for the difficulty score
        misconfigured_policy: SKIP or FAIL on a broken answer key
        max_workers: Threads used to score responses of one attempt

    Example:
        >>> config = ScoringConfig(free_text_correct_threshold=0.7)
        >>> config.correct_threshold(QuestionType.ESSAY)
        0.7
        >>> config.round_marks(2.25)
        2.3
    """

    free_text: FreeTextConfig = field(default_factory=FreeTextConfig)
    choice_correct_threshold: float = 1.0
    free_text_correct_threshold: float = 0.60
    marks_precision: int = 1
    grade_scale: GradeScale = field(default_factory=GradeScale)
    difficulty_weights: Dict[Difficulty, float] = field(
        default_factory=lambda: dict(DIFFICULTY_WEIGHTS)
    )
    misconfigured_policy: MisconfiguredPolicy = MisconfiguredPolicy.SKIP
    max_workers: int = 1

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        for name in ("choice_correct_threshold", "free_text_correct_threshold"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ValueError(f"{name} must be within (0, 1]: {value}")
        if self.marks_precision < 0:
            raise ValueError(f"marks_precision must be non-negative: {self.marks_precision}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1: {self.max_workers}")

    def correct_threshold(self, question_type: QuestionType) -> float:
        """Normalised score a response of this type needs to count as correct."""
        if question_type.is_free_text:
            return self.free_text_correct_threshold
        return self.choice_correct_threshold

    def round_marks(self, value: float) -> float:
        """Round half-up to marks_precision (2.25 -> 2.3 at one place)."""
        quantum = Decimal(1).scaleb(-self.marks_precision)
        return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


DEFAULT_SCORING_CONFIG = ScoringConfig()
