"""
Module: grading.aggregator

Purpose:
    Reduce an attempt's ResponseScores into its AttemptSummary: totals,
    percentage, pass/fail, letter grade, difficulty-tier tallies and the
    informational analytics (accuracy, consistency, difficulty score,
    timing). A pure function of the scores, the exam and the config.

Key Functions:
    - aggregate(): Build the AttemptSummary

Dependencies:
    - numpy: Score dispersion for the consistency score
    - common.thresholds: Analytics rounding

Used By:
    - grading.controller: grade_attempt()
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

import numpy as np

from exam_scoring.common.thresholds import TIMING_THRESHOLDS
from exam_scoring.core.models import (
    AttemptSummary,
    Difficulty,
    DifficultyTally,
    Exam,
    ResponseScore,
    TimingStats,
)

from .config import DEFAULT_SCORING_CONFIG, ScoringConfig

logger = logging.getLogger(__name__)


def _tally(scores: Sequence[ResponseScore]) -> Dict[Difficulty, DifficultyTally]:
    """Correct/total per tier; every tier is present even when empty."""
    tallies: Dict[Difficulty, DifficultyTally] = {}
    for tier in Difficulty:
        in_tier = [s for s in scores if s.difficulty is tier]
        tallies[tier] = DifficultyTally(
            correct=sum(1 for s in in_tier if s.is_correct),
            total=len(in_tier),
        )
    return tallies


def _consistency(scores: Sequence[ResponseScore]) -> float:
    """100 x (1 - coefficient of variation) of the normalised scores."""
    if not scores:
        return 0.0
    values = np.array([s.normalized_score for s in scores], dtype=np.float64)
    mean = float(values.mean())
    if mean == 0.0:
        return 0.0
    cv = float(values.std()) / mean
    return float(np.clip(100.0 * (1.0 - cv), 0.0, 100.0))


def _difficulty_score(
    tallies: Dict[Difficulty, DifficultyTally],
    weights: Dict[Difficulty, float],
) -> float:
    """Accuracy with each question weighted by its tier."""
    weighted_total = sum(weights.get(d, 1.0) * t.total for d, t in tallies.items())
    if weighted_total == 0:
        return 0.0
    weighted_correct = sum(weights.get(d, 1.0) * t.correct for d, t in tallies.items())
    return 100.0 * weighted_correct / weighted_total


def _timing(scores: Sequence[ResponseScore], exam: Exam, precision: int) -> TimingStats:
    total_time = float(sum(s.time_spent_seconds for s in scores))
    count = len(scores)
    answered = sum(1 for s in scores if s.is_answered)
    allotted = exam.allotted_seconds

    average = total_time / count if count else 0.0
    used_ratio = total_time / allotted if allotted else 0.0
    efficiency = allotted / total_time if total_time else 0.0
    speed = answered / (total_time / 60.0) if total_time else 0.0

    return TimingStats(
        total_time_spent=round(total_time, precision),
        average_time_per_question=round(average, precision),
        allotted_seconds=allotted,
        time_used_ratio=round(used_ratio, precision),
        time_efficiency=round(efficiency, precision),
        speed_score=round(speed, precision),
    )


def aggregate(
    scores: Sequence[ResponseScore],
    exam: Exam,
    config: Optional[ScoringConfig] = None,
) -> AttemptSummary:
    """
    Build the attempt summary from per-question scores.

    Pass/fail compares obtained marks with the exam's passing marks;
    the timing analytics are informational and never affect it.

    Args:
        scores: One ResponseScore per question of the attempt
        exam: Exam configuration (passing marks, duration)
        config: Grading policy (defaults if None)

    Returns:
        AttemptSummary

    Example:
        >>> summary = aggregate(scores, exam)
        >>> summary.correct_count + summary.wrong_count + summary.unanswered_count
        5
    """
    config = config or DEFAULT_SCORING_CONFIG
    analytics_precision = TIMING_THRESHOLDS.analytics_precision

    # Full-credit responses carry exactly max_marks, so both sums round alike
    total_marks = config.round_marks(sum(s.max_marks for s in scores))
    obtained = config.round_marks(sum(s.marks_awarded for s in scores))
    obtained = min(obtained, total_marks)

    percentage = round(100.0 * obtained / total_marks, 2) if total_marks else 0.0

    outcomes = [s.outcome for s in scores]
    correct = outcomes.count("correct")
    wrong = outcomes.count("wrong")
    unanswered = outcomes.count("unanswered")

    tallies = _tally(scores)
    count = len(scores)

    summary = AttemptSummary(
        total_marks=total_marks,
        obtained_marks=obtained,
        percentage=percentage,
        is_passed=obtained >= exam.passing_marks,
        correct_count=correct,
        wrong_count=wrong,
        unanswered_count=unanswered,
        grade=config.grade_scale.letter_for(percentage),
        per_difficulty=tallies,
        timing=_timing(scores, exam, analytics_precision),
        accuracy=round(100.0 * correct / count, analytics_precision) if count else 0.0,
        consistency_score=round(_consistency(scores), analytics_precision),
        difficulty_score=round(
            _difficulty_score(tallies, config.difficulty_weights), analytics_precision
        ),
    )
    logger.info(
        f"Exam {exam.id}: {obtained}/{total_marks} ({percentage}%) "
        f"grade={summary.grade} passed={summary.is_passed}"
    )
    return summary
