"""
Module: summary

Purpose:
    Provides AttemptSummary and its parts (DifficultyTally, TimingStats) -
    the attempt-level result derived entirely from a set of ResponseScores
    and the exam's pass mark. Recomputed whenever the scores change.

Key Functions:
    - AttemptSummary.question_count: Size of the attempt
    - AttemptSummary.notification_payload(): Fields safe to broadcast

Dependencies:
    - dataclasses (std)
    - .questions.Difficulty

Used By:
    - grading.aggregator: builds summaries
    - grading.controller: hands them to collaborators
    - output.report: result sheet rendering
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from .questions import Difficulty


@dataclass(frozen=True, slots=True)
class DifficultyTally:
    """Correct answers out of questions for one difficulty tier."""

    correct: int = 0
    total: int = 0

    def __post_init__(self) -> None:
        if self.correct < 0 or self.total < 0 or self.correct > self.total:
            raise ValueError(f"Invalid tally: {self.correct}/{self.total}")

    def to_dict(self) -> dict:
        return {"correct": self.correct, "total": self.total}


@dataclass(frozen=True, slots=True)
class TimingStats:
    """
    Informational timing analytics; never affects pass/fail.

    Attributes:
        total_time_spent: Sum of per-question time in seconds
        average_time_per_question: total_time_spent / question count
        allotted_seconds: Exam duration in seconds
        time_used_ratio: total_time_spent / allotted_seconds
        time_efficiency: allotted_seconds / total_time_spent (0 if no time spent)
        speed_score: Answered questions per minute spent
    """

    total_time_spent: float = 0.0
    average_time_per_question: float = 0.0
    allotted_seconds: int = 0
    time_used_ratio: float = 0.0
    time_efficiency: float = 0.0
    speed_score: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_time_spent": self.total_time_spent,
            "average_time_per_question": self.average_time_per_question,
            "allotted_seconds": self.allotted_seconds,
            "time_used_ratio": self.time_used_ratio,
            "time_efficiency": self.time_efficiency,
            "speed_score": self.speed_score,
        }


@dataclass(frozen=True)
class AttemptSummary:
    """
    Attempt-level result (immutable).

    Attributes:
        total_marks: Sum of question marks over the assembled set
        obtained_marks: Sum of marks awarded
        percentage: obtained_marks / total_marks x 100
        is_passed: obtained_marks >= exam passing marks
        correct_count: Questions answered correctly
        wrong_count: Questions answered but not correct
        unanswered_count: Questions left empty
        grade: Letter grade from the grade scale
        per_difficulty: Correct/total per difficulty tier
        timing: Timing analytics
        accuracy: correct_count / question count x 100
        consistency_score: 100 x (1 - coefficient of variation of scores)
        difficulty_score: Tier-weighted accuracy

    Invariants:
        - correct_count + wrong_count + unanswered_count == question_count
        - 0 <= obtained_marks <= total_marks
    """

    total_marks: float
    obtained_marks: float
    percentage: float
    is_passed: bool
    correct_count: int
    wrong_count: int
    unanswered_count: int
    grade: str
    per_difficulty: Dict[Difficulty, DifficultyTally] = field(default_factory=dict)
    timing: TimingStats = field(default_factory=TimingStats)
    accuracy: float = 0.0
    consistency_score: float = 0.0
    difficulty_score: float = 0.0

    def __post_init__(self) -> None:
        """Validate partition and mark bounds on construction."""
        tiers_total = sum(t.total for t in self.per_difficulty.values())
        if self.per_difficulty and tiers_total != self.question_count:
            raise ValueError(
                f"Difficulty tiers cover {tiers_total} questions, "
                f"expected {self.question_count}"
            )
        if not 0 <= self.obtained_marks <= self.total_marks:
            raise ValueError(
                f"obtained_marks {self.obtained_marks} outside [0, {self.total_marks}]"
            )

    @property
    def question_count(self) -> int:
        return self.correct_count + self.wrong_count + self.unanswered_count

    def notification_payload(self) -> dict:
        """Summary fields handed to the notification collaborator."""
        return {
            "obtained_marks": self.obtained_marks,
            "total_marks": self.total_marks,
            "percentage": self.percentage,
            "is_passed": self.is_passed,
            "grade": self.grade,
        }

    def to_dict(self) -> dict:
        return {
            "total_marks": self.total_marks,
            "obtained_marks": self.obtained_marks,
            "percentage": self.percentage,
            "is_passed": self.is_passed,
            "correct_count": self.correct_count,
            "wrong_count": self.wrong_count,
            "unanswered_count": self.unanswered_count,
            "grade": self.grade,
            "per_difficulty": {d.value: t.to_dict() for d, t in self.per_difficulty.items()},
            "timing": self.timing.to_dict(),
            "accuracy": self.accuracy,
            "consistency_score": self.consistency_score,
            "difficulty_score": self.difficulty_score,
        }

    @classmethod
    def from_dict(cls, data: dict) -> AttemptSummary:
        return cls(
            total_marks=data["total_marks"],
            obtained_marks=data["obtained_marks"],
            percentage=data["percentage"],
            is_passed=data["is_passed"],
            correct_count=data["correct_count"],
            wrong_count=data["wrong_count"],
            unanswered_count=data["unanswered_count"],
            grade=data["grade"],
            per_difficulty={
                Difficulty(d): DifficultyTally(**t)
                for d, t in data.get("per_difficulty", {}).items()
            },
            timing=TimingStats(**data.get("timing", {})),
            accuracy=data.get("accuracy", 0.0),
            consistency_score=data.get("consistency_score", 0.0),
            difficulty_score=data.get("difficulty_score", 0.0),
        )
