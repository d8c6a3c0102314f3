"""
Grading Package

Turns a completed attempt into per-question scores and an attempt summary.

Pipeline: comparators / free_text -> scorer -> aggregator -> controller.
"""

from .aggregator import aggregate
from .comparators import Comparison, MisconfiguredQuestion, compare
from .config import (
    DEFAULT_SCORING_CONFIG,
    DIFFICULTY_WEIGHTS,
    GRADE_BANDS,
    FreeTextConfig,
    FreeTextWeights,
    GradeScale,
    MisconfiguredPolicy,
    ScoringConfig,
)
from .controller import AttemptJob, GradedAttempt, grade_attempt, publish_outcome, regrade_attempts
from .free_text import FreeTextResult, score_free_text
from .ports import AttemptLedger, CertificateIssuer, CompletionNotifier, ResultStore
from .scorer import AttemptScorer, InvalidResponseShape, ScoringCancelled, score_attempt

__all__ = [
    "aggregate",
    "Comparison",
    "MisconfiguredQuestion",
    "compare",
    "DEFAULT_SCORING_CONFIG",
    "DIFFICULTY_WEIGHTS",
    "GRADE_BANDS",
    "FreeTextConfig",
    "FreeTextWeights",
    "GradeScale",
    "MisconfiguredPolicy",
    "ScoringConfig",
    "AttemptJob",
    "GradedAttempt",
    "grade_attempt",
    "publish_outcome",
    "regrade_attempts",
    "FreeTextResult",
    "score_free_text",
    "AttemptLedger",
    "CertificateIssuer",
    "CompletionNotifier",
    "ResultStore",
    "AttemptScorer",
    "InvalidResponseShape",
    "ScoringCancelled",
    "score_attempt",
]
