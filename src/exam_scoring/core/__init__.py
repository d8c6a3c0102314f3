"""
Exam Scoring Core Package

Shared data models, payload validation and serialization. These models are
the single source of truth for the grading and selection packages.

**DESIGN NOTES:**

1. **Immutable Data Models**
   - Frozen dataclasses; any change (e.g. re-grading) creates new instances

2. **Derived Results Are Never Stored Independently**
   - AttemptSummary is always recomputed from ResponseScores
   - ResponseScore carries what the aggregator needs, so aggregation
     never has to look questions up again

3. **Validation On Construction**
   - Every model checks its invariants in __post_init__
"""

from .models import (
    AnswerOption,
    AttemptSummary,
    Difficulty,
    Exam,
    FreeTextBreakdown,
    Question,
    QuestionType,
    ResponseScore,
    StudentResponse,
)

__all__ = [
    "AnswerOption",
    "AttemptSummary",
    "Difficulty",
    "Exam",
    "FreeTextBreakdown",
    "Question",
    "QuestionType",
    "ResponseScore",
    "StudentResponse",
]
