"""
Grading pipeline controller.

Orchestrates the full grading pipeline for a completed attempt:
1. Score every question (Attempt Scorer)
2. Aggregate the scores (Result Aggregator)
3. Publish the outcome to the collaborators, strictly after aggregation

Also grades independent attempts concurrently for bulk re-grading.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence

from exam_scoring.core.models import (
    AttemptSummary,
    Exam,
    Question,
    ResponseScore,
    StudentResponse,
)

from .aggregator import aggregate
from .config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .ports import AttemptLedger, CertificateIssuer, CompletionNotifier, ResultStore
from .scorer import AttemptScorer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GradedAttempt:
    """
    Complete grading result (immutable).

    Attributes:
        attempt_id: Attempt graded
        exam_id: Exam the attempt belongs to
        scores: One ResponseScore per question, in question order
        summary: Aggregated result
        warnings: Scoring warnings (dropped responses, misconfigured keys)

    Example:
        >>> graded = grade_attempt("a-1", exam, questions, responses)
        >>> print(f"{graded.summary.obtained_marks}/{graded.summary.total_marks}")
    """

    attempt_id: str
    exam_id: str
    scores: tuple[ResponseScore, ...]
    summary: AttemptSummary
    warnings: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "attempt_id": self.attempt_id,
            "exam_id": self.exam_id,
            "scores": [s.to_dict() for s in self.scores],
            "summary": self.summary.to_dict(),
            "warnings": list(self.warnings),
        }

    @classmethod
    def from_dict(cls, data: dict) -> GradedAttempt:
        return cls(
            attempt_id=data["attempt_id"],
            exam_id=data.get("exam_id", ""),
            scores=tuple(ResponseScore.from_dict(s) for s in data.get("scores", [])),
            summary=AttemptSummary.from_dict(data["summary"]),
            warnings=tuple(data.get("warnings", [])),
        )


@dataclass(frozen=True)
class AttemptJob:
    """Inputs for grading one attempt in a bulk run."""

    attempt_id: str
    exam: Exam
    questions: Sequence[Question]
    responses: Sequence[StudentResponse]


def grade_attempt(
    attempt_id: str,
    exam: Exam,
    questions: Sequence[Question],
    responses: Sequence[StudentResponse],
    config: Optional[ScoringConfig] = None,
    *,
    strict: bool = False,
    cancel_event: Optional[threading.Event] = None,
) -> GradedAttempt:
    """
    Grade a completed attempt from start to finish.

    Nothing partial escapes: if scoring is cancelled or a FAIL-policy
    error is raised, no GradedAttempt is produced.

    Args:
        attempt_id: Attempt identifier
        exam: Exam configuration
        questions: Assembled question set
        responses: Submitted responses
        config: Grading policy (defaults if None)
        strict: Raise on responses for unknown questions
        cancel_event: Set to abandon grading

    Returns:
        GradedAttempt with scores, summary and warnings

    Raises:
        ScoringCancelled: If cancel_event was set during scoring
        MisconfiguredQuestion: FAIL policy and a broken answer key
        InvalidResponseShape: Strict mode and a stray response
    """
    config = config or DEFAULT_SCORING_CONFIG
    start_time = time.perf_counter()
    logger.info(f"Grading attempt {attempt_id} ({len(questions)} questions)")

    scorer = AttemptScorer(
        questions=questions,
        config=config,
        strict=strict,
        cancel_event=cancel_event,
    )
    scores = scorer.score(responses)
    summary = aggregate(scores, exam, config)

    elapsed = time.perf_counter() - start_time
    logger.info(f"Graded attempt {attempt_id} in {elapsed:.3f}s")
    return GradedAttempt(
        attempt_id=attempt_id,
        exam_id=exam.id,
        scores=tuple(scores),
        summary=summary,
        warnings=tuple(scorer.warnings),
    )


def regrade_attempts(
    jobs: Sequence[AttemptJob],
    config: Optional[ScoringConfig] = None,
    max_workers: int = 4,
) -> List[GradedAttempt]:
    """
    Grade independent attempts concurrently.

    Used after an answer-key correction. Attempts share no mutable state,
    so they are graded in parallel without locking.

    Args:
        jobs: Attempts to grade
        config: Grading policy applied to every attempt
        max_workers: Thread pool size

    Returns:
        GradedAttempts in job order
    """
    config = config or DEFAULT_SCORING_CONFIG
    if not jobs:
        return []
    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        futures = [
            executor.submit(
                grade_attempt, job.attempt_id, job.exam, job.questions, job.responses, config
            )
            for job in jobs
        ]
        results = [future.result() for future in futures]
    logger.info(f"Re-graded {len(results)} attempts")
    return results


def publish_outcome(
    graded: GradedAttempt,
    store: ResultStore,
    ledger: AttemptLedger,
    certificates: Optional[CertificateIssuer] = None,
    notifier: Optional[CompletionNotifier] = None,
) -> None:
    """
    Hand a graded attempt to its collaborators.

    Order: persist, record the attempt, issue a certificate when passed,
    then notify. A failing collaborator propagates its error and later
    steps do not run.

    Args:
        graded: Result of grade_attempt()
        store: Persistence collaborator
        ledger: Attempts-used accounting
        certificates: Certificate issuance (optional)
        notifier: Completion notification (optional)
    """
    summary = graded.summary
    store.save(graded)
    ledger.record_attempt(graded.attempt_id, summary.is_passed)

    if summary.is_passed and certificates is not None:
        certificates.issue(graded.attempt_id, summary)
        logger.info(f"Certificate requested for attempt {graded.attempt_id}")

    if notifier is not None:
        notifier.notify(graded.attempt_id, summary.notification_payload())
