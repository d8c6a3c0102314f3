"""
Module: grading.scorer

Purpose:
    Score every question of an assembled attempt. Locates each question's
    response, dispatches to the comparator or the free-text scorer, and
    converts the normalised score to marks. Produces exactly one
    ResponseScore per question, in question order.

Key Classes:
    - AttemptScorer: Scoring orchestrator for one attempt

Key Functions:
    - score_attempt(): Main entry point
    - index_responses(): Map responses by question id, dropping strays

Dependencies:
    - concurrent.futures: Optional per-attempt thread pool
    - grading.comparators, grading.free_text

Used By:
    - grading.controller: grade_attempt()
    - __main__: grade command
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from exam_scoring.core.models import Question, ResponseScore, StudentResponse

from .comparators import MisconfiguredQuestion, compare
from .config import DEFAULT_SCORING_CONFIG, MisconfiguredPolicy, ScoringConfig
from .free_text import score_free_text

logger = logging.getLogger(__name__)


class InvalidResponseShape(Exception):
    """Raised in strict mode when a response does not belong to the attempt."""

    def __init__(self, question_id: str, reason: str):
        super().__init__(f"Response for {question_id}: {reason}")
        self.question_id = question_id
        self.reason = reason


class ScoringCancelled(Exception):
    """Raised when scoring is cancelled before completion."""


def index_responses(
    questions: Sequence[Question],
    responses: Sequence[StudentResponse],
    *,
    strict: bool = False,
) -> Tuple[Dict[str, StudentResponse], List[str]]:
    """
    Map responses by question id.

    Responses for questions outside the attempt are dropped with a warning.
    When a question was answered more than once, the first response wins.

    Args:
        questions: Assembled question set
        responses: Submitted responses
        strict: Raise instead of dropping a stray response

    Returns:
        (responses by question id, warnings)

    Raises:
        InvalidResponseShape: In strict mode, for an unknown question id
    """
    known = {q.id for q in questions}
    indexed: Dict[str, StudentResponse] = {}
    warnings: List[str] = []

    for response in responses:
        qid = response.question_id
        if qid not in known:
            if strict:
                raise InvalidResponseShape(qid, "question is not part of the attempt")
            message = f"Dropped response for unknown question {qid}"
            logger.warning(message)
            warnings.append(message)
            continue
        if qid in indexed:
            message = f"Duplicate response for {qid}; keeping the first"
            logger.warning(message)
            warnings.append(message)
            continue
        indexed[qid] = response

    return indexed, warnings


@dataclass
class AttemptScorer:
    """
    Scoring orchestrator for one attempt.

    Attributes:
        questions: Assembled question set, in presentation order
        config: Grading policy
        strict: Raise on responses for unknown questions
        cancel_event: Set to stop scoring early

    Usage:
        scorer = AttemptScorer(questions, config)
        scores = scorer.score(responses)
        for warning in scorer.warnings:
            ...
    """

    questions: Sequence[Question]
    config: ScoringConfig = DEFAULT_SCORING_CONFIG
    strict: bool = False
    cancel_event: Optional[threading.Event] = None

    warnings: List[str] = field(init=False, default_factory=list)

    def score(self, responses: Sequence[StudentResponse]) -> List[ResponseScore]:
        """
        Score all questions of the attempt.

        Args:
            responses: Submitted responses, in any order

        Returns:
            One ResponseScore per question, in question order

        Raises:
            InvalidResponseShape: Strict mode and a stray response
            MisconfiguredQuestion: FAIL policy and a broken answer key
            ScoringCancelled: If cancel_event was set
        """
        self.warnings = []
        indexed, warnings = index_responses(self.questions, responses, strict=self.strict)
        self.warnings.extend(warnings)

        pairs = [
            (q, indexed.get(q.id) or StudentResponse.empty(q.id))
            for q in self.questions
        ]

        if self.config.max_workers > 1 and len(pairs) > 1:
            results = self._score_parallel(pairs)
        else:
            results = [self._score_one(q, r) for q, r in pairs]

        for result in results:
            self.warnings.extend(result.warnings)
        logger.info(
            f"Scored {len(results)} questions "
            f"({sum(1 for r in results if r.is_answered)} answered)"
        )
        return results

    def _score_parallel(self, pairs: List[Tuple[Question, StudentResponse]]) -> List[ResponseScore]:
        """Score on a thread pool, joining results in question order."""
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures: List[Future] = [
                executor.submit(self._score_one, q, r) for q, r in pairs
            ]
            try:
                return [future.result() for future in futures]
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

    def _check_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise ScoringCancelled("Scoring cancelled")

    def _score_one(self, question: Question, response: StudentResponse) -> ResponseScore:
        self._check_cancelled()
        try:
            return self._grade(question, response)
        except MisconfiguredQuestion as e:
            if self.config.misconfigured_policy is MisconfiguredPolicy.FAIL:
                raise
            logger.warning(f"{e}; awarding 0")
            return ResponseScore(
                question_id=question.id,
                question_type=question.type,
                normalized_score=0.0,
                marks_awarded=0.0,
                max_marks=question.marks,
                is_correct=False,
                is_answered=not response.is_empty_for(question.type),
                difficulty=question.difficulty,
                time_spent_seconds=response.time_spent_seconds,
                feedback="This question could not be graded.",
                warnings=(str(e),),
            )

    def _grade(self, question: Question, response: StudentResponse) -> ResponseScore:
        breakdown = None
        if question.type.is_free_text:
            if not question.model_answer.strip():
                raise MisconfiguredQuestion(question.id, "no model answer text")
            answered = not response.is_empty_for(question.type)
            result = score_free_text(
                response.free_text,
                question.model_answer,
                question.marks,
                self.config.free_text,
            )
            score, feedback, breakdown = result.score, result.feedback, result.breakdown
        else:
            comparison = compare(question, response)
            score, feedback, answered = comparison.score, comparison.feedback, comparison.is_answered

        threshold = self.config.correct_threshold(question.type)
        if score >= 1.0:
            marks = question.marks
        else:
            marks = min(self.config.round_marks(score * question.marks), question.marks)
        return ResponseScore(
            question_id=question.id,
            question_type=question.type,
            normalized_score=score,
            marks_awarded=marks,
            max_marks=question.marks,
            is_correct=answered and score >= threshold,
            is_answered=answered,
            difficulty=question.difficulty,
            time_spent_seconds=response.time_spent_seconds,
            feedback=feedback,
            breakdown=breakdown,
        )


def score_attempt(
    questions: Sequence[Question],
    responses: Sequence[StudentResponse],
    config: Optional[ScoringConfig] = None,
    *,
    strict: bool = False,
    cancel_event: Optional[threading.Event] = None,
) -> List[ResponseScore]:
    """
    Score an attempt.

    Main entry point for scoring. Missing responses count as unanswered;
    responses to questions outside the attempt are dropped with a warning.

    Args:
        questions: Assembled question set
        responses: Submitted responses
        config: Grading policy (defaults if None)
        strict: Raise on responses for unknown questions
        cancel_event: Set to stop scoring early

    Returns:
        One ResponseScore per question, in question order

    Example:
        >>> scores = score_attempt(questions, responses)
        >>> sum(s.marks_awarded for s in scores)
    """
    scorer = AttemptScorer(
        questions=questions,
        config=config or DEFAULT_SCORING_CONFIG,
        strict=strict,
        cancel_event=cancel_event,
    )
    return scorer.score(responses)
