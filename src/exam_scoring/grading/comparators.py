"""
Module: grading.comparators

Purpose:
    Deterministic correctness checks for every non-free-text question
    type. Each comparator turns (question, response) into a normalised
    score in [0, 1]; partial credit is proportional for MULTIPLE_CHOICE,
    ORDERING, MATCHING and FILL_IN_THE_BLANK.

Key Functions:
    - compare(): Dispatch to the comparator registered for the type
    - COMPARATORS: QuestionType -> comparator function

Dependencies:
    - core.models: Question, StudentResponse, QuestionType

Used By:
    - grading.scorer: Scores every non-free-text response
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List

from exam_scoring.core.models import Question, QuestionType, StudentResponse

logger = logging.getLogger(__name__)


class MisconfiguredQuestion(Exception):
    """Raised when a question has no usable answer key."""

    def __init__(self, question_id: str, reason: str):
        super().__init__(f"Question {question_id} is misconfigured: {reason}")
        self.question_id = question_id
        self.reason = reason


@dataclass(frozen=True)
class Comparison:
    """Result of comparing one response to its answer key."""

    score: float
    is_answered: bool
    feedback: str = ""


Comparator = Callable[[Question, StudentResponse], Comparison]


def _unanswered() -> Comparison:
    return Comparison(score=0.0, is_answered=False, feedback="No answer submitted.")


def _require_key(question: Question) -> None:
    if not question.options:
        raise MisconfiguredQuestion(question.id, "question has no options")
    if not question.correct_options:
        raise MisconfiguredQuestion(question.id, "no option is flagged correct")


def _same_text(a: str, b: str) -> bool:
    return a.strip().casefold() == b.strip().casefold()


def _partial_feedback(score: float) -> str:
    if score >= 1.0:
        return "Correct."
    if score > 0.0:
        return f"Partially correct ({score:.0%})."
    return "Incorrect."


# ─────────────────────────────────────────────────────────────────────────────
# Comparators
# ─────────────────────────────────────────────────────────────────────────────

def compare_single(question: Question, response: StudentResponse) -> Comparison:
    """
    SINGLE_CHOICE / TRUE_FALSE: full credit only for exactly the key.

    Selecting the correct option together with any other option scores 0.
    """
    _require_key(question)
    if len(question.correct_options) != 1:
        raise MisconfiguredQuestion(
            question.id,
            f"expected exactly one correct option, found {len(question.correct_options)}",
        )
    if not response.selected_option_ids:
        return _unanswered()
    score = 1.0 if set(response.selected_option_ids) == question.correct_option_ids else 0.0
    return Comparison(score=score, is_answered=True, feedback=_partial_feedback(score))


def compare_multiple(question: Question, response: StudentResponse) -> Comparison:
    """
    MULTIPLE_CHOICE / ACCOUNTING_TABLE: Jaccard similarity of the sets.

    |selected & correct| / |selected | correct|, so wrong picks cost credit
    and selecting every option never earns full marks.
    """
    _require_key(question)
    if not response.selected_option_ids:
        return _unanswered()
    selected = set(response.selected_option_ids)
    correct = question.correct_option_ids
    score = len(selected & correct) / len(selected | correct)
    return Comparison(score=score, is_answered=True, feedback=_partial_feedback(score))


def compare_ordering(question: Question, response: StudentResponse) -> Comparison:
    """ORDERING: fraction of key positions holding the expected option."""
    _require_key(question)
    if not response.selected_option_ids:
        return _unanswered()
    expected = [o.id for o in question.correct_options]
    submitted = response.selected_option_ids
    hits = sum(1 for i, option_id in enumerate(expected) if i < len(submitted) and submitted[i] == option_id)
    score = hits / len(expected)
    return Comparison(score=score, is_answered=True, feedback=_partial_feedback(score))


def compare_matching(question: Question, response: StudentResponse) -> Comparison:
    """
    MATCHING: fraction of premises paired with their expected text.

    Premises are the options flagged correct; each carries its expected
    right-hand side in match_text. Comparison ignores case and padding.
    """
    _require_key(question)
    premises = question.correct_options
    if any(p.match_text is None for p in premises):
        raise MisconfiguredQuestion(question.id, "matching premise without match_text")
    if response.is_empty_for(QuestionType.MATCHING):
        return _unanswered()
    hits = sum(
        1 for p in premises
        if _same_text(response.matches.get(p.id, ""), p.match_text or "")
    )
    score = hits / len(premises)
    return Comparison(score=score, is_answered=True, feedback=_partial_feedback(score))


def _blank_alternatives(question: Question) -> List[List[str]]:
    """Accepted answers per blank, in blank order."""
    blanks: Dict[int, List[str]] = {}
    for option in question.correct_options:
        accepted = [a for a in (part.strip() for part in option.text.split("|")) if a]
        blanks.setdefault(option.sort_order, []).extend(accepted)
    return [blanks[k] for k in sorted(blanks)]


def compare_fill_in_blank(question: Question, response: StudentResponse) -> Comparison:
    """
    FILL_IN_THE_BLANK: fraction of blanks filled with an accepted answer.

    Correct options sharing a sort_order are alternatives for the same
    blank, and one option may list alternatives separated by '|'. A
    single-blank question also accepts the answer in free_text.
    """
    _require_key(question)
    blanks = _blank_alternatives(question)
    if not all(blanks):
        raise MisconfiguredQuestion(question.id, "blank without accepted text")
    if response.is_empty_for(QuestionType.FILL_IN_THE_BLANK):
        return _unanswered()

    answers = list(response.blank_answers)
    if not answers and response.free_text is not None:
        answers = [response.free_text]

    hits = 0
    for i, accepted in enumerate(blanks):
        if i < len(answers) and any(_same_text(answers[i], a) for a in accepted):
            hits += 1
    score = hits / len(blanks)
    return Comparison(score=score, is_answered=True, feedback=_partial_feedback(score))


COMPARATORS: Dict[QuestionType, Comparator] = {
    QuestionType.SINGLE_CHOICE: compare_single,
    QuestionType.TRUE_FALSE: compare_single,
    QuestionType.MULTIPLE_CHOICE: compare_multiple,
    QuestionType.ACCOUNTING_TABLE: compare_multiple,
    QuestionType.ORDERING: compare_ordering,
    QuestionType.MATCHING: compare_matching,
    QuestionType.FILL_IN_THE_BLANK: compare_fill_in_blank,
}


def compare(question: Question, response: StudentResponse) -> Comparison:
    """
    Compare a response against the question's answer key.

    Args:
        question: Question with its answer key
        response: Submitted response for the question

    Returns:
        Comparison with a score in [0, 1]

    Raises:
        MisconfiguredQuestion: If the answer key is unusable
        KeyError: If the type is graded by the free-text scorer
    """
    try:
        comparator = COMPARATORS[question.type]
    except KeyError:
        raise KeyError(f"No comparator for question type {question.type.value}") from None
    result = comparator(question, response)
    logger.debug(f"{question.id} ({question.type.value}): score={result.score:.3f}")
    return result
