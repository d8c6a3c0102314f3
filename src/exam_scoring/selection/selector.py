"""
Module: selection.selector

Purpose:
    Assemble an attempt's question set from the question pool. Draws a
    uniform random sample without replacement per type from the eligible
    pool, then shuffles the assembled set so type clusters are not
    predictable.

Key Functions:
    - select_questions(): Main entry point for selection
    - check_supply(): Requested vs available report per type

Key Classes:
    - Selector: Orchestrates the selection
    - SupplyReport: Result of check_supply()

Algorithm:
    1. Validate counts against the declared total (SelectionConfig)
    2. Filter the pool per type: matching type, active, matching category
    3. Fail on the first type with too few eligible questions
    4. Sample each type from the id-sorted pool with the seeded RNG
    5. Shuffle the assembled set

Dependencies:
    - random (std): Seeded sampling
    - selection.config: SelectionConfig

Used By:
    - __main__: select command
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from exam_scoring.core.models import Question, QuestionType

from .config import SelectionConfig, SelectionConfigError

logger = logging.getLogger(__name__)

__all__ = [
    "InsufficientQuestions",
    "SelectionConfigError",
    "Selector",
    "SupplyReport",
    "TypeSupply",
    "check_supply",
    "select_questions",
]


class InsufficientQuestions(Exception):
    """The pool cannot satisfy the requested count for a question type."""

    def __init__(self, question_type: QuestionType, required: int, available: int):
        super().__init__(
            f"Not enough {question_type.value} questions: "
            f"required {required}, available {available}"
        )
        self.question_type = question_type
        self.required = required
        self.available = available


def _eligible(pool: Sequence[Question], qtype: QuestionType, category_id: Optional[str]) -> List[Question]:
    """Active questions of one type in the category, sorted by id."""
    matches = [
        q for q in pool
        if q.type is qtype
        and q.is_active
        and (category_id is None or q.category_id == category_id)
    ]
    return sorted(matches, key=lambda q: q.id)


def select_questions(
    pool: Sequence[Question],
    config: SelectionConfig,
) -> List[Question]:
    """
    Select an attempt's question set.

    Main entry point for the selection algorithm.

    Args:
        pool: Question bank to draw from
        config: Per-type counts, total, category and seed

    Returns:
        Assembled questions in shuffled order

    Raises:
        InsufficientQuestions: If any type has fewer eligible questions
            than requested

    Invariants:
        - len(result) == config.total_questions
        - No duplicate questions in the result

    Example:
        >>> config = SelectionConfig({QuestionType.TRUE_FALSE: 2}, total_questions=2, seed=7)
        >>> len(select_questions(pool, config))
        2
    """
    selector = Selector(pool, config)
    return selector.run()


@dataclass
class Selector:
    """
    Question selection orchestrator.

    Attributes:
        pool: Available questions
        config: Selection configuration
    """

    pool: Sequence[Question]
    config: SelectionConfig

    # Internal state
    _rng: random.Random = field(init=False)
    _by_type: Dict[QuestionType, List[Question]] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        """Initialize internal state."""
        self._rng = random.Random(self.config.seed)
        self._by_type = {
            qtype: _eligible(self.pool, qtype, self.config.category_id)
            for qtype in self.config.requested_types
        }

    def run(self) -> List[Question]:
        """Execute the selection."""
        self._check_supply()

        selected: List[Question] = []
        for qtype in self.config.requested_types:
            count = self.config.question_counts[qtype]
            drawn = self._rng.sample(self._by_type[qtype], count)
            logger.debug(f"Drew {count} of {len(self._by_type[qtype])} {qtype.value} questions")
            selected.extend(drawn)

        self._rng.shuffle(selected)
        logger.info(f"Selected {len(selected)} questions across {len(self._by_type)} types")
        return selected

    def _check_supply(self) -> None:
        """Fail before drawing anything if any type is short."""
        for qtype in self.config.requested_types:
            required = self.config.question_counts[qtype]
            available = len(self._by_type[qtype])
            if available < required:
                raise InsufficientQuestions(qtype, required, available)


# ─────────────────────────────────────────────────────────────────────────────
# Supply Report
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TypeSupply:
    """Requested vs available questions for one type."""

    question_type: QuestionType
    requested: int
    available: int

    @property
    def is_sufficient(self) -> bool:
        return self.available >= self.requested

    @property
    def is_tight(self) -> bool:
        """Exactly as many questions as requested: every attempt gets the same set."""
        return self.requested > 0 and self.available == self.requested

    def to_dict(self) -> dict:
        return {
            "question_type": self.question_type.value,
            "requested": self.requested,
            "available": self.available,
            "is_sufficient": self.is_sufficient,
        }


@dataclass(frozen=True)
class SupplyReport:
    """
    Result of check_supply().

    Attributes:
        types: Per-type supply in config order
        warnings: Human-readable warnings (shortfalls, tight supply)
    """

    types: tuple[TypeSupply, ...]
    warnings: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return all(t.is_sufficient for t in self.types)

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "types": [t.to_dict() for t in self.types],
            "warnings": list(self.warnings),
        }


def check_supply(pool: Sequence[Question], config: SelectionConfig) -> SupplyReport:
    """
    Report whether the pool can satisfy the configuration.

    Never raises for shortfalls; used by admins before publishing an exam.

    Args:
        pool: Question bank
        config: Selection configuration

    Returns:
        SupplyReport with per-type counts and warnings
    """
    types: List[TypeSupply] = []
    warnings: List[str] = []
    for qtype, requested in config.question_counts.items():
        available = len(_eligible(pool, qtype, config.category_id))
        supply = TypeSupply(qtype, requested, available)
        types.append(supply)
        if not supply.is_sufficient:
            warnings.append(
                f"{qtype.value}: need {requested} questions but only {available} available"
            )
        elif supply.is_tight:
            warnings.append(
                f"{qtype.value}: exactly {available} questions available, "
                f"no room for randomisation"
            )
    for warning in warnings:
        logger.warning(warning)
    return SupplyReport(types=tuple(types), warnings=tuple(warnings))
