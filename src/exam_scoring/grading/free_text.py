"""
Module: grading.free_text

Purpose:
    Grade ESSAY and SHORT_ANSWER responses without human review. The
    composite is a weighted sum of five bounded sub-scores computed from
    the student text and the question's model answer. Pure and
    deterministic: the same texts always produce the same score.

Key Functions:
    - score_free_text(): Composite score, sub-scores and feedback

Algorithm:
    1. Keyword coverage: share of distinct model keyword stems found in
       the answer (exact stem, or prefix of a long enough stem); model
       answers without keywords fall back to content stems, then tokens
    2. Semantic overlap: cosine of term-frequency vectors over content stems
    3. Structure: sentence and length completeness vs the model answer,
       scaled down when sentences repeat
    4. Language quality: length floor and lexical diversity
    5. Coherence: connector use, minus a penalty for sentences that negate
       model concepts the model states positively

    Surface dimensions (3-5) are gated by topical relevance so fluent
    off-topic text earns nothing, and an answer sharing no model keyword
    is capped at a small ceiling.

Dependencies:
    - numpy: Term-frequency cosine
    - common.text: Tokenising, stemming, sentence splitting
    - common.thresholds: FreeTextThresholds

Used By:
    - grading.scorer: ESSAY / SHORT_ANSWER responses
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import numpy as np

from exam_scoring.common import text as textutils
from exam_scoring.common.thresholds import FreeTextThresholds
from exam_scoring.core.models.scores import FreeTextBreakdown

from .config import FreeTextConfig

logger = logging.getLogger(__name__)

_DIMENSION_FEEDBACK = {
    "keyword_coverage": "Key concepts from the expected answer are missing.",
    "semantic_overlap": "The answer does not cover the expected content closely.",
    "structure": "Develop the answer into more complete, distinct points.",
    "language_quality": "The answer is too short or repetitive.",
    "coherence": "Link ideas with clear reasoning and avoid contradictions.",
}

# Lead sentence by composite, highest floor first
_BAND_FEEDBACK = (
    (0.90, "Excellent answer."),
    (0.80, "Very good answer."),
    (0.70, "Good understanding shown."),
    (0.60, "Satisfactory answer."),
    (0.50, "Basic understanding shown."),
    (0.40, "Limited understanding shown."),
)
_BAND_FALLBACK = "The answer does not adequately address the question."

_GOOD_FEEDBACK = "Good answer covering the expected concepts."
_EMPTY_FEEDBACK = "No answer submitted."


@dataclass(frozen=True)
class FreeTextResult:
    """
    Output of the free-text scorer.

    Attributes:
        score: Composite in [0, 1]
        marks_awarded: score x max_marks, before rounding
        breakdown: The five sub-scores
        feedback: Band sentence, then the weak dimensions (if any)
    """

    score: float
    marks_awarded: float
    breakdown: FreeTextBreakdown
    feedback: str


# ─────────────────────────────────────────────────────────────────────────────
# Text Profile
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class _Profile:
    """Pre-computed features of one text."""

    raw: str
    tokens: List[str]
    sentences: List[str]
    keyword_stems: List[str]
    content_stems: List[str]
    token_stems: List[str]
    connectors: int
    negated: bool

    @property
    def word_count(self) -> int:
        return len(self.tokens)


def _profile(text: str, thresholds: FreeTextThresholds) -> _Profile:
    tokens = textutils.tokenize(text)
    return _Profile(
        raw=text,
        tokens=tokens,
        sentences=textutils.split_sentences(text),
        keyword_stems=[
            textutils.stem(t)
            for t in textutils.keywords(tokens, thresholds.min_keyword_length)
        ],
        content_stems=[textutils.stem(t) for t in textutils.keywords(tokens, 1)],
        token_stems=[textutils.stem(t) for t in tokens],
        connectors=textutils.count_connectors(text),
        negated=textutils.has_negation(text),
    )


def _stems_match(a: str, b: str, min_prefix: int) -> bool:
    if a == b:
        return True
    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    return len(shorter) >= min_prefix and longer.startswith(shorter)


def _contains_stem(stems: Iterable[str], target: str, min_prefix: int) -> bool:
    return any(_stems_match(s, target, min_prefix) for s in stems)


# ─────────────────────────────────────────────────────────────────────────────
# Sub-scores
# ─────────────────────────────────────────────────────────────────────────────

def _reference_terms(student: _Profile, model: _Profile) -> Tuple[List[str], List[str]]:
    """
    Pick the term tier the model answer actually has.

    Short model answers ("42", "pH 7", "No") have no keywords, so coverage
    falls back to content stems, then to every token.
    """
    if model.keyword_stems:
        return student.keyword_stems, model.keyword_stems
    if model.content_stems:
        return student.content_stems, model.content_stems
    return student.token_stems, model.token_stems


def _keyword_coverage(student: _Profile, model: _Profile, th: FreeTextThresholds) -> float:
    student_terms, model_terms = _reference_terms(student, model)
    targets = sorted(set(model_terms))
    if not targets:
        return 0.0
    available = set(student_terms)
    hits = sum(
        1 for t in targets
        if _contains_stem(available, t, th.min_prefix_match_length)
    )
    return hits / len(targets)


def _semantic_overlap(student: _Profile, model: _Profile) -> float:
    if model.content_stems:
        student_terms, model_terms = student.content_stems, model.content_stems
    else:
        student_terms, model_terms = student.token_stems, model.token_stems
    if not student_terms or not model_terms:
        return 0.0
    vocab = sorted(set(student_terms) | set(model_terms))
    index = {term: i for i, term in enumerate(vocab)}

    def vector(stems: List[str]) -> np.ndarray:
        vec = np.zeros(len(vocab), dtype=np.float64)
        for term, count in Counter(stems).items():
            vec[index[term]] = count
        return vec

    a = vector(student_terms)
    b = vector(model_terms)
    denom = float(np.linalg.norm(a) * np.linalg.norm(b))
    if denom == 0.0:
        return 0.0
    return float(np.clip(np.dot(a, b) / denom, 0.0, 1.0))


def _structure(student: _Profile, model: _Profile, th: FreeTextThresholds) -> float:
    if not student.sentences:
        return 0.0
    sentence_ratio = min(1.0, len(student.sentences) / max(1, len(model.sentences)))
    expected_words = max(1.0, th.expected_length_ratio * model.word_count)
    length_ratio = min(1.0, student.word_count / expected_words)
    score = th.sentence_weight * sentence_ratio + th.length_weight * length_ratio

    unique = len({textutils.normalize(s) for s in student.sentences})
    uniqueness = unique / len(student.sentences)
    if uniqueness < th.repetition_threshold:
        score *= uniqueness
    return score


def _language_quality(student: _Profile, th: FreeTextThresholds) -> float:
    if not student.tokens:
        return 0.0
    score = min(1.0, student.word_count / th.full_credit_words)
    if len(student.raw.strip()) < th.min_chars:
        score *= th.short_text_multiplier

    diversity = len(set(student.tokens)) / student.word_count
    if diversity < th.diversity_floor:
        score *= diversity / th.diversity_floor
    return score


def _coherence(student: _Profile, model: _Profile, th: FreeTextThresholds) -> float:
    bonus = min(1.0, student.connectors / max(1, model.connectors))
    score = th.coherence_base + (1.0 - th.coherence_base) * bonus

    if not model.negated:
        model_stems = set(model.keyword_stems)
        contradictions = 0
        for sentence in student.sentences:
            if not textutils.has_negation(sentence):
                continue
            tokens = textutils.keywords(textutils.tokenize(sentence), th.min_keyword_length)
            stems = {textutils.stem(t) for t in tokens}
            if stems & model_stems:
                contradictions += 1
        penalty = min(th.max_contradiction_penalty, contradictions * th.contradiction_penalty)
        score -= penalty
    return min(1.0, max(0.0, score))


def _band_sentence(composite: float) -> str:
    for floor, sentence in _BAND_FEEDBACK:
        if composite >= floor:
            return sentence
    return _BAND_FALLBACK


def _feedback(composite: float, breakdown: FreeTextBreakdown, th: FreeTextThresholds) -> str:
    weak = [
        _DIMENSION_FEEDBACK[name]
        for name, value in breakdown.as_dict().items()
        if value < th.weak_dimension
    ]
    return " ".join([_band_sentence(composite)] + (weak or [_GOOD_FEEDBACK]))


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def score_free_text(
    student_text: Optional[str],
    model_text: str,
    max_marks: float,
    config: Optional[FreeTextConfig] = None,
) -> FreeTextResult:
    """
    Score a free-text answer against the model answer.

    Never raises for bad input: empty, gibberish or off-topic text simply
    degrades to a low score.

    Args:
        student_text: Submitted answer (None treated as empty)
        model_text: Reference answer
        max_marks: Question mark weight
        config: Weights and thresholds (defaults if None)

    Returns:
        FreeTextResult with the composite clamped to [0, 1]

    Example:
        >>> score_free_text("", "Plants make glucose.", 10).score
        0.0
    """
    config = config or FreeTextConfig()
    th = config.thresholds
    w = config.weights

    if not (student_text or "").strip():
        return FreeTextResult(0.0, 0.0, FreeTextBreakdown.zero(), _EMPTY_FEEDBACK)

    student = _profile(student_text or "", th)
    model = _profile(model_text or "", th)

    breakdown = FreeTextBreakdown(
        keyword_coverage=_keyword_coverage(student, model, th),
        semantic_overlap=_semantic_overlap(student, model),
        structure=_structure(student, model, th),
        language_quality=_language_quality(student, th),
        coherence=_coherence(student, model, th),
    )

    relevance = min(
        1.0,
        max(breakdown.keyword_coverage, breakdown.semantic_overlap) / th.relevance_saturation,
    )
    composite = (
        w.keyword * breakdown.keyword_coverage
        + w.semantic * breakdown.semantic_overlap
        + relevance * (
            w.structure * breakdown.structure
            + w.language * breakdown.language_quality
            + w.coherence * breakdown.coherence
        )
    )
    if breakdown.keyword_coverage == 0.0:
        composite = min(composite, th.ungrounded_ceiling)
    composite = min(1.0, max(0.0, composite))

    logger.debug(
        f"Free-text composite {composite:.3f} "
        f"(K={breakdown.keyword_coverage:.2f} S={breakdown.semantic_overlap:.2f} "
        f"St={breakdown.structure:.2f} L={breakdown.language_quality:.2f} "
        f"C={breakdown.coherence:.2f})"
    )
    return FreeTextResult(
        score=composite,
        marks_awarded=composite * max_marks,
        breakdown=breakdown,
        feedback=_feedback(composite, breakdown, th),
    )
