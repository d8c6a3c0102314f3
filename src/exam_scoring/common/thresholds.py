"""Centralized threshold and magic number configuration.

This module contains the thresholds used by the free-text heuristics and
the result analytics. Having these in one place makes tuning easier and
keeps the scoring algorithms free of scattered literals.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FreeTextThresholds:
    """Thresholds for the free-text sub-scores."""

    # Keyword extraction
    min_keyword_length: int = 3  # Shorter tokens are never keywords
    min_prefix_match_length: int = 4  # Shorter stem of a prefix match must be this long

    # Structure
    sentence_weight: float = 0.6  # Share of structure from sentence count
    length_weight: float = 0.4  # Share of structure from answer length
    expected_length_ratio: float = 0.75  # Student words expected vs model words
    repetition_threshold: float = 0.5  # Unique/total sentences below this is penalised

    # Language quality
    full_credit_words: int = 8  # Words needed for full length credit
    min_chars: int = 20  # Below this the length score is halved
    short_text_multiplier: float = 0.5
    diversity_floor: float = 0.5  # Unique-word ratio below this is penalised

    # Coherence
    coherence_base: float = 0.5  # Score with no connectors and no contradictions
    contradiction_penalty: float = 0.25  # Per contradicting sentence
    max_contradiction_penalty: float = 0.5

    # Guardrails
    relevance_saturation: float = 0.5  # max(keyword, semantic) giving full surface credit
    ungrounded_ceiling: float = 0.10  # Cap when no keyword stem is shared
    weak_dimension: float = 0.5  # Sub-scores below this are named in feedback


@dataclass(frozen=True)
class TimingThresholds:
    """Thresholds for the informational timing analytics."""

    analytics_precision: int = 2  # Decimal places for ratios and scores


# Global instances for easy import
FREE_TEXT_THRESHOLDS = FreeTextThresholds()
TIMING_THRESHOLDS = TimingThresholds()
