"""Common utilities shared across the engine."""

from __future__ import annotations

from .thresholds import (
    FREE_TEXT_THRESHOLDS,
    TIMING_THRESHOLDS,
    FreeTextThresholds,
    TimingThresholds,
)

__all__ = [
    "FREE_TEXT_THRESHOLDS",
    "TIMING_THRESHOLDS",
    "FreeTextThresholds",
    "TimingThresholds",
]
