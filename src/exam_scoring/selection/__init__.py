"""
Selection Package

Randomised assembly of an attempt's question set from the question bank.
"""

from .config import SelectionConfig, SelectionConfigError
from .selector import (
    InsufficientQuestions,
    Selector,
    SupplyReport,
    TypeSupply,
    check_supply,
    select_questions,
)

__all__ = [
    "SelectionConfig",
    "SelectionConfigError",
    "InsufficientQuestions",
    "Selector",
    "SupplyReport",
    "TypeSupply",
    "check_supply",
    "select_questions",
]
