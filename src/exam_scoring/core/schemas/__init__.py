"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    validate_question,
    validate_response,
    validate_exam,
    ValidationError,
)

__all__ = [
    "validate_question",
    "validate_response",
    "validate_exam",
    "ValidationError",
]
