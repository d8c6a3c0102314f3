"""
Utils Package

Serialization helpers for question banks, response sets and exams.
"""

from .serialization import (
    deserialize_question,
    deserialize_response,
    load_exam_json,
    load_questions_jsonl,
    load_responses_json,
    save_questions_jsonl,
    save_responses_json,
)

__all__ = [
    "deserialize_question",
    "deserialize_response",
    "load_exam_json",
    "load_questions_jsonl",
    "load_responses_json",
    "save_questions_jsonl",
    "save_responses_json",
]
