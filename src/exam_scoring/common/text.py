"""
Module: common.text

Purpose:
    Text normalisation helpers for free-text scoring: tokenisation,
    sentence splitting, stopword filtering, stemming, connector and
    negation detection.

Key Functions:
    - tokenize(): Lowercase alphanumeric tokens
    - split_sentences(): Sentence segmentation on terminal punctuation
    - keywords(): Salient (non-stopword, long enough) tokens
    - stem(): Cached Porter stem of a token
    - count_connectors(): Logical connector occurrences
    - has_negation(): Whether a fragment negates something

Dependencies:
    - nltk: Porter stemmer (no corpus download needed)
    - re (std)

Used By:
    - grading.free_text: All five sub-scores
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import List

from nltk.stem import PorterStemmer

_STEMMER = PorterStemmer()

_TOKEN_RE = re.compile(r"[a-z0-9]+")
_SENTENCE_RE = re.compile(r"(?<=[.!?])\s+|\n+")
_NEGATION_RE = re.compile(r"\b(?:not|no|never|cannot|none|neither|nor)\b|n't\b")

STOPWORDS = frozenset("""
a about above after again against all also am an and any are as at be because
been before being below between both but by can could did do does doing down
during each few for from further had has have having he her here hers herself
him himself his how i if in into is it its itself just me more most my myself
no nor not never of off on once only or other our ours ourselves out over own
same she should so some such than that the their theirs them themselves then
there these they this those through to too under until up very was we were
what when where which while who whom why will with would you your yours
yourself yourselves let s t via per etc
""".split())

CONNECTORS = (
    "because",
    "therefore",
    "however",
    "thus",
    "hence",
    "consequently",
    "although",
    "whereas",
    "moreover",
    "furthermore",
    "additionally",
    "finally",
    "firstly",
    "secondly",
    "since",
    "so that",
    "for example",
    "for instance",
    "such as",
    "as a result",
    "in addition",
    "in contrast",
    "on the other hand",
    "this means",
    "which means",
)

_CONNECTOR_RES = tuple(
    re.compile(r"\b" + re.escape(c) + r"\b") for c in CONNECTORS
)


def normalize(text: str) -> str:
    """Lowercase and collapse whitespace."""
    return re.sub(r"\s+", " ", (text or "")).strip().lower()


def tokenize(text: str) -> List[str]:
    """
    Split text into lowercase alphanumeric tokens.

    Example:
        >>> tokenize("Plants convert CO2, and water!")
        ['plants', 'convert', 'co2', 'and', 'water']
    """
    return _TOKEN_RE.findall(normalize(text))


def split_sentences(text: str) -> List[str]:
    """
    Split text into non-empty sentences.

    Splits after '.', '!' or '?' followed by whitespace, and on line breaks,
    so decimals like "3.5" stay inside their sentence.
    """
    parts = _SENTENCE_RE.split((text or "").strip())
    return [p.strip() for p in parts if p and tokenize(p)]


def keywords(tokens: List[str], min_length: int = 3) -> List[str]:
    """Tokens that are not stopwords and have at least min_length characters."""
    return [t for t in tokens if len(t) >= min_length and t not in STOPWORDS]


@lru_cache(maxsize=8192)
def stem(token: str) -> str:
    """Porter stem of a single lowercase token."""
    return _STEMMER.stem(token)


def count_connectors(text: str) -> int:
    """Count logical connector occurrences in text."""
    lowered = normalize(text)
    return sum(len(pattern.findall(lowered)) for pattern in _CONNECTOR_RES)


def has_negation(text: str) -> bool:
    return bool(_NEGATION_RE.search(normalize(text)))
