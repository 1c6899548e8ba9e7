"""
Fuzzy Field Matcher
===================
Grades how well a single query term matches a single text field.

Match tiers, tried in order (first hit wins):
  1. substring      1.0  (+0.2 when the field starts with the term)
  2. word prefix    0.9
  3. whole field    similarity * 0.7   (terms of 4+ chars only)
  4. single word    similarity * 0.6   (terms of 4+ chars only)

Each tier has a strictly lower ceiling than the one before it, so a fuzzy
hit never outranks a clean one once field weights are applied.
Similarity is 1 - levenshtein / max(len(a), len(b)).
"""

from __future__ import annotations
from typing import Callable, NamedTuple, Optional, Tuple

from rapidfuzz.distance import Levenshtein

DEFAULT_FUZZY_THRESHOLD = 0.3
MIN_FUZZY_QUERY_LENGTH = 4
MIN_FUZZY_WORD_LENGTH = 3

SUBSTRING_SCORE = 1.0
LEADING_MATCH_BONUS = 0.2
WORD_PREFIX_SCORE = 0.9
WHOLE_FIELD_FACTOR = 0.7
SINGLE_WORD_FACTOR = 0.6


class MatchResult(NamedTuple):
    matches: bool
    score: float


NO_MATCH = MatchResult(False, 0.0)

# (text_lower, query_lower, threshold) -> score, or None when the tier misses
MatchTier = Callable[[str, str, float], Optional[float]]


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance: insert, delete and substitute all cost 1."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1 - levenshtein_distance(a, b) / longest


def _substring_tier(text: str, query: str, threshold: float) -> Optional[float]:
    position = text.find(query)
    if position < 0:
        return None
    bonus = LEADING_MATCH_BONUS if position == 0 else 0.0
    return SUBSTRING_SCORE + bonus


def _word_prefix_tier(text: str, query: str, threshold: float) -> Optional[float]:
    for word in text.split():
        if word.startswith(query):
            return WORD_PREFIX_SCORE
    return None


def _whole_field_tier(text: str, query: str, threshold: float) -> Optional[float]:
    if len(query) < MIN_FUZZY_QUERY_LENGTH:
        return None
    sim = similarity(text, query)
    if sim >= 1 - threshold:
        return sim * WHOLE_FIELD_FACTOR
    return None


def _single_word_tier(text: str, query: str, threshold: float) -> Optional[float]:
    if len(query) < MIN_FUZZY_QUERY_LENGTH:
        return None
    for word in text.split():
        if len(word) < MIN_FUZZY_WORD_LENGTH:
            continue
        sim = similarity(word, query)
        # First qualifying word wins, not the best one
        if sim >= 1 - threshold:
            return sim * SINGLE_WORD_FACTOR
    return None


MATCH_TIERS: Tuple[MatchTier, ...] = (
    _substring_tier,
    _word_prefix_tier,
    _whole_field_tier,
    _single_word_tier,
)


def fuzzy_match(text: str, query: str, threshold: float = DEFAULT_FUZZY_THRESHOLD) -> MatchResult:
    """
    Match one query term against one field value.

    Args:
        text:      Field value (any casing)
        query:     A single term; multi-word queries are split by the caller
        threshold: Maximum tolerated normalized edit distance (0.3 = 30%)

    Returns:
        MatchResult(matches, score). Score is 0 when nothing matched.
    """
    text_lower = text.lower()
    query_lower = query.lower()

    for tier in MATCH_TIERS:
        score = tier(text_lower, query_lower, threshold)
        if score is not None:
            return MatchResult(True, score)
    return NO_MATCH

