"""
Multi-Field Weighted Search
===========================
In-memory relevance ranking for packages and tours.

Every query term is fuzzy-matched against a fixed set of weighted fields:

  title        5.0
  category     3.0
  countries    3.0   (first matching country only)
  tags         2.5   (first matching tag only)
  excerpt      1.5
  description  1.0

Term scores are summed per item, averaged across terms for multi-word
queries, filtered by a minimum score, sorted and capped.

Stateless: the caller supplies the candidate list on every call.
"""

from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional, Sequence, Union
import logging
import re

from pydantic import BaseModel, ConfigDict, Field

from app.services.fuzzy_matcher import DEFAULT_FUZZY_THRESHOLD, fuzzy_match

logger = logging.getLogger(__name__)

FIELD_WEIGHTS: Dict[str, float] = {
    "title": 5,
    "category": 3,
    "countries": 3,
    "tags": 2.5,
    "excerpt": 1.5,
    "description": 1,
}
LIST_FIELDS = frozenset({"countries", "tags"})

DEFAULT_MAX_RESULTS = 20
DEFAULT_MIN_SCORE = 0.1
DEFAULT_MAX_SUGGESTIONS = 5
MIN_SUGGESTION_QUERY_LENGTH = 2


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class SearchableItem(BaseModel):
    """A package or tour exposed to search. Display fields are never scored."""
    id: Union[int, str]
    type: Literal["package", "tour"]
    title: str
    description: Optional[str] = None
    excerpt: Optional[str] = None
    category: Optional[str] = None
    countries: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    price: Optional[float] = None
    duration: Optional[str] = None
    image: Optional[str] = None
    slug: Optional[str] = None


class SearchResult(SearchableItem):
    score: float
    matched_fields: List[str] = Field(default_factory=list, alias="matchedFields")

    model_config = ConfigDict(populate_by_name=True)


class SearchOptions(BaseModel):
    fuzzy_threshold: float = Field(DEFAULT_FUZZY_THRESHOLD, ge=0, le=1)
    max_results: int = Field(DEFAULT_MAX_RESULTS, ge=0)
    min_score: float = Field(DEFAULT_MIN_SCORE, ge=0)


def _split_terms(query: str) -> List[str]:
    return [t for t in query.lower().strip().split() if t]


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------

def _score_term(item: SearchableItem, term: str, threshold: float, matched_fields: List[str]) -> float:
    """Weighted score of one term across all fields of one item."""
    term_score = 0.0
    for field, weight in FIELD_WEIGHTS.items():
        value = getattr(item, field)
        if not value:
            continue
        candidates = value if field in LIST_FIELDS else [value]
        for candidate in candidates:
            match = fuzzy_match(candidate, term, threshold)
            if match.matches:
                term_score += match.score * weight
                if field not in matched_fields:
                    matched_fields.append(field)
                # A field contributes its weight at most once per term
                break
    return term_score


def search_items(
    items: Sequence[SearchableItem],
    query: str,
    options: Optional[SearchOptions] = None,
) -> List[SearchResult]:
    """
    Rank items against a free-text query.

    Args:
        items:   Candidate packages/tours (any order)
        query:   Raw user input (any casing/whitespace)
        options: Threshold, result cap and minimum score

    Returns:
        Results sorted by score desc, at most options.max_results long.
        Empty when the query is blank.
    """
    options = options or SearchOptions()
    if not query.strip():
        return []

    terms = _split_terms(query)
    results: List[SearchResult] = []

    for item in items:
        total_score = 0.0
        matched_fields: List[str] = []

        for term in terms:
            total_score += _score_term(item, term, options.fuzzy_threshold, matched_fields)

        # Average across terms so long queries don't win on term count alone
        if len(terms) > 1:
            total_score = total_score / len(terms)

        if total_score >= options.min_score:
            results.append(SearchResult(
                **item.model_dump(),
                score=total_score,
                matched_fields=matched_fields,
            ))

    results.sort(key=lambda r: r.score, reverse=True)
    logger.debug(f"search_items: '{query}' -> {len(results)}/{len(items)} above min_score")
    return results[:options.max_results]


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------

def highlight_match(text: str, query: str) -> str:
    """Wrap every case-insensitive occurrence of each query term in <mark>."""
    if not query.strip() or not text:
        return text

    result = text
    for term in query.lower().strip().split():
        pattern = re.compile(f"({re.escape(term)})", re.IGNORECASE)
        result = pattern.sub(r"<mark>\1</mark>", result)
    return result


def get_search_suggestions(
    items: Sequence[SearchableItem],
    query: str,
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
) -> List[str]:
    """
    Substring suggestions from titles, categories, countries and tags.
    Not ranked: values come back in the order items were scanned.
    """
    if not query.strip() or len(query) < MIN_SUGGESTION_QUERY_LENGTH:
        return []

    q = query.lower()
    # dict keeps insertion order; values unused
    suggestions: Dict[str, Any] = {}

    for item in items:
        if len(suggestions) >= max_suggestions:
            break

        if item.title and q in item.title.lower():
            suggestions[item.title] = None
        if item.category and q in item.category.lower():
            suggestions[item.category] = None

        for country in item.countries or []:
            if q in country.lower() and len(suggestions) < max_suggestions:
                suggestions[country] = None
        for tag in item.tags or []:
            if q in tag.lower() and len(suggestions) < max_suggestions:
                suggestions[tag] = None

    return list(suggestions)[:max_suggestions]
