"""
Site Search API
===============
Fuzzy, field-weighted search over published packages and cached tours.

Endpoints:
  GET /search              -- ranked results + suggestions
  GET /search/suggestions  -- typeahead suggestions only
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import List, Optional, Sequence
import logging

from app.core.config import settings
from app.core.monitoring import track_performance
from app.core.rate_limiting import limiter, SEARCH_LIMIT, SUGGEST_LIMIT
from app.db.database import get_db
from app.db.repositories import CachedTourRepository, FlightPackageRepository
from app.services.catalog import build_searchable_catalog
from app.services.search_engine import (
    SearchableItem,
    SearchOptions,
    SearchResult,
    get_search_suggestions,
    search_items,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


class SearchResponse(BaseModel):
    results: List[SearchResult]
    suggestions: List[str]
    total: int


class SuggestionsResponse(BaseModel):
    suggestions: List[str]


def load_catalog(db: Optional[Session]) -> List[SearchableItem]:
    """Published packages + cached tours. Raises 503 when the DB is down and real data is enforced."""
    if db is None:
        if settings.enforce_real_data:
            raise HTTPException(status_code=503, detail="Service unavailable: database not connected")
        return []
    packages = FlightPackageRepository(db).get_published()
    tours = CachedTourRepository(db).get_all()
    return build_searchable_catalog(packages, tours)


@track_performance("Catalog search")
def _run_search(items: Sequence[SearchableItem], query: str, max_results: int) -> List[SearchResult]:
    options = SearchOptions(
        fuzzy_threshold=settings.search_fuzzy_threshold,
        max_results=max_results,
        min_score=settings.search_min_score,
    )
    return search_items(items, query, options)


@router.get("", response_model=SearchResponse)
@limiter.limit(SEARCH_LIMIT)
def search(
    request: Request,
    q: str = Query("", max_length=200, description="Search text"),
    max_results: int = Query(
        settings.search_default_max_results,
        ge=1,
        le=settings.search_max_results_limit,
        alias="maxResults",
    ),
    db: Session = Depends(get_db),
):
    """
    Search packages and tours.
    Queries shorter than the configured minimum return an empty body.
    """
    query = q.strip()
    if len(query) < settings.search_min_query_length:
        return SearchResponse(results=[], suggestions=[], total=0)

    items = load_catalog(db)
    results = _run_search(items, query, max_results)
    suggestions = get_search_suggestions(items, query, settings.search_max_suggestions)
    logger.info(f"Search '{query}': {len(results)} results from {len(items)} items")

    return SearchResponse(results=results, suggestions=suggestions, total=len(results))


@router.get("/suggestions", response_model=SuggestionsResponse)
@limiter.limit(SUGGEST_LIMIT)
def suggestions(
    request: Request,
    q: str = Query("", max_length=200, description="Partial search text"),
    limit: int = Query(settings.search_max_suggestions, ge=1, le=20),
    db: Session = Depends(get_db),
):
    """Typeahead suggestions from titles, destinations and tags."""
    if len(q.strip()) < settings.search_min_query_length:
        return SuggestionsResponse(suggestions=[])
    items = load_catalog(db)
    return SuggestionsResponse(suggestions=get_search_suggestions(items, q.strip(), limit))
