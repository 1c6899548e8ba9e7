"""
Holiday Finder API
==================
Filter-driven package search ranked by the keyword index.

Endpoints:
  GET  /ai-search                      -- filtered + scored packages
  GET  /ai-search/filters              -- destinations and slider bounds
  GET  /ai-search/holiday-types        -- taxonomy reference
  GET  /ai-search/index/{package_id}   -- one keyword index record
  POST /ai-search/reindex              -- full rebuild (X-API-Key)
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
import logging

from app.core.config import settings
from app.core.rate_limiting import limiter, HOLIDAY_SEARCH_LIMIT, REINDEX_LIMIT
from app.db.database import get_db
from app.db.models import FlightPackage
from app.db.repositories import FlightPackageRepository
from app.services.catalog import (
    HolidaySearchResult,
    filter_options,
    holiday_search,
    package_to_indexable,
)
from app.services.keyword_index import (
    KeywordIndexStore,
    PackageKeywordIndex,
    get_holiday_type_keywords,
    get_keyword_index,
)
from app.services.taxonomy import HOLIDAY_TYPE_ALIASES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai-search", tags=["holiday-search"])


class HolidaySearchFilters(BaseModel):
    destinations: List[str]
    holiday_types: List[str] = Field(alias="holidayTypes")
    max_price: int = Field(alias="maxPrice")
    max_duration: int = Field(alias="maxDuration")

    model_config = ConfigDict(populate_by_name=True)


class HolidaySearchResponse(BaseModel):
    results: List[HolidaySearchResult]
    total: int
    filters: HolidaySearchFilters


def _published_packages(db: Optional[Session]) -> List[FlightPackage]:
    if db is None:
        if settings.enforce_real_data:
            raise HTTPException(status_code=503, detail="Service unavailable: database not connected")
        return []
    return FlightPackageRepository(db).get_published()


def rebuild_index(store: KeywordIndexStore, packages: List[FlightPackage]) -> Dict[str, Any]:
    store.build(package_to_indexable(p) for p in packages)
    return store.stats()


@router.get("", response_model=HolidaySearchResponse)
@limiter.limit(HOLIDAY_SEARCH_LIMIT)
def search_holidays(
    request: Request,
    destination: Optional[str] = Query(None, max_length=100, description="Destination or 'all'"),
    max_duration: Optional[int] = Query(None, ge=1, le=365, alias="maxDuration"),
    max_budget: Optional[float] = Query(None, ge=0, alias="maxBudget"),
    holiday_type: Optional[str] = Query(None, max_length=50, alias="holidayType"),
    db: Session = Depends(get_db),
    store: KeywordIndexStore = Depends(get_keyword_index),
):
    """
    Holiday finder search.
    Builds the keyword index on first use if startup did not.
    """
    packages = _published_packages(db)
    if packages and not store.is_built():
        logger.info("Keyword index empty -- building on demand")
        rebuild_index(store, packages)

    results, holiday_types = holiday_search(
        packages,
        store,
        destination=destination,
        max_duration=max_duration,
        max_budget=max_budget,
        holiday_type=holiday_type,
        limit=settings.holiday_search_max_results,
    )
    options = filter_options(packages)
    logger.info(
        f"Holiday search destination={destination} type={holiday_type} "
        f"budget={max_budget} duration={max_duration}: {len(results)} results"
    )

    return HolidaySearchResponse(
        results=results,
        total=len(results),
        filters=HolidaySearchFilters(
            destinations=options["destinations"],
            holiday_types=holiday_types,
            max_price=options["maxPrice"],
            max_duration=options["maxDuration"],
        ),
    )


@router.get("/filters")
def get_filters(db: Session = Depends(get_db)):
    """Destinations and price/duration slider bounds from published packages."""
    return filter_options(_published_packages(db))


@router.get("/holiday-types")
def get_holiday_types():
    """Holiday-type keyword taxonomy and storefront filter aliases."""
    return {
        "holidayTypes": get_holiday_type_keywords(),
        "aliases": {k: list(v) for k, v in HOLIDAY_TYPE_ALIASES.items()},
    }


@router.get("/index/{package_id}", response_model=PackageKeywordIndex)
def get_index_record(
    package_id: int,
    store: KeywordIndexStore = Depends(get_keyword_index),
):
    """Keyword index record for one package."""
    record = store.get(package_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Package not in keyword index")
    return record


@router.post("/reindex")
@limiter.limit(REINDEX_LIMIT)
def reindex(
    request: Request,
    db: Session = Depends(get_db),
    store: KeywordIndexStore = Depends(get_keyword_index),
):
    """Rebuild the keyword index from published packages. Protected by API key."""
    api_key = request.headers.get("X-API-Key", "")
    if api_key != settings.admin_api_key:
        raise HTTPException(status_code=403, detail="Invalid or missing API key")

    stats = rebuild_index(store, _published_packages(db))
    return {
        "status": "ok",
        "indexed": stats["packages"],
        "holidayTypeMatches": stats["holiday_type_matches"],
        "distribution": stats["distribution"],
    }
