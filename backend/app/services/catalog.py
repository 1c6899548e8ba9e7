"""
Catalog Adapter & Holiday-Type Search
=====================================
Turns storefront catalog rows into search engine inputs and runs the
holiday-type filter search on top of the keyword index.

Schema mapping:
  flight_packages  -> SearchableItem(type="package") and IndexablePackage
  cached_products  -> SearchableItem(type="tour") from the provider JSON:
      title          title
      excerpt        excerpt
      summary        description
      country        category + countries
      keywords       tags
      price          price
      durationText   duration
      keyPhoto       image (originalUrl)

Holiday-type search ranks by keyword-index score, then by price (cheapest
first). Budget and duration are hard filters.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging
import math
import re

from pydantic import ConfigDict, Field, ValidationError

from app.db.models import CachedTour, FlightPackage
from app.services.keyword_index import (
    IndexablePackage,
    ItineraryDay,
    KeywordIndexStore,
    PackageKeywordIndex,
    index_package,
    score_package_with_index,
)
from app.services.search_engine import SearchableItem
from app.services.taxonomy import HOLIDAY_TYPE_ALIASES, HOLIDAY_TYPE_KEYWORDS

logger = logging.getLogger(__name__)

# Storefront slider defaults when the catalog is empty
DEFAULT_MAX_PRICE = 10000
DEFAULT_MAX_DURATION = 21

_DAYS_RE = re.compile(r"(\d+)\s*days?", re.IGNORECASE)
_NIGHTS_RE = re.compile(r"(\d+)\s*nights?", re.IGNORECASE)
_NUMBER_RE = re.compile(r"\d+")


class HolidaySearchResult(SearchableItem):
    score: float
    duration_days: Optional[int] = Field(None, alias="durationDays")
    holiday_types: List[str] = Field(default_factory=list, alias="holidayTypes")

    model_config = ConfigDict(populate_by_name=True)


def _str_list(value: Any) -> List[str]:
    """JSON list columns may hold None or non-string junk."""
    if not value or not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None and str(v).strip()]


def _str_or_none(value: Any) -> Optional[str]:
    """Provider JSON text fields; anything that is not a non-blank string is dropped."""
    if isinstance(value, str) and value.strip():
        return value
    return None


def parse_duration_days(duration: Optional[str]) -> Optional[int]:
    """
    Number of days in a duration label.
    "7 Nights / 9 Days" -> 9, "10 nights" -> 11, "5" -> 5, "" -> None
    """
    if not duration:
        return None
    days = _DAYS_RE.search(duration)
    if days:
        return int(days.group(1))
    nights = _NIGHTS_RE.search(duration)
    if nights:
        return int(nights.group(1)) + 1
    number = _NUMBER_RE.search(duration)
    return int(number.group(0)) if number else None


# ---------------------------------------------------------------------------
# Row conversion
# ---------------------------------------------------------------------------

def package_to_searchable(pkg: FlightPackage) -> SearchableItem:
    return SearchableItem(
        id=pkg.id,
        type="package",
        title=pkg.title,
        description=pkg.description or None,
        excerpt=pkg.excerpt,
        category=pkg.category or None,
        countries=_str_list(pkg.countries),
        tags=_str_list(pkg.tags),
        price=pkg.price,
        duration=pkg.duration,
        image=pkg.featured_image,
        slug=pkg.slug,
    )


def package_to_indexable(pkg: FlightPackage) -> IndexablePackage:
    itinerary = [
        ItineraryDay(
            day=day["day"] if isinstance(day.get("day"), int) else None,
            title=str(day.get("title") or ""),
            description=str(day.get("description") or ""),
        )
        for day in (pkg.itinerary or [])
        if isinstance(day, dict)
    ]
    return IndexablePackage(
        id=pkg.id,
        title=pkg.title,
        description=pkg.description,
        excerpt=pkg.excerpt,
        category=pkg.category or "",
        countries=_str_list(pkg.countries),
        tags=_str_list(pkg.tags),
        highlights=_str_list(pkg.highlights),
        whats_included=_str_list(pkg.whats_included),
        itinerary=itinerary,
    )


def tour_to_searchable(tour: CachedTour) -> Optional[SearchableItem]:
    """Provider snapshot -> searchable tour. None when the snapshot has no title."""
    data: Dict[str, Any] = tour.data if isinstance(tour.data, dict) else {}
    title = data.get("title")
    if not title:
        logger.debug(f"Skipping cached tour {tour.product_id}: no title")
        return None

    country = _str_or_none(data.get("country"))
    price = data.get("price")
    key_photo = data.get("keyPhoto") or {}

    try:
        return SearchableItem(
            id=tour.product_id,
            type="tour",
            title=str(title),
            description=_str_or_none(data.get("summary")),
            excerpt=_str_or_none(data.get("excerpt")),
            category=country,
            countries=[country] if country else [],
            tags=_str_list(data.get("keywords")),
            price=float(price) if isinstance(price, (int, float)) else None,
            duration=_str_or_none(data.get("durationText")),
            image=_str_or_none(key_photo.get("originalUrl")) if isinstance(key_photo, dict) else None,
        )
    except ValidationError as e:
        logger.warning(f"Skipping cached tour {tour.product_id}: {e.error_count()} invalid fields")
        return None


def build_searchable_catalog(
    packages: Sequence[FlightPackage],
    tours: Sequence[CachedTour],
) -> List[SearchableItem]:
    """Packages first, then tours, as one candidate list."""
    items: List[SearchableItem] = [package_to_searchable(p) for p in packages]
    for tour in tours:
        item = tour_to_searchable(tour)
        if item is not None:
            items.append(item)
    return items


# ---------------------------------------------------------------------------
# Holiday-type search
# ---------------------------------------------------------------------------

def resolve_holiday_types(holiday_type: Optional[str]) -> List[str]:
    """
    Map a storefront filter value to taxonomy labels.
    "city" -> ["City Break"], "Beach" -> ["Beach"], "all"/None -> []
    Unknown values pass through unchanged (and simply never match).
    """
    if not holiday_type or holiday_type.strip().lower() in ("all", "any"):
        return []
    value = holiday_type.strip()
    aliased = HOLIDAY_TYPE_ALIASES.get(value.lower())
    if aliased:
        return list(aliased)
    for label in HOLIDAY_TYPE_KEYWORDS:
        if label.lower() == value.lower():
            return [label]
    return [value]


def _matches_destination(record: PackageKeywordIndex, pkg: FlightPackage, destination: str) -> bool:
    wanted = destination.strip().lower()
    if wanted in record.destination_keywords:
        return True
    if (pkg.category or "").lower() == wanted:
        return True
    return any(c.lower() == wanted for c in _str_list(pkg.countries))


def holiday_search(
    packages: Sequence[FlightPackage],
    store: KeywordIndexStore,
    destination: Optional[str] = None,
    max_duration: Optional[int] = None,
    max_budget: Optional[float] = None,
    holiday_type: Optional[str] = None,
    limit: int = 50,
) -> Tuple[List[HolidaySearchResult], List[str]]:
    """
    Filter and rank packages for the holiday finder.

    Returns:
        (results, resolved holiday-type labels)
    """
    holiday_types = resolve_holiday_types(holiday_type)
    results: List[HolidaySearchResult] = []
    stale = 0

    for pkg in packages:
        record = store.get(pkg.id)
        if record is None:
            # Package published after the last rebuild
            record = index_package(package_to_indexable(pkg))
            stale += 1

        if destination and destination.strip().lower() != "all":
            if not _matches_destination(record, pkg, destination):
                continue

        if max_budget is not None and (pkg.price or 0) > max_budget:
            continue

        days = parse_duration_days(pkg.duration)
        if max_duration is not None and days is not None and days > max_duration:
            continue

        score = score_package_with_index(record, holiday_types)
        if holiday_types and score <= 0:
            continue

        item = package_to_searchable(pkg)
        results.append(HolidaySearchResult(
            **item.model_dump(),
            score=score,
            duration_days=days,
            holiday_types=[m.holiday_type for m in record.holiday_type_matches],
        ))

    if stale:
        logger.info(f"Holiday search indexed {stale} packages missing from the keyword index")

    results.sort(key=lambda r: (-r.score, r.price if r.price is not None else math.inf))
    return results[:limit], holiday_types


def filter_options(packages: Sequence[FlightPackage]) -> Dict[str, Any]:
    """Destination list and slider bounds for the holiday finder."""
    destinations = sorted({p.category for p in packages if p.category})
    prices = [p.price for p in packages if p.price]
    durations = [d for d in (parse_duration_days(p.duration) for p in packages) if d]
    return {
        "destinations": destinations,
        "maxPrice": int(math.ceil(max(prices))) if prices else DEFAULT_MAX_PRICE,
        "maxDuration": max(durations) if durations else DEFAULT_MAX_DURATION,
    }
