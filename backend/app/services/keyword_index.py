"""
Keyword Index for Holiday-Type Search
=====================================
Scans package content once per rebuild and classifies every package
against the holiday-type taxonomy and the destination gazetteer.

Build phase : package text -> keywords -> holiday-type + destination matches
Query phase : requested holiday types -> score per package (no text work)

The index lives in a KeywordIndexStore. A rebuild computes a complete new
map first, then swaps the store's read-only snapshot in one assignment, so
concurrent readers see either the old index or the new one, never a mix.
"""

from __future__ import annotations
from collections import Counter
from datetime import datetime
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional
import logging
import re
import threading

from pydantic import BaseModel, Field

from app.core.monitoring import track_performance
from app.services.taxonomy import DESTINATION_KEYWORDS, HOLIDAY_TYPE_KEYWORDS

logger = logging.getLogger(__name__)

TAG_MATCH_SCORE = 50
PRIMARY_KEYWORD_SCORE = 15
SECONDARY_KEYWORD_SCORE = 5
NO_FILTER_BASE_SCORE = 10
MULTI_MATCH_BONUS = 10
MIN_KEYWORD_LENGTH = 3

_HTML_TAG_RE = re.compile(r"<[^>]*>")
_HTML_ENTITY_RE = re.compile(r"&[a-z]+;", re.IGNORECASE)
_SPECIAL_CHARS_RE = re.compile(r"[^\w\s-]", re.ASCII)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class ItineraryDay(BaseModel):
    day: Optional[int] = None
    title: str = ""
    description: str = ""


class IndexablePackage(BaseModel):
    """The package fields the index reads."""
    id: int
    title: str
    description: Optional[str] = None
    excerpt: Optional[str] = None
    category: str = ""
    countries: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    highlights: List[str] = Field(default_factory=list)
    whats_included: List[str] = Field(default_factory=list)
    itinerary: List[ItineraryDay] = Field(default_factory=list)


class KeywordMatch(BaseModel):
    holiday_type: str
    score: float
    matched_terms: List[str] = Field(default_factory=list)


class PackageKeywordIndex(BaseModel):
    package_id: int
    extracted_keywords: List[str] = Field(default_factory=list)
    holiday_type_matches: List[KeywordMatch] = Field(default_factory=list)
    destination_keywords: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Text processing
# ---------------------------------------------------------------------------

def extract_keywords(text: str) -> List[str]:
    """
    Normalize free text into unique keywords.
    Strips HTML, keeps word chars and hyphens, drops tokens of 2 chars or less.
    Order of first occurrence is preserved (multi-word taxonomy terms rely on it).
    """
    if not text:
        return []

    clean = _HTML_TAG_RE.sub(" ", text)
    clean = _HTML_ENTITY_RE.sub(" ", clean)
    clean = _SPECIAL_CHARS_RE.sub(" ", clean)
    clean = clean.lower().strip()

    words = [w for w in clean.split() if len(w) >= MIN_KEYWORD_LENGTH]
    return list(dict.fromkeys(words))


def calculate_holiday_type_matches(keywords: List[str], existing_tags: List[str]) -> List[KeywordMatch]:
    """
    Score every holiday type against a package's keywords.

    +50 when the package is already tagged with the type,
    +15 per primary keyword, +5 per secondary keyword (substring of the
    joined keyword text). Overlapping keywords such as "beach"/"beachfront"
    both count.
    """
    keyword_text = " ".join(keywords)
    lowered_tags = {tag.lower() for tag in existing_tags}
    matches: List[KeywordMatch] = []

    for holiday_type, keyword_sets in HOLIDAY_TYPE_KEYWORDS.items():
        score = 0
        matched_terms: List[str] = []

        if holiday_type.lower() in lowered_tags:
            score += TAG_MATCH_SCORE
            matched_terms.append(f"tag:{holiday_type}")

        for keyword in keyword_sets["primary"]:
            if keyword in keyword_text:
                score += PRIMARY_KEYWORD_SCORE
                matched_terms.append(keyword)

        for keyword in keyword_sets["secondary"]:
            if keyword in keyword_text:
                score += SECONDARY_KEYWORD_SCORE
                matched_terms.append(keyword)

        if score > 0:
            matches.append(KeywordMatch(holiday_type=holiday_type, score=score, matched_terms=matched_terms))

    matches.sort(key=lambda m: m.score, reverse=True)
    return matches


def extract_destination_keywords(keywords: List[str], category: str, countries: List[str]) -> List[str]:
    """Package's own category/countries plus every gazetteer destination it mentions."""
    keyword_text = " ".join(keywords)
    matched: List[str] = []

    if category:
        matched.append(category.lower())
    matched.extend(country.lower() for country in countries)

    for destination, aliases in DESTINATION_KEYWORDS.items():
        if any(alias in keyword_text for alias in aliases):
            matched.append(destination.lower())

    return list(dict.fromkeys(matched))


def _package_text(pkg: IndexablePackage) -> str:
    parts: List[str] = [
        pkg.title,
        pkg.description or "",
        pkg.excerpt or "",
        pkg.category,
        *pkg.countries,
        *pkg.tags,
        *pkg.highlights,
        *pkg.whats_included,
        *(f"{day.title} {day.description}" for day in pkg.itinerary),
    ]
    return " ".join(parts)


def index_package(pkg: IndexablePackage) -> PackageKeywordIndex:
    """Build the keyword index record for one package. Pure."""
    keywords = extract_keywords(_package_text(pkg))
    return PackageKeywordIndex(
        package_id=pkg.id,
        extracted_keywords=keywords,
        holiday_type_matches=calculate_holiday_type_matches(keywords, pkg.tags),
        destination_keywords=extract_destination_keywords(keywords, pkg.category, pkg.countries),
    )


def score_package_with_index(index: PackageKeywordIndex, holiday_type_filters: List[str]) -> float:
    """
    Score a package for a set of requested holiday types.
    No filters means every package matches equally (base score 10).
    """
    if not holiday_type_filters:
        return NO_FILTER_BASE_SCORE

    by_type = {m.holiday_type.lower(): m for m in index.holiday_type_matches}
    total_score = 0.0
    match_count = 0

    for holiday_filter in holiday_type_filters:
        match = by_type.get(holiday_filter.lower())
        if match is not None:
            total_score += match.score
            match_count += 1

    # Reward packages that satisfy several requested types at once
    if match_count > 1:
        total_score += match_count * MULTI_MATCH_BONUS

    return total_score


# ---------------------------------------------------------------------------
# Index store
# ---------------------------------------------------------------------------

class KeywordIndexStore:
    """
    Owns one keyword index snapshot.
    Writers serialize on a lock; readers never block.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot: Mapping[int, PackageKeywordIndex] = MappingProxyType({})
        self._built_at: Optional[datetime] = None

    @track_performance("Keyword index build")
    def build(self, packages: Iterable[IndexablePackage]) -> Mapping[int, PackageKeywordIndex]:
        """Replace the whole index. Entries from the previous build are dropped."""
        packages = list(packages)
        logger.info(f"Building keyword index for {len(packages)} packages...")

        fresh: Dict[int, PackageKeywordIndex] = {pkg.id: index_package(pkg) for pkg in packages}
        snapshot = MappingProxyType(fresh)

        with self._lock:
            self._snapshot = snapshot
            self._built_at = datetime.utcnow()

        stats = self.stats()
        logger.info(
            f"Keyword index built: {stats['packages']} packages, "
            f"{stats['holiday_type_matches']} holiday type matches"
        )
        logger.info(f"Holiday type distribution: {stats['distribution']}")
        return snapshot

    def get(self, package_id: int) -> Optional[PackageKeywordIndex]:
        return self._snapshot.get(package_id)

    def is_built(self) -> bool:
        return len(self._snapshot) > 0

    def snapshot(self) -> Mapping[int, PackageKeywordIndex]:
        return self._snapshot

    def stats(self) -> Dict[str, object]:
        snapshot = self._snapshot
        distribution: Counter = Counter()
        for record in snapshot.values():
            distribution.update(m.holiday_type for m in record.holiday_type_matches)
        return {
            "packages": len(snapshot),
            "holiday_type_matches": sum(distribution.values()),
            "distribution": dict(distribution),
            "built_at": self._built_at.isoformat() if self._built_at else None,
        }


# Process-wide default store
keyword_index = KeywordIndexStore()


def get_keyword_index() -> KeywordIndexStore:
    """FastAPI dependency for the shared store (override in tests)."""
    return keyword_index


def build_package_index(packages: Iterable[IndexablePackage]) -> None:
    keyword_index.build(packages)


def get_package_index(package_id: int) -> Optional[PackageKeywordIndex]:
    return keyword_index.get(package_id)


def is_index_built() -> bool:
    return keyword_index.is_built()


def get_holiday_type_keywords() -> Dict[str, Dict[str, List[str]]]:
    """Copy of the taxonomy table for reference endpoints."""
    return {
        holiday_type: {"primary": list(sets["primary"]), "secondary": list(sets["secondary"])}
        for holiday_type, sets in HOLIDAY_TYPE_KEYWORDS.items()
    }
