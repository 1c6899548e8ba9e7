from types import MappingProxyType

import pytest

from app.services import keyword_index as ki
from app.services.keyword_index import (
    IndexablePackage,
    ItineraryDay,
    KeywordIndexStore,
    KeywordMatch,
    PackageKeywordIndex,
    calculate_holiday_type_matches,
    extract_destination_keywords,
    extract_keywords,
    get_holiday_type_keywords,
    index_package,
    score_package_with_index,
)


def _by_type(matches):
    return {m.holiday_type: m for m in matches}


def maldives_package(package_id=7):
    return IndexablePackage(
        id=package_id,
        title="Maldives Honeymoon",
        description="<p>Overwater villa with private pool</p>",
        category="Maldives",
        countries=["Maldives"],
        tags=["Honeymoon"],
        itinerary=[ItineraryDay(day=1, title="Arrive", description="Seaplane to the atoll")],
    )


class TestExtractKeywords:
    def test_strips_html_entities_and_punctuation(self):
        text = "<p>Sun &amp; Sand on the Beach-front!</p>"
        assert extract_keywords(text) == ["sun", "sand", "the", "beach-front"]

    def test_empty(self):
        assert extract_keywords("") == []

    def test_deduplicates_in_first_seen_order(self):
        assert extract_keywords("Beach beach BEACH sea") == ["beach", "sea"]

    def test_drops_short_tokens(self):
        assert extract_keywords("a to the spa") == ["the", "spa"]


class TestHolidayTypeMatches:
    def test_existing_tag_scores_fifty(self):
        matches = _by_type(calculate_holiday_type_matches(["relaxing"], ["BEACH"]))
        assert matches["Beach"].score >= 50
        assert matches["Beach"].matched_terms[0] == "tag:Beach"

    def test_overlapping_keywords_both_count(self):
        beach = _by_type(calculate_holiday_type_matches(["beachfront"], []))["Beach"]
        assert beach.score == 30
        assert beach.matched_terms == ["beach", "beachfront"]

    def test_multi_word_term_needs_adjacent_keywords(self):
        city = _by_type(calculate_holiday_type_matches(["rome", "city", "break"], []))["City Break"]
        assert "city break" in city.matched_terms
        assert city.score == 20

    def test_sorted_by_score(self):
        matches = calculate_holiday_type_matches(["beach", "safari"], ["Safari"])
        assert matches[0].holiday_type == "Safari"
        scores = [m.score for m in matches]
        assert scores == sorted(scores, reverse=True)

    def test_no_signal_no_entries(self):
        assert calculate_holiday_type_matches(["xyzzy"], []) == []


class TestDestinations:
    def test_category_and_countries_come_first(self):
        result = extract_destination_keywords(["taj", "mahal", "agra"], "India", ["India", "Nepal"])
        assert result == ["india", "nepal"]

    def test_alias_from_text(self):
        assert extract_destination_keywords(["overwater", "villas"], "", []) == ["maldives"]


class TestIndexPackage:
    def test_record(self):
        record = index_package(maldives_package())
        matches = _by_type(record.holiday_type_matches)

        assert record.package_id == 7
        assert "seaplane" in record.extracted_keywords
        assert matches["Honeymoon"].score >= 50 + 5
        assert record.destination_keywords[0] == "maldives"


class TestScoring:
    @pytest.fixture
    def record(self):
        return PackageKeywordIndex(
            package_id=1,
            holiday_type_matches=[
                KeywordMatch(holiday_type="Beach", score=65),
                KeywordMatch(holiday_type="Luxury", score=20),
            ],
        )

    def test_no_filters_is_base_score(self, record):
        assert score_package_with_index(record, []) == 10

    def test_single_filter_case_insensitive(self, record):
        assert score_package_with_index(record, ["beach"]) == 65

    def test_multi_match_bonus(self, record):
        assert score_package_with_index(record, ["Beach", "Luxury"]) == 65 + 20 + 2 * 10

    def test_bonus_only_counts_matched_filters(self, record):
        assert score_package_with_index(record, ["Beach", "Safari"]) == 65

    def test_unmatched_filter(self, record):
        assert score_package_with_index(record, ["Safari"]) == 0


class TestKeywordIndexStore:
    def test_empty_store(self):
        store = KeywordIndexStore()
        assert not store.is_built()
        assert store.get(1) is None
        assert store.stats()["built_at"] is None

    def test_rebuild_replaces_previous_entries(self):
        store = KeywordIndexStore()
        store.build([maldives_package(1)])
        store.build([maldives_package(2)])
        assert store.get(1) is None
        assert store.get(2) is not None

    def test_old_snapshot_unchanged_after_rebuild(self):
        store = KeywordIndexStore()
        old = store.build([maldives_package(1)])
        store.build([maldives_package(2)])
        assert list(old) == [1]
        assert list(store.snapshot()) == [2]

    def test_snapshot_is_read_only(self):
        store = KeywordIndexStore()
        snapshot = store.build([maldives_package(1)])
        assert isinstance(snapshot, MappingProxyType)
        with pytest.raises(TypeError):
            snapshot[2] = None

    def test_build_from_nothing_is_not_built(self):
        store = KeywordIndexStore()
        store.build([])
        assert not store.is_built()

    def test_stats(self):
        store = KeywordIndexStore()
        store.build([maldives_package(1), maldives_package(2)])
        stats = store.stats()
        assert stats["packages"] == 2
        assert stats["distribution"]["Honeymoon"] == 2
        assert stats["holiday_type_matches"] == sum(stats["distribution"].values())
        assert stats["built_at"] is not None

    def test_module_level_store(self, monkeypatch):
        monkeypatch.setattr(ki, "keyword_index", KeywordIndexStore())
        assert not ki.is_index_built()
        ki.build_package_index([maldives_package(3)])
        assert ki.is_index_built()
        assert ki.get_package_index(3).package_id == 3


def test_holiday_type_keywords_are_copied():
    table = get_holiday_type_keywords()
    assert len(table) == 14
    table["Beach"]["primary"].append("moon")
    assert "moon" not in get_holiday_type_keywords()["Beach"]["primary"]
