import pytest

from app.services.fuzzy_matcher import (
    NO_MATCH,
    _word_prefix_tier,
    fuzzy_match,
    levenshtein_distance,
    similarity,
)


class TestLevenshtein:
    def test_classic_distance(self):
        assert levenshtein_distance("kitten", "sitting") == 3

    def test_empty_strings(self):
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("", "") == 0

    def test_similarity_of_empty_strings_is_one(self):
        assert similarity("", "") == 1.0

    def test_similarity_normalized_by_longer_string(self):
        assert similarity("paris", "pariz") == pytest.approx(0.8)


class TestSubstringTier:
    def test_leading_match_gets_bonus(self):
        result = fuzzy_match("Rome City Break", "rome")
        assert result.matches
        assert result.score == pytest.approx(1.2)

    def test_inner_match_scores_one(self):
        assert fuzzy_match("Rome City Break", "city").score == pytest.approx(1.0)

    def test_case_insensitive(self):
        assert fuzzy_match("MALDIVES", "maldives").matches

    def test_short_query_still_matches_by_containment(self):
        assert fuzzy_match("Golden Triangle", "tri").score == pytest.approx(1.0)


class TestWordPrefixTier:
    def test_prefix_of_a_word(self):
        assert _word_prefix_tier("paris adventure", "adv", 0.3) == pytest.approx(0.9)

    def test_no_prefix(self):
        assert _word_prefix_tier("paris adventure", "ven", 0.3) is None


class TestFuzzyTiers:
    def test_threshold_boundary_one_deletion_matches(self):
        result = fuzzy_match("holiday", "holidy", 0.3)
        assert result.matches
        assert result.score == pytest.approx((1 - 1 / 7) * 0.7)

    def test_unrelated_short_query_misses(self):
        assert fuzzy_match("holiday", "xyz", 0.3) == NO_MATCH

    def test_short_query_gets_no_fuzzy_match(self):
        assert not fuzzy_match("rome", "rme").matches

    def test_single_word_tier(self):
        result = fuzzy_match("Paris Adventure", "pariz")
        assert result.matches
        assert result.score == pytest.approx(0.8 * 0.6)

    def test_first_qualifying_word_wins(self):
        # "parisx" qualifies at 0.5 before the closer "paris" is examined
        result = fuzzy_match("parisx paris", "pariz", 0.5)
        assert result.score == pytest.approx((1 - 2 / 6) * 0.6)

    def test_short_words_are_skipped(self):
        assert not fuzzy_match("to be ok", "tobe", 0.3).matches

    def test_zero_threshold_requires_containment(self):
        assert not fuzzy_match("holiday", "holidy", 0.0).matches
        assert fuzzy_match("holiday", "holi", 0.0).matches

    def test_substring_outranks_any_fuzzy_score(self):
        exact = fuzzy_match("holiday", "holiday")
        fuzzy = fuzzy_match("holiday", "holidy")
        assert exact.score >= 1.0 > fuzzy.score
