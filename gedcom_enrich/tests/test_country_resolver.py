"""
Tests for the country resolution cascade and its statistics.
"""
import pytest

from gedcom_enrich.country_data import CountryData
from gedcom_enrich.country_resolver import (
    CountryResolver,
    ResolverStatistics,
    confidence_tier,
    fuzzy_confidence,
)


class TestResolve:
    @pytest.mark.parametrize("place,year,iso2,confidence,method", [
        ("USA", None, "US", 1.0, "exact"),
        ("de", None, "DE", 1.0, "exact"),
        ("Germany", None, "DE", 0.95, "alias"),
        ("Holland", None, "NL", 0.95, "alias"),
        ("  united   STATES ", None, "US", 0.95, "alias"),
        ("New York, USA", None, "US", 0.9, "pattern"),
        ("London, England", None, "GB", 0.9, "pattern"),
        ("Cork", None, "IE", 0.85, "region"),
        ("Berlin", None, "DE", 0.85, "region"),
        ("München", None, "DE", 0.85, "region"),
        ("Texas", 1960, "US", 0.85, "region"),
        ("South Vietnam", 1970, "VN", 0.75, "historical"),
        ("East Germany", 1980, "DE", 0.75, "historical"),
    ])
    def test_cascade_tiers(self, country_resolver, place, year, iso2, confidence, method):
        match = country_resolver.resolve(place, year)
        assert match.iso2 == iso2
        assert match.confidence == confidence
        assert match.method == method

    def test_pattern_reports_matched_part(self, country_resolver):
        match = country_resolver.resolve("Dallas, Texas, USA")
        assert match.iso2 == "US"
        assert match.matched_on == "USA"

    def test_historical_carries_year(self, country_resolver):
        match = country_resolver.resolve("South Vietnam", 1970)
        assert match.historical_year == 1970
        assert match.matched_on == "South Vietnam"

    def test_historical_name_outside_range(self, country_resolver):
        """A historical name is not matched outside its years, nor by partial matching."""
        assert country_resolver.resolve("East Germany", 1995).iso2 is None
        assert country_resolver.resolve("East Germany").iso2 is None

    def test_partial_word_match(self, country_resolver):
        """A country name inside a longer place is a partial match."""
        match = country_resolver.resolve("Province of Germany Hinterland")
        assert match.iso2 == "DE"
        assert match.confidence == 0.85
        assert match.method == "pattern"

    def test_fuzzy_typo(self, country_resolver):
        match = country_resolver.resolve("Urited States")
        assert match.iso2 == "US"
        assert match.method == "fuzzy"
        assert match.confidence >= 0.5

    def test_confidence_never_rises_down_the_cascade(self, country_resolver):
        """Each later tier in the cascade scores no higher than the one before it."""
        samples = [
            ("USA", None, "exact"),
            ("Germany", None, "alias"),
            ("New York, USA", None, "pattern"),
            ("Cork", None, "region"),
            ("South Vietnam", 1970, "historical"),
            ("Urited States", None, "fuzzy"),
        ]
        matches = [country_resolver.resolve(place, year) for place, year, _ in samples]
        assert [match.method for match in matches] == [method for _, _, method in samples]
        confidences = [match.confidence for match in matches]
        assert confidences == sorted(confidences, reverse=True)
        assert confidences[-1] < confidences[-2]

    @pytest.mark.parametrize("place", [None, "", "   ", "Qwertyuiop Zxcvbnm"])
    def test_no_match(self, country_resolver, place):
        match = country_resolver.resolve(place)
        assert match.iso2 is None
        assert match.confidence == 0.0
        assert not match.matched
        assert match.method == "fuzzy"
        assert match.matched_on is None

    def test_empty_input_skips_cascade(self, country_resolver, monkeypatch):
        def fail(*args):
            raise AssertionError("cascade consulted for empty input")

        monkeypatch.setattr(country_resolver, "_match_exact", fail)
        match = country_resolver.resolve("")
        assert (match.iso2, match.confidence, match.method) == (None, 0.0, "fuzzy")

    def test_resolver_from_country_data(self):
        data = CountryData.from_dict({"FR": {"canonical": "France", "regions": ["paris"]}})
        resolver = CountryResolver(country_data=data)
        assert resolver.resolve("Paris").iso2 == "FR"
        assert resolver.resolve("Berlin").iso2 is None

    def test_missing_data_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CountryResolver(data_file=tmp_path / "none.yaml")


class TestStatistics:
    def test_process_place_threads_statistics(self, country_resolver):
        """Each lookup returns a new statistics value; earlier values are unchanged."""
        stats = ResolverStatistics()
        match, stats1 = country_resolver.process_place("USA", 1900, "I1", "birth", stats)
        _, stats2 = country_resolver.process_place("Nowhere Qzx", 1950, "I2", "death", stats1)
        assert match.iso2 == "US"
        assert stats.total_locations == 0
        assert stats1.total_locations == 1
        assert stats2.total_locations == 2
        assert stats2.tiers["high"] == 1
        assert stats2.tiers["unmatched"] == 1
        assert stats2.methods["exact"] == 1
        assert stats2.match_rate == 0.5
        unresolved = stats2.unresolved[0]
        assert (unresolved.place, unresolved.individual_id, unresolved.event_type, unresolved.year) == \
            ("Nowhere Qzx", "I2", "death", 1950)

    def test_process_place_without_statistics(self, country_resolver):
        _, stats = country_resolver.process_place("Cork")
        assert stats.total_locations == 1
        assert stats.tiers["medium"] == 1

    def test_reset(self, country_resolver):
        _, stats = country_resolver.process_place("Cork")
        assert stats.reset().total_locations == 0
        assert stats.total_locations == 1

    def test_to_dict(self, country_resolver):
        _, stats = country_resolver.process_place("Atlantis Qqq", individual_id="I9", event_type="birth")
        data = stats.to_dict()
        assert set(data) == {'total_locations', 'matched', 'methods', 'match_rate', 'unresolved_locations'}
        assert data['match_rate'] == 0.0
        assert data['unresolved_locations'][0]['individual_id'] == "I9"

    def test_empty_match_rate(self):
        assert ResolverStatistics().match_rate == 0.0

    @pytest.mark.parametrize("confidence,tier", [
        (1.0, 'high'), (0.9, 'high'), (0.85, 'medium'), (0.75, 'medium'),
        (0.6, 'low'), (0.5, 'low'), (0.3, 'unmatched'), (0.0, 'unmatched'),
    ])
    def test_confidence_tier(self, confidence, tier):
        assert confidence_tier(confidence) == tier

    @pytest.mark.parametrize("distance,expected", [(0, 0.6), (1, 0.5), (2, 0.4), (3, 0.3), (5, 0.3)])
    def test_fuzzy_confidence(self, distance, expected):
        assert fuzzy_confidence(distance) == expected
