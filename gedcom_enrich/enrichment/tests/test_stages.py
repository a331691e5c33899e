"""
Tests for the built-in enrichment stages.
"""
from __future__ import annotations

import pytest

from gedcom_enrich.enrichment.model import Population, families_by_id
from gedcom_enrich.enrichment.stages import CountryStage, GenerationStage, MetadataStage, RelationshipStage
from gedcom_enrich.relationships import collect_ancestors, collect_descendants


@pytest.fixture
def population(sample_tree):
    individuals, families = sample_tree
    return Population(individuals=dict(individuals), families=families_by_id(families))


@pytest.fixture
def related(population):
    return RelationshipStage().apply(population, [])


class TestRelationshipStage:
    def test_builds_relations(self, related):
        assert related.individuals["I3"].parents == {"I1", "I2"}
        assert related.individuals["I4"].spouses == {"I3"}

    def test_collects_issues(self, make_individual, make_family):
        """Test that unknown references become issues and do not fail the stage."""
        population = Population(
            individuals={"I1": make_individual("I1")},
            families=families_by_id([make_family("F1", husband="I1", wife="I2")]),
        )
        issues = []
        result = RelationshipStage().apply(population, issues)
        assert result.individuals["I1"].spouses == set()
        assert [issue.issue_type for issue in issues] == ['unknown_reference']


class TestCountryStage:
    def test_resolves_birth_and_death(self, population, country_resolver):
        result = CountryStage(resolver=country_resolver).apply(population, [])
        people = result.individuals
        assert people["I1"].birth.country.iso2 == "GB"
        assert people["I1"].death.country.iso2 == "IE"
        assert people["I3"].death.country.method == "pattern"
        assert people["I6"].birth.country is None
        assert result.resolver_statistics.total_locations == 8

    def test_unresolved_not_attached(self, make_individual, country_resolver):
        """Test that a miss leaves the event without a country but is logged."""
        person = make_individual("I1", birth_date="1900", birth_place="Qwertyuiop Zxcvbnm")
        result = CountryStage(resolver=country_resolver).apply(Population(individuals={"I1": person}), [])
        assert result.individuals["I1"].birth.country is None
        assert result.individuals["I1"].birth.place == "Qwertyuiop Zxcvbnm"
        unresolved = result.resolver_statistics.unresolved[0]
        assert (unresolved.individual_id, unresolved.event_type, unresolved.year) == ("I1", "birth", 1900)

    def test_event_year_enables_historical_names(self, make_individual, country_resolver):
        person = make_individual("I1", birth_date="12 JUN 1980", birth_place="East Germany")
        population = Population(individuals={"I1": person})
        with_year = CountryStage(resolver=country_resolver).apply(population, [])
        without_year = CountryStage(resolver=country_resolver, use_event_year=False).apply(population, [])
        assert with_year.individuals["I1"].birth.country.iso2 == "DE"
        assert with_year.individuals["I1"].birth.country.historical_year == 1980
        assert without_year.individuals["I1"].birth.country is None

    def test_event_types(self, population, country_resolver):
        result = CountryStage(resolver=country_resolver, event_types=('death',)).apply(population, [])
        assert result.individuals["I1"].birth.country is None
        assert result.individuals["I1"].death.country.iso2 == "IE"
        assert result.resolver_statistics.total_locations == 3

    def test_statistics_continue_from_population(self, population, country_resolver):
        stage = CountryStage(resolver=country_resolver)
        first = stage.apply(population, [])
        second = stage.apply(first, [])
        assert second.resolver_statistics.total_locations == 16
        assert population.resolver_statistics.total_locations == 0


class TestGenerationStage:
    def test_assigns_generations(self, related):
        result = GenerationStage().apply(related, [])
        assert {pid: p.generation for pid, p in result.individuals.items()} == \
            {"I1": 0, "I2": 0, "I3": 1, "I4": 1, "I5": 2, "I6": 2}
        assert related.individuals["I1"].generation is None


class TestMetadataStage:
    def test_metadata_values(self, related):
        """Test derived years, lifespan, month and counts."""
        result = MetadataStage().apply(related, [])
        john = result.individuals["I1"].metadata
        assert john.birth_year == 1900
        assert john.death_year == 1970
        assert john.lifespan_years == 70
        assert john.lifespan == pytest.approx(0.9333, abs=1e-4)
        assert john.birth_month == 1
        assert john.is_alive is False
        assert john.spouse_count == 1
        assert john.children_count == 1
        assert john.descendant_count == 3

        mary = result.individuals["I2"].metadata
        assert mary.lifespan == 1.0
        assert mary.birth_month is None

        robert = result.individuals["I5"].metadata
        assert robert.birth_month == 7
        assert robert.is_alive is True
        assert robert.lifespan is None
        assert robert.ancestor_count == 4
        assert robert.sibling_count == 1

    def test_lifespan_in_unit_interval(self, related):
        result = MetadataStage().apply(related, [])
        for person in result.individuals.values():
            lifespan = person.metadata.lifespan
            assert lifespan is None or 0.0 <= lifespan <= 1.0

    def test_negative_lifespan_reported(self, make_individual):
        person = make_individual("I1", birth_date="1950", death_date="1900")
        issues = []
        result = MetadataStage().apply(Population(individuals={"I1": person}), issues)
        assert result.individuals["I1"].metadata.lifespan_years is None
        assert result.individuals["I1"].metadata.lifespan is None
        assert [issue.issue_type for issue in issues] == ['negative_lifespan']

    def test_death_without_date_counts_as_alive(self, make_individual):
        person = make_individual("I1", birth_date="1900", death_place="Cork")
        result = MetadataStage().apply(Population(individuals={"I1": person}), [])
        assert result.individuals["I1"].metadata.is_alive is True

    def test_zero_lifespans_normalize_to_zero(self, make_individual):
        person = make_individual("I1", birth_date="1900", death_date="1900")
        result = MetadataStage().apply(Population(individuals={"I1": person}), [])
        assert result.individuals["I1"].metadata.lifespan == 0.0

    def test_lineage_counts_optional(self, related):
        result = MetadataStage(include_lineage_counts=False).apply(related, [])
        assert result.individuals["I5"].metadata.ancestor_count == 0

    def test_lineage_counts_match_closures(self, related):
        """Shared lines counted once per individual give the same sizes as a direct walk."""
        result = MetadataStage().apply(related, [])
        for pid, person in result.individuals.items():
            assert person.metadata.ancestor_count == len(collect_ancestors(related.individuals, pid))
            assert person.metadata.descendant_count == len(collect_descendants(related.individuals, pid))

    def test_zodiac_sign(self, related):
        """A sign needs both day and month of birth."""
        result = MetadataStage().apply(related, [])
        assert result.individuals["I1"].metadata.zodiac_sign == "Capricorn"
        assert result.individuals["I3"].metadata.zodiac_sign == "Pisces"
        assert result.individuals["I5"].metadata.zodiac_sign is None
        assert result.individuals["I6"].metadata.zodiac_sign is None

    def test_relative_generation_values(self, related):
        """Members of a generation are spread over [0, 1] by birth year."""
        generated = GenerationStage().apply(related, [])
        result = MetadataStage().apply(generated, [])
        values = {pid: person.metadata.relative_generation_value for pid, person in result.individuals.items()}
        assert values == {"I1": 0.0, "I2": 1.0, "I3": 0.0, "I4": 1.0, "I5": 0.0, "I6": 1.0}

    def test_relative_generation_value_alone_and_unknown(self, make_individual):
        people = {
            "I1": make_individual("I1", birth_date="1900", generation=0),
            "I2": make_individual("I2", birth_date="1900"),
        }
        result = MetadataStage().apply(Population(individuals=people), [])
        assert result.individuals["I1"].metadata.relative_generation_value == 0.5
        assert result.individuals["I2"].metadata.relative_generation_value is None

    def test_relative_generation_ties_broken_by_name(self, make_individual):
        people = {
            pid: make_individual(pid, name, birth_date=birth, generation=1)
            for pid, name, birth in (("I1", "Carl", "1900"), ("I2", "Anna", "1900"), ("I3", "Bert", None))
        }
        values = MetadataStage.relative_generation_values(people)
        assert values == {"I3": 0.0, "I2": 0.5, "I1": 1.0}
