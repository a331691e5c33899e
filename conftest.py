"""
Shared pytest fixtures for gedcom_enrich tests.
"""
from __future__ import annotations

import random
from pathlib import Path
from typing import Dict, List, Tuple

import pytest

from gedcom_enrich.country_resolver import CountryResolver
from gedcom_enrich.model import FamilyUnit, Individual, LifeEvent


SAMPLE_GEDCOM = """0 HEAD
1 SOUR TEST
1 GEDC
2 VERS 5.5.1
2 FORM LINEAGE-LINKED
1 CHAR UTF-8
0 @I1@ INDI
1 NAME John /Smith/
1 SEX M
1 BIRT
2 DATE 1 JAN 1900
2 PLAC London, England
1 DEAT
2 DATE 5 MAY 1970
2 PLAC Cork
1 FAMS @F1@
0 @I2@ INDI
1 NAME Mary /Murphy/
1 SEX F
1 BIRT
2 DATE 1905
2 PLAC Dublin, Ireland
1 FAMS @F1@
0 @I3@ INDI
1 NAME James /Smith/
1 SEX M
1 BIRT
2 DATE 15 MAR 1930
1 FAMC @F1@
0 @F1@ FAM
1 HUSB @I1@
1 WIFE @I2@
1 CHIL @I3@
0 TRLR
"""


@pytest.fixture
def make_individual():
    """Factory for Individual records with optional birth/death events."""
    def _create(xref_id: str, name: str = "Test Person", sex=None,
                birth_date=None, birth_place=None,
                death_date=None, death_place=None, **kwargs) -> Individual:
        birth = LifeEvent(date=birth_date, place=birth_place) if birth_date or birth_place else None
        death = LifeEvent(date=death_date, place=death_place) if death_date or death_place else None
        return Individual(xref_id=xref_id, name=name, sex=sex, birth=birth, death=death, **kwargs)

    return _create


@pytest.fixture
def make_family():
    """Factory for FamilyUnit records."""
    def _create(xref_id: str, husband=None, wife=None, children=()) -> FamilyUnit:
        return FamilyUnit(xref_id=xref_id, husband=husband, wife=wife, children=tuple(children))

    return _create


@pytest.fixture
def sample_tree(make_individual, make_family) -> Tuple[Dict[str, Individual], List[FamilyUnit]]:
    """
    Three generations across two families.

        F1: I1 + I2 -> I3
        F2: I3 + I4 -> I5, I6
    """
    people = [
        make_individual("I1", "John /Smith/", sex="M",
                        birth_date="1 JAN 1900", birth_place="London, England",
                        death_date="5 MAY 1970", death_place="Cork"),
        make_individual("I2", "Mary /Murphy/", sex="F",
                        birth_date="1905", birth_place="Dublin, Ireland",
                        death_date="1980", death_place="Dublin, Ireland"),
        make_individual("I3", "James /Smith/", sex="M",
                        birth_date="15 MAR 1930", birth_place="Dallas, Texas, USA",
                        death_date="2000", death_place="New York, USA"),
        make_individual("I4", "Anna /Weber/", sex="F",
                        birth_date="1932", birth_place="Berlin, Germany"),
        make_individual("I5", "Robert /Smith/", sex="M",
                        birth_date="JUL 1960", birth_place="Texas"),
        make_individual("I6", "Susan /Smith/", sex="F", birth_date="1962"),
    ]
    families = [
        make_family("F1", husband="I1", wife="I2", children=["I3"]),
        make_family("F2", husband="I3", wife="I4", children=["I5", "I6"]),
    ]
    return {person.xref_id: person for person in people}, families


@pytest.fixture(scope="session")
def country_resolver() -> CountryResolver:
    """Resolver over the packaged country reference data."""
    return CountryResolver()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for deterministic masking."""
    return random.Random(42)


@pytest.fixture
def gedcom_file(tmp_path) -> Path:
    """A small three-person GEDCOM file on disk."""
    path = tmp_path / "sample.ged"
    path.write_text(SAMPLE_GEDCOM, encoding="utf-8")
    return path
