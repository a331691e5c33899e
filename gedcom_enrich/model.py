"""
model.py - Core record types for gedcom_enrich.

Defines the plain, immutable records that flow through the enrichment pipeline:
    - Individual: a person with relationship id-sets and optional enrichment
    - LifeEvent: a birth or death with free-text date and place
    - FamilyUnit: husband, wife and ordered children ids
    - CountryMatch: result of resolving a place string to a country
    - IndividualMetadata: non-PII values derived during enrichment

Relatives are referenced by id only, never by object, so that malformed
cyclic input cannot create ownership cycles.

Module: gedcom_enrich.model
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Literal, Optional, Tuple

__all__ = [
    'MatchMethod',
    'Issue',
    'CountryMatch',
    'LifeEvent',
    'IndividualMetadata',
    'Individual',
    'FamilyUnit',
    'RELATION_NAMES',
]

MatchMethod = Literal["exact", "alias", "pattern", "region", "historical", "fuzzy"]

RELATION_NAMES: Tuple[str, ...] = ('parents', 'spouses', 'children', 'siblings')


@dataclass(frozen=True)
class Issue:
    """A record-local problem found while processing; the affected relation is skipped."""
    issue_type: str
    severity: Literal["info", "warning", "error"]
    message: str
    person_id: Optional[str] = None
    related_person_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CountryMatch:
    """
    Outcome of resolving a free-text place to a country.

    Attributes:
        iso2 (Optional[str]): ISO 3166-1 alpha-2 code, or None when unresolved.
        confidence (float): Confidence in [0, 1].
        method (MatchMethod): Cascade tier that produced the match.
        matched_on (Optional[str]): Substring or token that matched.
        historical_year (Optional[int]): Year used for a historical match.
    """
    iso2: Optional[str]
    confidence: float
    method: MatchMethod
    matched_on: Optional[str] = None
    historical_year: Optional[int] = None

    @property
    def matched(self) -> bool:
        return self.iso2 is not None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'iso2': self.iso2,
            'confidence': self.confidence,
            'method': self.method,
        }
        if self.matched_on is not None:
            data['matched_on'] = self.matched_on
        if self.historical_year is not None:
            data['historical_year'] = self.historical_year
        return data


@dataclass(frozen=True)
class LifeEvent:
    """A birth or death event as recorded in the source file."""
    date: Optional[str] = None
    place: Optional[str] = None
    country: Optional[CountryMatch] = None


@dataclass(frozen=True)
class IndividualMetadata:
    """
    Non-identifying values computed for an individual during enrichment.

    Attributes:
        birth_year (Optional[int]): Year extracted from the birth date.
        death_year (Optional[int]): Year extracted from the death date.
        lifespan_years (Optional[int]): death_year - birth_year when both are known.
        lifespan (Optional[float]): lifespan_years normalized to [0, 1] against the longest in the population.
        birth_month (Optional[int]): Month 1-12 when the birth date carries one.
        is_alive (bool): True when no death date is recorded.
        parent_count, spouse_count, children_count, sibling_count (int): Relationship set sizes.
        ancestor_count, descendant_count (int): Sizes of the ancestor/descendant closures.
        zodiac_sign (Optional[str]): Western zodiac sign when the birth date has a day and month.
        relative_generation_value (Optional[float]): Position in [0, 1] among individuals of the same
            generation ordered by birth year then name; 0.5 when alone, None when the generation is unknown.
    """
    birth_year: Optional[int] = None
    death_year: Optional[int] = None
    lifespan_years: Optional[int] = None
    lifespan: Optional[float] = None
    birth_month: Optional[int] = None
    is_alive: bool = True
    parent_count: int = 0
    spouse_count: int = 0
    children_count: int = 0
    sibling_count: int = 0
    ancestor_count: int = 0
    descendant_count: int = 0
    zodiac_sign: Optional[str] = None
    relative_generation_value: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.__dataclass_fields__}


@dataclass(frozen=True)
class Individual:
    """
    A person in the population.

    Attributes:
        xref_id (str): Unique identifier assigned by the source file.
        name (str): Display name.
        sex (Optional[str]): 'M', 'F' or None.
        birth (Optional[LifeEvent]): Birth event.
        death (Optional[LifeEvent]): Death event.
        parents, spouses, children, siblings (FrozenSet[str]): Relative ids, never including xref_id.
        generation (Optional[int]): Relative generation; None means unknown.
        metadata (Optional[IndividualMetadata]): Derived values, set by the metadata stage.
    """
    xref_id: str
    name: str = ''
    sex: Optional[str] = None
    birth: Optional[LifeEvent] = None
    death: Optional[LifeEvent] = None
    parents: FrozenSet[str] = field(default_factory=frozenset)
    spouses: FrozenSet[str] = field(default_factory=frozenset)
    children: FrozenSet[str] = field(default_factory=frozenset)
    siblings: FrozenSet[str] = field(default_factory=frozenset)
    generation: Optional[int] = None
    metadata: Optional[IndividualMetadata] = None

    def __post_init__(self) -> None:
        # accept any iterable of ids from callers
        for relation in RELATION_NAMES:
            value = getattr(self, relation)
            if not isinstance(value, frozenset):
                object.__setattr__(self, relation, frozenset(value or ()))

    def get_event(self, event_type: str) -> Optional[LifeEvent]:
        """
        Get a life event by type.

        Args:
            event_type (str): 'birth' or 'death'.

        Returns:
            Optional[LifeEvent]: The event, or None if absent or unknown type.
        """
        if event_type == 'birth':
            return self.birth
        if event_type == 'death':
            return self.death
        return None

    @property
    def relationship_count(self) -> int:
        return len(self.parents) + len(self.spouses) + len(self.children) + len(self.siblings)


@dataclass(frozen=True)
class FamilyUnit:
    """
    A family record: optional husband and wife plus an ordered list of children.

    Attributes:
        xref_id (str): Family identifier.
        husband (Optional[str]): Husband's individual id.
        wife (Optional[str]): Wife's individual id.
        children (Tuple[str, ...]): Children's individual ids in source order.
    """
    xref_id: str
    husband: Optional[str] = None
    wife: Optional[str] = None
    children: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.children, tuple):
            object.__setattr__(self, 'children', tuple(self.children or ()))

    @property
    def partners(self) -> Tuple[str, ...]:
        return tuple(pid for pid in (self.husband, self.wife) if pid)

    @property
    def number_of_children(self) -> int:
        return len(self.children)
