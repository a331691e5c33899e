from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Union

from gedcom_enrich.country_resolver import ResolverStatistics
from gedcom_enrich.model import FamilyUnit, Individual, Issue

FamiliesInput = Union[Mapping[str, FamilyUnit], Iterable[FamilyUnit]]


def families_by_id(families: FamiliesInput) -> Dict[str, FamilyUnit]:
    """Normalize a mapping or iterable of family units to a dict keyed by xref_id."""
    if isinstance(families, Mapping):
        return dict(families)
    return {family.xref_id: family for family in families}


@dataclass(frozen=True)
class Population:
    """
    The state threaded through enrichment stages.

    Each stage returns a new Population; the input one is left untouched.

    Attributes:
        individuals (Dict[str, Individual]): Individuals keyed by xref_id.
        families (Dict[str, FamilyUnit]): Family units keyed by xref_id.
        resolver_statistics (ResolverStatistics): Country resolution statistics so far.
    """
    individuals: Dict[str, Individual] = field(default_factory=dict)
    families: Dict[str, FamilyUnit] = field(default_factory=dict)
    resolver_statistics: ResolverStatistics = field(default_factory=ResolverStatistics)


@dataclass
class EnrichmentResult:
    individuals: Dict[str, Individual]
    families: Dict[str, FamilyUnit]
    issues: List[Issue] = field(default_factory=list)
    resolver_statistics: ResolverStatistics = field(default_factory=ResolverStatistics)
    stage_runs: List[str] = field(default_factory=list)  # stage_ids in run order

    @property
    def population(self) -> Population:
        return Population(
            individuals=self.individuals,
            families=self.families,
            resolver_statistics=self.resolver_statistics,
        )
