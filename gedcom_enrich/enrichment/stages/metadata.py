from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from typing import Dict, FrozenSet, List, Mapping, Optional

from gedcom_enrich.date_utils import extract_month, extract_year, zodiac_sign
from gedcom_enrich.enrichment.model import Population
from gedcom_enrich.model import Individual, IndividualMetadata, Issue
from gedcom_enrich.relationships import lineage_closures
from .base import EnrichmentStage, register_stage

logger = logging.getLogger(__name__)


@register_stage
@dataclass
class MetadataStage(EnrichmentStage):
    """
    Derive non-identifying metadata for every individual.

    Lifespan is normalized to [0, 1] against the longest lifespan in the
    population. An individual without a recorded death date counts as alive.
    A death year before the birth year is reported and leaves lifespan unset.
    The relative generation value places an individual among everyone of the
    same generation, so it needs generations assigned first.
    """
    stage_id: str = "metadata"
    include_lineage_counts: bool = True

    def apply(self, population: Population, issues: List[Issue]) -> Population:
        individuals = population.individuals
        lifespans: Dict[str, Optional[int]] = {}
        for pid, person in individuals.items():
            lifespans[pid] = self._lifespan_years(person, issues)
        longest = max((years for years in lifespans.values() if years is not None), default=0)
        relative_values = self.relative_generation_values(individuals)

        ancestors: Mapping[str, FrozenSet[str]] = {}
        descendants: Mapping[str, FrozenSet[str]] = {}
        if self.include_lineage_counts:
            ancestors = lineage_closures(individuals, 'parents')
            descendants = lineage_closures(individuals, 'children')

        enriched: Dict[str, Individual] = {}
        total = len(individuals)
        for idx, (pid, person) in enumerate(individuals.items()):
            if idx % 100 == 0:
                self._report_step(
                    info=f"Computing metadata for individual {pid} ({idx + 1}/{total})",
                    target=total,
                    reset_counter=(idx == 0),
                    plus_step=100,
                )
            lifespan_years = lifespans[pid]
            birth_date = person.birth.date if person.birth else None
            metadata = IndividualMetadata(
                birth_year=extract_year(birth_date),
                death_year=extract_year(person.death.date) if person.death else None,
                lifespan_years=lifespan_years,
                lifespan=self._normalize(lifespan_years, longest),
                birth_month=extract_month(birth_date),
                is_alive=not (person.death and person.death.date),
                parent_count=len(person.parents),
                spouse_count=len(person.spouses),
                children_count=len(person.children),
                sibling_count=len(person.siblings),
                ancestor_count=len(ancestors.get(pid, ())),
                descendant_count=len(descendants.get(pid, ())),
                zodiac_sign=zodiac_sign(birth_date),
                relative_generation_value=relative_values.get(pid),
            )
            enriched[pid] = replace(person, metadata=metadata)

        return replace(population, individuals=enriched)

    @staticmethod
    def relative_generation_values(individuals: Mapping[str, Individual]) -> Dict[str, float]:
        """
        Position of each individual within its generation, normalized to [0, 1].

        Members of a generation are ordered by birth year (unknown sorts as 0)
        and then by name. Someone alone in their generation gets 0.5.
        Individuals with an unknown generation are left out.
        """
        by_generation: Dict[int, List[Individual]] = {}
        for person in individuals.values():
            if person.generation is not None:
                by_generation.setdefault(person.generation, []).append(person)

        values: Dict[str, float] = {}
        for members in by_generation.values():
            if len(members) == 1:
                values[members[0].xref_id] = 0.5
                continue
            members.sort(key=lambda p: ((extract_year(p.birth.date) if p.birth else None) or 0, p.name))
            last = len(members) - 1
            for position, person in enumerate(members):
                values[person.xref_id] = round(position / last, 4)
        return values

    @staticmethod
    def _lifespan_years(person: Individual, issues: List[Issue]) -> Optional[int]:
        birth_year = extract_year(person.birth.date) if person.birth else None
        death_year = extract_year(person.death.date) if person.death else None
        if birth_year is None or death_year is None:
            return None
        if death_year < birth_year:
            message = f"Death year {death_year} is before birth year {birth_year}; lifespan left unknown"
            logger.warning(f"{person.xref_id}: {message}")
            issues.append(Issue(
                issue_type='negative_lifespan',
                severity='warning',
                message=message,
                person_id=person.xref_id,
            ))
            return None
        return death_year - birth_year

    @staticmethod
    def _normalize(lifespan_years: Optional[int], longest: int) -> Optional[float]:
        if lifespan_years is None:
            return None
        if longest <= 0:
            return 0.0
        return round(lifespan_years / longest, 4)
