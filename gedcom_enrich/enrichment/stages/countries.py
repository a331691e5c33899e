from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from typing import Dict, List, Optional, Tuple

from gedcom_enrich.country_resolver import CountryResolver
from gedcom_enrich.date_utils import extract_year
from gedcom_enrich.enrichment.model import Population
from gedcom_enrich.model import Individual, Issue
from .base import EnrichmentStage, register_stage

logger = logging.getLogger(__name__)


@register_stage
@dataclass
class CountryStage(EnrichmentStage):
    """
    Resolve birth/death places to countries.

    Only successful matches are attached to the event; misses are recorded in
    the population's resolver statistics and unresolved log.
    """
    stage_id: str = "countries"
    resolver: Optional[CountryResolver] = None
    event_types: Tuple[str, ...] = ('birth', 'death')
    use_event_year: bool = True

    def __post_init__(self):
        super().__post_init__()
        if self.resolver is None:
            # loads the packaged reference data; fails loudly if it is missing
            self.resolver = CountryResolver()

    def apply(self, population: Population, issues: List[Issue]) -> Population:
        statistics = population.resolver_statistics
        individuals: Dict[str, Individual] = {}
        total = len(population.individuals)

        for idx, (pid, person) in enumerate(population.individuals.items()):
            if idx % 100 == 0:
                self._report_step(
                    info=f"Resolving countries for individual {pid} ({idx + 1}/{total})",
                    target=total,
                    reset_counter=(idx == 0),
                    plus_step=100,
                )

            updates = {}
            for event_type in self.event_types:
                event = person.get_event(event_type)
                if event is None or not event.place:
                    continue
                year = extract_year(event.date) if self.use_event_year else None
                match, statistics = self.resolver.process_place(
                    event.place, year, individual_id=pid, event_type=event_type, statistics=statistics,
                )
                updates[event_type] = replace(event, country=match if match.iso2 else None)
            individuals[pid] = replace(person, **updates) if updates else person

        logger.info(
            f"Resolved {statistics.matched_count}/{statistics.total_locations} places to countries "
            f"({len(statistics.unresolved)} unresolved)"
        )
        return replace(population, individuals=individuals, resolver_statistics=statistics)
