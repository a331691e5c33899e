"""
Geographic statistics collector.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
import logging
from typing import Sequence, Set

from gedcom_enrich.country_data import get_continent_for_country_code
from gedcom_enrich.model import FamilyUnit, Individual
from gedcom_enrich.statistics.base import StatisticsCollector, register_collector
from gedcom_enrich.statistics.model import Stats
from gedcom_enrich.statistics.utils import event_country, event_place

logger = logging.getLogger(__name__)


@register_collector
@dataclass
class GeographicCollector(StatisticsCollector):
    """
    Collects statistics about where people were born and died.

    Country values come from the countries enrichment stage; places that were
    never resolved count towards unresolved_places.

    Statistics collected:
        - Birth and death country counts (ISO2)
        - Continents of birth countries
        - Unique birth and death places
        - Migration count (birth country differs from death country)
        - Resolved and unresolved place counts
    """
    collector_id: str = "geographic"

    def collect(
        self,
        individuals: Sequence[Individual],
        families: Sequence[FamilyUnit],
        existing_stats: Stats,
        collector_num: int = None,
        total_collectors: int = None,
    ) -> Stats:
        """Collect geographic statistics."""
        stats = Stats()
        prefix = self._prefix(collector_num, total_collectors)
        total = len(individuals)
        self._report_step(info=f"{prefix}Analyzing geographic data", target=total, reset_counter=True, plus_step=0)

        birth_countries: Counter = Counter()
        death_countries: Counter = Counter()
        continents: Counter = Counter()
        birth_places: Set[str] = set()
        death_places: Set[str] = set()
        migration_count = 0
        resolved_places = 0
        unresolved_places = 0

        for idx, person in enumerate(individuals):
            if idx % 100 == 0:
                if self._stop_requested("Geographic collection stopped"):
                    logger.info(f"Geographic statistics stopped after {idx} individuals")
                    break
                self._report_step(plus_step=100)

            for event, places, countries in (
                (person.birth, birth_places, birth_countries),
                (person.death, death_places, death_countries),
            ):
                place = event_place(event)
                if place is None:
                    continue
                places.add(place)
                country = event_country(event)
                if country:
                    countries[country] += 1
                    resolved_places += 1
                else:
                    unresolved_places += 1

            born_in = event_country(person.birth)
            died_in = event_country(person.death)
            if born_in:
                continent = get_continent_for_country_code(born_in)
                if continent:
                    continents[continent] += 1
            if born_in and died_in and born_in != died_in:
                migration_count += 1

        birth_total = sum(birth_countries.values())
        stats.add_values('geographic', {
            'birth_countries': dict(birth_countries.most_common()),
            'death_countries': dict(death_countries.most_common()),
            'countries_represented': len(birth_countries),
            'birth_country_percentages': {
                country: round(100 * count / birth_total, 1) for country, count in birth_countries.most_common()
            },
            'continents': dict(continents.most_common()),
            'unique_birth_places': len(birth_places),
            'unique_death_places': len(death_places),
            'migration_count': migration_count,
            'resolved_places': resolved_places,
            'unresolved_places': unresolved_places,
        })
        return stats
