"""
Temporal statistics collector.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from gedcom_enrich.model import FamilyUnit, Individual
from gedcom_enrich.statistics.base import StatisticsCollector, register_collector, sorted_counts
from gedcom_enrich.statistics.model import Stats
from gedcom_enrich.statistics.utils import birth_year, death_year, decade_of, lifespan_years

logger = logging.getLogger(__name__)

# (label, first year, last year); None means open-ended
HISTORICAL_PERIODS: Tuple[Tuple[str, Optional[int], Optional[int]], ...] = (
    ('pre-1700', None, 1699),
    ('1700-1799', 1700, 1799),
    ('1800-1849', 1800, 1849),
    ('1850-1899', 1850, 1899),
    ('1900-1945', 1900, 1945),
    ('1946-1999', 1946, 1999),
    ('2000+', 2000, None),
)


def historical_period(year: int) -> str:
    """Return the label of the historical period containing year."""
    for label, first, last in HISTORICAL_PERIODS:
        if (first is None or year >= first) and (last is None or year <= last):
            return label
    raise ValueError(f"No historical period for year {year}")


@register_collector
@dataclass
class TemporalCollector(StatisticsCollector):
    """
    Collects statistics about when people lived.

    Statistics collected:
        - Earliest and latest birth year and the span between them
        - Births and deaths per decade
        - Average, longest and shortest lifespan, variance and 10-year buckets
        - Births per named historical period
    """
    collector_id: str = "temporal"

    def collect(
        self,
        individuals: Sequence[Individual],
        families: Sequence[FamilyUnit],
        existing_stats: Stats,
        collector_num: int = None,
        total_collectors: int = None,
    ) -> Stats:
        """Collect temporal statistics."""
        stats = Stats()
        prefix = self._prefix(collector_num, total_collectors)
        total = len(individuals)
        self._report_step(info=f"{prefix}Analyzing timeline", target=total, reset_counter=True, plus_step=0)

        birth_years: List[int] = []
        death_years: List[int] = []
        lifespans: List[int] = []

        for idx, person in enumerate(individuals):
            if idx % 100 == 0:
                if self._stop_requested("Temporal collection stopped"):
                    logger.info(f"Temporal statistics stopped after {idx} individuals")
                    break
                self._report_step(plus_step=100)

            born = birth_year(person)
            if born is not None:
                birth_years.append(born)
            died = death_year(person)
            if died is not None:
                death_years.append(died)
            years = lifespan_years(person)
            if years is not None:
                lifespans.append(years)

        earliest = min(birth_years, default=0)
        latest = max(birth_years, default=0)
        average = sum(lifespans) / len(lifespans) if lifespans else 0.0
        variance = sum((years - average) ** 2 for years in lifespans) / len(lifespans) if lifespans else 0.0

        periods: Dict[str, int] = {label: 0 for label, _, _ in HISTORICAL_PERIODS}
        for year in birth_years:
            periods[historical_period(year)] += 1

        stats.add_values('temporal', {
            'earliest_birth_year': earliest,
            'latest_birth_year': latest,
            'time_span_years': latest - earliest,
            'birth_decades': sorted_counts([decade_of(year) for year in birth_years]),
            'death_decades': sorted_counts([decade_of(year) for year in death_years]),
            'average_lifespan': round(average, 1),
            'longest_lifespan': max(lifespans, default=0),
            'shortest_lifespan': min(lifespans, default=0),
            'lifespan_variance': round(variance, 2),
            'lifespan_distribution': {
                f"{start}-{start + 9}": count
                for start, count in sorted_counts([decade_of(years) for years in lifespans]).items()
            },
            'historical_periods': periods,
        })
        return stats
