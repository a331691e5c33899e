"""
Demographics statistics collector.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Dict, Optional, Sequence, Tuple

from gedcom_enrich.model import FamilyUnit, Individual
from gedcom_enrich.statistics.base import StatisticsCollector, register_collector
from gedcom_enrich.statistics.model import Stats
from gedcom_enrich.statistics.utils import is_alive, lifespan_years

logger = logging.getLogger(__name__)

# (label, upper bound exclusive); None means open-ended
AGE_GROUPS: Tuple[Tuple[str, Optional[int]], ...] = (
    ('0-19', 20),
    ('20-39', 40),
    ('40-59', 60),
    ('60-79', 80),
    ('80+', None),
)


def age_group(age: int) -> str:
    for label, upper in AGE_GROUPS:
        if upper is None or age < upper:
            return label
    return AGE_GROUPS[-1][0]


@register_collector
@dataclass
class DemographicsCollector(StatisticsCollector):
    """
    Collects demographic statistics from the population.

    Statistics collected:
        - Gender distribution (M, F, U)
        - Age at death grouped into 20-year bands
        - Living vs deceased counts
    """
    collector_id: str = "demographics"

    def collect(
        self,
        individuals: Sequence[Individual],
        families: Sequence[FamilyUnit],
        existing_stats: Stats,
        collector_num: int = None,
        total_collectors: int = None,
    ) -> Stats:
        """Collect demographic statistics."""
        stats = Stats()
        prefix = self._prefix(collector_num, total_collectors)
        total = len(individuals)
        self._report_step(info=f"{prefix}Analyzing demographics", target=total, reset_counter=True, plus_step=0)

        genders: Dict[str, int] = {'M': 0, 'F': 0, 'U': 0}
        age_groups: Dict[str, int] = {label: 0 for label, _ in AGE_GROUPS}
        living_count = 0
        deceased_count = 0

        for idx, person in enumerate(individuals):
            if idx % 100 == 0:
                if self._stop_requested("Demographics collection stopped"):
                    logger.info(f"Demographics stopped after {idx} individuals")
                    break
                self._report_step(plus_step=100)

            sex = (person.sex or '').strip().upper()
            genders[sex if sex in ('M', 'F') else 'U'] += 1

            if is_alive(person):
                living_count += 1
            else:
                deceased_count += 1

            age = lifespan_years(person)
            if age is not None:
                age_groups[age_group(age)] += 1

        stats.add_values('demographics', {
            'gender_distribution': genders,
            'age_groups': age_groups,
            'living_count': living_count,
            'deceased_count': deceased_count,
        })
        return stats
