"""
Family graph structure statistics collector.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Dict, Sequence

from gedcom_enrich.generations import GenerationTracker
from gedcom_enrich.model import FamilyUnit, Individual
from gedcom_enrich.relationships import connected_components, generate_edges
from gedcom_enrich.statistics.base import StatisticsCollector, individuals_by_id, register_collector, sorted_counts
from gedcom_enrich.statistics.model import Stats

logger = logging.getLogger(__name__)

EDGE_KINDS = ('parent-child', 'spouse', 'sibling')
LARGE_FAMILY_SIZE = 5


@register_collector
@dataclass
class StructureCollector(StatisticsCollector):
    """
    Collects statistics about the shape of the family graph.

    Statistics collected:
        - Total individuals and families
        - Edge counts by relationship kind
        - Generation distribution, range and unknown count
        - Family size distribution, average children, childless and large families
        - Connected components and the largest component size
    """
    collector_id: str = "structure"

    def collect(
        self,
        individuals: Sequence[Individual],
        families: Sequence[FamilyUnit],
        existing_stats: Stats,
        collector_num: int = None,
        total_collectors: int = None,
    ) -> Stats:
        """Collect structure statistics."""
        stats = Stats()
        prefix = self._prefix(collector_num, total_collectors)
        self._report_step(info=f"{prefix}Analyzing family structure", target=len(individuals), reset_counter=True, plus_step=0)

        by_id = individuals_by_id(individuals)

        edges_by_kind: Dict[str, int] = {kind: 0 for kind in EDGE_KINDS}
        for edge in generate_edges(families, by_id):
            edges_by_kind[edge.kind] += 1

        tracker = GenerationTracker.from_generations({p.xref_id: p.generation for p in individuals})
        unknown_generation = sum(1 for p in individuals if p.generation is None)

        child_counts = [family.number_of_children for family in families]
        total_children = sum(child_counts)

        components = connected_components(by_id)

        stats.add_values('structure', {
            'total_individuals': len(individuals),
            'total_families': len(families),
            'edges_by_kind': edges_by_kind,
            'generation_distribution': tracker.distribution(),
            'min_generation': tracker.earliest_generation if tracker.earliest_generation is not None else 0,
            'max_generation': tracker.latest_generation if tracker.latest_generation is not None else 0,
            'unknown_generation_count': unknown_generation,
            'family_size_distribution': sorted_counts(child_counts),
            'average_children_per_family': round(total_children / len(families), 2) if families else 0.0,
            'childless_families': sum(1 for count in child_counts if count == 0),
            'large_families': sum(1 for count in child_counts if count >= LARGE_FAMILY_SIZE),
            'connected_components': len(components),
            'largest_component_size': max((len(c) for c in components), default=0),
        })
        self._report_step(plus_step=len(individuals))
        return stats
