from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List

from gedcom_enrich.enrichment.model import Population
from gedcom_enrich.model import Issue
from gedcom_enrich.relationships import RelationshipGraphBuilder
from .base import EnrichmentStage, register_stage


@register_stage
@dataclass
class RelationshipStage(EnrichmentStage):
    """Rebuild parent/child/spouse/sibling sets from the family units."""
    stage_id: str = "relationships"
    builder: RelationshipGraphBuilder = field(default_factory=RelationshipGraphBuilder)

    def apply(self, population: Population, issues: List[Issue]) -> Population:
        self._report_step(info=f"Building relationships for {len(population.individuals)} individuals")
        graph = self.builder.build(population.individuals, population.families.values())
        issues.extend(graph.issues)
        return replace(population, individuals=graph.individuals)
