from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List

from gedcom_enrich.enrichment.model import Population
from gedcom_enrich.generations import GenerationAssigner
from gedcom_enrich.model import Issue
from .base import EnrichmentStage, register_stage


@register_stage
@dataclass
class GenerationStage(EnrichmentStage):
    """Assign relative generations; needs relationship sets from the relationships stage."""
    stage_id: str = "generations"
    assigner: GenerationAssigner = field(default_factory=GenerationAssigner)

    def apply(self, population: Population, issues: List[Issue]) -> Population:
        self._report_step(info=f"Assigning generations for {len(population.individuals)} individuals")
        individuals = self.assigner.apply(population.individuals, list(population.families.values()))
        return replace(population, individuals=individuals)
