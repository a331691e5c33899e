"""Enrichment stages: each derives one kind of data for the whole population.

Built-in stages, in run order:
    - RelationshipStage: parent/child/spouse/sibling sets from family units
    - CountryStage: birth/death places resolved to countries
    - GenerationStage: relative generation numbers
    - MetadataStage: years, normalized lifespan, birth month, relationship counts

Extensibility:
    Create custom stages by:
        1. Subclass EnrichmentStage
        2. Implement apply(population, issues) -> Population
        3. Use @register_stage decorator for automatic registration

Example:
    >>> from gedcom_enrich.enrichment.stages import EnrichmentStage, register_stage
    >>> @register_stage
    ... @dataclass
    ... class MyStage(EnrichmentStage):
    ...     stage_id: str = "my_stage"
    ...     def apply(self, population, issues):
    ...         return population
"""

from .base import EnrichmentStage
from .base import register_stage
from .base import get_stage_registry
from .relationships import RelationshipStage
from .countries import CountryStage
from .generations import GenerationStage
from .metadata import MetadataStage

__all__ = [
    'EnrichmentStage',
    'register_stage',
    'get_stage_registry',
    'RelationshipStage',
    'CountryStage',
    'GenerationStage',
    'MetadataStage',
]
