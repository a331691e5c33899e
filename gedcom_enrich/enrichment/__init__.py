"""Enrichment module: staged derivation of relationships, countries, generations and metadata.

Provides a pluggable pipeline that turns raw individuals and family units into
enriched, immutable copies:
    - Rebuilding parent/child/spouse/sibling sets from family units
    - Resolving birth/death places to countries with a confidence score
    - Assigning relative generation numbers
    - Deriving non-identifying metadata (years, normalized lifespan, birth month)

Core classes:
    - Enrichment: High-level interface for running enrichment
    - EnrichmentPipeline: Runs stages in order and aggregates results
    - EnrichmentConfig: Configuration loaded from config.yaml
    - Population: State threaded between stages
    - EnrichmentResult: Enriched population, issues and resolver statistics

Example:
    >>> from gedcom_enrich.enrichment import Enrichment
    >>> enrichment = Enrichment(individuals=individuals, families=families)
    >>> for issue in enrichment.issues:
    ...     print(f"{issue.severity}: {issue.message}")
"""

from gedcom_enrich.model import Issue
from .model import Population
from .model import EnrichmentResult
from .config import EnrichmentConfig
from .stages import EnrichmentStage
from .stages import register_stage
from .stages import get_stage_registry
from .stages import RelationshipStage
from .stages import CountryStage
from .stages import GenerationStage
from .stages import MetadataStage
from .pipeline import EnrichmentPipeline
from .defaults import get_default_stages
from .enrichment import Enrichment

__all__ = [
    'Issue',
    'Population',
    'EnrichmentResult',
    'EnrichmentConfig',
    'EnrichmentStage',
    'register_stage',
    'get_stage_registry',
    'RelationshipStage',
    'CountryStage',
    'GenerationStage',
    'MetadataStage',
    'EnrichmentPipeline',
    'get_default_stages',
    'Enrichment',
]
