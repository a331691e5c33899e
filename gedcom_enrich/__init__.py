"""gedcom_enrich package: Exposes core classes for enriching and anonymizing genealogical data."""

from gedcom_enrich.model import CountryMatch, FamilyUnit, Individual, IndividualMetadata, Issue, LifeEvent
from gedcom_enrich.country_data import CountryData
from gedcom_enrich.country_resolver import CountryResolver, ResolverStatistics
from gedcom_enrich.relationships import Edge, RelationshipGraphBuilder, connected_components, generate_edges
from gedcom_enrich.generations import GenerationAssigner, GenerationTracker
from gedcom_enrich.gedcom_loader import GedcomLoader
from gedcom_enrich.anonymization import AnonymizationConfig, PIIAnonymizer, validate_anonymization
from gedcom_enrich.statistics import MetricsAggregator
from gedcom_enrich.family_tree import FamilyTree

__all__ = [
    "AnonymizationConfig",
    "CountryData",
    "CountryMatch",
    "CountryResolver",
    "Edge",
    "FamilyTree",
    "FamilyUnit",
    "GedcomLoader",
    "GenerationAssigner",
    "GenerationTracker",
    "Individual",
    "IndividualMetadata",
    "Issue",
    "LifeEvent",
    "MetricsAggregator",
    "PIIAnonymizer",
    "RelationshipGraphBuilder",
    "ResolverStatistics",
    "connected_components",
    "generate_edges",
    "validate_anonymization",
]
