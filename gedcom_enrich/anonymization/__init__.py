"""Anonymization module: one-way removal of PII from an enriched population.

Core classes:
    - PIIAnonymizer: Replaces names, reduces dates to years, removes places and masks metadata
    - AnonymizationConfig: Naming strategy, year handling and masking settings
    - AnonymizationResult: Anonymized individuals and families plus a StrippingReport
    - validate_anonymization: Post-condition check on anonymized output

Example:
    >>> from gedcom_enrich.anonymization import PIIAnonymizer
    >>> result = PIIAnonymizer(rng=random.Random(1)).anonymize(individuals, families)
    >>> result.report.names_stripped
"""

from .config import AnonymizationConfig
from .masking import mask_birth_month, mask_boolean, mask_lifespan
from .model import AnonymizationResult, AnonymizedFamily, AnonymizedIndividual, StrippingReport
from .anonymizer import PIIAnonymizer
from .validation import ValidationReport, validate_anonymization

__all__ = [
    'AnonymizationConfig',
    'mask_lifespan',
    'mask_birth_month',
    'mask_boolean',
    'AnonymizationResult',
    'AnonymizedFamily',
    'AnonymizedIndividual',
    'StrippingReport',
    'PIIAnonymizer',
    'ValidationReport',
    'validate_anonymization',
]
