"""
family_tree.py - High-level handler for an enriched family tree.

This module defines the FamilyTree class, which ties the pieces together:
    - Loading individuals and families from a GEDCOM file, or taking them directly
    - Running the enrichment pipeline (relationships, countries, generations, metadata)
    - Collecting population statistics
    - Producing an anonymized export for untrusted consumers such as an LLM

Module: gedcom_enrich.family_tree
"""
from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .anonymization import AnonymizationConfig, AnonymizationResult, PIIAnonymizer
from .app_hooks import AppHooks
from .country_resolver import ResolverStatistics
from .enrichment import Enrichment, EnrichmentConfig
from .enrichment.model import FamiliesInput
from .gedcom_loader import GedcomLoader
from .model import FamilyUnit, Individual
from .statistics import MetricsAggregator

logger = logging.getLogger(__name__)


class FamilyTree:
    """
    Enriched family tree with statistics and anonymized export.

    Attributes:
        individuals (Dict[str, Individual]): Enriched individuals keyed by xref_id.
        families (Dict[str, FamilyUnit]): Family units keyed by xref_id.
        issues (list): Record-local issues found during enrichment.
        resolver_statistics (ResolverStatistics): Country resolution statistics for this tree.
        statistics (Optional[MetricsAggregator]): Population metrics, or None when disabled.
        app_hooks (Optional[AppHooks]): Optional application hooks for progress reporting.
    """
    __slots__ = [
        'individuals',
        'families',
        'issues',
        'resolver_statistics',
        'statistics',
        'app_hooks',
        'enrichment',
    ]

    def __init__(
        self,
        individuals: Optional[Dict[str, Individual]] = None,
        families: FamiliesInput = None,
        gedcom_file: Optional[Union[str, Path]] = None,
        enable_statistics: bool = True,
        enrichment_config: Optional[Dict[str, Any]] = None,
        app_hooks: Optional['AppHooks'] = None,
    ) -> None:
        """
        Load (or accept) a population, enrich it and optionally collect statistics.

        Args:
            individuals: Individuals keyed by xref_id; ignored when gedcom_file is given.
            families: Family units for those individuals.
            gedcom_file: GEDCOM file to load instead of passing records directly.
            enable_statistics: Collect population metrics after enrichment.
            enrichment_config: Overrides for the enrichment configuration.
            app_hooks: Optional application hooks for progress reporting.

        Raises:
            FileNotFoundError: If the GEDCOM file or reference data cannot be found.
            ValueError: If configuration or reference data is malformed.
        """
        self.app_hooks = app_hooks
        if gedcom_file is not None:
            self._report_step("Loading GEDCOM file", target=None, reset_counter=True, plus_step=0)
            individuals, families = GedcomLoader(gedcom_file).load()

        individuals = individuals or {}
        families = families or {}

        self._report_step("Enrichment", target=len(individuals), reset_counter=True, plus_step=0)
        self.enrichment = Enrichment(config_dict=enrichment_config, app_hooks=app_hooks)
        result = self.enrichment.enrich(individuals, families)
        self.individuals: Dict[str, Individual] = result.individuals
        self.families: Dict[str, FamilyUnit] = result.families
        self.issues = result.issues
        self.resolver_statistics: ResolverStatistics = result.resolver_statistics
        if self.issues:
            logger.info(f"Enrichment completed with {len(self.issues)} issues found")

        if enable_statistics:
            self._report_step("Statistics", target=len(self.individuals), reset_counter=True, plus_step=0)
            self.statistics: Optional[MetricsAggregator] = MetricsAggregator(
                self.individuals,
                self.families,
                resolver_statistics=self.resolver_statistics,
                app_hooks=app_hooks,
            )
        else:
            self.statistics = None
            logger.info("Statistics disabled by configuration")

    def _report_step(self, info: str = "", target: Optional[int] = None, reset_counter: bool = False, plus_step: int = 0) -> None:
        """
        Report a step via app hooks if available. (Private method)

        Args:
            info (str): Information message.
            target (int): Target count for progress.
            reset_counter (bool): Whether to reset the counter.
            plus_step (int): Incremental step count.
        """
        if self.app_hooks and callable(getattr(self.app_hooks, "report_step", None)):
            self.app_hooks.report_step(info=info, target=target, reset_counter=reset_counter, plus_step=plus_step)
        else:
            logger.info(info)

    def get_person_by_name(self, name: str, exact_match: bool = False) -> Optional[Individual]:
        """
        Get an individual by name.

        Searches through all individuals to find a matching name. Can do exact or
        partial (case-insensitive) matching. Returns the first match found.

        Args:
            name (str): The name to search for.
            exact_match (bool): If True, requires exact match (case-insensitive).
                If False, matches if name appears anywhere in the individual's name.

        Returns:
            Optional[Individual]: The matching individual, or None if no match found.
        """
        search_name = name.lower().strip()
        for person in self.individuals.values():
            if not person.name:
                continue
            person_name = person.name.lower()
            if (exact_match and person_name == search_name) or (not exact_match and search_name in person_name):
                return person
        return None

    def anonymize(
        self,
        config: Optional[AnonymizationConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> AnonymizationResult:
        """
        Produce an anonymized copy of the enriched tree.

        Args:
            config: Anonymization settings; defaults when None.
            rng: Random source for masking; pass a seeded one for reproducible output.

        Returns:
            AnonymizationResult: Anonymized individuals and families plus a stripping report.
        """
        return PIIAnonymizer(config=config, rng=rng).anonymize(self.individuals, self.families)

    def llm_export(
        self,
        config: Optional[AnonymizationConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> Dict[str, Any]:
        """
        Build an export that contains anonymized data only.

        Statistics are included without the unresolved place log, which holds
        free-text places.

        Returns:
            Dict[str, Any]: Keys 'individuals', 'families', 'statistics' and 'report'.
        """
        anonymized = self.anonymize(config=config, rng=rng).to_dict()
        statistics = self.statistics.to_dict() if self.statistics else {}
        if 'country_resolution' in statistics:
            statistics['country_resolution'].pop('unresolved_locations', None)
        return {
            'individuals': anonymized['individuals'],
            'families': anonymized['families'],
            'statistics': statistics,
            'report': anonymized['report'],
        }
