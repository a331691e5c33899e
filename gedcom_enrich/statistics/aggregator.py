from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union
import logging

from gedcom_enrich.app_hooks import AppHooks
from gedcom_enrich.country_resolver import ResolverStatistics
from gedcom_enrich.model import FamilyUnit, Individual
from .pipeline import StatisticsConfig, StatisticsPipeline
from .model import Stats

logger = logging.getLogger(__name__)

COUNTRY_RESOLUTION_CATEGORY = 'country_resolution'
SUMMARY_CATEGORY = 'summary'


class MetricsAggregator:
    """
    High-level interface for collecting population metrics.

    A convenience wrapper around StatisticsPipeline. Analysis runs on
    construction, including for an empty population, so results are always
    available with every key present.

    Example:
        metrics = MetricsAggregator(individuals, families, resolver_statistics=stats)
        metrics.get_value('structure', 'total_individuals')
    """

    def __init__(
        self,
        individuals: Optional[Union[Mapping[str, Individual], Iterable[Individual]]] = None,
        families: Optional[Union[Mapping[str, FamilyUnit], Iterable[FamilyUnit]]] = None,
        resolver_statistics: Optional[ResolverStatistics] = None,
        config_dict: Optional[Dict[str, Any]] = None,
        config_file: Optional[Path] = None,
        app_hooks: Optional[AppHooks] = None
    ) -> None:
        """
        Initialize and run metrics collection.

        Args:
            individuals: Enriched individuals, keyed by xref_id or as a list
            families: Family units
            resolver_statistics: Country resolution statistics for the same population
            config_dict: Dictionary to configure collectors (e.g., {'collectors': {'geographic': False}})
            config_file: Path to YAML config file with a 'statistics' section
            app_hooks: Optional application hooks for progress reporting
        """
        self.app_hooks = app_hooks
        self.individuals = individuals if individuals is not None else {}
        self.families = families if families is not None else ()
        self.resolver_statistics = resolver_statistics

        if config_dict:
            self.config = StatisticsConfig.from_dict(config_dict)
        elif config_file:
            self.config = StatisticsConfig(config_file=config_file)
        else:
            self.config = StatisticsConfig()

        self.pipeline = StatisticsPipeline(config=self.config, app_hooks=app_hooks)
        self._results: Stats = self._analyze()

    def _analyze(self) -> Stats:
        logger.info(f"Collecting statistics on {len(self.individuals)} individuals")
        results = self.pipeline.run(self.individuals, self.families)
        if self.resolver_statistics is not None:
            results.add_values(COUNTRY_RESOLUTION_CATEGORY, self.resolver_statistics.to_dict())
        results.add_values(SUMMARY_CATEGORY, self.summarize(results))
        return results

    @staticmethod
    def summarize(results: Stats) -> Dict[str, Any]:
        """
        Headline figures drawn from the other categories.

        Values from a disabled collector fall back to zero; time_span is None
        when no birth year is known.
        """
        earliest = results.get_value('temporal', 'earliest_birth_year', 0)
        latest = results.get_value('temporal', 'latest_birth_year', 0)
        generations = results.get_value('structure', 'generation_distribution', {})
        max_generations = 0
        if generations:
            max_generations = (results.get_value('structure', 'max_generation', 0)
                               - results.get_value('structure', 'min_generation', 0) + 1)
        return {
            'total_individuals': results.get_value('structure', 'total_individuals', 0),
            'total_families': results.get_value('structure', 'total_families', 0),
            'time_span': f"{earliest} - {latest}" if earliest else None,
            'countries_represented': results.get_value('geographic', 'countries_represented', 0),
            'average_children_per_family': results.get_value('structure', 'average_children_per_family', 0.0),
            'average_lifespan': results.get_value('temporal', 'average_lifespan', 0.0),
            'max_generations': max_generations,
        }

    @property
    def results(self) -> Stats:
        """Get the statistics results."""
        return self._results

    def get_value(self, category: str, name: str, default=None):
        """
        Convenience method to get a specific statistic value.

        Args:
            category: Category name (e.g., 'structure', 'temporal')
            name: Statistic name (e.g., 'total_individuals')
            default: Default value if not found

        Returns:
            The statistic value or default
        """
        return self._results.get_value(category, name, default)

    def get_category(self, category: str) -> Dict[str, Any]:
        """Get all statistics in a category."""
        return self._results.get_category(category)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Export all statistics as a dictionary of categories."""
        return self._results.to_dict()
