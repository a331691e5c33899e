"""
Pipeline for running statistics collectors.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
import yaml

from gedcom_enrich.model import FamilyUnit, Individual
from gedcom_enrich.statistics.base import StatisticsCollector, get_collector_registry
from gedcom_enrich.statistics.model import Stats

logger = logging.getLogger(__name__)


@dataclass
class StatisticsConfig:
    """
    Configuration for statistics collection.

    Attributes:
        collectors: Dict of collector_id -> enabled status
        config_file: Path to YAML config file (optional)
    """
    collectors: Dict[str, bool] = field(default_factory=dict)
    config_file: Optional[Path] = None

    def __post_init__(self) -> None:
        """Load configuration from file if config_file is specified and exists."""
        if self.config_file and Path(self.config_file).exists():
            self._load_from_file()
        elif self.config_file:
            logger.warning(f"Statistics config file not found: {self.config_file}; all collectors enabled")

    def _load_from_file(self) -> None:
        """
        Load configuration from YAML file.

        Reads the 'statistics' section from the YAML file and extracts
        collector enable/disable settings. A malformed file is logged and
        leaves every collector enabled.
        """
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load statistics config from {self.config_file}: {e}")
            return

        statistics_config = data.get('statistics', {}) if isinstance(data, dict) else {}
        self._apply_collectors(statistics_config.get('collectors', {}) or {})
        logger.info(f"Loaded statistics config from {self.config_file}")

    def _apply_collectors(self, collectors_config: Mapping[str, Any]) -> None:
        for collector_id, settings in collectors_config.items():
            if isinstance(settings, dict):
                self.collectors[collector_id] = bool(settings.get('enabled', True))
            elif isinstance(settings, bool):
                self.collectors[collector_id] = settings
            else:
                logger.warning(f"Ignoring statistics setting for '{collector_id}': {settings!r}")

    def is_enabled(self, collector_id: str) -> bool:
        """
        Check if a collector is enabled.

        Args:
            collector_id: Identifier of the collector to check

        Returns:
            True if enabled (default if not specified), False otherwise
        """
        return self.collectors.get(collector_id, True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> StatisticsConfig:
        """
        Create configuration from dictionary.

        Args:
            data: Dictionary with 'collectors' key mapping collector_id to
                enabled status or to a {'enabled': bool} mapping

        Returns:
            StatisticsConfig instance
        """
        config = cls()
        config._apply_collectors(data.get('collectors', {}) or {})
        return config


@dataclass
class StatisticsPipeline:
    """
    Pipeline for running statistics collectors on a population.

    Attributes:
        collectors: List of collector instances to run
        config: Configuration for the pipeline
        app_hooks: Optional application hooks for progress reporting
    """
    collectors: List[StatisticsCollector] = field(default_factory=list)
    config: StatisticsConfig = field(default_factory=StatisticsConfig)
    app_hooks: Optional[Any] = field(default=None)

    def __post_init__(self) -> None:
        """Initialize collectors from registry if none provided."""
        if not self.collectors:
            self._load_collectors_from_registry()

    def _load_collectors_from_registry(self) -> None:
        """Instantiate each registered collector with its enabled setting applied."""
        registry = get_collector_registry()
        for collector_id, collector_cls in registry.items():
            enabled = self.config.is_enabled(collector_id)
            self.collectors.append(collector_cls(enabled=enabled, app_hooks=self.app_hooks))
            logger.debug(f"Loaded collector: {collector_id} (enabled={enabled})")

    def run(
        self,
        individuals: Union[Mapping[str, Individual], Iterable[Individual]],
        families: Union[Mapping[str, FamilyUnit], Iterable[FamilyUnit]] = (),
    ) -> Stats:
        """
        Run all enabled collectors on the population.

        A collector that raises is logged and skipped; the remaining
        collectors still run.

        Args:
            individuals: Individuals, as a list or keyed by xref_id
            families: Family units, as a list or keyed by xref_id

        Returns:
            Stats object with all collected values
        """
        stats = Stats()
        individual_list = list(individuals.values()) if isinstance(individuals, Mapping) else list(individuals)
        family_list = list(families.values()) if isinstance(families, Mapping) else list(families)

        logger.debug(f"Running statistics on {len(individual_list)} individuals and {len(family_list)} families")

        enabled_collectors = [c for c in self.collectors if c.enabled]
        total_collectors = len(enabled_collectors)
        self._report_step(info="Collecting statistics", target=total_collectors, reset_counter=True, plus_step=0)

        for collector_num, collector in enumerate(enabled_collectors, start=1):
            if self._stop_requested("Statistics collection stopped by user"):
                logger.info(f"Statistics stopped after {collector_num - 1} collectors")
                return stats

            try:
                logger.debug(f"Running collector: {collector.collector_id}")
                collector_stats = collector.collect(individual_list, family_list, stats, collector_num, total_collectors)
                stats.merge(collector_stats)
                self._report_step(plus_step=1)
            except Exception as e:
                logger.error(f"Error in collector {collector.collector_id}: {e}", exc_info=True)

        return stats

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
            logger.debug(info)

    def _stop_requested(self, logger_stop_message: str = "Stop requested by user") -> bool:
        """
        Check if stop has been requested via app hooks. (Private method)

        Returns:
            bool: True if stop requested, False otherwise.
        """
        if self.app_hooks and callable(getattr(self.app_hooks, "stop_requested", None)):
            if self.app_hooks.stop_requested():
                if logger_stop_message:
                    logger.info(logger_stop_message)
                return True
        return False
