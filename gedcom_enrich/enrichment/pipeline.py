from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from gedcom_enrich.app_hooks import AppHooks
from gedcom_enrich.model import Individual, Issue

from .config import EnrichmentConfig
from .model import EnrichmentResult, FamiliesInput, Population, families_by_id
from .stages.base import EnrichmentStage

logger = logging.getLogger(__name__)


class EnrichmentPipeline:
    """
    Runs enrichment stages once each, in order, threading a Population through them.

    Data flows one way: every stage receives the previous stage's output and
    returns a new Population. Caller data is never modified.
    """
    def __init__(self, config: EnrichmentConfig, stages: Sequence[EnrichmentStage], app_hooks: Optional['AppHooks'] = None) -> None:
        self.config = config
        self.stages = list(stages)
        self.app_hooks = app_hooks

        # Set app_hooks on all stages that support it
        for stage in self.stages:
            if hasattr(stage, 'app_hooks'):
                stage.app_hooks = app_hooks

    def run(self, individuals: Dict[str, Individual], families: FamiliesInput = ()) -> EnrichmentResult:
        """
        Enrich a population.

        Args:
            individuals: Individuals keyed by xref_id.
            families: Family units, as a mapping keyed by xref_id or any iterable.

        Returns:
            EnrichmentResult: Enriched copies, issues, resolver statistics and the stages run.
        """
        population = Population(individuals=dict(individuals), families=families_by_id(families))
        issues: List[Issue] = []
        stage_runs: List[str] = []

        if not self.config.enabled:
            logger.info("Enrichment disabled by configuration")
            return self._result(population, issues, stage_runs)

        enabled_stages = [s for s in self.stages if self.config.stage_enabled(s.stage_id)]
        self._report_step(info="Enriching data", target=len(enabled_stages), reset_counter=True, plus_step=0)

        for stage in enabled_stages:
            if self._stop_requested("Enrichment stopped by user"):
                logger.info(f"Enrichment stopped after stages: {stage_runs}")
                break

            logger.debug(f"Running enrichment stage: {stage.stage_id}")
            population = stage.apply(population, issues)
            stage_runs.append(stage.stage_id)

            # Report progress after each stage
            self._report_step(plus_step=1)

        if issues:
            logger.info(f"Enrichment completed with {len(issues)} issues found")
        return self._result(population, issues, stage_runs)

    @staticmethod
    def _result(population: Population, issues: List[Issue], stage_runs: List[str]) -> EnrichmentResult:
        return EnrichmentResult(
            individuals=population.individuals,
            families=population.families,
            issues=issues,
            resolver_statistics=population.resolver_statistics,
            stage_runs=stage_runs,
        )

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
                    logger.debug(logger_stop_message)
                return True
        return False
