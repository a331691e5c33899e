from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from gedcom_enrich.app_hooks import AppHooks
from gedcom_enrich.country_resolver import CountryResolver
from gedcom_enrich.model import Individual
from .config import EnrichmentConfig
from .defaults import get_default_stages
from .model import EnrichmentResult, FamiliesInput
from .pipeline import EnrichmentPipeline


class Enrichment:
    def __init__(
        self,
        config_dict: Optional[Dict[str, Any]] = None,
        config_yaml: Optional[Path] = None,
        individuals: Optional[Dict[str, Individual]] = None,
        families: FamiliesInput = (),
        resolver: Optional[CountryResolver] = None,
        app_hooks: Optional['AppHooks'] = None
    ) -> None:
        """
        Initialize enrichment with optional configuration.

        Args:
            config_dict: Dictionary to override config values
            config_yaml: Path to YAML config file. If None, uses default config.yaml
            individuals: Optional individuals to enrich straight away
            families: Family units for those individuals
            resolver: Optional CountryResolver to share between runs
            app_hooks: Optional application hooks for progress reporting

        Raises:
            FileNotFoundError, ValueError: If configuration or country data cannot be loaded.
        """
        # Load from YAML first (or use defaults), then apply any dict overrides
        if config_yaml:
            self.config = EnrichmentConfig.from_yaml(Path(config_yaml))
        else:
            self.config = EnrichmentConfig()

        if config_dict:
            self.config = EnrichmentConfig.from_dict({**self.config.to_dict(), **config_dict})

        self.stages = get_default_stages(self.config, resolver=resolver, app_hooks=app_hooks)
        self.pipeline = EnrichmentPipeline(
            config=self.config,
            stages=self.stages,
            app_hooks=app_hooks
        )
        self.result: Optional[EnrichmentResult] = None
        if individuals:
            self.enrich(individuals, families)

    def enrich(self, individuals: Dict[str, Individual], families: FamiliesInput = ()) -> EnrichmentResult:
        """
        Enrich the given population using the enrichment pipeline.

        Args:
            individuals: Individuals keyed by xref_id.
            families: Family units.

        Returns:
            EnrichmentResult: The result of the enrichment process.
        """
        self.result = self.pipeline.run(individuals, families)
        return self.result

    @property
    def issues(self):
        return self.result.issues if self.result else []
