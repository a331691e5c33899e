"""
Default enrichment stages configuration.
"""
from __future__ import annotations

from typing import Any, List, Optional

from gedcom_enrich.country_resolver import CountryResolver
from .config import EnrichmentConfig
from .stages import EnrichmentStage, get_stage_registry


# Stage parameter mapping: maps config fields to stage constructor parameters
STAGE_PARAM_MAP = {
    'countries': {
        'event_types': lambda cfg: tuple(cfg.resolve_event_types),
        'use_event_year': 'use_event_year_for_history',
        'resolver': lambda cfg: CountryResolver(data_file=cfg.country_data_file),
    },
}


def get_default_stages(config: EnrichmentConfig, resolver: Optional[CountryResolver] = None, app_hooks: Optional[Any] = None) -> List[EnrichmentStage]:
    """
    Create default enrichment stages based on config using the stage registry.

    Args:
        config: EnrichmentConfig instance with stage parameters.
        resolver: Pre-built CountryResolver to share instead of loading one from config.
        app_hooks: Optional application hooks passed to every stage.

    Returns:
        List[EnrichmentStage]: Enabled stages in registration order.

    Raises:
        FileNotFoundError, ValueError: If country reference data cannot be loaded.
    """
    registry = get_stage_registry()
    stages = []

    for stage_id, stage_class in registry.items():
        if not config.stage_enabled(stage_id):
            continue

        param_map = STAGE_PARAM_MAP.get(stage_id, {})
        kwargs = {'app_hooks': app_hooks}
        for param_name, config_key in param_map.items():
            if param_name == 'resolver' and resolver is not None:
                kwargs[param_name] = resolver
            elif callable(config_key):
                kwargs[param_name] = config_key(config)
            else:
                kwargs[param_name] = getattr(config, config_key)

        stages.append(stage_class(**kwargs))

    return stages
