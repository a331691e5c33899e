"""
Base classes for enrichment stages.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
from typing import Any, Dict, List, Type

from gedcom_enrich.enrichment.model import Population
from gedcom_enrich.model import Issue

logger = logging.getLogger(__name__)

# Stage Registry (registration order is run order)
_STAGE_REGISTRY: Dict[str, Type['EnrichmentStage']] = {}


def register_stage(cls: Type['EnrichmentStage']) -> Type['EnrichmentStage']:
    """
    Decorator to register a stage class in the global registry.

    Usage:
        @register_stage
        @dataclass
        class MyStage(EnrichmentStage):
            stage_id: str = "my_stage"
            ...
    """
    stage_id = getattr(cls, 'stage_id', None)
    if stage_id:
        _STAGE_REGISTRY[stage_id] = cls
        logger.debug(f"Registered enrichment stage: {stage_id}")
    else:
        logger.warning(f"Stage {cls.__name__} missing 'stage_id' attribute, not registered")
    return cls


def get_stage_registry() -> Dict[str, Type['EnrichmentStage']]:
    """Get the global stage registry."""
    return _STAGE_REGISTRY.copy()


@dataclass
class EnrichmentStage(ABC):
    """
    Base class for enrichment stages.

    A stage takes a Population and returns a new, augmented Population. It must
    not mutate the one it is given. Record-local problems are appended to
    issues and the affected relation is skipped.

    Attributes:
        stage_id: Unique identifier for this stage
        app_hooks: Optional application hooks for progress reporting
    """
    stage_id: str = ""
    app_hooks: Any = None

    @abstractmethod
    def apply(self, population: Population, issues: List[Issue]) -> Population:
        """
        Apply the stage.

        Args:
            population: Current population
            issues: List to append record-local issues to

        Returns:
            New Population with this stage's enrichment
        """
        pass

    def __post_init__(self):
        """Validate stage configuration."""
        if not self.stage_id:
            raise ValueError(f"{self.__class__.__name__} must define stage_id")

    def _report_step(self, info: str = "", target: int = None, reset_counter: bool = False, plus_step: int = 0) -> None:
        """Report a step via app hooks if available.

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
        """Check if stop has been requested via app hooks.

        Returns:
            bool: True if stop requested, False otherwise.
        """
        if self.app_hooks and callable(getattr(self.app_hooks, "stop_requested", None)):
            if self.app_hooks.stop_requested():
                if logger_stop_message:
                    logger.debug(logger_stop_message)
                return True
        return False
