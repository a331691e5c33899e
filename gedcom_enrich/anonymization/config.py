from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Literal
import logging

from gedcom_enrich.enrichment.config import _read_yaml

logger = logging.getLogger(__name__)

NameStrategy = Literal["individual_id", "generation_index"]
NAME_STRATEGIES = ("individual_id", "generation_index")
MASKER_KINDS = ("lifespan", "birth_month", "boolean")


def _default_masked_fields() -> Dict[str, str]:
    return {'lifespan': 'lifespan', 'birth_month': 'birth_month', 'is_alive': 'boolean'}


@dataclass
class AnonymizationConfig:
    """
    Configuration for PII anonymization.

    Attributes:
        name_strategy: 'individual_id' gives Individual_<id>; 'generation_index'
            gives Person_<generation>_<index within generation>.
        keep_years: Keep birth/death years; when False birth/death are dropped entirely.
        masked_fields: Metadata field -> masker kind ('lifespan', 'birth_month', 'boolean').
        lifespan_noise: Maximum relative change applied to the normalized lifespan.
        birth_month_noise: Maximum number of months a birth month is moved by.
    """
    name_strategy: NameStrategy = "individual_id"
    keep_years: bool = True
    masked_fields: Dict[str, str] = field(default_factory=_default_masked_fields)
    lifespan_noise: float = 0.05
    birth_month_noise: int = 1

    def __post_init__(self):
        if self.name_strategy not in NAME_STRATEGIES:
            raise ValueError(f"Unknown name_strategy '{self.name_strategy}'; expected one of {NAME_STRATEGIES}")
        for field_name, kind in self.masked_fields.items():
            if kind not in MASKER_KINDS:
                raise ValueError(f"Unknown masker '{kind}' for field '{field_name}'; expected one of {MASKER_KINDS}")
        if self.lifespan_noise < 0 or self.birth_month_noise < 0:
            raise ValueError("Masking noise must not be negative")

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> AnonymizationConfig:
        """
        Create configuration from a dictionary; unknown keys are ignored with a warning.

        Raises:
            ValueError: If a value is invalid.
        """
        known = {key: value for key, value in config_dict.items() if key in cls.__dataclass_fields__}
        for key in config_dict.keys() - known.keys():
            logger.warning(f"Ignoring unknown anonymization setting '{key}'")
        return cls(**known)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> AnonymizationConfig:
        """
        Load the 'anonymization' section of a YAML file.

        A file without that section gives the default configuration.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file cannot be parsed or holds invalid values.
        """
        section = _read_yaml(Path(yaml_path)).get('anonymization') or {}
        if not isinstance(section, dict):
            raise ValueError(f"'anonymization' section of {yaml_path} must be a mapping")
        return cls.from_dict(section)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name_strategy': self.name_strategy,
            'keep_years': self.keep_years,
            'masked_fields': dict(self.masked_fields),
            'lifespan_noise': self.lifespan_noise,
            'birth_month_noise': self.birth_month_noise,
        }
