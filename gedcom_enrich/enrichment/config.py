from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

DEFAULT_CONFIG_FILE = Path(__file__).parent / "config.yaml"


def _read_yaml(yaml_path: Path) -> Dict[str, Any]:
    if not yaml_path or not Path(yaml_path).exists():
        raise FileNotFoundError(f"Configuration file not found: {yaml_path}")
    try:
        with open(yaml_path, 'r', encoding='utf-8') as f:
            config_dict = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing {yaml_path}: {e}")
    if not isinstance(config_dict, dict):
        raise ValueError(f"Configuration file {yaml_path} must contain a mapping")
    return config_dict


@dataclass
class EnrichmentConfig:
    """
    Configuration for the enrichment process.

    Loads all configuration values from config.yaml in the enrichment directory.
    """
    # General settings
    enabled: bool = field(init=False)

    # Stage toggles (nested dict)
    stages_enabled: Dict[str, bool] = field(init=False)

    # Country resolution
    country_data_file: Optional[str] = field(init=False)
    resolve_event_types: List[str] = field(init=False)
    use_event_year_for_history: bool = field(init=False)

    def __post_init__(self):
        """Load configuration from YAML file."""
        config_dict = _read_yaml(DEFAULT_CONFIG_FILE)
        self._apply(config_dict, source=DEFAULT_CONFIG_FILE.name)

    def _apply(self, config_dict: Dict[str, Any], source: str, defaults: Optional[Dict[str, Any]] = None) -> None:
        for key in self.__dataclass_fields__.keys():
            if key in config_dict:
                object.__setattr__(self, key, config_dict[key])
            elif defaults is not None and key in defaults:
                object.__setattr__(self, key, defaults[key])
            else:
                raise ValueError(f"Required configuration field '{key}' not found in {source}")

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> EnrichmentConfig:
        """
        Load configuration from a specific YAML file.

        Fields missing from the file fall back to the packaged config.yaml.

        Args:
            yaml_path: Path to YAML config file.

        Returns:
            EnrichmentConfig: Configuration instance loaded from YAML.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file cannot be parsed.
        """
        config_dict = _read_yaml(Path(yaml_path))
        return cls.from_dict(config_dict)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> EnrichmentConfig:
        """
        Create configuration from a dictionary.

        Args:
            config_dict (Dict[str, Any]): Dictionary with configuration values;
                missing fields are taken from the packaged config.yaml.

        Returns:
            EnrichmentConfig: Configuration instance.
        """
        instance = object.__new__(cls)
        defaults = _read_yaml(DEFAULT_CONFIG_FILE)
        instance._apply(config_dict, source="configuration", defaults=defaults)
        return instance

    def stage_enabled(self, stage_id: str) -> bool:
        # default: enabled unless explicitly false
        return self.stages_enabled.get(stage_id, True)

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, key) for key in self.__dataclass_fields__.keys()}
