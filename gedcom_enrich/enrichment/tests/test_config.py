"""
Tests for enrichment configuration.
"""
from __future__ import annotations

import pytest

from gedcom_enrich.enrichment.config import DEFAULT_CONFIG_FILE, EnrichmentConfig


class TestEnrichmentConfig:
    """Tests for EnrichmentConfig."""

    def test_defaults_from_packaged_yaml(self):
        """Test that defaults come from the packaged config.yaml."""
        config = EnrichmentConfig()
        assert config.enabled is True
        assert config.resolve_event_types == ['birth', 'death']
        assert config.use_event_year_for_history is True
        assert config.country_data_file is None
        for stage_id in ("relationships", "countries", "generations", "metadata"):
            assert config.stage_enabled(stage_id)

    def test_unlisted_stage_enabled(self):
        """Test that stages missing from stages_enabled default to enabled."""
        config = EnrichmentConfig.from_dict({'stages_enabled': {}})
        assert config.stage_enabled("custom_stage")

    def test_from_dict_falls_back_to_defaults(self):
        """Test that missing fields are filled from the packaged defaults."""
        config = EnrichmentConfig.from_dict({'stages_enabled': {'countries': False}})
        assert not config.stage_enabled("countries")
        assert config.stage_enabled("metadata")
        assert config.resolve_event_types == ['birth', 'death']

    def test_from_yaml(self, tmp_path):
        """Test loading a partial YAML file."""
        path = tmp_path / "enrichment.yaml"
        path.write_text("enabled: false\nresolve_event_types: [birth]\n", encoding="utf-8")
        config = EnrichmentConfig.from_yaml(path)
        assert config.enabled is False
        assert config.resolve_event_types == ['birth']
        assert config.use_event_year_for_history is True

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            EnrichmentConfig.from_yaml(tmp_path / "missing.yaml")

    @pytest.mark.parametrize("content", ["enabled: [unclosed\n", "- just\n- a list\n"])
    def test_from_yaml_malformed(self, tmp_path, content):
        path = tmp_path / "bad.yaml"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ValueError):
            EnrichmentConfig.from_yaml(path)

    def test_to_dict_round_trip_keys(self):
        data = EnrichmentConfig().to_dict()
        assert set(data) == {
            'enabled', 'stages_enabled', 'country_data_file',
            'resolve_event_types', 'use_event_year_for_history',
        }
        assert DEFAULT_CONFIG_FILE.exists()
