"""
Tests for anonymization.masking module.
"""
from __future__ import annotations

import random

import pytest

from gedcom_enrich.anonymization.masking import get_masker, mask_birth_month, mask_boolean, mask_lifespan


class TestMaskLifespan:
    """Tests for mask_lifespan."""

    def test_stays_within_noise(self, rng):
        """Test that the change never exceeds 0.05."""
        for _ in range(200):
            masked = mask_lifespan(0.5, rng)
            assert 0.45 <= masked <= 0.55

    @pytest.mark.parametrize("value", [0.0, 0.01, 0.99, 1.0])
    def test_clamped_to_unit_interval(self, rng, value):
        """Test that values near the edges stay in [0, 1]."""
        for _ in range(100):
            assert 0.0 <= mask_lifespan(value, rng) <= 1.0

    def test_none_passes_through(self, rng):
        """Test that an unknown lifespan stays unknown."""
        assert mask_lifespan(None, rng) is None

    def test_same_seed_same_result(self):
        """Test reproducibility with a seeded random source."""
        assert mask_lifespan(0.7, random.Random(7)) == mask_lifespan(0.7, random.Random(7))


class TestMaskBirthMonth:
    """Tests for mask_birth_month."""

    def test_moves_at_most_one_month(self, rng):
        """Test that the month moves by at most one."""
        for _ in range(200):
            assert mask_birth_month(6, rng) in (5, 6, 7)

    @pytest.mark.parametrize("month,allowed", [(1, {1, 2}), (12, {11, 12})])
    def test_clamped_to_calendar(self, rng, month, allowed):
        """Test that January and December stay within 1-12."""
        for _ in range(100):
            assert mask_birth_month(month, rng) in allowed

    def test_none_passes_through(self, rng):
        """Test that an unknown month stays unknown."""
        assert mask_birth_month(None, rng) is None


class TestMaskBoolean:
    """Tests for mask_boolean."""

    @pytest.mark.parametrize("value", [True, False, None])
    def test_pass_through(self, rng, value):
        """Test that flags are returned unchanged."""
        assert mask_boolean(value, rng) is value


def test_get_masker_unknown():
    """Test that an unknown masker kind is rejected."""
    with pytest.raises(ValueError):
        get_masker('shuffle')
