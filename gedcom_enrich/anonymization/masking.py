"""
masking.py - Statistical masking of non-identifying metadata.

Maskers take a value and an injected random.Random so callers control
reproducibility. Values that are None stay None.

Module: gedcom_enrich.anonymization.masking
"""
from __future__ import annotations

import random
from typing import Any, Callable, Dict, Optional


def mask_lifespan(value: Optional[float], rng: random.Random, noise: float = 0.05) -> Optional[float]:
    """
    Perturb a normalized lifespan by up to +/- noise, clamped to [0, 1].

    Args:
        value (Optional[float]): Normalized lifespan.
        rng (random.Random): Random source.
        noise (float): Maximum absolute change.

    Returns:
        Optional[float]: Masked value, rounded to 4 places.
    """
    if value is None:
        return None
    masked = value + (rng.random() - 0.5) * 2 * noise
    return round(min(1.0, max(0.0, masked)), 4)


def mask_birth_month(value: Optional[int], rng: random.Random, noise: int = 1) -> Optional[int]:
    """Move a birth month by up to +/- noise months, clamped to [1, 12]."""
    if value is None:
        return None
    return min(12, max(1, value + rng.randint(-noise, noise)))


def mask_boolean(value: Optional[bool], rng: random.Random) -> Optional[bool]:
    # pass-through: flipping a flag would change its meaning
    return value


MASKERS: Dict[str, Callable[..., Any]] = {
    'lifespan': mask_lifespan,
    'birth_month': mask_birth_month,
    'boolean': mask_boolean,
}


def get_masker(kind: str) -> Callable[..., Any]:
    try:
        return MASKERS[kind]
    except KeyError:
        raise ValueError(f"Unknown masker '{kind}'") from None
