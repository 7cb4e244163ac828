"""Injected random source for pattern generators.

Every generator draws its per-call parameters (frequencies, offsets,
feature counts, center positions) and any per-pixel noise from a random
source passed in by the caller instead of a process-wide singleton. This
makes a generation reproducible: the same seed and dimensions give a
byte-identical buffer.

Any object exposing ``random(size=None)`` that returns floats in
``[0, 1)`` qualifies. A ``numpy.random.Generator`` does; tests substitute
a constant source to pin every draw.

All draws are made through ``random()`` and scaled multiplicatively, so no
drawn parameter can fall outside its documented range.
"""

import math
from typing import Protocol

import numpy as np


class RandomSource(Protocol):
    """Uniform ``[0, 1)`` sampler accepted by every generator."""

    def random(self, size=None):  # pragma: no cover - protocol
        ...


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Create a numpy random generator.

    Args:
        seed: Seed for reproducible output (None for fresh OS entropy)

    Returns:
        np.random.Generator seeded with ``seed``
    """
    return np.random.default_rng(seed)


def resolve_rng(rng: RandomSource | None) -> RandomSource:
    """Return ``rng`` or a freshly seeded generator when it is None."""
    if rng is None:
        return make_rng()
    return rng


def draw_uniform(rng: RandomSource, low: float, spread: float) -> float:
    """Draw ``low + random() * spread``."""
    return low + float(rng.random()) * spread


def draw_count(rng: RandomSource, minimum: int, spread: int) -> int:
    """Draw an integer in ``[minimum, minimum + spread)``."""
    return minimum + math.floor(float(rng.random()) * spread)


def draw_chance(rng: RandomSource, probability: float) -> bool:
    """Return True with the given probability (strict ``random() < p``)."""
    return float(rng.random()) < probability


def draw_above(rng: RandomSource, threshold: float) -> bool:
    """Return True when a draw strictly exceeds ``threshold`` (``random() > t``).

    Used for optional features that are switched on by a high draw, so a
    draw of exactly ``threshold`` leaves the feature off.
    """
    return float(rng.random()) > threshold


def draw_field(rng: RandomSource, shape: tuple[int, ...]) -> np.ndarray:
    """Draw an array of independent uniform samples with the given shape."""
    return np.asarray(rng.random(shape), dtype=np.float64)
