"""Basic family: binary noise, sine-octave noise, waves and TV static."""

import logging
import math

import numpy as np

from ..core.buffer import PixelBuffer
from ..core.contract import pattern_generator
from ..core.random_source import RandomSource, draw_count, draw_field, draw_uniform
from ..core.raster import coordinate_grid, write_gray
from ..core.registry import pattern_registry

logger = logging.getLogger(__name__)

TWO_PI = 2 * math.pi


def _threshold(values: np.ndarray) -> np.ndarray:
    return np.where(values > 0, 255, 0)


@pattern_generator
def noise(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Independent black or white pixels with equal probability."""
    write_gray(buffer, np.where(draw_field(rng, (height, width)) > 0.5, 255, 0))


def simple_noise(x, y):
    """Smooth pseudo-noise in ``[-1, 1]`` built from nested sines."""
    return (
        np.sin(x + np.sin(y * 1.3) * 0.5)
        + np.sin(y + np.sin(x * 1.1) * 0.7)
        + np.sin((x + y) * 0.7) * 0.3
    ) / 3


@pattern_generator
def perlin_noise(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Three octaves of ``simple_noise``, thresholded at zero.

    Each octave doubles the frequency and halves the amplitude, starting
    from a random scale in ``[0.005, 0.015)``.
    """
    scale = draw_uniform(rng, 0.005, 0.01)

    xs, ys = coordinate_grid(width, height)
    total = np.zeros((height, width))
    amplitude = 1.0
    frequency = scale
    for _ in range(3):
        total += simple_noise(xs * frequency, ys * frequency) * amplitude
        amplitude *= 0.5
        frequency *= 2

    write_gray(buffer, _threshold(total))


def _radial_waves(xs, ys, width, height, rng):
    total = np.zeros_like(xs)
    for _ in range(draw_count(rng, 2, 4)):
        x = draw_uniform(rng, 0.0, width)
        y = draw_uniform(rng, 0.0, height)
        frequency = draw_uniform(rng, 0.008, 0.02)
        amplitude = draw_uniform(rng, 0.3, 0.7)
        phase = draw_uniform(rng, 0.0, TWO_PI)
        distance = np.hypot(xs - x, ys - y)
        total += np.sin(distance * frequency + phase) * amplitude / (1 + distance * 0.001)
    return total


def _linear_waves(xs, ys, width, height, rng):
    total = np.zeros_like(xs)
    for _ in range(draw_count(rng, 2, 4)):
        angle = draw_uniform(rng, 0.0, TWO_PI)
        frequency = draw_uniform(rng, 0.01, 0.03)
        amplitude = draw_uniform(rng, 0.4, 0.6)
        phase = draw_uniform(rng, 0.0, TWO_PI)
        distance = xs * math.cos(angle) + ys * math.sin(angle)
        total += np.sin(distance * frequency + phase) * amplitude
    return total


def _standing_waves(xs, ys, width, height, rng):
    freq_x = draw_uniform(rng, 0.01, 0.02)
    freq_y = draw_uniform(rng, 0.01, 0.02)
    phase_x = draw_uniform(rng, 0.0, TWO_PI)
    phase_y = draw_uniform(rng, 0.0, TWO_PI)
    return np.sin(xs * freq_x + phase_x) * np.sin(ys * freq_y + phase_y)


def _interference(xs, ys, width, height, rng):
    sources = (
        (width * 0.2, height * 0.3, 0.015, 1.0),
        (width * 0.8, height * 0.3, 0.015, 1.0),
        (width * 0.5, height * 0.7, 0.02, 0.8),
    )
    total = np.zeros_like(xs)
    for x, y, frequency, amplitude in sources:
        distance = np.hypot(xs - x, ys - y)
        total += np.sin(distance * frequency) * amplitude / (1 + distance * 0.0005)
    return total


def _modulated_waves(xs, ys, width, height, rng):
    carrier_freq = draw_uniform(rng, 0.02, 0.03)
    mod_freq = draw_uniform(rng, 0.003, 0.007)
    mod_depth = draw_uniform(rng, 0.5, 0.5)
    distance = np.hypot(xs - width / 2, ys - height / 2)
    modulator = 1 + mod_depth * np.sin(distance * mod_freq)
    return np.sin(distance * carrier_freq * modulator)


def _ripples(xs, ys, width, height, rng):
    total = np.zeros_like(xs)
    for _ in range(draw_count(rng, 3, 5)):
        x = draw_uniform(rng, 0.0, width)
        y = draw_uniform(rng, 0.0, height)
        time = draw_uniform(rng, 0.0, 100.0)
        strength = draw_uniform(rng, 0.5, 0.5)
        distance = np.hypot(xs - x, ys - y)
        total += np.sin(distance * 0.03 - time) * strength * np.exp(-distance * 0.002)
    return total


WAVE_VARIANTS = {
    "radial": _radial_waves,
    "linear": _linear_waves,
    "standing": _standing_waves,
    "interference": _interference,
    "modulated": _modulated_waves,
    "ripple": _ripples,
}


@pattern_generator
def wave(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """One of six wave-field variants, thresholded at zero."""
    variant = list(WAVE_VARIANTS)[draw_count(rng, 0, len(WAVE_VARIANTS))]
    logger.debug(f"wave: {variant}")

    xs, ys = coordinate_grid(width, height)
    write_gray(buffer, _threshold(WAVE_VARIANTS[variant](xs, ys, width, height, rng)))


@pattern_generator
def static(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Clustered black and white static with broken horizontal scan lines.

    Square clusters of 1-3 pixels share a value (black with probability
    ``density``); each pixel then flips with probability 0.2. Partial scan
    lines cover about 70% of their row.
    """
    density = draw_uniform(rng, 0.3, 0.4)
    cluster = draw_count(rng, 1, 3)

    cluster_rows = math.ceil(height / cluster)
    cluster_cols = math.ceil(width / cluster)
    values = np.where(draw_field(rng, (cluster_rows, cluster_cols)) < density, 0, 255)
    values = np.repeat(np.repeat(values, cluster, axis=0), cluster, axis=1)[:height, :width]
    flipped = draw_field(rng, (height, width)) <= 0.2
    write_gray(buffer, np.where(flipped, 255 - values, values))

    line_count = math.floor(height / draw_uniform(rng, 5.0, 10.0))
    for _ in range(line_count):
        y = math.floor(draw_uniform(rng, 0.0, height))
        intensity = 0 if draw_uniform(rng, 0.0, 1.0) > 0.5 else 255
        hit = draw_field(rng, (width,)) > 0.3
        buffer.pixels[y, hit, :3] = intensity


pattern_registry.register("noise", noise, category="basic", description="Binary random noise")
pattern_registry.register(
    "perlin", perlin_noise, category="basic", description="Octave sine noise"
)
pattern_registry.register("wave", wave, category="basic", description="Wave interference fields")
pattern_registry.register("static", static, category="basic", description="Clustered TV static")
