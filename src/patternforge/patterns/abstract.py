"""Abstract family: closed-form sine/cosine fields and organic blots.

Field generators (abstract art, flow field, morphing, kaleidoscope) draw
a handful of frequencies and a phase offset once per call, evaluate a
trigonometric field over the whole grid, and threshold it with a strict
``>`` so a value exactly on the threshold falls to the "off" branch.

Blot generators (ink blot, paint splash) scatter feature centers over a
white background and mark pixels black when any center claims them.
"""

import logging
import math

import numpy as np

from ..core.buffer import PixelBuffer
from ..core.contract import pattern_generator
from ..core.features import FeatureCenter
from ..core.random_source import RandomSource, draw_count, draw_uniform
from ..core.raster import coordinate_grid, polar, write_gray
from ..core.registry import pattern_registry

logger = logging.getLogger(__name__)

TWO_PI = 2 * math.pi


def _binary(mask: np.ndarray, on: int = 255, off: int = 0) -> np.ndarray:
    return np.where(mask, on, off)


@pattern_generator
def abstract_art(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Sum of three interfering trigonometric terms, thresholded at 0.1."""
    freq_x1 = draw_uniform(rng, 0.01, 0.02)
    freq_y1 = draw_uniform(rng, 0.015, 0.02)
    freq_r = draw_uniform(rng, 0.005, 0.015)
    freq_xy = draw_uniform(rng, 0.01, 0.015)
    offset = draw_uniform(rng, 0.0, TWO_PI)

    xs, ys = coordinate_grid(width, height)
    t1 = np.sin(xs * freq_x1 + offset) * np.cos(ys * freq_y1 + offset)
    t2 = np.sin(np.sqrt(xs * xs + ys * ys) * freq_r + offset)
    t3 = np.cos((xs + ys) * freq_xy + offset) * np.sin((xs - ys) * freq_xy + offset)

    write_gray(buffer, _binary((t1 + t2 + t3) / 3 > 0.1))


@pattern_generator
def flow_field(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Dark curved strokes following a warped flow direction on white."""
    freq_x = draw_uniform(rng, 0.005, 0.015)
    freq_y = draw_uniform(rng, 0.003, 0.012)
    offset = draw_uniform(rng, 0.0, TWO_PI)

    xs, ys = coordinate_grid(width, height)
    angle = np.sin(xs * freq_x + offset) * np.cos(ys * freq_y + offset) * TWO_PI
    flow = np.sin(xs * (freq_x * 2) + ys * (freq_y * 1.5) + angle + offset) * np.cos(
        xs * (freq_x * 1.8) - ys * (freq_y * 1.2) + angle * 0.5 + offset
    )
    line_strength = np.abs(
        np.sin(xs * 0.03 + flow * 15 + offset) * np.cos(ys * 0.02 + flow * 12 + offset)
    )

    write_gray(buffer, _binary(line_strength > 0.7, on=0, off=255))


@pattern_generator
def morphing(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Two warped fields cross-faded by a position-dependent blend.

    A time-like intermediate ``time = sin(x*fx1 + o) + cos(y*fy1 + o)``
    shifts the phase of both morph terms and drives the blend weight
    ``sin(2*time + o) * 0.5 + 0.5``. Output is thresholded at 0.15.
    """
    freq_x1 = draw_uniform(rng, 0.005, 0.015)
    freq_y1 = draw_uniform(rng, 0.004, 0.012)
    freq_x2 = draw_uniform(rng, 0.015, 0.02)
    freq_y2 = draw_uniform(rng, 0.02, 0.025)
    time_freq = draw_uniform(rng, 0.5, 1.5)
    offset = draw_uniform(rng, 0.0, TWO_PI)

    xs, ys = coordinate_grid(width, height)
    time = np.sin(xs * freq_x1 + offset) + np.cos(ys * freq_y1 + offset)
    phase = time * time_freq
    morph1 = np.sin(xs * freq_x2 + phase + offset) * np.cos(ys * freq_y1 + phase + offset)
    morph2 = np.cos(xs * freq_x1 - phase + offset) * np.sin(ys * freq_y2 - phase + offset)
    blend = np.sin(time * 2 + offset) * 0.5 + 0.5
    pattern = morph1 * blend + morph2 * (1 - blend)

    write_gray(buffer, _binary(pattern > 0.15))


def fold_angle(angle, segments: int):
    """Fold an angle into one mirrored kaleidoscope segment.

    The angle is reduced into ``[0, 2*pi/segments)`` and then reflected
    about the segment's midline, so the result lies in ``[0, pi/segments]``.
    """
    segment = TWO_PI / segments
    normalized = np.mod(angle, segment)
    return np.where(normalized > segment / 2, segment - normalized, normalized)


@pattern_generator
def kaleidoscope(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Rotationally symmetric field with 6 to 11 mirrored segments."""
    segments = draw_count(rng, 6, 6)
    freq_x = draw_uniform(rng, 0.01, 0.02)
    freq_y = draw_uniform(rng, 0.015, 0.02)
    freq_r = draw_uniform(rng, 0.005, 0.015)
    offset = draw_uniform(rng, 0.0, TWO_PI)
    logger.debug(f"kaleidoscope: {segments} segments")

    xs, ys = coordinate_grid(width, height)
    distance, angle = polar(xs, ys, width / 2, height / 2)
    mirrored = fold_angle(angle, segments)
    px = np.cos(mirrored) * distance
    py = np.sin(mirrored) * distance
    pattern = (
        np.sin(px * freq_x + offset) * np.cos(py * freq_y + offset) * np.sin(distance * freq_r + offset)
    )

    write_gray(buffer, _binary(pattern > 0.2))


@pattern_generator
def ink_blot(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Sharp-edged black blots on white.

    Each of 3 to 7 centers perturbs its distance field with its own seeded
    sine noise. A pixel becomes ink when the sharp falloff (1 once
    ``1 - d/size`` exceeds 0.3) times the center's intensity exceeds 0.5.
    Once marked, later centers cannot clear it.
    """
    count = draw_count(rng, 3, 5)
    centers = []
    for _ in range(count):
        x = draw_uniform(rng, 0.0, width)
        y = draw_uniform(rng, 0.0, height)
        intensity = draw_uniform(rng, 0.6, 0.4)
        size = draw_uniform(rng, 80.0, 150.0)
        seed = draw_uniform(rng, 0.0, 1000.0)
        centers.append(FeatureCenter(x, y, size, intensity, seed))
    logger.debug(f"ink_blot: {count} centers")

    xs, ys = coordinate_grid(width, height)
    ink = np.zeros((height, width), dtype=bool)
    for center in centers:
        noise = np.sin((xs + center.seed) * 0.02) * np.cos((ys + center.seed) * 0.015) * 40
        organic = center.distance(xs, ys) + noise
        falloff = 1 - organic / center.size
        sharp = np.where(falloff > 0.3, 1.0, 0.0)
        ink |= (organic < center.size) & (sharp * center.intensity > 0.5)

    write_gray(buffer, _binary(ink, on=0, off=255))


@pattern_generator
def paint_splash(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Directional black splashes on white.

    Each splash stretches its distance field along a random velocity:
    ``flow = cos(|angle - velocity_angle|) * 0.7 + 0.3`` and the effective
    distance is ``d / flow``. Behind the splash ``flow`` turns negative, so
    the effective distance is negative and the rear wedge is inked too.
    """
    count = draw_count(rng, 2, 4)
    splashes = []
    for _ in range(count):
        x = draw_uniform(rng, 0.0, width)
        y = draw_uniform(rng, 0.0, height)
        vx = draw_uniform(rng, -0.5, 1.0) * 200
        vy = draw_uniform(rng, -0.5, 1.0) * 200
        size = draw_uniform(rng, 60.0, 120.0)
        splashes.append((x, y, math.atan2(vy, vx), size))

    xs, ys = coordinate_grid(width, height)
    ink = np.zeros((height, width), dtype=bool)
    for x, y, velocity_angle, size in splashes:
        distance, angle = polar(xs, ys, x, y)
        flow = np.cos(np.abs(angle - velocity_angle)) * 0.7 + 0.3
        with np.errstate(divide="ignore", invalid="ignore"):
            effective = distance / flow
        ink |= (effective < size) & (1 - effective / size > 0.4)

    write_gray(buffer, _binary(ink, on=0, off=255))


pattern_registry.register(
    "ink", ink_blot, category="abstract", description="Sharp-edged ink blots"
)
pattern_registry.register(
    "splash", paint_splash, category="abstract", description="Directional paint splashes"
)
pattern_registry.register(
    "flow", flow_field, category="abstract", multicolor=True, description="Flowing curved lines"
)
pattern_registry.register(
    "abstract",
    abstract_art,
    category="abstract",
    multicolor=True,
    description="Interfering trigonometric fields",
)
pattern_registry.register(
    "kaleidoscope",
    kaleidoscope,
    category="abstract",
    multicolor=True,
    description="Mirrored rotational symmetry",
)
pattern_registry.register(
    "morphing", morphing, category="abstract", description="Cross-faded warped fields"
)
