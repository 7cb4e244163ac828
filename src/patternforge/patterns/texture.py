"""Texture family: marble veining, wood rings and lace motifs."""

import logging
import math

import numpy as np

from ..core.buffer import PixelBuffer
from ..core.contract import pattern_generator
from ..core.drawing import plot, polygon_points, ring_points, round_half_up, segment
from ..core.random_source import RandomSource, draw_above, draw_count, draw_uniform
from ..core.raster import coordinate_grid, fill, write_gray
from ..core.registry import pattern_registry
from .basic import simple_noise

logger = logging.getLogger(__name__)

TWO_PI = 2 * math.pi

LACE_MOTIFS = ("flower", "cross", "double_diamond", "star", "hexagon")
# Connectors start and stop this far from each cell center
LACE_CONNECTOR_GAP = 12


@pattern_generator
def marble(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Three octaves of noise crossed with a sinusoidal vein field.

    ``marble = sum(simple_noise(x*f, y*f) * a)`` over octaves starting at a
    scale in ``[0.002, 0.006)``, and
    ``vein = sin(x*scale*strength + 10*marble) * sin(y*scale*strength + 8*marble)``
    with ``strength`` in ``[2, 5)``. White where ``marble + vein/2 > 0``.
    """
    scale = draw_uniform(rng, 0.002, 0.004)
    strength = draw_uniform(rng, 2.0, 3.0)

    xs, ys = coordinate_grid(width, height)
    base = np.zeros((height, width))
    frequency = scale
    amplitude = 1.0
    for _ in range(3):
        base += simple_noise(xs * frequency, ys * frequency) * amplitude
        frequency *= 2
        amplitude *= 0.5

    vein = np.sin(xs * scale * strength + base * 10) * np.sin(ys * scale * strength + base * 8)
    write_gray(buffer, np.where(base + vein * 0.5 > 0, 255, 0))


@pattern_generator
def wood(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Tree rings around the image center with a vertical grain."""
    ring_frequency = draw_uniform(rng, 0.1, 0.2)

    xs, ys = coordinate_grid(width, height)
    dx = xs - width / 2
    dy = ys - height / 2
    distance = np.sqrt(dx * dx + dy * dy) + simple_noise(xs * 0.01, ys * 0.01) * 20
    rings = np.sin(distance * ring_frequency)
    grain = simple_noise(xs * 0.02, ys * 0.001) * 0.3

    write_gray(buffer, np.where(rings + grain > 0, 255, 0))


def _circle(buffer, center_x, center_y, radius):
    plot(buffer, *ring_points(center_x, center_y, radius, radius, 0.1))


def _line(buffer, x0, y0, x1, y1):
    plot(buffer, *segment(x0, y0, x1, y1))


def _flower(buffer, cx, cy, radius):
    for angle in np.arange(6) * TWO_PI / 6:
        _circle(buffer, cx + math.cos(angle) * radius, cy + math.sin(angle) * radius, radius * 0.4)
    _circle(buffer, cx, cy, radius * 0.3)


def _cross(buffer, cx, cy, size):
    _line(buffer, cx - size, cy, cx + size, cy)
    _line(buffer, cx, cy - size, cx, cy + size)
    for end_x, end_y in ((cx - size, cy), (cx + size, cy), (cx, cy - size), (cx, cy + size)):
        _circle(buffer, end_x, end_y, size * 0.2)


def _double_diamond(buffer, cx, cy, size):
    for extent in (size, size * 0.5):
        plot(
            buffer,
            *polygon_points(
                [cx - extent, cx, cx + extent, cx],
                [cy, cy - extent, cy, cy + extent],
            ),
        )


def _star(buffer, cx, cy, radius):
    for angle in np.arange(8) * TWO_PI / 8:
        _line(buffer, cx, cy, cx + math.cos(angle) * radius, cy + math.sin(angle) * radius)


def _hexagon(buffer, cx, cy, radius):
    angles = np.arange(6) * TWO_PI / 6
    plot(buffer, *polygon_points(cx + np.cos(angles) * radius, cy + np.sin(angles) * radius))
    _circle(buffer, cx, cy, radius * 0.3)


LACE_DRAWERS = {
    "flower": (_flower, 0.25),
    "cross": (_cross, 0.3),
    "double_diamond": (_double_diamond, 0.2),
    "star": (_star, 0.25),
    "hexagon": (_hexagon, 0.22),
}


def _wavy_line(buffer, x0, y0, x1, y1):
    """Straight connector with three half-waves of 3 px amplitude."""
    steps = max(abs(x1 - x0), abs(y1 - y0))
    t = np.arange(math.floor(steps) + 1) / steps
    xs = x0 + (x1 - x0) * t
    ys = y0 + (y1 - y0) * t + np.sin(t * math.pi * 3) * 3
    plot(buffer, round_half_up(xs), round_half_up(ys))


@pattern_generator
def lace(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """A grid of lace motifs, some joined to their neighbours by wavy threads.

    Cells are 50-79 px square and only whole cells are drawn. Each cell
    gets one of five motifs (flower, cross, double diamond, star or
    hexagon) sized relative to the cell. When a cell's connector draw
    exceeds 0.5 it is joined to the next cell to the right and below.
    """
    fill(buffer, 255, 255, 255)
    grid = draw_count(rng, 50, 30)
    cells_x = width // grid
    cells_y = height // grid
    logger.debug(f"lace: {cells_x}x{cells_y} cells of {grid}px")

    for cell_y in range(cells_y):
        for cell_x in range(cells_x):
            cx = cell_x * grid + grid / 2
            cy = cell_y * grid + grid / 2

            draw, scale = LACE_DRAWERS[LACE_MOTIFS[draw_count(rng, 0, 5)]]
            draw(buffer, cx, cy, grid * scale)

            if draw_above(rng, 0.5):
                if cell_x < cells_x - 1:
                    next_x = cx + grid
                    _wavy_line(buffer, cx + LACE_CONNECTOR_GAP, cy, next_x - LACE_CONNECTOR_GAP, cy)
                if cell_y < cells_y - 1:
                    next_y = cy + grid
                    _wavy_line(buffer, cx, cy + LACE_CONNECTOR_GAP, cx, next_y - LACE_CONNECTOR_GAP)


pattern_registry.register("marble", marble, category="texture", description="Veined marble")
pattern_registry.register("wood", wood, category="texture", description="Wood grain rings")
pattern_registry.register("lace", lace, category="texture", description="Lace motif grid")
