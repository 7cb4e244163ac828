"""Geometric family: automata, escape-time fractals, tilings and traced figures.

Grid generators (cellular, fractal, voronoi) compute one binary value per
pixel over the whole grid. Figure generators (spiral, honeycomb, crystals,
mandala) trace black strokes on a white background with the helpers in
``patternforge.core.drawing``.
"""

import logging
import math

import numpy as np

from ..core.buffer import PixelBuffer
from ..core.contract import pattern_generator
from ..core.drawing import (
    brush,
    half_up,
    plot,
    polygon_points,
    ring_points,
    round_half_up,
    segment,
    stroke,
)
from ..core.random_source import (
    RandomSource,
    draw_above,
    draw_count,
    draw_field,
    draw_uniform,
)
from ..core.raster import coordinate_grid, fill, write_gray
from ..core.registry import pattern_registry

logger = logging.getLogger(__name__)

TWO_PI = 2 * math.pi

CELLULAR_ROUNDS = 3
FRACTAL_MAX_ITERATIONS = 50

# Spirals sweep ten full turns, sampled every 0.02 rad
SPIRAL_SWEEP = 20 * math.pi
SPIRAL_STEP = 0.02

MANDALA_MOTIFS = ("dots", "petals", "triangles", "rays")


def _neighbour_counts(grid: np.ndarray) -> np.ndarray:
    """Number of live 8-connected neighbours of every interior cell."""
    height, width = grid.shape
    cells = grid.astype(np.int8)
    counts = np.zeros((height - 2, width - 2), dtype=np.int8)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            counts += cells[1 + dy : height - 1 + dy, 1 + dx : width - 1 + dx]
    return counts


@pattern_generator
def cellular(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Random cells smoothed by three rounds of a majority rule.

    A cell starts alive (white) where its draw exceeds 0.55. Each round,
    every interior cell becomes alive when at least 4 of its 8 neighbours
    were alive in the previous round. The outer ring of cells keeps its
    initial state.
    """
    grid = draw_field(rng, (height, width)) > 0.55
    if height > 2 and width > 2:
        for _ in range(CELLULAR_ROUNDS):
            grid[1:-1, 1:-1] = _neighbour_counts(grid) >= 4

    write_gray(buffer, np.where(grid, 255, 0))


@pattern_generator
def fractal(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Mandelbrot set over a randomly zoomed and offset window.

    Pixel ``(x, y)`` maps to ``c = ((x/w - 0.5) * 4 * zoom + ox, (y/h - 0.5) * 4 * zoom + oy)``
    and the orbit starts at ``z = c``. Pixels whose orbit reaches
    ``|z|^2 >= 4`` within 50 iterations are white; the set is black.
    """
    zoom = draw_uniform(rng, 0.5, 1.5)
    offset_x = draw_uniform(rng, -0.5, 1.0) * 2
    offset_y = draw_uniform(rng, -0.5, 1.0) * 2
    logger.debug(f"fractal: zoom={zoom:.3f} offset=({offset_x:.3f}, {offset_y:.3f})")

    xs, ys = coordinate_grid(width, height)
    c_re = (xs / width - 0.5) * 4 * zoom + offset_x
    c_im = (ys / height - 0.5) * 4 * zoom + offset_y

    z_re = c_re.copy()
    z_im = c_im.copy()
    escaped = np.zeros((height, width), dtype=bool)
    for _ in range(FRACTAL_MAX_ITERATIONS):
        escaped |= z_re * z_re + z_im * z_im >= 4
        running = ~escaped
        next_re = z_re * z_re - z_im * z_im + c_re
        next_im = 2 * z_re * z_im + c_im
        # Escaped orbits are frozen
        z_re = np.where(running, next_re, z_re)
        z_im = np.where(running, next_im, z_im)

    write_gray(buffer, np.where(escaped, 255, 0))


@pattern_generator
def voronoi(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Voronoi cells, each black or white at random.

    ``floor(sqrt(width * height) / 50)`` seeds are scattered uniformly and
    a seed is white when its draw exceeds 0.5. Every pixel takes the color
    of its nearest seed; on equal distances the earlier seed wins. A buffer
    too small for a single seed is black.
    """
    count = math.floor(math.sqrt(width * height) / 50)
    logger.debug(f"voronoi: {count} seeds")
    if count == 0:
        write_gray(buffer, 0)
        return

    seed_x = draw_field(rng, (count,)) * width
    seed_y = draw_field(rng, (count,)) * height
    colors = np.where(draw_field(rng, (count,)) > 0.5, 255.0, 0.0)

    xs, ys = coordinate_grid(width, height)
    nearest = np.full((height, width), np.inf)
    value = np.zeros((height, width))
    for x, y, color in zip(seed_x, seed_y, colors):
        dx = xs - x
        dy = ys - y
        distance = np.sqrt(dx * dx + dy * dy)
        closer = distance < nearest
        nearest = np.where(closer, distance, nearest)
        value = np.where(closer, color, value)

    write_gray(buffer, value)


@pattern_generator
def spiral(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Two to five interleaved Archimedean spirals traced with a round brush.

    Each spiral sweeps ten turns from the image center out to 40% of the
    shorter side. Spiral ``k`` of ``n`` is rotated by ``k/n`` of a full
    turn. The brush radius is 3 to 7 pixels.
    """
    fill(buffer, 255, 255, 255)
    count = draw_count(rng, 2, 4)
    thickness = draw_count(rng, 3, 5)
    logger.debug(f"spiral: {count} arms, brush {thickness}px")

    center_x = width / 2
    center_y = height / 2
    max_radius = min(width, height) * 0.4
    angles = np.arange(math.ceil(SPIRAL_SWEEP / SPIRAL_STEP)) * SPIRAL_STEP
    radii = angles * max_radius / SPIRAL_SWEEP

    for arm in range(count):
        rotated = angles + arm / count * TWO_PI
        xs = round_half_up(center_x + np.cos(rotated) * radii)
        ys = round_half_up(center_y + np.sin(rotated) * radii)
        stroke(buffer, xs, ys, thickness)


def _hexagon_offsets(radius: int) -> tuple[np.ndarray, np.ndarray]:
    """Offsets inside a flat-sided hexagon of the given integer radius."""
    dy, dx = np.mgrid[-radius : radius + 1, -radius : radius + 1]
    ax, ay = np.abs(dx), np.abs(dy)
    inside = (ax <= radius * 0.866) & (ay <= radius) & (ax * 0.5 + ay * 0.866 <= radius)
    return dx[inside], dy[inside]


@pattern_generator
def honeycomb(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Hexagon outlines on a staggered grid, some cells filled solid.

    Cells are 20-59 px wide and outlines use a brush of radius 2-4. Rows
    are ``0.75 * sqrt(3) * cell`` apart and odd rows shift right by half a
    cell. A cell is filled when its draw exceeds 0.7.
    """
    fill(buffer, 255, 255, 255)
    cell = draw_count(rng, 20, 40)
    thickness = draw_count(rng, 2, 3)
    hex_height = cell * math.sqrt(3)
    rows = math.ceil(height / hex_height) + 1
    cols = math.ceil(width / cell) + 2
    logger.debug(f"honeycomb: {rows}x{cols} cells of {cell}px")

    vertex_angles = np.arange(6) * math.pi / 3
    shifts = np.arange(cols) * cell
    fill_dx, fill_dy = _hexagon_offsets(half_up(cell * 0.4))

    for row in range(rows):
        offset_x = (row % 2) * cell * 0.5
        center_y = row * hex_height * 0.75

        # Cells in a row are whole-cell translates of the first one
        vx = offset_x + np.cos(vertex_angles) * cell * 0.5
        vy = center_y + np.sin(vertex_angles) * cell * 0.5
        ox, oy = brush(*polygon_points(vx, vy), thickness)
        plot(buffer, ox[np.newaxis, :] + shifts[:, np.newaxis], np.broadcast_to(oy, (cols, oy.size)))

        filled = draw_field(rng, (cols,)) > 0.7
        if filled.any():
            cx = half_up(offset_x) + shifts[filled]
            cy = half_up(center_y)
            plot(
                buffer,
                cx[:, np.newaxis] + fill_dx,
                np.broadcast_to(cy + fill_dy, (cx.size, fill_dy.size)),
            )


@pattern_generator
def crystals(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Irregular polygon outlines with random internal spokes.

    8-22 crystals, each with 6-11 faces whose vertex radii vary between
    70% and 130% of the crystal size. Outlines use a brush of radius 2. A
    spoke from the center to a vertex (brush radius 1) appears where that
    vertex's draw exceeds 0.6.
    """
    fill(buffer, 255, 255, 255)
    count = draw_count(rng, 8, 15)

    for _ in range(count):
        center_x = draw_uniform(rng, 0.0, width)
        center_y = draw_uniform(rng, 0.0, height)
        size = draw_uniform(rng, 30.0, 100.0)
        faces = draw_count(rng, 6, 6)
        rotation = draw_uniform(rng, 0.0, TWO_PI)

        angles = np.arange(faces) / faces * TWO_PI + rotation
        radii = size * (0.7 + draw_field(rng, (faces,)) * 0.6)
        vx = center_x + np.cos(angles) * radii
        vy = center_y + np.sin(angles) * radii
        stroke(buffer, *polygon_points(vx, vy), 2)

        spokes = draw_field(rng, (faces,)) > 0.6
        for vertex in np.flatnonzero(spokes):
            stroke(buffer, *segment(center_x, center_y, vx[vertex], vy[vertex]), 1)


def _mandala_motif(
    buffer: PixelBuffer,
    motif: str,
    center_x: float,
    center_y: float,
    radius: float,
    angle: float,
    rng: RandomSource,
) -> None:
    """Draw one repetition of a layer motif at ``angle`` on a circle of ``radius``."""
    anchor_x = center_x + math.cos(angle) * radius
    anchor_y = center_y + math.sin(angle) * radius

    if motif == "dots":
        dot = half_up(draw_uniform(rng, 3.0, 5.0))
        stroke(buffer, [half_up(anchor_x)], [half_up(anchor_y)], dot)
    elif motif == "petals":
        for petal in range(3):
            petal_angle = angle + (petal - 1) * 0.2
            reach = radius * draw_uniform(rng, 0.8, 0.4)
            stroke(
                buffer,
                *segment(
                    center_x + math.cos(petal_angle) * radius * 0.7,
                    center_y + math.sin(petal_angle) * radius * 0.7,
                    center_x + math.cos(petal_angle) * reach,
                    center_y + math.sin(petal_angle) * reach,
                ),
                2,
            )
    elif motif == "triangles":
        size = draw_uniform(rng, 10.0, 15.0)
        for side in range(3):
            start = side / 3 * TWO_PI
            end = start + TWO_PI / 3
            stroke(
                buffer,
                *segment(
                    anchor_x + math.cos(start) * size,
                    anchor_y + math.sin(start) * size,
                    anchor_x + math.cos(end) * size,
                    anchor_y + math.sin(end) * size,
                ),
                1,
            )
    else:
        length = radius * draw_uniform(rng, 0.3, 0.4)
        inner = radius - length
        outer = radius + length * 0.5
        stroke(
            buffer,
            *segment(
                center_x + math.cos(angle) * inner,
                center_y + math.sin(angle) * inner,
                center_x + math.cos(angle) * outer,
                center_y + math.sin(angle) * outer,
            ),
            2,
        )


@pattern_generator
def mandala(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Concentric layers of a repeated motif around the image center.

    5-12 layers are spaced evenly out to 40% of the shorter side. Each
    layer repeats one motif (dots, petal strokes, triangles or radial
    rays) 6-11 times around its circle. Even-numbered layers also get a
    thin ring.
    """
    fill(buffer, 255, 255, 255)
    center_x = width / 2
    center_y = height / 2
    max_radius = min(width, height) * 0.4
    layers = draw_count(rng, 5, 8)
    symmetry = draw_count(rng, 6, 6)
    logger.debug(f"mandala: {layers} layers, {symmetry}-fold")

    for layer in range(layers):
        radius = (layer + 1) * (max_radius / layers)
        motif = MANDALA_MOTIFS[draw_count(rng, 0, 4)]
        for repeat in range(symmetry):
            angle = repeat / symmetry * TWO_PI
            _mandala_motif(buffer, motif, center_x, center_y, radius, angle, rng)

        if layer % 2 == 0:
            ring = half_up(radius)
            xs, ys = ring_points(half_up(center_x), half_up(center_y), ring, ring, 0.01)
            stroke(buffer, xs, ys, 1)


pattern_registry.register(
    "cellular", cellular, category="geometric", description="Majority-rule cellular automaton"
)
pattern_registry.register(
    "fractal", fractal, category="geometric", multicolor=True, description="Mandelbrot set"
)
pattern_registry.register(
    "voronoi", voronoi, category="geometric", multicolor=True, description="Two-tone Voronoi cells"
)
pattern_registry.register(
    "spiral", spiral, category="geometric", multicolor=True, description="Interleaved spirals"
)
pattern_registry.register(
    "honeycomb",
    honeycomb,
    category="geometric",
    multicolor=True,
    description="Hexagonal grid with filled cells",
)
pattern_registry.register(
    "crystals", crystals, category="geometric", multicolor=True, description="Irregular crystals"
)
pattern_registry.register(
    "mandala", mandala, category="geometric", multicolor=True, description="Symmetric mandala"
)
