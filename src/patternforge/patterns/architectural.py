"""Architectural family: rasterized building silhouettes and drawings.

These generators place explicit shapes (rectangles, outlines, circles,
straight lines) rather than evaluating one field. Shape edges are computed
in floating point and floored before indexing; every write is clipped to
the buffer, so shapes that hang off an edge are simply cut.
"""

import logging
import math

import numpy as np

from ..core.buffer import PixelBuffer
from ..core.contract import pattern_generator
from ..core.random_source import (
    RandomSource,
    draw_above,
    draw_count,
    draw_field,
    draw_uniform,
)
from ..core.raster import (
    coordinate_grid,
    fill,
    fill_rect,
    rect_slices,
    span,
    to_bytes,
    write_gray,
    write_rgb,
)
from ..core.registry import pattern_registry

logger = logging.getLogger(__name__)

BLUEPRINT_LINE = 220

# (dx, dy, width, height) relative to the image center, before scaling
BLUEPRINT_ROOMS = (
    (-150, -100, 100, 80),
    (-50, -100, 120, 80),
    (70, -100, 80, 80),
    (-100, -20, 200, 60),
)


def _rect_shape(buffer: PixelBuffer, x0: float, y0: float, x1: float, y1: float) -> tuple[int, int]:
    rows, cols = rect_slices(x0, y0, x1, y1, buffer.width, buffer.height)
    return rows.stop - rows.start, cols.stop - cols.start


def _outline(buffer: PixelBuffer, x: int, y: int, w: int, h: int, value: int) -> None:
    """Draw a one-pixel rectangle outline, clipping each edge to the buffer."""
    top_bottom = span(x, x + w, buffer.width)
    sides = span(y, y + h, buffer.height)
    for row in (y, y + h):
        if 0 <= row < buffer.height:
            buffer.pixels[row, top_bottom, :3] = value
    for col in (x, x + w):
        if 0 <= col < buffer.width:
            buffer.pixels[sides, col, :3] = value


@pattern_generator
def blueprint(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Light grid and four room outlines on blueprint blue.

    Grid spacing is drawn from 40 to 60 pixels, and the floor plan is
    scaled about the image center by a factor between 0.8 and 1.2.
    """
    spacing = draw_count(rng, 40, 21)
    scale = draw_uniform(rng, 0.8, 0.4)
    logger.debug(f"blueprint: grid={spacing}px scale={scale:.2f}")

    fill(buffer, 20, 50, 100)
    buffer.pixels[:, ::spacing, :3] = BLUEPRINT_LINE
    buffer.pixels[::spacing, :, :3] = BLUEPRINT_LINE

    center_x = width / 2
    center_y = height / 2
    for dx, dy, w, h in BLUEPRINT_ROOMS:
        _outline(
            buffer,
            math.floor(center_x + dx * scale),
            math.floor(center_y + dy * scale),
            math.floor(w * scale),
            math.floor(h * scale),
            BLUEPRINT_LINE,
        )


def _draw_cable(buffer: PixelBuffer, x0: float, y0: float, x1: float, y1: float) -> None:
    """Straight cable sampled once per horizontal pixel from (x0, y0) toward (x1, y1)."""
    steps = abs(x1 - x0)
    if steps == 0:
        return
    t = np.arange(math.ceil(steps)) / steps
    xs = np.floor(x0 + (x1 - x0) * t).astype(np.intp)
    ys = np.floor(y0 + (y1 - y0) * t).astype(np.intp)
    inside = (xs >= 0) & (xs < buffer.width) & (ys >= 0) & (ys < buffer.height)
    buffer.pixels[ys[inside], xs[inside], :3] = 40


@pattern_generator
def bridges(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Bridge deck on 3-5 supports, sometimes cable-stayed from a central tower."""
    fill(buffer, 180, 200, 220)

    deck_y = height * 0.6
    deck_height = 20
    fill_rect(buffer, 0, deck_y, width, deck_y + deck_height, 100)

    support_count = draw_count(rng, 3, 3)
    support_spacing = width / (support_count + 1)
    support_width = 15
    for support in range(support_count):
        support_x = (support + 1) * support_spacing - support_width / 2
        fill_rect(buffer, support_x, deck_y + deck_height, support_x + support_width, height, 80)

    # Cable-stayed variant when the draw exceeds 0.5
    if not draw_above(rng, 0.5):
        return

    tower_x = width / 2
    tower_height = height * 0.4
    tower_width = 12
    fill_rect(
        buffer,
        tower_x - tower_width / 2,
        deck_y - tower_height,
        tower_x + tower_width / 2,
        deck_y + deck_height,
        60,
    )

    cable_count = 8
    cable_top = deck_y - tower_height * 0.8
    for cable in range(cable_count):
        cable_x = cable / (cable_count - 1) * width
        _draw_cable(buffer, tower_x, cable_top, cable_x, deck_y)


@pattern_generator
def cityscape(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Skyline of 15-34 buildings with lit windows under a graded sky."""
    xs, ys = coordinate_grid(width, height)
    sky = 150 + ys / height * 70
    write_rgb(buffer, sky, sky + 20, sky + 40)

    count = draw_count(rng, 15, 20)
    for building in range(count):
        bx = building / count * width
        bw = width / count * draw_uniform(rng, 0.8, 0.4)
        bh = height * draw_uniform(rng, 0.2, 0.7)
        top = height - bh
        brightness = draw_uniform(rng, 40.0, 60.0)
        fill_rect(buffer, bx, top, bx + bw, height, brightness)

        rows = math.floor(bh / 25)
        cols = math.floor(bw / 20)
        for row in range(rows):
            for col in range(cols):
                if not draw_above(rng, 0.3):
                    continue  # unlit
                wx = math.floor(bx + (col + 0.5) * (bw / cols))
                wy = math.floor(top + (row + 0.5) * (bh / rows))
                shape = _rect_shape(buffer, wx - 2, wy - 3, wx + 3, wy + 4)
                if 0 in shape:
                    continue
                glow = draw_field(rng, shape) > 0.4
                lit = 200 + draw_field(rng, shape) * 55
                fill_rect(buffer, wx - 2, wy - 3, wx + 3, wy + 4, np.where(glow, lit, brightness))


@pattern_generator
def columns(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Row of 3-6 fluted classical columns, each with a capital and a base."""
    fill(buffer, 220, 220, 220)

    count = draw_count(rng, 3, 4)
    spacing = width / (count + 1)
    column_width = min(50, spacing * 0.4)
    column_height = height * 0.8
    column_top = height * 0.1

    for column in range(count):
        column_x = (column + 1) * spacing - column_width / 2
        column_bottom = column_top + column_height
        rows, cols = rect_slices(column_x, column_top, column_x + column_width, column_bottom, width, height)
        # Offset of each pixel from the column's left edge
        k = np.arange(cols.start, cols.stop) - math.floor(column_x)
        shading = 180 - np.sin(k * math.pi * 8 / column_width) * 30
        shape = (rows.stop - rows.start, cols.stop - cols.start)
        if 0 not in shape:
            fill_rect(
                buffer,
                column_x,
                column_top,
                column_x + column_width,
                column_bottom,
                np.broadcast_to(shading, shape),
            )

        capital_height = column_height * 0.1
        capital_width = column_width * 1.5
        capital_x = column_x - (capital_width - column_width) / 2
        fill_rect(
            buffer, capital_x, column_top - capital_height, capital_x + capital_width, column_top, 150
        )

        base_height = column_height * 0.08
        base_width = column_width * 1.3
        base_x = column_x - (base_width - column_width) / 2
        base_top = column_top + column_height
        fill_rect(buffer, base_x, base_top, base_x + base_width, base_top + base_height, 160)


@pattern_generator
def gothic(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Pointed arches and column stubs, optionally with dark tracery.

    Each arch is cut from two circles centered on the arch's baseline and
    offset either side of its center line, with the middle half removed.
    When tracery is enabled, dark pixels (R below 100) under a
    ``|sin(0.1x) cos(0.05y)| > 0.9`` lattice are darkened by 30 after
    every arch is drawn.
    """
    fill(buffer, 240, 240, 240)

    count = draw_count(rng, 3, 3)
    tracery = draw_above(rng, 0.5)
    logger.debug(f"gothic: {count} arches, tracery={tracery}")

    arch_width = width / count
    arch_height = height * 0.8
    arch_top = height * 0.1
    radius = arch_width * 0.3
    baseline = arch_top + arch_height

    xs, ys = coordinate_grid(width, height)
    lattice = np.abs(np.sin(xs * 0.1) * np.cos(ys * 0.05)) > 0.9
    within = (ys > arch_top) & (ys < baseline)

    for arch in range(count):
        center_x = (arch + 0.5) * arch_width
        dx = xs - center_x
        left = np.hypot(xs - (center_x - radius * 0.5), ys - baseline)
        right = np.hypot(xs - (center_x + radius * 0.5), ys - baseline)

        arch_mask = (
            within
            & (((left < radius) & (xs < center_x)) | ((right < radius) & (xs > center_x)))
            & (np.abs(dx) > arch_width * 0.25)
        )
        write_gray(buffer, 50, mask=arch_mask)

        column_mask = (np.abs(dx) < 10) & (ys > arch_top + arch_height * 0.8)
        write_gray(buffer, 80, mask=column_mask)

        if tracery:
            dark = lattice & (buffer.pixels[..., 0] < 100)
            buffer.pixels[dark, :3] = to_bytes(buffer.pixels[dark, :3].astype(np.float64) - 30)


@pattern_generator
def modern(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Block towers with textured facades and a regular window grid."""
    fill(buffer, 200, 200, 200)

    count = draw_count(rng, 5, 8)
    for building in range(count):
        bx = building / count * width
        bw = width / count * draw_uniform(rng, 0.7, 0.3)
        bh = height * draw_uniform(rng, 0.3, 0.6)
        top = height - bh

        shape = _rect_shape(buffer, bx, top, bx + bw, height)
        if 0 not in shape:
            fill_rect(buffer, bx, top, bx + bw, height, 60 + draw_field(rng, shape) * 40)

        rows = math.floor(bh / 20)
        cols = math.floor(bw / 15)
        for row in range(rows):
            for col in range(cols):
                wx = math.floor(bx + (col + 1) * (bw / (cols + 1)))
                wy = math.floor(top + (row + 1) * (bh / (rows + 1)))
                shape = _rect_shape(buffer, wx, wy, wx + 6, wy + 8)
                if 0 in shape:
                    continue
                lit = draw_field(rng, shape) > 0.3
                fill_rect(buffer, wx, wy, wx + 6, wy + 8, np.where(lit, 180, 20))


pattern_registry.register(
    "gothic", gothic, category="architectural", description="Pointed Gothic arches"
)
pattern_registry.register(
    "modern", modern, category="architectural", description="Modern towers with window grids"
)
pattern_registry.register(
    "blueprint", blueprint, category="architectural", description="Blueprint grid and floor plan"
)
pattern_registry.register(
    "columns", columns, category="architectural", description="Fluted classical columns"
)
pattern_registry.register(
    "bridges", bridges, category="architectural", description="Bridge deck, supports and cables"
)
pattern_registry.register(
    "cityscape", cityscape, category="architectural", description="City skyline with lit windows"
)
