"""Structural family: mazes, circuit boards and neural networks.

Circuit and neural networks are colored generators; every channel write is
clamped to ``[0, 255]`` and additive layers (connections, impulses) are
applied one feature at a time so that overlapping features accumulate.
"""

import logging
import math

import numpy as np

from ..core.buffer import PixelBuffer
from ..core.contract import pattern_generator
from ..core.drawing import add_at, half_up, plot, round_half_up
from ..core.random_source import (
    RandomSource,
    draw_above,
    draw_count,
    draw_uniform,
)
from ..core.raster import fill, to_bytes
from ..core.registry import pattern_registry

logger = logging.getLogger(__name__)

BOARD = (20, 60, 20)
COPPER = (200, 150, 50)
NEURAL_BACKGROUND = (20, 20, 40)
CONNECTION_COLOR = np.array([80.0, 120.0, 160.0])
IMPULSE_COLOR = np.array([200.0, 220.0, 255.0])


def _disc(radius: float):
    """Integer offsets within ``radius`` of the origin and their distances.

    Offsets run over whole pixels ``-floor(radius)..floor(radius)`` so a
    fractional radius still draws a full disc.
    """
    reach = math.floor(radius)
    dy, dx = np.mgrid[-reach : reach + 1, -reach : reach + 1]
    distance = np.sqrt(dx * dx + dy * dy)
    inside = distance <= radius
    return dx[inside], dy[inside], distance[inside]


@pattern_generator
def maze(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Rooms on a coarse grid joined by random corridors.

    Cells are ``max(4, min(width, height) // 100)`` pixels square. Every
    odd-indexed cell is a room; each room opens a corridor to the right
    and one downward when their draws exceed 0.5 and the next room is
    inside the grid. Finally ``ceil(cells * 0.1)`` random cells are opened.
    Open cells are white, walls and any partial cells at the edges black.
    """
    cell = max(4, min(width, height) // 100)
    maze_width = width // cell
    maze_height = height // cell
    grid = np.zeros((maze_height, maze_width), dtype=bool)

    for y in range(1, maze_height - 1, 2):
        for x in range(1, maze_width - 1, 2):
            grid[y, x] = True
            if draw_above(rng, 0.5) and x + 2 < maze_width - 1:
                grid[y, x + 1] = True
            if draw_above(rng, 0.5) and y + 2 < maze_height - 1:
                grid[y + 1, x] = True

    openings = math.ceil(maze_width * maze_height * 0.1)
    logger.debug(f"maze: {maze_width}x{maze_height} cells, {openings} random openings")
    for _ in range(openings):
        x = draw_count(rng, 0, maze_width)
        y = draw_count(rng, 0, maze_height)
        grid[y, x] = True

    fill(buffer, 0, 0, 0)
    open_pixels = np.repeat(np.repeat(grid, cell, axis=0), cell, axis=1)
    buffer.pixels[: open_pixels.shape[0], : open_pixels.shape[1], :3][open_pixels] = 255


def _trace(buffer, across: int, start: int, stop: float, trace_width: int, horizontal: bool):
    """Copper track ``trace_width`` pixels wide centered on row or column ``across``."""
    length = buffer.width if horizontal else buffer.height
    breadth = buffer.height if horizontal else buffer.width
    first = max(0, start)
    last = min(length - 1, math.floor(stop))
    if last < first:
        return

    # Offsets that land half a pixel before the edge are dropped, not floored
    offsets = across + np.arange(trace_width) - trace_width / 2
    offsets = np.floor(offsets[(offsets >= 0) & (offsets < breadth)]).astype(np.intp)
    if horizontal:
        buffer.pixels[offsets, first : last + 1, :3] = COPPER
    else:
        buffer.pixels[first : last + 1, offsets, :3] = COPPER


def _rect_component(buffer, x, y, component_width, component_height):
    dy, dx = np.mgrid[0:component_height, 0:component_width]
    edge = (dx == 0) | (dx == component_width - 1) | (dy == 0) | (dy == component_height - 1)
    shade = np.where(edge, 100, 80).ravel()
    plot(buffer, x + dx, y + dy, np.repeat(shade[:, np.newaxis], 3, axis=1))


def _round_component(buffer, x, y, radius):
    dx, dy, distance = _disc(radius)
    shade = np.where(distance > radius - 1, 120, 90)
    plot(buffer, x + dx, y + dy, np.repeat(shade[:, np.newaxis], 3, axis=1))


@pattern_generator
def circuit(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Copper traces, components and vias on a dark green board.

    20-49 straight traces 2-4 px wide, horizontal when their draw exceeds
    0.5, each spanning at least 30% of the board. 10-24 components follow,
    rectangular (gray outline, darker body) when their draw exceeds 0.6 and
    round otherwise. 15-39 silver vias of radius 2-4 are drawn last.
    """
    fill(buffer, *BOARD)

    traces = draw_count(rng, 20, 30)
    for _ in range(traces):
        horizontal = draw_above(rng, 0.5)
        trace_width = draw_count(rng, 2, 3)
        length, breadth = (width, height) if horizontal else (height, width)
        across = draw_count(rng, 0, breadth)
        start = math.floor(draw_uniform(rng, 0.0, length * 0.3))
        stop = start + math.floor(draw_uniform(rng, 0.0, length * 0.4)) + length * 0.3
        _trace(buffer, across, start, stop, trace_width, horizontal)

    components = draw_count(rng, 10, 15)
    for _ in range(components):
        x = math.floor(draw_uniform(rng, 0.0, width - 40)) + 20
        y = math.floor(draw_uniform(rng, 0.0, height - 30)) + 15
        component_width = draw_count(rng, 10, 25)
        component_height = draw_count(rng, 8, 15)
        if draw_above(rng, 0.6):
            _rect_component(buffer, x, y, component_width, component_height)
        else:
            _round_component(buffer, x, y, min(component_width, component_height) / 2)

    vias = draw_count(rng, 15, 25)
    logger.debug(f"circuit: {traces} traces, {components} components, {vias} vias")
    for _ in range(vias):
        x = draw_count(rng, 0, width)
        y = draw_count(rng, 0, height)
        dx, dy, _ = _disc(draw_count(rng, 2, 3))
        plot(buffer, x + dx, y + dy, 180)


def _connection(buffer, first, second, strength):
    """Additive glowing line between two nodes, brightest at its midpoint."""
    x0, y0 = first[:2]
    x1, y1 = second[:2]
    steps = max(abs(x1 - x0), abs(y1 - y0))
    if steps == 0:
        return
    t = np.arange(math.floor(steps) + 1) / steps
    xs = round_half_up(x0 + (x1 - x0) * t)
    ys = round_half_up(y0 + (y1 - y0) * t)
    glow = strength * (0.3 + 0.7 * np.sin(t * math.pi))
    add_at(buffer, xs, ys, glow[:, np.newaxis] * CONNECTION_COLOR)


def _node(buffer, x, y, size, activity):
    dx, dy, distance = _disc(size)
    intensity = (activity * (1 - distance / size))[:, np.newaxis]
    border = (distance > size - 2)[:, np.newaxis]
    rim = np.array([100.0, 150.0, 200.0]) + intensity * np.array([100.0, 100.0, 55.0])
    core = np.array([60.0, 100.0, 180.0]) + intensity * np.array([150.0, 150.0, 75.0])
    plot(buffer, half_up(x) + dx, half_up(y) + dy, to_bytes(np.where(border, rim, core)))


def _impulse(buffer, x, y, intensity):
    radius = 3 + intensity * 4
    dx, dy, distance = _disc(radius)
    falloff = intensity * (1 - distance / radius)
    add_at(buffer, half_up(x) + dx, half_up(y) + dy, falloff[:, np.newaxis] * IMPULSE_COLOR)


@pattern_generator
def neural(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Glowing nodes joined by faint connections, with bright impulses on top.

    20-49 nodes with radius 5-20 and an activity level in ``[0, 1)``. Each
    pair closer than 20% of the shorter side is connected when its draw
    exceeds 0.7, with a glow scaled by the pair's mean activity. Nodes are
    drawn over the connections and 5-14 impulses are added last.
    """
    fill(buffer, *NEURAL_BACKGROUND)

    count = draw_count(rng, 20, 30)
    nodes = [
        (
            draw_uniform(rng, 0.0, width),
            draw_uniform(rng, 0.0, height),
            draw_uniform(rng, 5.0, 15.0),
            draw_uniform(rng, 0.0, 1.0),
        )
        for _ in range(count)
    ]

    reach = min(width, height) * 0.2
    connections = 0
    for i, first in enumerate(nodes):
        for second in nodes[i + 1 :]:
            distance = math.sqrt((first[0] - second[0]) ** 2 + (first[1] - second[1]) ** 2)
            if distance < reach and draw_above(rng, 0.7):
                _connection(buffer, first, second, (first[3] + second[3]) / 2)
                connections += 1

    for x, y, size, activity in nodes:
        _node(buffer, x, y, size, activity)

    impulses = draw_count(rng, 5, 10)
    logger.debug(f"neural: {count} nodes, {connections} connections, {impulses} impulses")
    for _ in range(impulses):
        x = draw_uniform(rng, 0.0, width)
        y = draw_uniform(rng, 0.0, height)
        _impulse(buffer, x, y, draw_uniform(rng, 0.5, 0.5))


pattern_registry.register("maze", maze, category="structural", description="Grid maze")
pattern_registry.register(
    "circuit", circuit, category="structural", description="Circuit board traces"
)
pattern_registry.register(
    "neural", neural, category="structural", description="Neural network nodes"
)
