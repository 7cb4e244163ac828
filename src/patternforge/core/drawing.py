"""Stroke primitives for the shape-drawing generators.

Field generators evaluate a formula over the whole grid. The geometric,
natural, texture and structural families instead trace strokes: lines,
outlines sampled by angle, and round brushes stamped along a path. This
module turns those strokes into integer pixel coordinates and writes them
with clipping.

Coordinates are rounded half up (``floor(v + 0.5)``) before indexing.
Points outside the buffer are dropped silently.
"""

from __future__ import annotations

import math

import numpy as np

from .buffer import PixelBuffer
from .raster import to_bytes


def half_up(value: float) -> int:
    """Round a scalar half up, so 2.5 becomes 3 and -2.5 becomes -2."""
    return math.floor(value + 0.5)


def round_half_up(values) -> np.ndarray:
    """Vectorized ``half_up`` returning an integer array."""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5).astype(np.intp)


def line_points(x0: int, y0: int, x1: int, y1: int) -> tuple[np.ndarray, np.ndarray]:
    """Return the pixels of a Bresenham line from ``(x0, y0)`` to ``(x1, y1)`` inclusive."""
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy

    xs = []
    ys = []
    x, y = x0, y0
    while True:
        xs.append(x)
        ys.append(y)
        if x == x1 and y == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy
    return np.array(xs, dtype=np.intp), np.array(ys, dtype=np.intp)


def segment(x0: float, y0: float, x1: float, y1: float) -> tuple[np.ndarray, np.ndarray]:
    """Bresenham line between float endpoints, each rounded half up first."""
    return line_points(half_up(x0), half_up(y0), half_up(x1), half_up(y1))


def polygon_points(xs, ys) -> tuple[np.ndarray, np.ndarray]:
    """Outline a closed polygon through float vertices, one Bresenham line per edge."""
    count = len(xs)
    edges = [segment(xs[i], ys[i], xs[(i + 1) % count], ys[(i + 1) % count]) for i in range(count)]
    return np.concatenate([e[0] for e in edges]), np.concatenate([e[1] for e in edges])


def ring_points(
    center_x: float, center_y: float, radius_x: float, radius_y: float, step: float
) -> tuple[np.ndarray, np.ndarray]:
    """Sample an ellipse every ``step`` radians from 0 up to (not including) 2pi."""
    angles = np.arange(0.0, 2 * math.pi, step)
    return (
        round_half_up(center_x + np.cos(angles) * radius_x),
        round_half_up(center_y + np.sin(angles) * radius_y),
    )


def disc_offsets(radius: float) -> tuple[np.ndarray, np.ndarray]:
    """Integer offsets ``(dx, dy)`` with ``dx*dx + dy*dy <= radius*radius``."""
    reach = math.floor(radius)
    dy, dx = np.mgrid[-reach : reach + 1, -reach : reach + 1]
    inside = dx * dx + dy * dy <= radius * radius
    return dx[inside], dy[inside]


def brush(xs, ys, radius: float) -> tuple[np.ndarray, np.ndarray]:
    """Expand every point into a disc of the given radius."""
    points = np.stack([np.ravel(xs), np.ravel(ys)]).astype(np.intp)
    if points.shape[1] > 1:
        points = np.unique(points, axis=1)
    dx, dy = disc_offsets(radius)
    xs = points[0][:, np.newaxis] + dx
    ys = points[1][:, np.newaxis] + dy
    return xs.ravel(), ys.ravel()


def _inside(buffer: PixelBuffer, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    return (xs >= 0) & (xs < buffer.width) & (ys >= 0) & (ys < buffer.height)


def plot(buffer: PixelBuffer, xs, ys, value=0) -> None:
    """Write a gray value, an RGB triple or ``(n, 3)`` per-point rows to in-bounds points."""
    xs = np.asarray(xs, dtype=np.intp).ravel()
    ys = np.asarray(ys, dtype=np.intp).ravel()
    inside = _inside(buffer, xs, ys)
    value = np.asarray(value)
    if value.ndim == 2:
        value = value[inside]
    buffer.pixels[ys[inside], xs[inside], :3] = value


def stroke(buffer: PixelBuffer, xs, ys, radius: float, value=0) -> None:
    """Stamp a round brush of ``radius`` at each point."""
    bx, by = brush(xs, ys, radius)
    plot(buffer, bx, by, value)


def add_at(buffer: PixelBuffer, xs, ys, delta) -> None:
    """Add ``delta`` (scalar, RGB triple or ``(n, 3)`` rows) to distinct points, clamped."""
    xs, ys = np.asarray(xs, dtype=np.intp), np.asarray(ys, dtype=np.intp)
    delta = np.broadcast_to(np.asarray(delta, dtype=np.float64), xs.shape + (3,))
    inside = _inside(buffer, xs, ys)
    xs, ys, delta = xs[inside], ys[inside], delta[inside]
    current = buffer.pixels[ys, xs, :3].astype(np.float64)
    buffer.pixels[ys, xs, :3] = to_bytes(current + delta)
