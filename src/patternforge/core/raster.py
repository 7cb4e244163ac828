"""Shared raster primitives used by every pattern family.

Generators express their per-pixel math as whole-grid numpy operations
over coordinate arrays, then store the result through the helpers here.
The bounds, index and clamp rules live in this module only:

- Float intensities become bytes by clamping to ``[0, 255]`` and rounding
  half-to-even (NaN stores as 0), the conversion a clamped 8-bit canvas
  performs on assignment.
- Shapes whose edges are computed in floating point are rasterized with
  ``span()``, which reproduces a ``for (v = start; v < stop; v++)`` sweep
  with ``floor(v)`` indexing and drops whatever falls outside the buffer.
- Writes at perturbed coordinates are masked or sliced to the buffer, so
  out-of-range coordinates are skipped silently.
"""

from __future__ import annotations

import math

import numpy as np

from .buffer import PixelBuffer

LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])


def coordinate_grid(width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    """Return float ``(xs, ys)`` arrays of shape ``(height, width)``."""
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    return xs, ys


def polar(
    xs: np.ndarray, ys: np.ndarray, center_x: float, center_y: float
) -> tuple[np.ndarray, np.ndarray]:
    """Return Euclidean distance and ``atan2`` angle of each pixel from a center."""
    dx = xs - center_x
    dy = ys - center_y
    return np.sqrt(dx * dx + dy * dy), np.arctan2(dy, dx)


def to_bytes(values) -> np.ndarray:
    """Clamp float intensities to ``[0, 255]`` and round to ``uint8``."""
    values = np.nan_to_num(np.asarray(values, dtype=np.float64), nan=0.0, posinf=255.0, neginf=0.0)
    return np.rint(np.clip(values, 0.0, 255.0)).astype(np.uint8)


def fill(buffer: PixelBuffer, r: int, g: int, b: int, a: int = 255) -> None:
    """Fill every pixel with one color."""
    buffer.pixels[...] = (r, g, b, a)


def write_gray(buffer: PixelBuffer, values, mask: np.ndarray | None = None) -> None:
    """Store grayscale intensities into RGB and set alpha to 255.

    Args:
        buffer: Target buffer
        values: Scalar or ``(height, width)`` array of float intensities
        mask: Optional boolean ``(height, width)`` array; only True pixels are written
    """
    gray = np.broadcast_to(to_bytes(values), (buffer.height, buffer.width))
    if mask is None:
        buffer.pixels[..., :3] = gray[..., np.newaxis]
        buffer.pixels[..., 3] = 255
    else:
        buffer.pixels[mask, :3] = gray[mask][:, np.newaxis]
        buffer.pixels[mask, 3] = 255


def write_rgb(buffer: PixelBuffer, r, g, b) -> None:
    """Store per-channel float intensities and set alpha to 255."""
    buffer.pixels[..., 0] = to_bytes(r)
    buffer.pixels[..., 1] = to_bytes(g)
    buffer.pixels[..., 2] = to_bytes(b)
    buffer.pixels[..., 3] = 255


def span(start: float, stop: float, limit: int) -> slice:
    """Return the in-bounds index range swept by a float loop.

    Equivalent to collecting ``floor(v)`` for ``v = start, start + 1, ...``
    while ``v < stop`` and keeping the values in ``[0, limit)``.
    """
    if not stop > start:
        return slice(0, 0)
    first = math.floor(start)
    steps = math.ceil(stop - start)
    low = max(first, 0)
    high = min(first + steps, limit)
    return slice(low, max(low, high))


def rect_slices(
    x0: float, y0: float, x1: float, y1: float, width: int, height: int
) -> tuple[slice, slice]:
    """Return ``(rows, cols)`` slices covering the float rectangle ``[x0, x1) x [y0, y1)``."""
    return span(y0, y1, height), span(x0, x1, width)


def fill_rect(buffer: PixelBuffer, x0: float, y0: float, x1: float, y1: float, value) -> None:
    """Write a gray value (or a matching array of values) into a clipped rectangle."""
    rows, cols = rect_slices(x0, y0, x1, y1, buffer.width, buffer.height)
    region = buffer.pixels[rows, cols, :3]
    if region.size == 0:
        return
    gray = to_bytes(value)
    if gray.ndim == 2:
        gray = gray[..., np.newaxis]
    region[...] = gray


def add_clamped(channels: np.ndarray, delta) -> None:
    """Add ``delta`` to a ``uint8`` view in place, clamping to ``[0, 255]``."""
    channels[...] = to_bytes(channels.astype(np.float64) + delta)


def luma(rgb: np.ndarray) -> np.ndarray:
    """Perceptual brightness ``0.299R + 0.587G + 0.114B`` of ``(..., 3)`` samples."""
    return rgb[..., :3].astype(np.float64) @ LUMA_WEIGHTS


def angular_distance(a, b):
    """Absolute difference between two angles, wrapped into ``[0, pi]``."""
    diff = np.abs(np.asarray(a) - np.asarray(b)) % (2 * np.pi)
    return np.minimum(diff, 2 * np.pi - diff)
